"""``$name`` placeholder lookup and substitution."""
from __future__ import annotations

import re
from typing import List, Mapping, Optional

CONSTANT_PATTERN = re.compile(r"\$(\w+)", re.ASCII)
TEMP_FILE_PATTERN = re.compile(r"^tmp")


def parse_names(s: str) -> List[str]:
    """Return the placeholder names in ``s`` from left to right."""
    return CONSTANT_PATTERN.findall(s)


def is_temp_file_name(name: str) -> bool:
    return TEMP_FILE_PATTERN.match(name) is not None


def expand(s: str, table: Optional[Mapping[str, str]]) -> str:
    """Substitute every placeholder in ``s``; unknown names become ``""``."""
    table = table or {}
    return CONSTANT_PATTERN.sub(lambda match: table.get(match.group(1), ""), s)


__all__ = ["CONSTANT_PATTERN", "expand", "is_temp_file_name", "parse_names"]
