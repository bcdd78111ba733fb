"""Turn script text into a :class:`CmdChain`.

Script format, one command per line::

    # comments run to the end of the line
    convert -depth 8 $input pnm:$tmpImage
    tesseract $tmpImage stdout > $contents

Every ``$name`` is declared as a constant with an empty value. Names
starting with ``tmp`` are also backed by a temp file created in the sandbox
when the chain runs.

``#`` starts a comment wherever it appears, including inside quotes, unless
it is written as ``\\#``. A quote cut short by a comment makes the line
fail with ``ScriptSyntaxError``. Lines end at ``\\n`` only.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from paperless.chain.constants import is_temp_file_name, parse_names
from paperless.chain.errors import ChainError
from paperless.chain.links.chain import CmdChain
from paperless.chain.links.cmd import Cmd
from paperless.chain.models import Environment
from paperless.chain.tokenizer import split_quoted

logger = logging.getLogger(__name__)

COMMENT_PATTERN = re.compile(r"(?<!\\)#")
ESCAPED_COMMENT = "\\#"


def strip_comment(line: str) -> str:
    """Cut ``line`` at the first ``#`` not preceded by a backslash.

    ``\\#`` stays in the line as a literal ``#``.
    """
    line = COMMENT_PATTERN.split(line, maxsplit=1)[0]
    return line.replace(ESCAPED_COMMENT, "#").lstrip()


def parse_script(text: str, allowed_commands: Optional[Iterable[str]] = None) -> CmdChain:
    """Parse ``text`` and check every command against a placeholder sandbox.

    The check uses ``/`` as sandbox root so that no real sandbox is needed
    while authoring; it catches unknown programs and, when
    ``allowed_commands`` is given, programs outside the allowlist.
    """
    chain = CmdChain(environment=Environment(allowed_commands=allowed_commands))
    line_numbers = []

    for number, raw in enumerate(text.split("\n"), start=1):
        line = strip_comment(raw.rstrip("\r"))
        if not line:
            continue

        for name in parse_names(line):
            if is_temp_file_name(name):
                chain.environment.add_temp_file(name)
            else:
                chain.environment.add_constant(name)

        try:
            tokens = split_quoted(line)
        except ChainError as exc:
            raise exc.annotate(f"line {number}")
        if not tokens:
            continue
        chain.append(Cmd(tokens))
        line_numbers.append(number)

    static_env = Environment(
        constants=dict(chain.environment.constants or {}),
        root_dir="/",
        allowed_commands=chain.environment.allowed_commands,
    )
    for number, link in zip(line_numbers, chain.links):
        try:
            link.validate(static_env)
        except ChainError as exc:
            raise exc.annotate(f"line {number}")

    logger.debug("parsed script into %d commands", len(chain.links))
    return chain


__all__ = ["parse_script", "strip_comment"]
