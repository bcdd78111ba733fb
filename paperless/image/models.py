"""Scanned image record and the names of the files derived from it."""
from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import List, Optional

from attrs import define, field


@define(slots=True)
class Image:
    id: int
    fileid: str
    checksum: str = ""
    filename: str = ""
    add_date: datetime = field(factory=lambda: datetime.now(timezone.utc))
    scan_date: Optional[datetime] = None
    interpret_date: Optional[datetime] = None
    process_log: str = ""
    text: str = ""
    comment: str = ""
    tags: List[str] = field(factory=list)

    @property
    def stem(self) -> str:
        return f"{self.id:06d}"

    def orig_file(self, destdir: str) -> str:
        return os.path.join(destdir, f"{self.stem}.{self.fileid}")

    def txt_file(self, destdir: str) -> str:
        return os.path.join(destdir, f"{self.stem}.txt")

    def clean_file(self, destdir: str) -> str:
        return os.path.join(destdir, f"{self.stem}-clean.jpg")

    def thumb_file(self, destdir: str) -> str:
        return os.path.join(destdir, f"{self.stem}-thumb.jpg")

    def output_files(self, destdir: str) -> List[str]:
        return [self.txt_file(destdir), self.clean_file(destdir), self.thumb_file(destdir)]


__all__ = ["Image"]
