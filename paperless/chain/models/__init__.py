"""Data models for the command chain: the sandbox environment and run status."""
from __future__ import annotations

import io
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Set

from attrs import define, field

from paperless.chain.errors import ConfigurationError, SandboxCorruptionError, SandboxNotReadyError

logger = logging.getLogger(__name__)


def _optional_set(value):
    if value is None:
        return None
    return set(value)


@define(slots=True)
class Environment:
    """Sandbox and constant bindings for one chain execution.

    ``allowed_commands`` of ``None`` permits every program found on the
    search path; a set, even an empty one, is the only authority on what
    may run.
    """

    constants: Optional[Dict[str, str]] = field(factory=dict)
    temp_file_names: List[str] = field(factory=list)
    root_dir: str = ""
    allowed_commands: Optional[Set[str]] = field(default=None, converter=_optional_set)
    temp_root: Optional[str] = field(default=None, eq=False)
    _initialized: bool = field(default=False, init=False, eq=False)

    @property
    def initialized(self) -> bool:
        return self._initialized

    def add_constant(self, name: str, value: str = "") -> None:
        if self.constants is None:
            self.constants = {}
        self.constants.setdefault(name, value)

    def add_temp_file(self, name: str) -> None:
        self.add_constant(name)
        if name not in self.temp_file_names:
            self.temp_file_names.append(name)

    def _temp_base(self) -> Path:
        return Path(self.temp_root or tempfile.gettempdir()).resolve()

    def init_env(self) -> None:
        """Create the sandbox directory and one empty file per temp constant."""
        if self._initialized:
            return
        if self.constants is None:
            raise ConfigurationError("environment has no constants table")

        base = self._temp_base()
        self.root_dir = tempfile.mkdtemp(prefix="paperless-", dir=str(base))
        logger.debug("created sandbox %s", self.root_dir)

        try:
            for name in self.temp_file_names:
                fd, path = tempfile.mkstemp(prefix=f"{name}-", dir=self.root_dir)
                os.close(fd)
                self.constants[name] = path
        except OSError:
            logger.warning("creating temp files in %s failed, removing sandbox", self.root_dir)
            shutil.rmtree(self.root_dir, ignore_errors=True)
            self._clear_temp_values()
            self.root_dir = ""
            raise

        self._initialized = True

    def deinit_env(self) -> None:
        """Remove the sandbox directory and reset temp constants to ``""``."""
        if not self._initialized:
            return
        self._check_root_dir()

        root_dir = self.root_dir
        try:
            shutil.rmtree(root_dir)
            logger.debug("removed sandbox %s", root_dir)
        finally:
            self._clear_temp_values()
            self.root_dir = ""
            self._initialized = False

    def validate_sandbox(self) -> None:
        if not self.root_dir:
            raise SandboxNotReadyError("sandbox directory is not set")
        if not os.path.isdir(self.root_dir):
            raise SandboxNotReadyError(f"sandbox directory {self.root_dir} does not exist")

    def _check_root_dir(self) -> None:
        if not self.root_dir or not os.path.isabs(self.root_dir):
            raise SandboxCorruptionError(f"sandbox path {self.root_dir!r} is not absolute")
        base = self._temp_base()
        root = Path(self.root_dir).resolve()
        if root == base or base not in root.parents:
            raise SandboxCorruptionError(
                f"sandbox path {self.root_dir} is not inside the temp directory {base}"
            )

    def _clear_temp_values(self) -> None:
        if self.constants is None:
            return
        for name in self.temp_file_names:
            self.constants[name] = ""


@define(slots=True)
class Status:
    """Run-time context of one chain invocation."""

    environment: Environment = field(factory=Environment)
    log: BinaryIO = field(factory=io.BytesIO, eq=False)

    def write_log(self, data: bytes | str) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        if data:
            self.log.write(data)


__all__ = [
    "Environment",
    "Status",
]
