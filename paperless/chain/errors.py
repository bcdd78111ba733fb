"""Error kinds raised by the command chain engine."""
from __future__ import annotations

from typing import Iterable, List, Optional


class ChainError(Exception):
    """Base class for every failure raised by the command chain."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def annotate(self, context: str) -> "ChainError":
        """Prefix ``context`` to the message, keeping the concrete type."""
        self.message = f"{context}: {self.message}"
        self.args = (self.message,)
        return self

    def __str__(self) -> str:
        return self.message


class ScriptSyntaxError(ChainError):
    pass


class MalformedCommandError(ChainError):
    pass


class CommandNotAllowedError(ChainError):
    pass


class CommandNotFoundError(ChainError):
    pass


class UndefinedConstantError(ChainError):
    def __init__(self, name: str) -> None:
        super().__init__(f"undefined constant: ${name}")
        self.name = name


class DanglingRedirectionError(ChainError):
    pass


class SandboxNotReadyError(ChainError):
    pass


class SandboxCorruptionError(ChainError):
    pass


class ConfigurationError(ChainError):
    pass


class ProcessExecutionError(ChainError):
    def __init__(self, message: str, returncode: Optional[int] = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class ErrorList(ChainError):
    """Several failures reported together, in the order they happened."""

    def __init__(self, message: str, errors: Iterable[BaseException]) -> None:
        self.errors: List[BaseException] = list(errors)
        details = "; ".join(str(err) for err in self.errors)
        super().__init__(f"{message}: {details}" if details else message)


__all__ = [
    "ChainError",
    "ScriptSyntaxError",
    "MalformedCommandError",
    "CommandNotAllowedError",
    "CommandNotFoundError",
    "UndefinedConstantError",
    "DanglingRedirectionError",
    "SandboxNotReadyError",
    "SandboxCorruptionError",
    "ConfigurationError",
    "ProcessExecutionError",
    "ErrorList",
]
