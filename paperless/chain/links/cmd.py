"""Link that runs one external program inside the sandbox."""
from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from typing import List, Optional, Sequence, Tuple

from attrs import define, field

from paperless.chain.constants import expand, parse_names
from paperless.chain.errors import (
    CommandNotAllowedError,
    CommandNotFoundError,
    DanglingRedirectionError,
    MalformedCommandError,
    ProcessExecutionError,
    UndefinedConstantError,
)
from paperless.chain.links.base import Link
from paperless.chain.models import Environment, Status

logger = logging.getLogger(__name__)

REDIRECT = ">"


def _to_list(tokens: Sequence[str]) -> List[str]:
    return [str(token) for token in tokens]


@define(slots=True)
class Cmd(Link):
    """A program name followed by its arguments.

    One argument may be the literal ``>`` followed by a file name, in which
    case standard output goes to that file (relative to the sandbox) instead
    of the log. Validation never modifies the command; the resolved program
    path is stored in ``resolved_program`` when the command runs.
    """

    tokens: List[str] = field(converter=_to_list)
    resolved_program: Optional[str] = field(default=None, eq=False, repr=False)

    @property
    def program(self) -> str:
        return self.tokens[0] if self.tokens else ""

    def validate(self, env: Environment) -> None:
        if not self.tokens or not self.tokens[0]:
            raise MalformedCommandError("empty command")

        program = self.tokens[0]
        if env.allowed_commands is not None and program not in env.allowed_commands:
            raise CommandNotAllowedError(f"command not allowed: {program}")

        if shutil.which(program) is None:
            raise CommandNotFoundError(f"command not found: {program}")

        env.validate_sandbox()

        constants = env.constants or {}
        for token in self.tokens:
            for name in parse_names(token):
                if name not in constants:
                    raise UndefinedConstantError(name)

        for index, token in enumerate(self.tokens):
            if token != REDIRECT:
                continue
            if index + 1 >= len(self.tokens) or not self.tokens[index + 1]:
                raise DanglingRedirectionError(f"redirection without a target in: {self}")

        if self.tokens[1:].count(REDIRECT) > 1:
            raise MalformedCommandError(f"more than one redirection in: {self}")

    def run(self, status: Status) -> None:
        env = status.environment
        self.validate(env)

        expanded = [expand(token, env.constants) for token in self.tokens]
        args, target = self._split_redirect(expanded)
        status.write_log(f"$ {shlex.join(expanded)}\n")
        logger.info("running %s", shlex.join(expanded))

        self.resolved_program = shutil.which(args[0])
        if self.resolved_program is None:
            raise ProcessExecutionError(f"command not found: {args[0]}")
        argv = [self.resolved_program, *args[1:]]

        if target is None:
            returncode, output = self._run_process(argv, env.root_dir)
            status.write_log(output)
        else:
            target_path = os.path.join(env.root_dir, target)
            try:
                with open(target_path, "wb") as out:
                    returncode, output = self._run_process(argv, env.root_dir, stdout=out)
            except OSError as exc:
                raise ProcessExecutionError(f"cannot write output to {target_path}: {exc}") from exc
            status.write_log(output)

        if returncode != 0:
            logger.warning("%s exited with code %d", args[0], returncode)
            raise ProcessExecutionError(f"{args[0]} exited with code {returncode}", returncode)

    def _split_redirect(self, expanded: List[str]) -> Tuple[List[str], Optional[str]]:
        # The marker is located in the unexpanded tokens so a constant
        # whose value happens to be ">" stays an ordinary argument.
        if REDIRECT not in self.tokens[1:]:
            return expanded, None
        index = self.tokens.index(REDIRECT, 1)
        return expanded[:index] + expanded[index + 2:], expanded[index + 1]

    def _run_process(self, argv: List[str], cwd: str, stdout=None) -> Tuple[int, bytes]:
        try:
            if stdout is None:
                completed = subprocess.run(
                    argv, cwd=cwd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, check=False
                )
                return completed.returncode, completed.stdout
            completed = subprocess.run(argv, cwd=cwd, stdout=stdout, stderr=subprocess.PIPE, check=False)
            return completed.returncode, completed.stderr
        except OSError as exc:
            raise ProcessExecutionError(f"failed to execute {argv[0]}: {exc}") from exc

    def __str__(self) -> str:
        return shlex.join(self.tokens)


__all__ = ["Cmd", "REDIRECT"]
