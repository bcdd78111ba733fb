"""Tests for validating and running a single Cmd."""
import os

import pytest

from paperless.chain.errors import (
    CommandNotAllowedError,
    CommandNotFoundError,
    DanglingRedirectionError,
    MalformedCommandError,
    ProcessExecutionError,
    SandboxNotReadyError,
    UndefinedConstantError,
)
from paperless.chain.links.cmd import Cmd
from paperless.chain.models import Environment, Status


def sandbox(tmp_path, **kwargs) -> Environment:
    return Environment(root_dir=str(tmp_path), **kwargs)


def test_validate_proper_command(tmp_path) -> None:
    Cmd(["true"]).validate(sandbox(tmp_path))


@pytest.mark.parametrize("tokens", [[], [""]])
def test_validate_empty_command(tmp_path, tokens) -> None:
    with pytest.raises(MalformedCommandError):
        Cmd(tokens).validate(sandbox(tmp_path))


def test_validate_command_not_found(tmp_path) -> None:
    with pytest.raises(CommandNotFoundError):
        Cmd(["command-is-not-found"]).validate(sandbox(tmp_path))


def test_validate_allowlist_rejects_resolvable_program(tmp_path) -> None:
    with pytest.raises(CommandNotAllowedError):
        Cmd(["true"]).validate(sandbox(tmp_path, allowed_commands={"false"}))


def test_validate_empty_allowlist_rejects_everything(tmp_path) -> None:
    with pytest.raises(CommandNotAllowedError):
        Cmd(["true"]).validate(sandbox(tmp_path, allowed_commands=set()))


def test_validate_allowlist_checked_before_lookup(tmp_path) -> None:
    with pytest.raises(CommandNotAllowedError):
        Cmd(["command-is-not-found"]).validate(sandbox(tmp_path, allowed_commands={"true"}))


def test_validate_requires_sandbox() -> None:
    with pytest.raises(SandboxNotReadyError):
        Cmd(["true"]).validate(Environment())


def test_validate_undefined_constant(tmp_path) -> None:
    with pytest.raises(UndefinedConstantError) as excinfo:
        Cmd(["echo", "$present", "$missing"]).validate(sandbox(tmp_path, constants={"present": ""}))
    assert excinfo.value.name == "missing"
    assert "missing" in str(excinfo.value)


def test_validate_accepts_empty_constant_value(tmp_path) -> None:
    Cmd(["echo", "$empty"]).validate(sandbox(tmp_path, constants={"empty": ""}))


@pytest.mark.parametrize("tokens", [["echo", "hi", ">"], ["echo", "hi", ">", ""]])
def test_validate_dangling_redirection(tmp_path, tokens) -> None:
    with pytest.raises(DanglingRedirectionError):
        Cmd(tokens).validate(sandbox(tmp_path))


def test_validate_does_not_modify_command(tmp_path) -> None:
    cmd = Cmd(["true", "arg"])
    cmd.validate(sandbox(tmp_path, allowed_commands={"true"}))
    assert cmd.tokens == ["true", "arg"]
    assert cmd.resolved_program is None


def test_run_logs_command_and_output(tmp_path) -> None:
    status = Status(environment=sandbox(tmp_path))
    Cmd(["echo", "first", "second"]).run(status)

    log = status.log.getvalue()
    assert b"$ echo first second\n" in log
    assert b"first second\n" in log


def test_run_resolves_program_without_touching_tokens(tmp_path) -> None:
    cmd = Cmd(["true"])
    status = Status(environment=sandbox(tmp_path, allowed_commands={"true"}))
    cmd.run(status)
    assert cmd.tokens == ["true"]
    assert cmd.resolved_program is not None
    assert os.path.isabs(cmd.resolved_program)
    # still valid against the literal allowlist entry
    cmd.validate(status.environment)


def test_run_expands_constants(tmp_path) -> None:
    env = sandbox(tmp_path, constants={"a": "some", "b": "thing"})
    status = Status(environment=env)
    Cmd(["echo", "$a other $b"]).run(status)
    assert b"some other thing\n" in status.log.getvalue()


def test_run_uses_sandbox_as_working_directory(tmp_path) -> None:
    Cmd(["touch", "marker"]).run(Status(environment=sandbox(tmp_path)))
    assert (tmp_path / "marker").exists()


def test_run_redirects_stdout_into_sandbox(tmp_path) -> None:
    status = Status(environment=sandbox(tmp_path))
    Cmd(["sh", "-c", "echo out; echo err 1>&2", ">", "out.txt"]).run(status)

    assert (tmp_path / "out.txt").read_text(encoding="utf-8") == "out\n"
    log = status.log.getvalue()
    assert b"err\n" in log
    assert b"out\n" not in log


def test_run_redirects_to_absolute_constant(tmp_path) -> None:
    box = tmp_path / "box"
    box.mkdir()
    target = tmp_path / "result.txt"
    status = Status(environment=sandbox(box, constants={"contents": str(target)}))

    Cmd(["echo", "hello", ">", "$contents"]).run(status)

    assert target.read_text(encoding="utf-8") == "hello\n"
    assert os.listdir(box) == []


def test_run_constant_with_redirect_value_is_plain_argument(tmp_path) -> None:
    status = Status(environment=sandbox(tmp_path, constants={"arrow": ">"}))
    Cmd(["echo", "$arrow", "x"]).run(status)
    assert b"> x\n" in status.log.getvalue()
    assert os.listdir(tmp_path) == []


def test_run_non_zero_exit(tmp_path) -> None:
    with pytest.raises(ProcessExecutionError) as excinfo:
        Cmd(["false"]).run(Status(environment=sandbox(tmp_path)))
    assert excinfo.value.returncode == 1


def test_run_unwritable_redirection_target(tmp_path) -> None:
    with pytest.raises(ProcessExecutionError) as excinfo:
        Cmd(["echo", "x", ">", "no/such/dir/out.txt"]).run(Status(environment=sandbox(tmp_path)))
    assert excinfo.value.returncode is None
    assert isinstance(excinfo.value.__cause__, OSError)


def test_run_revalidates(tmp_path) -> None:
    with pytest.raises(UndefinedConstantError):
        Cmd(["echo", "$missing"]).run(Status(environment=sandbox(tmp_path)))


def test_validate_rejects_second_redirection(tmp_path) -> None:
    with pytest.raises(MalformedCommandError):
        Cmd(["echo", "a", ">", "x", ">", "y"]).validate(sandbox(tmp_path))
    assert os.listdir(tmp_path) == []
