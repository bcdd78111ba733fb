"""Tests for building environments from configuration."""
from omegaconf import OmegaConf

from paperless.chain.runtime import ChainRuntime, to_dict
from paperless.chain.script import parse_script


def test_defaults() -> None:
    runtime = ChainRuntime()
    assert runtime.temp_root is None
    assert runtime.allowed_commands is None
    assert runtime.max_concurrent == 4


def test_environment_for_binds_only_given_constants(tmp_path) -> None:
    runtime = ChainRuntime(
        OmegaConf.create(
            {"temp_root": str(tmp_path), "allowed_commands": ["cat", "echo"], "max_concurrent": 2}
        )
    )
    chain = parse_script("cat $input $tmpFoo > $contents")

    env = runtime.environment_for(chain, {"input": "/in", "contents": "/out"})

    assert env.constants == {"input": "/in", "contents": "/out"}
    assert env.temp_file_names == ["tmpFoo"]
    assert env.temp_file_names is not chain.environment.temp_file_names
    assert env.allowed_commands == {"cat", "echo"}
    assert env.temp_root == str(tmp_path)
    assert runtime.create_pool().max_concurrent == 2


def test_explicit_allowlist_replaces_configured_one() -> None:
    runtime = ChainRuntime({"allowed_commands": ["echo"]})
    chain = parse_script("true")
    status = runtime.status_for(chain, allowed_commands=["true"])
    assert status.environment.allowed_commands == {"true"}


def test_packaged_configuration() -> None:
    runtime = ChainRuntime.from_global_config()
    assert runtime.allowed_commands is None
    assert runtime.max_concurrent == 4


def test_to_dict_accepts_config_and_plain_values() -> None:
    assert to_dict(None) == {}
    assert to_dict({"a": 1}) == {"a": 1}
    converted = to_dict(OmegaConf.create({"max_concurrent": 2, "allowed_commands": ["cat"]}))
    assert converted == {"max_concurrent": 2, "allowed_commands": ["cat"]}
    assert isinstance(converted, dict)
