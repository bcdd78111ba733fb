"""Runtime glue that builds environments and pools from the Hydra config."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from omegaconf import OmegaConf

from paperless.chain.links.chain import CmdChain
from paperless.chain.models import Environment, Status
from paperless.chain.pool import ChainPool

logger = logging.getLogger(__name__)


def to_dict(data: Any) -> Dict[str, Any]:
    if data is None:
        return {}
    if isinstance(data, dict):
        return data
    return OmegaConf.to_container(data, resolve=True)  # type: ignore[return-value]


def _to_allowlist(value: Optional[Iterable[Any]]) -> Optional[set]:
    if value is None:
        return None
    return {str(item) for item in value if item}


class ChainRuntime:
    """Chain settings taken from the ``chain`` section of the configuration."""

    def __init__(self, config: Optional[Any] = None) -> None:
        cfg = to_dict(config)

        temp_root = cfg.get("temp_root")
        self.temp_root: Optional[str] = str(temp_root) if temp_root else None
        self.allowed_commands = _to_allowlist(cfg.get("allowed_commands"))
        self.max_concurrent = int(cfg.get("max_concurrent", 4))

    @classmethod
    def from_global_config(cls) -> "ChainRuntime":
        try:
            from paperless.utils.hydra_config.init import conf  # type: ignore
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("loading the packaged configuration failed, using defaults: %s", exc)
            return cls({})
        return cls(conf.get("chain"))

    def environment_for(
        self,
        chain: CmdChain,
        constants: Optional[Mapping[str, str]] = None,
        allowed_commands: Optional[Iterable[str]] = None,
    ) -> Environment:
        """Fresh environment for one run of ``chain``.

        Only ``constants`` are bound; temp-file constants are added when the
        sandbox is created, and any other placeholder of the chain left
        unbound fails validation. An explicit ``allowed_commands`` replaces
        the configured allowlist.
        """
        declared = chain.environment
        values = {str(k): str(v) for k, v in (constants or {}).items()}
        allowlist = _to_allowlist(allowed_commands) if allowed_commands is not None else self.allowed_commands
        return Environment(
            constants=values,
            temp_file_names=list(declared.temp_file_names),
            allowed_commands=allowlist,
            temp_root=self.temp_root,
        )

    def status_for(self, chain: CmdChain, constants: Optional[Mapping[str, str]] = None, **kwargs: Any) -> Status:
        return Status(environment=self.environment_for(chain, constants, **kwargs))

    def create_pool(self, **kwargs: Any) -> ChainPool:
        return ChainPool(max_concurrent=self.max_concurrent, **kwargs)


__all__ = ["ChainRuntime", "to_dict"]
