"""Link interface shared by every step kind of a command chain."""
from __future__ import annotations

import abc

from attrs import define

from paperless.chain.models import Environment, Status


@define(init=False)
class Link(abc.ABC):
    """One executable step of a chain."""

    @abc.abstractmethod
    def validate(self, env: Environment) -> None:
        """Raise a ``ChainError`` if the step cannot run against ``env``."""
        raise NotImplementedError

    @abc.abstractmethod
    def run(self, status: Status) -> None:
        raise NotImplementedError


__all__ = ["Link"]
