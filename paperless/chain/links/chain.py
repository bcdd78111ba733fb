"""Ordered, fail-fast sequence of links sharing one environment."""
from __future__ import annotations

import logging
from typing import List

from attrs import define, field

from paperless.chain.errors import ChainError, ErrorList, ProcessExecutionError
from paperless.chain.links.base import Link
from paperless.chain.models import Environment, Status

logger = logging.getLogger(__name__)


@define(slots=True)
class CmdChain(Link):
    """Links executed strictly in declaration order.

    ``environment`` holds the constants and temp files the chain's script
    declared. A chain can itself be a link of another chain, in which case
    it runs against the outer status environment.
    """

    environment: Environment = field(factory=Environment)
    links: List[Link] = field(factory=list)

    def append(self, link: Link) -> None:
        self.links.append(link)

    def validate(self, env: Environment) -> None:
        for index, link in enumerate(self.links, start=1):
            try:
                link.validate(env)
            except ChainError as exc:
                raise exc.annotate(f"step {index}")

    def run(self, status: Status) -> None:
        self.validate(status.environment)

        for index, link in enumerate(self.links, start=1):
            try:
                link.run(status)
            except ChainError as exc:
                logger.warning("chain aborted at step %d: %s", index, exc)
                raise exc.annotate(f"step {index}")
            except OSError as exc:
                logger.warning("chain aborted at step %d: %s", index, exc)
                raise ProcessExecutionError(f"step {index}: {exc}") from exc


def run_cmd_chain(chain: CmdChain, status: Status) -> None:
    """Run ``chain`` inside a fresh sandbox that is always removed afterwards."""
    env = status.environment
    env.init_env()

    try:
        chain.run(status)
    except Exception as run_error:
        try:
            env.deinit_env()
        except Exception as deinit_error:
            raise ErrorList("running the command chain failed", [run_error, deinit_error]) from run_error
        raise
    except BaseException:
        # interrupts must reach the caller as themselves
        try:
            env.deinit_env()
        except Exception as deinit_error:  # pylint: disable=broad-except
            logger.warning("removing sandbox after interrupt failed: %s", deinit_error)
        raise
    env.deinit_env()


__all__ = ["CmdChain", "run_cmd_chain"]
