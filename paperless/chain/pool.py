"""Bounded concurrent execution of independent command chains."""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable, List, Optional, Tuple

from attrs import define

from paperless.chain.links.chain import CmdChain, run_cmd_chain
from paperless.chain.models import Status

logger = logging.getLogger(__name__)

Job = Tuple[CmdChain, Status]
Finalizer = Callable[[CmdChain, Status, Optional[BaseException]], None]


@define(slots=False)
class ChainPool:
    """Runs chains on worker threads, at most ``max_concurrent`` at a time.

    The pool is owned by whoever creates it. Every job must carry its own
    environment so that no two chains share a sandbox. The optional
    ``finalize`` callback runs after every job, whether it failed or not.
    """

    max_concurrent: int = 4
    finalize: Optional[Finalizer] = None

    def __attrs_post_init__(self) -> None:
        self.max_concurrent = max(1, int(self.max_concurrent))

    async def submit(self, chain: CmdChain, status: Status) -> Optional[BaseException]:
        """Run one chain; return the exception it raised, or ``None``."""
        error: Optional[BaseException] = None
        try:
            await asyncio.get_running_loop().run_in_executor(None, run_cmd_chain, chain, status)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("command chain failed: %s", exc)
            error = exc
        finally:
            if self.finalize is not None:
                self.finalize(chain, status, error)
        return error

    async def run(self, jobs: Iterable[Job]) -> List[Optional[BaseException]]:
        """Run every job; results are in job order."""
        jobs = list(jobs)
        environments = {id(status.environment) for _, status in jobs}
        if len(environments) != len(jobs):
            raise ValueError("every job needs its own Environment")

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def bounded(chain: CmdChain, status: Status) -> Optional[BaseException]:
            async with semaphore:
                return await self.submit(chain, status)

        return list(await asyncio.gather(*(bounded(chain, status) for chain, status in jobs)))

    def run_sync(self, jobs: Iterable[Job]) -> List[Optional[BaseException]]:
        """Blocking variant of :meth:`run` for callers without an event loop."""
        return asyncio.run(self.run(jobs))


__all__ = ["ChainPool", "Job"]
