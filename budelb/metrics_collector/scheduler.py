"""Fixed-cadence driver for collection cycles."""

import asyncio
import time
from typing import Any, Awaitable, Callable, Optional

from ..commons.config import app_settings
from ..commons.logging import get_logger


logger = get_logger(__name__)


class CollectionScheduler:
    """Runs a collection coroutine every ``interval`` seconds.

    The time a cycle takes is subtracted from the following sleep, so cycles
    start roughly ``interval`` seconds apart. A cycle that overruns the interval
    is followed immediately by the next one; missed cycles are not caught up.
    """

    def __init__(
        self,
        collect: Callable[[], Awaitable[Any]],
        interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.collect = collect
        self.interval = interval or app_settings.collection_interval
        self.clock = clock
        self.sleep = sleep

    def compute_delay(self, elapsed: float) -> float:
        """Return how long to sleep after a cycle that took ``elapsed`` seconds."""
        return max(0.0, self.interval - elapsed)

    async def run_once(self) -> float:
        """Run a single cycle and return the delay before the next one should start."""
        logger.info("Begun to get CloudWatch data for all ELBs")
        begin = self.clock()
        await self.collect()
        elapsed = self.clock() - begin
        delay = self.compute_delay(elapsed)
        logger.info(f"All metrics collected in {elapsed:.2f}s, sleeping for {delay:.2f}s")
        return delay

    async def run_forever(self, max_cycles: Optional[int] = None) -> None:
        """Run cycles until cancelled or, if given, until ``max_cycles`` have completed.

        Errors raised by a cycle propagate to the caller, which is expected to log
        them and exit so the process is restarted by its supervisor.
        """
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            delay = await self.run_once()
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            await self.sleep(delay)
