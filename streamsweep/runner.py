"""
Bounded-concurrency execution of batch workers.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 8


@dataclass
class BatchResult:
    """Outcome of one batch worker."""
    batch: List[str]
    ok: bool = True
    error: Optional[BaseException] = None

    @property
    def error_message(self) -> str:
        if self.error is None:
            return ""
        return f"{type(self.error).__name__}: {self.error}"


BatchWorker = Callable[[List[str]], Awaitable[BatchResult]]


class ConcurrentRunner:
    """
    Runs one worker per batch with at most `concurrency` batches in flight.

    A failing batch never cancels or blocks its siblings. Exceptions that
    escape a worker are turned into failed BatchResults and are not raised
    to the caller.
    """

    def __init__(self, concurrency: int = DEFAULT_CONCURRENCY):
        if concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {concurrency}")
        self.concurrency = concurrency

    async def run(self, batches: Sequence[List[str]], worker: BatchWorker) -> List[BatchResult]:
        """
        Run worker over every batch and wait for all of them to finish.

        Returns:
            One BatchResult per batch, in the order of `batches`
        """
        if not batches:
            return []

        semaphore = asyncio.Semaphore(self.concurrency)

        async def _guarded(batch: List[str]) -> BatchResult:
            async with semaphore:
                try:
                    result = await worker(batch)
                except Exception as e:
                    logger.error(f"Batch worker raised for {len(batch)} streams: {e}")
                    result = BatchResult(batch=batch, ok=False, error=e)
            return result

        results = await asyncio.gather(*(_guarded(batch) for batch in batches))

        failed = sum(1 for r in results if not r.ok)
        logger.info(f"Ran {len(results)} batches, {failed} failed")
        return list(results)
