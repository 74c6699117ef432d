"""
Delete a batch of inactive streams.
"""

import asyncio
import logging
from typing import List

from ..ledger import StatusLedger
from ..runner import BatchResult
from ..transport import Transport

logger = logging.getLogger(__name__)


async def delete_batch(transport: Transport, batch: List[str], ledger: StatusLedger) -> BatchResult:
    """
    Delete every stream in the batch.

    Confirmed deletions become DELETED. Streams whose deletion failed keep
    their previous status. A stream already removed out of band fails here
    like any other error; the two cases are not told apart.
    """
    outcomes = await asyncio.gather(
        *(asyncio.to_thread(transport.delete_stream, stream_id) for stream_id in batch),
        return_exceptions=True,
    )

    failures = []
    for stream_id, outcome in zip(batch, outcomes):
        if isinstance(outcome, BaseException):
            failures.append((stream_id, outcome))
        else:
            ledger.mark_deleted(stream_id)

    if failures:
        failed_ids = ", ".join(stream_id for stream_id, _ in failures)
        logger.warning(f"Delete failed for {len(failures)} of {len(batch)} streams: {failed_ids}")
        return BatchResult(batch=batch, ok=False, error=failures[0][1])

    return BatchResult(batch=batch)
