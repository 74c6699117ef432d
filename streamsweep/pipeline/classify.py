"""
Classify a batch of streams by recent activity.
"""

import asyncio
import logging
from typing import List

from ..ledger import StatusLedger
from ..runner import BatchResult
from ..transport import Transport
from ..window import RunWindow

logger = logging.getLogger(__name__)


async def classify_batch(transport: Transport, window: RunWindow,
                         batch: List[str], ledger: StatusLedger) -> BatchResult:
    """
    Query activity for every stream in the batch and record the outcome.

    Inactive streams are marked INACTIVE and active ones are dropped from
    the ledger. If any query in the batch fails, every stream in the batch
    is marked UNKNOWN instead, so a later resume retries the whole batch.
    """
    outcomes = await asyncio.gather(
        *(asyncio.to_thread(transport.query_activity, stream_id, window) for stream_id in batch),
        return_exceptions=True,
    )

    errors = [o for o in outcomes if isinstance(o, BaseException)]
    if errors:
        for stream_id in batch:
            ledger.mark_unknown(stream_id)
        logger.warning(f"Classify failed for batch of {len(batch)} ({len(errors)} errors); marked unknown")
        return BatchResult(batch=batch, ok=False, error=errors[0])

    for stream_id, active in zip(batch, outcomes):
        if active:
            ledger.discard(stream_id)
        else:
            ledger.mark_inactive(stream_id)

    return BatchResult(batch=batch)
