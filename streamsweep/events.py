"""
Run events reported by the orchestrator while a sweep is in progress.
"""

import logging
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

EventCallback = Callable[[str, Dict[str, Any]], None]


class EventTypes:
    RUN_START = "RUN_START"
    CANDIDATES_LISTED = "CANDIDATES_LISTED"
    CLASSIFY_BATCH_FAILED = "CLASSIFY_BATCH_FAILED"
    DELETE_BATCH_FAILED = "DELETE_BATCH_FAILED"
    CHECKPOINT_SAVED = "CHECKPOINT_SAVED"
    DELETE_SKIPPED_DRY_RUN = "DELETE_SKIPPED_DRY_RUN"
    RUN_FAILED = "RUN_FAILED"
    RUN_DONE = "RUN_DONE"


FAILURE_EVENTS = {
    EventTypes.CLASSIFY_BATCH_FAILED,
    EventTypes.DELETE_BATCH_FAILED,
    EventTypes.RUN_FAILED,
}


def emit_event(callback: Optional[EventCallback], event_type: str, data: Dict[str, Any]) -> None:
    """
    Log an event and hand it to the callback, if any.

    Args:
        callback: Receiver of (event_type, data), may be None
        event_type: One of EventTypes
        data: Event payload
    """
    if event_type in FAILURE_EVENTS:
        logger.warning(f"{event_type}: {data}")
    else:
        logger.debug(f"{event_type}: {data}")

    if callback is not None:
        callback(event_type, data)
