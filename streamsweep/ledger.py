"""
Status ledger for swept streams and its JSON checkpoint.
"""

import json
import logging
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from .errors import CheckpointError

logger = logging.getLogger(__name__)


class Status(Enum):
    """Sweep status of a single stream."""
    UNKNOWN = "unknown"
    INACTIVE = "inactive"
    DELETED = "deleted"


class StatusLedger:
    """
    Mapping of stream ID to Status, safe for concurrent writers.

    A stream found active is removed from the ledger rather than stored.
    Once a stream is DELETED its entry is never changed again.
    """

    def __init__(self, entries: Optional[Dict[str, Status]] = None):
        self._entries: Dict[str, Status] = dict(entries or {})
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, resource_id: str) -> bool:
        return resource_id in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __eq__(self, other) -> bool:
        if not isinstance(other, StatusLedger):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def get(self, resource_id: str) -> Optional[Status]:
        return self._entries.get(resource_id)

    def set(self, resource_id: str, status: Status) -> bool:
        """
        Set the status of a stream.

        Returns:
            False if the stream is already DELETED and was left untouched
        """
        with self._lock:
            current = self._entries.get(resource_id)
            if current is Status.DELETED and status is not Status.DELETED:
                logger.debug(f"Not overwriting deleted stream {resource_id} with {status.value}")
                return False
            self._entries[resource_id] = status
            return True

    def mark_unknown(self, resource_id: str) -> bool:
        return self.set(resource_id, Status.UNKNOWN)

    def mark_inactive(self, resource_id: str) -> bool:
        return self.set(resource_id, Status.INACTIVE)

    def mark_deleted(self, resource_id: str) -> bool:
        return self.set(resource_id, Status.DELETED)

    def discard(self, resource_id: str) -> bool:
        """Drop an active stream from the ledger. Deleted entries are kept."""
        with self._lock:
            if self._entries.get(resource_id) is Status.DELETED:
                return False
            return self._entries.pop(resource_id, None) is not None

    def with_status(self, status: Status) -> List[str]:
        """IDs currently at the given status, in insertion order."""
        with self._lock:
            return [rid for rid, st in self._entries.items() if st is status]

    def partition(self) -> Dict[Status, List[str]]:
        """Group every ID by status. All three groups are always present."""
        groups: Dict[Status, List[str]] = {status: [] for status in Status}
        with self._lock:
            for rid, status in self._entries.items():
                groups[status].append(rid)
        return groups

    def to_dict(self) -> Dict[str, str]:
        with self._lock:
            return {rid: status.value for rid, status in self._entries.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "StatusLedger":
        """
        Build a ledger from checkpoint content.

        Raises:
            CheckpointError: If the content is not a mapping of ID to a known status
        """
        if not isinstance(data, dict):
            raise CheckpointError(f"Checkpoint must be a JSON object, got {type(data).__name__}")

        entries = {}
        for rid, value in data.items():
            try:
                entries[str(rid)] = Status(value)
            except ValueError:
                raise CheckpointError(f"Invalid status {value!r} for stream {rid}") from None
        return cls(entries)


def save_checkpoint(ledger: StatusLedger, path: Union[str, Path]) -> Path:
    """
    Write the ledger to the checkpoint file, replacing it completely.

    Args:
        ledger: Ledger to persist
        path: Checkpoint file path

    Returns:
        Path: The written checkpoint path

    Raises:
        CheckpointError: If the file cannot be written
    """
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")

    try:
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(ledger.to_dict(), f, indent=2, sort_keys=True)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path.exists() and not tmp_path.is_dir():
            tmp_path.unlink()
        raise CheckpointError(f"Failed to write checkpoint {path}: {e}") from e

    logger.info(f"Saved {len(ledger)} entries to {path}")
    return path


def load_checkpoint(path: Union[str, Path]) -> StatusLedger:
    """
    Read a ledger from the checkpoint file.

    Hand-edited entries are accepted as long as every value is a known status.

    Raises:
        CheckpointError: If the file is missing, unreadable or malformed
    """
    path = Path(path)

    if not path.exists():
        raise CheckpointError(f"Checkpoint {path} not found; run without --resume first")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CheckpointError(f"Checkpoint {path} is not valid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise CheckpointError(f"Checkpoint {path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise CheckpointError(f"Failed to read checkpoint {path}: {e}") from e

    ledger = StatusLedger.from_dict(data)
    logger.info(f"Loaded {len(ledger)} entries from {path}")
    return ledger
