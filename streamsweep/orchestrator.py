"""
Sweep orchestration: list, classify, checkpoint, delete, checkpoint, report.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .batching import split_batches
from .config import SweepConfig
from .events import EventCallback, EventTypes, emit_event
from .filters import CandidateFilter
from .ledger import Status, StatusLedger, load_checkpoint, save_checkpoint
from .pipeline import classify_batch, delete_batch
from .runner import BatchResult, ConcurrentRunner
from .transport import LightstepTransport, Transport
from .window import RunWindow

logger = logging.getLogger(__name__)


class RunState(Enum):
    """Stages of a sweep run."""
    START = "start"
    LISTING = "listing"
    CLASSIFYING = "classifying"
    CHECKPOINTED_1 = "checkpointed_1"
    ACTING = "acting"
    CHECKPOINTED_2 = "checkpointed_2"
    REPORTED = "reported"
    FAILED = "failed"


@dataclass
class RunReport:
    """Summary of a finished run, grouped by status."""
    state: RunState
    dry_run: bool
    checkpoint_path: Path
    unknown: List[str] = field(default_factory=list)
    inactive: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    classify_failures: int = 0
    delete_failures: int = 0

    @classmethod
    def from_ledger(cls, ledger: StatusLedger, **kwargs) -> "RunReport":
        groups = ledger.partition()
        return cls(
            unknown=groups[Status.UNKNOWN],
            inactive=groups[Status.INACTIVE],
            deleted=groups[Status.DELETED],
            **kwargs,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "dry_run": self.dry_run,
            "checkpoint": str(self.checkpoint_path),
            "unknown": self.unknown,
            "inactive": self.inactive,
            "deleted": self.deleted,
            "classify_failures": self.classify_failures,
            "delete_failures": self.delete_failures,
        }


class Orchestrator:
    """
    Drives one sweep run over a ledger it owns for the run's duration.

    Batch failures are contained and recorded in the ledger. Anything else
    that escapes a stage, such as a checkpoint write error, moves the run to
    FAILED and is raised to the caller.
    """

    def __init__(self, config: SweepConfig, transport: Optional[Transport] = None,
                 event_callback: Optional[EventCallback] = None, now: Optional[datetime] = None):
        config.validate()

        self.config = config
        self.transport = transport or LightstepTransport(
            config.org, config.project, config.api_key, env=config.env, timeout=config.timeout
        )
        self.event_callback = event_callback
        self.window = RunWindow.from_days(config.days, now=now)
        self.candidate_filter = CandidateFilter(
            window=self.window, exclude=tuple(config.exclude), service=config.service
        )
        self.runner = ConcurrentRunner(config.concurrency)
        self.ledger = StatusLedger()
        self.state = RunState.START
        self.history: List[RunState] = [RunState.START]

    def _transition(self, state: RunState) -> None:
        logger.info(f"Run state {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def _emit(self, event_type: str, data: Dict[str, Any]) -> None:
        emit_event(self.event_callback, event_type, data)

    def run(self) -> RunReport:
        """
        Execute the sweep to completion.

        Returns:
            RunReport for the final ledger

        Raises:
            SweepError: If the run failed outside a batch (e.g. checkpoint I/O)
        """
        try:
            return asyncio.run(self._run())
        except Exception as e:
            self._transition(RunState.FAILED)
            self._emit(EventTypes.RUN_FAILED, {"error": str(e), "error_type": type(e).__name__})
            raise

    async def _run(self) -> RunReport:
        # Every batch in flight issues all of its requests at once
        executor = ThreadPoolExecutor(
            max_workers=self.config.concurrency * self.config.batch_size,
            thread_name_prefix="streamsweep",
        )
        asyncio.get_running_loop().set_default_executor(executor)
        try:
            return await self._sweep()
        finally:
            executor.shutdown(wait=True)

    async def _sweep(self) -> RunReport:
        self._emit(EventTypes.RUN_START, {
            "org": self.config.org,
            "project": self.config.project,
            "resume": self.config.resume,
            "dry_run": self.config.dry_run,
            "oldest": self.window.oldest_iso,
            "youngest": self.window.youngest_iso,
        })

        if self.config.resume:
            self.ledger = load_checkpoint(self.config.checkpoint_path)
            candidates = self.ledger.with_status(Status.UNKNOWN)
        else:
            self._transition(RunState.LISTING)
            candidates = await asyncio.to_thread(self.transport.list_candidates, self.candidate_filter)
        self._emit(EventTypes.CANDIDATES_LISTED, {"count": len(candidates), "resume": self.config.resume})

        self._transition(RunState.CLASSIFYING)
        classify_results = await self._classify(candidates)
        self._checkpoint()
        self._transition(RunState.CHECKPOINTED_1)

        delete_results: List[BatchResult] = []
        inactive = self.ledger.with_status(Status.INACTIVE)
        if self.config.dry_run:
            self._emit(EventTypes.DELETE_SKIPPED_DRY_RUN, {"would_delete": inactive})
        else:
            self._transition(RunState.ACTING)
            delete_results = await self._delete(inactive)
        self._checkpoint()
        self._transition(RunState.CHECKPOINTED_2)

        report = RunReport.from_ledger(
            self.ledger,
            state=RunState.REPORTED,
            dry_run=self.config.dry_run,
            checkpoint_path=Path(self.config.checkpoint_path),
            classify_failures=sum(1 for r in classify_results if not r.ok),
            delete_failures=sum(1 for r in delete_results if not r.ok),
        )
        self._transition(RunState.REPORTED)
        self._emit(EventTypes.RUN_DONE, {
            "unknown": len(report.unknown),
            "inactive": len(report.inactive),
            "deleted": len(report.deleted),
        })
        return report

    async def _classify(self, candidates: List[str]) -> List[BatchResult]:
        batches = split_batches(candidates, self.config.batch_size)

        async def worker(batch: List[str]) -> BatchResult:
            result = await classify_batch(self.transport, self.window, batch, self.ledger)
            if not result.ok:
                self._emit(EventTypes.CLASSIFY_BATCH_FAILED,
                           {"streams": batch, "error": result.error_message})
            return result

        return await self.runner.run(batches, worker)

    async def _delete(self, inactive: List[str]) -> List[BatchResult]:
        batches = split_batches(inactive, self.config.batch_size)

        async def worker(batch: List[str]) -> BatchResult:
            result = await delete_batch(self.transport, batch, self.ledger)
            if not result.ok:
                self._emit(EventTypes.DELETE_BATCH_FAILED,
                           {"streams": batch, "error": result.error_message})
            return result

        return await self.runner.run(batches, worker)

    def _checkpoint(self) -> None:
        path = save_checkpoint(self.ledger, self.config.checkpoint_path)
        self._emit(EventTypes.CHECKPOINT_SAVED, {"path": str(path), "entries": len(self.ledger)})
