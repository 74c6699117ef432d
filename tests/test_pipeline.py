"""
Tests for the per-batch classify and delete workers.
"""

import asyncio
from datetime import datetime, timezone

from streamsweep.errors import TransportError
from streamsweep.ledger import Status, StatusLedger
from streamsweep.pipeline import classify_batch, delete_batch
from streamsweep.window import RunWindow

WINDOW = RunWindow.from_days(30, now=datetime(2024, 6, 1, tzinfo=timezone.utc))


class TestClassifyBatch:
    """Test classify worker."""

    def test_inactive_marked_and_active_dropped(self, make_transport):
        transport = make_transport(active={"b"})
        ledger = StatusLedger({"b": Status.UNKNOWN})

        result = asyncio.run(classify_batch(transport, WINDOW, ["a", "b", "c"], ledger))

        assert result.ok
        assert ledger.get("a") is Status.INACTIVE
        assert ledger.get("c") is Status.INACTIVE
        assert "b" not in ledger
        assert sorted(transport.queried) == ["a", "b", "c"]

    def test_any_failure_marks_whole_batch_unknown(self, make_transport):
        transport = make_transport(active={"b"}, failing_queries={"c"})
        ledger = StatusLedger()

        result = asyncio.run(classify_batch(transport, WINDOW, ["a", "b", "c"], ledger))

        assert not result.ok
        assert isinstance(result.error, TransportError)
        assert result.error.rate_limited
        assert ledger.to_dict() == {"a": "unknown", "b": "unknown", "c": "unknown"}

    def test_all_queries_issued_even_when_one_fails(self, make_transport):
        transport = make_transport(failing_queries={"a"})

        asyncio.run(classify_batch(transport, WINDOW, ["a", "b", "c"], StatusLedger()))

        assert sorted(transport.queried) == ["a", "b", "c"]

    def test_deleted_entries_untouched(self, make_transport):
        transport = make_transport(active={"a"})
        ledger = StatusLedger({"a": Status.DELETED, "b": Status.DELETED})

        asyncio.run(classify_batch(transport, WINDOW, ["a", "b"], ledger))

        assert ledger.get("a") is Status.DELETED
        assert ledger.get("b") is Status.DELETED


class TestDeleteBatch:
    """Test delete worker."""

    def test_success_marks_deleted(self, make_transport):
        transport = make_transport()
        ledger = StatusLedger({"a": Status.INACTIVE, "b": Status.INACTIVE})

        result = asyncio.run(delete_batch(transport, ["a", "b"], ledger))

        assert result.ok
        assert ledger.to_dict() == {"a": "deleted", "b": "deleted"}
        assert sorted(transport.deleted) == ["a", "b"]

    def test_failed_deletes_keep_prior_status(self, make_transport):
        transport = make_transport(failing_deletes={"b"})
        ledger = StatusLedger({"a": Status.INACTIVE, "b": Status.INACTIVE})

        result = asyncio.run(delete_batch(transport, ["a", "b"], ledger))

        assert not result.ok
        assert result.error.status_code == 500
        assert ledger.get("a") is Status.DELETED
        assert ledger.get("b") is Status.INACTIVE
