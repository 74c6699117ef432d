"""
Shared fixtures: an in-memory transport standing in for the remote API.
"""

import threading

import pytest

from streamsweep.errors import TransportError
from streamsweep.filters import Stream
from streamsweep.transport import Transport


class FakeTransport(Transport):
    """Transport with scripted activity and failures."""

    def __init__(self, streams=None, active=(), failing_queries=(), failing_deletes=()):
        self.streams = [s if isinstance(s, Stream) else Stream(id=s) for s in (streams or [])]
        self.active = set(active)
        self.failing_queries = set(failing_queries)
        self.failing_deletes = set(failing_deletes)
        self.queried = []
        self.deleted = []
        self.list_calls = 0
        self._lock = threading.Lock()

    def list_streams(self):
        self.list_calls += 1
        return list(self.streams)

    def query_activity(self, stream_id, window):
        with self._lock:
            self.queried.append(stream_id)
        if stream_id in self.failing_queries:
            raise TransportError("Too Many Requests", status_code=429)
        return stream_id in self.active

    def delete_stream(self, stream_id):
        if stream_id in self.failing_deletes:
            raise TransportError("Internal Server Error", status_code=500)
        with self._lock:
            self.deleted.append(stream_id)


@pytest.fixture
def make_transport():
    return FakeTransport
