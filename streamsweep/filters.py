"""
Candidate filtering for stream sweeps.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .window import RunWindow


@dataclass
class Stream:
    """A Lightstep stream as returned by the list endpoint."""
    id: str
    name: str = ""
    query: str = ""
    created_time: Optional[datetime] = None


@dataclass
class CandidateFilter:
    """
    Decides which listed streams are deletion candidates.

    A stream is excluded when its name or query contains one of the
    exclusion substrings, when a service substring is set and the query
    does not mention it, or when it was created inside the window.
    """
    window: Optional[RunWindow] = None
    exclude: Tuple[str, ...] = field(default_factory=tuple)
    service: Optional[str] = None

    def exclusion_reason(self, stream: Stream) -> Optional[str]:
        """Return why the stream is excluded, or None if it is a candidate."""
        for needle in self.exclude:
            if not needle:
                continue
            if needle in stream.name:
                return f"name contains '{needle}'"
            if needle in stream.query:
                return f"query contains '{needle}'"

        if self.service and self.service not in stream.query:
            return f"query does not mention service '{self.service}'"

        if self.window and stream.created_time and self.window.contains(stream.created_time):
            return "created inside the lookback window"

        return None

    def accepts(self, stream: Stream) -> bool:
        return self.exclusion_reason(stream) is None

    def apply(self, streams: Sequence[Stream]) -> List[Stream]:
        """Keep only candidate streams, preserving order."""
        return [s for s in streams if self.accepts(s)]
