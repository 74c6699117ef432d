"""
Activity lookback window.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional


@dataclass(frozen=True)
class RunWindow:
    """The (oldest, youngest) bounds used to judge recent activity."""
    oldest: datetime
    youngest: datetime

    @classmethod
    def from_days(cls, days: int, now: Optional[datetime] = None) -> "RunWindow":
        if days <= 0:
            raise ValueError(f"days must be positive, got {days}")
        youngest = now or datetime.now(timezone.utc)
        return cls(oldest=youngest - timedelta(days=days), youngest=youngest)

    def contains(self, moment: datetime) -> bool:
        return self.oldest <= moment <= self.youngest

    @staticmethod
    def format_time(moment: datetime) -> str:
        """RFC 3339 in UTC, e.g. 2024-05-01T12:00:00Z"""
        return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    @property
    def oldest_iso(self) -> str:
        return self.format_time(self.oldest)

    @property
    def youngest_iso(self) -> str:
        return self.format_time(self.youngest)
