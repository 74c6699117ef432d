"""
Exception types raised by the sweeper.
"""

from typing import Optional


class SweepError(Exception):
    """Base class for all sweeper errors."""


class ConfigurationError(SweepError):
    """Missing credential or malformed arguments. Raised before any network call."""


class CheckpointError(SweepError):
    """The checkpoint file could not be read, parsed or written."""


class TransportError(SweepError):
    """A call to the remote API failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429
