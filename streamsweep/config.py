"""
Run configuration for a stream sweep.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from .batching import DEFAULT_BATCH_SIZE
from .errors import ConfigurationError
from .runner import DEFAULT_CONCURRENCY
from .transport import DEFAULT_TIMEOUT

CHECKPOINT_FILENAME = "streams-status.json"
DEFAULT_DAYS = 30


def default_checkpoint_path() -> Path:
    """
    Get the checkpoint path, honouring STREAMSWEEP_CHECKPOINT.

    Returns:
        Path: Checkpoint file path
    """
    return Path(os.environ.get("STREAMSWEEP_CHECKPOINT", CHECKPOINT_FILENAME))


@dataclass
class SweepConfig:
    """Everything one run needs. Built once and not changed afterwards."""
    org: str
    project: str
    api_key: str
    days: int = DEFAULT_DAYS
    dry_run: bool = True
    resume: bool = False
    service: Optional[str] = None
    exclude: Tuple[str, ...] = field(default_factory=tuple)
    env: Optional[str] = None
    checkpoint_path: Path = field(default_factory=default_checkpoint_path)
    batch_size: int = DEFAULT_BATCH_SIZE
    concurrency: int = DEFAULT_CONCURRENCY
    timeout: int = DEFAULT_TIMEOUT

    def validate(self) -> None:
        """
        Check the configuration before any network activity.

        Raises:
            ConfigurationError: On a missing credential or out-of-range value
        """
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError("An API key is required")
        if not self.org:
            raise ConfigurationError("Organization is required")
        if not self.project:
            raise ConfigurationError("Project is required")
        if self.days < 1:
            raise ConfigurationError(f"days must be at least 1, got {self.days}")
        if self.batch_size < 1:
            raise ConfigurationError(f"batch size must be at least 1, got {self.batch_size}")
        if self.concurrency < 1:
            raise ConfigurationError(f"concurrency must be at least 1, got {self.concurrency}")
        if self.timeout < 1:
            raise ConfigurationError(f"timeout must be at least 1, got {self.timeout}")
