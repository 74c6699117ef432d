"""
Per-batch classify and delete workers.
"""

from .classify import classify_batch
from .act import delete_batch

__all__ = [
    "classify_batch",
    "delete_batch",
]
