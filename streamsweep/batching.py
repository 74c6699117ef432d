"""
Splitting stream IDs into fixed-size batches.
"""

from typing import List, Sequence

DEFAULT_BATCH_SIZE = 10


def split_batches(ids: Sequence[str], batch_size: int = DEFAULT_BATCH_SIZE) -> List[List[str]]:
    """
    Split IDs into consecutive batches of at most batch_size, keeping order.

    An empty input gives no batches; fewer IDs than batch_size give one batch.

    Args:
        ids: Ordered stream IDs
        batch_size: Maximum IDs per batch

    Returns:
        List of batches
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    return [list(ids[start:start + batch_size]) for start in range(0, len(ids), batch_size)]
