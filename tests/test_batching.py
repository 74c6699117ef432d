"""
Tests for splitting stream IDs into batches.
"""

import pytest

from streamsweep.batching import split_batches


class TestSplitBatches:
    """Test batch splitting."""

    def test_empty_input_gives_no_batches(self):
        assert split_batches([]) == []

    def test_fewer_than_batch_size_gives_one_batch(self):
        ids = ["a", "b", "c"]
        assert split_batches(ids, 10) == [["a", "b", "c"]]

    def test_exact_batch_size_gives_one_batch(self):
        ids = [str(i) for i in range(10)]
        assert split_batches(ids, 10) == [ids]

    def test_concatenation_preserves_order(self):
        """Batches joined back together equal the input, nothing lost or repeated."""
        for count in (1, 2, 9, 10, 11, 25, 100):
            ids = [f"s{i}" for i in range(count)]
            batches = split_batches(ids, 4)

            assert [rid for batch in batches for rid in batch] == ids
            assert all(1 <= len(batch) <= 4 for batch in batches)
            assert all(len(batch) == 4 for batch in batches[:-1])

    def test_last_batch_holds_remainder(self):
        batches = split_batches(["a", "b", "c", "d", "e"], 2)
        assert batches == [["a", "b"], ["c", "d"], ["e"]]

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError, match="batch_size must be positive"):
            split_batches(["a"], 0)
