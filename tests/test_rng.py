"""Tests for the seeded random source."""
import pytest
from climbgen.core.rng import SeededRandom, derive_seed, ZERO_SEED_REPLACEMENT, UINT64_MAX


class TestSeededRandom:
    """Test cases for SeededRandom."""

    def test_same_seed_same_stream(self):
        """Two generators with the same seed agree call by call."""
        a = SeededRandom(42)
        b = SeededRandom(42)
        assert [a.next_u64() for _ in range(20)] == [b.next_u64() for _ in range(20)]

    def test_first_value_follows_lcg(self):
        """State 1 advances to multiplier + increment."""
        assert SeededRandom(1).next_u64() == 6364136223846793006

    def test_zero_seed_is_remapped(self):
        """Seed 0 behaves like the replacement constant."""
        assert SeededRandom(0).state == ZERO_SEED_REPLACEMENT
        assert SeededRandom(0).next_u64() == SeededRandom(ZERO_SEED_REPLACEMENT).next_u64()

    def test_next_int_non_positive_bound(self):
        """A bound of zero returns 0 without consuming state."""
        rng = SeededRandom(9)
        before = rng.state
        assert rng.next_int(0) == 0
        assert rng.next_int(-3) == 0
        assert rng.state == before

    @pytest.mark.parametrize("bound", [1, 2, 7, 100])
    def test_next_int_in_range(self, bound):
        """next_int stays inside [0, bound)."""
        rng = SeededRandom(123)
        for _ in range(200):
            assert 0 <= rng.next_int(bound) < bound

    def test_next_double_in_unit_interval(self):
        """next_double stays inside [0, 1]."""
        rng = SeededRandom(77)
        for _ in range(200):
            assert 0.0 <= rng.next_double() <= 1.0

    def test_randint_inclusive_hits_both_ends(self):
        """randint_inclusive covers its whole closed range."""
        rng = SeededRandom(5)
        values = {rng.randint_inclusive(-2, 2) for _ in range(300)}
        assert values == {-2, -1, 0, 1, 2}

    def test_shuffle_is_permutation(self):
        """Shuffling keeps every element exactly once."""
        items = list(range(20))
        SeededRandom(3).shuffle(items)
        assert sorted(items) == list(range(20))

    def test_choose_weighted_skips_zero_weight(self):
        """Items with zero weight are never picked when others have weight."""
        rng = SeededRandom(7)
        picks = {rng.choose_weighted([("never", 0.0), ("always", 1.0)]) for _ in range(100)}
        assert picks == {"always"}


class TestDeriveSeed:
    """Test cases for batch seed derivation."""

    def test_offsets_by_stride(self):
        assert derive_seed(2025, 0, 7919) == 2025
        assert derive_seed(2025, 3, 7919) == 2025 + 3 * 7919

    def test_wraps_like_uint64(self):
        assert derive_seed(UINT64_MAX, 1, 1) == 0
