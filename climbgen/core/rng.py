"""Seeded pseudo-random source shared by every generator."""
from typing import List, Sequence, Tuple, TypeVar

T = TypeVar("T")

UINT64_MASK = 0xFFFFFFFFFFFFFFFF
UINT64_MAX = UINT64_MASK

# Zero would collapse the stream, so it is remapped to this constant
ZERO_SEED_REPLACEMENT = 0xCAFEBABE

LCG_MULTIPLIER = 6364136223846793005
LCG_INCREMENT = 1


def derive_seed(base: int, index: int, stride: int) -> int:
    """Per-level seed for batch generation (wraps like a uint64)."""
    return (base + index * stride) & UINT64_MASK


class SeededRandom:
    """Linear congruential generator with a 64-bit state.

    Every random choice made during generation goes through one of these
    methods, so two instances built from the same seed produce identical
    call-by-call output.
    """

    def __init__(self, seed: int):
        seed &= UINT64_MASK
        self._state = ZERO_SEED_REPLACEMENT if seed == 0 else seed

    @property
    def state(self) -> int:
        return self._state

    def next_u64(self) -> int:
        """Advance the state and return it."""
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) & UINT64_MASK
        return self._state

    def next_int(self, bound: int) -> int:
        """Value in [0, bound); 0 when bound <= 0 (no state is consumed)."""
        if bound <= 0:
            return 0
        return self.next_u64() % bound

    def next_double(self) -> float:
        return float(self.next_u64()) / float(UINT64_MAX)

    def randint_inclusive(self, low: int, high: int) -> int:
        return low + self.next_int(high - low + 1)

    def choice(self, items: Sequence[T]) -> T:
        return items[self.next_int(len(items))]

    def shuffle(self, items: List[T]) -> None:
        """Fisher-Yates shuffle in place, walking down from the last index."""
        for index in range(len(items) - 1, 0, -1):
            swap_index = self.next_int(index + 1)
            if swap_index != index:
                items[index], items[swap_index] = items[swap_index], items[index]

    def choose_weighted(self, items: Sequence[Tuple[T, float]]) -> T:
        """Pick one item with probability proportional to its weight."""
        total = sum(max(0.0, weight) for _, weight in items)
        pick = self.next_double() * total
        running = 0.0
        for value, weight in items:
            running += max(0.0, weight)
            if pick <= running:
                return value
        return items[-1][0]
