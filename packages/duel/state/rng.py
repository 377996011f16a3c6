"""
XorShift128 RNG - seedable random source for the duel engine.

Every random decision in combat (deck shuffles, AI strategy rolls, AI spell
picks) goes through this module so that a duel can be replayed exactly from
its seed.

Two usage patterns:
- Shuffles: the generator state (seed0, seed1) lives inside CombatState and
  is restored/saved around every shuffle via Random.from_state()/get_state().
- AI: the orchestration loop owns a Random and passes it explicitly.
"""

import os
import time
from typing import List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

MASK_64 = 0xFFFFFFFFFFFFFFFF


class XorShift128:
    """
    XorShift128 PRNG.

    State is two 64-bit integers (seed0, seed1).
    """

    def __init__(self, seed: int, seed1: Optional[int] = None):
        """
        Initialize with a 64-bit seed or explicit (seed0, seed1) state.

        Args:
            seed: Either the initial seed (if seed1 is None) or seed0 state
            seed1: If provided, use (seed, seed1) as direct state values
        """
        if seed1 is not None:
            self.seed0 = seed & MASK_64
            self.seed1 = seed1 & MASK_64
        else:
            if seed == 0:
                seed = -0x8000000000000000
            self.seed0 = self._murmur_hash3(seed)
            self.seed1 = self._murmur_hash3(self.seed0)

    @staticmethod
    def _murmur_hash3(x: int) -> int:
        """MurmurHash3 finalizer - used for seed initialization."""
        x = x & MASK_64
        x ^= x >> 33
        x = (x * 0xff51afd7ed558ccd) & MASK_64
        x ^= x >> 33
        x = (x * 0xc4ceb9fe1a85ec53) & MASK_64
        x ^= x >> 33
        return x

    def _next_long(self) -> int:
        """Generate next 64-bit value (unsigned)."""
        s1 = self.seed0
        s0 = self.seed1
        self.seed0 = s0

        s1 ^= (s1 << 23) & MASK_64
        self.seed1 = (s1 ^ s0 ^ (s1 >> 17) ^ (s0 >> 26)) & MASK_64

        return (self.seed0 + self.seed1) & MASK_64

    def next_int(self, bound: int) -> int:
        """Random int in [0, bound)."""
        if bound <= 0:
            raise ValueError("bound must be positive")

        while True:
            bits = self._next_long() >> 1
            val = bits % bound
            if bits - val + (bound - 1) >= 0:
                return int(val)

    def next_float(self) -> float:
        """Random float in [0, 1)."""
        return (self._next_long() >> 40) / (1 << 24)

    def get_state(self, index: int) -> int:
        """Get state value (0 = seed0, 1 = seed1)."""
        if index == 0:
            return self.seed0
        return self.seed1


class Random:
    """
    Draw helpers over XorShift128.

    Combat code only needs bounded ints, floats, picks and shuffles; the
    generator state can be saved and restored as a (seed0, seed1) pair.
    """

    def __init__(self, seed: int):
        self._rng = XorShift128(seed)

    @classmethod
    def from_state(cls, state: Tuple[int, int]) -> "Random":
        """Rebuild a generator from a saved (seed0, seed1) pair."""
        new = cls.__new__(cls)
        new._rng = XorShift128(state[0], state[1])
        return new

    def get_state(self) -> Tuple[int, int]:
        """Current (seed0, seed1) pair, suitable for from_state()."""
        return (self._rng.get_state(0), self._rng.get_state(1))

    def random_int(self, range_val: int) -> int:
        """Random int in [0, range_val] INCLUSIVE."""
        return self._rng.next_int(range_val + 1)

    def random_float(self) -> float:
        """Random float in [0, 1)."""
        return self._rng.next_float()

    def choice(self, items: Sequence[T]) -> T:
        """Uniform pick from a non-empty sequence."""
        if not items:
            raise IndexError("cannot choose from an empty sequence")
        return items[self.random_int(len(items) - 1)]

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """
        Fisher-Yates shuffle.

        Returns a new list; the input is left untouched.
        """
        shuffled = list(items)
        for i in range(len(shuffled) - 1, 0, -1):
            j = self.random_int(i)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled


SEED_CHARACTERS = "0123456789ABCDEFGHIJKLMNPQRSTUVWXYZ"


def seed_to_long(seed_string: str) -> int:
    """
    Convert seed string (e.g., "ABC123XYZ") to long value.

    Base-35 encoding: 0-9 + A-Z excluding O (O is read as 0).
    A purely numeric string is taken as the integer itself.
    """
    if seed_string.lstrip('-').isdigit():
        return int(seed_string)

    seed_string = seed_string.upper().replace("O", "0")

    result = 0
    for char in seed_string:
        remainder = SEED_CHARACTERS.find(char)
        if remainder == -1:
            continue
        result *= len(SEED_CHARACTERS)
        result += remainder

    return result


def entropy_seed() -> int:
    """Fresh 64-bit seed for duels started without one."""
    return int.from_bytes(os.urandom(8), "little") ^ time.time_ns()
