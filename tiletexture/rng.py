"""Seeded pseudorandom source shared by the blending pass."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

from .errors import InvalidParameter

UINT64_MAX = (1 << 64) - 1


# //1.- A seed supplied by the user and used verbatim.
@dataclass(frozen=True)
class ExplicitSeed:
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, np.integer)):
            raise InvalidParameter("seed", self.value, "expected an integer")
        if not 1 <= self.value <= UINT64_MAX:
            raise InvalidParameter("seed", self.value, "explicit seeds must lie within 1..2^64-1")


# //2.- Ask the source to pick a fresh seed from OS entropy and report it back.
@dataclass(frozen=True)
class AutoSeed:
    pass


SeedChoice = Union[ExplicitSeed, AutoSeed]


# //3.- Map the command line convention (0 = pick one) onto an explicit choice.
def seed_choice(value: Union[int, SeedChoice]) -> SeedChoice:
    if isinstance(value, (ExplicitSeed, AutoSeed)):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameter("seed", value, "expected an integer")
    if not 0 <= value <= UINT64_MAX:
        raise InvalidParameter("seed", value, "must be a 64 bit unsigned integer")
    if value == 0:
        return AutoSeed()
    return ExplicitSeed(int(value))


def generate_seed(entropy: Optional[np.random.Generator] = None) -> int:
    """Draw a non-zero 64 bit seed, from OS entropy unless a generator is given."""
    rng = entropy if entropy is not None else np.random.default_rng()
    return int(rng.integers(1, UINT64_MAX, dtype=np.uint64, endpoint=True))


class PseudorandomSource:
    """Reproducible integer stream backed by numpy's PCG64 generator.

    The effective seed is always available through :attr:`seed`, whether it
    was supplied or generated, so a run can be replayed later.
    """

    def __init__(self, choice: Union[int, SeedChoice] = AutoSeed()) -> None:
        choice = seed_choice(choice)
        if isinstance(choice, ExplicitSeed):
            self._seed = int(choice.value)
        else:
            self._seed = generate_seed()
        self._generator = np.random.default_rng(self._seed)

    @property
    def seed(self) -> int:
        return self._seed

    def next_in_range(
        self,
        lo: int,
        hi: int,
        size: Optional[Union[int, Tuple[int, ...]]] = None,
    ):
        """Uniform integers in ``[lo, hi]``; an array of ``size`` filled row-major when given."""
        if lo > hi:
            raise InvalidParameter("range", f"{lo}..{hi}", "low bound is greater than high bound")
        drawn = self._generator.integers(lo, hi, size=size, dtype=np.int64, endpoint=True)
        if size is None:
            return int(drawn)
        return drawn
