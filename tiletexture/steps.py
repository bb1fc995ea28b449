"""Step table mapping grayscale intensities onto tile names."""
from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

import numpy as np

from .errors import CoverageGap, InvalidParameter, InvalidRange, MalformedStep, RangeOverlap

MIN_INTENSITY = 0
MAX_INTENSITY = 255

_BOUND_RE = re.compile(r"[0-9]+")
_FORBIDDEN_NAME_RE = re.compile(r"[\s\"'\\\x00-\x1f\x7f]")


# //1.- One bucket of the partition: an inclusive intensity range bound to a tile name.
@dataclass(frozen=True)
class StepRange:
    tile_name: str
    low: int
    high: int

    # //2.- Reproduce the exact token the range was parsed from.
    def __str__(self) -> str:
        return f"{self.tile_name}:{self.low}..{self.high}"

    def contains(self, intensity: int) -> bool:
        return self.low <= intensity <= self.high


# //3.- Split a `tile-name:low..high` token into a StepRange without range checks.
def parse_step(token: str) -> StepRange:
    parts = token.split(":")
    if len(parts) != 2:
        raise MalformedStep(token)
    name, bounds = parts
    limits = bounds.split("..")
    if len(limits) != 2:
        raise MalformedStep(token)
    start, end = limits
    if not _BOUND_RE.fullmatch(start) or not _BOUND_RE.fullmatch(end):
        raise MalformedStep(token, "range bounds must be non-negative integers")
    _check_tile_name(name, token)
    return StepRange(tile_name=name, low=int(start), high=int(end))


def parse_steps(tokens: Iterable[str]) -> Tuple[StepRange, ...]:
    return tuple(parse_step(token) for token in tokens)


def _check_tile_name(name: str, source: object) -> None:
    if not isinstance(name, str) or not name:
        raise MalformedStep(str(source), "tile name must be a non-empty string")
    if _FORBIDDEN_NAME_RE.search(name):
        raise MalformedStep(str(source), "tile name contains whitespace, quotes or control characters")


class StepTable:
    """Validated partition of ``[0, 255]`` into named buckets.

    Ranges are kept twice: in the order they were provided, so a run can echo
    its parameters verbatim, and sorted by ``low`` for binary search lookups.
    Construction goes through :func:`validate`, which enforces full coverage
    with no overlap, so :meth:`resolve` never misses.
    """

    def __init__(self, provided: Sequence[StepRange], ordered: Sequence[StepRange]) -> None:
        self._provided = tuple(provided)
        self._ordered = tuple(ordered)
        self._lows = [step.low for step in self._ordered]
        names = []
        for step in self._ordered:
            if step.tile_name not in names:
                names.append(step.tile_name)
        self._names = tuple(names)
        lookup = {name: position for position, name in enumerate(self._names)}
        self._low_array = np.asarray(self._lows, dtype=np.int64)
        self._name_ids = np.asarray([lookup[step.tile_name] for step in self._ordered], dtype=np.int64)

    @property
    def provided(self) -> Tuple[StepRange, ...]:
        return self._provided

    @property
    def ranges(self) -> Tuple[StepRange, ...]:
        return self._ordered

    @property
    def names(self) -> Tuple[str, ...]:
        """Distinct tile names in the order their first bucket appears along ``[0, 255]``."""
        return self._names

    @property
    def name_ids(self) -> np.ndarray:
        """Position in :attr:`names` for every sorted range."""
        return self._name_ids

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self):
        return iter(self._ordered)

    def __str__(self) -> str:
        return " ".join(self.tokens())

    def __repr__(self) -> str:
        return f"StepTable({self})"

    def tokens(self) -> Tuple[str, ...]:
        return tuple(str(step) for step in self._provided)

    def range_for(self, intensity: int) -> StepRange:
        if isinstance(intensity, bool) or not isinstance(intensity, (int, np.integer)):
            raise InvalidParameter("intensity", intensity, "expected an integer")
        if not MIN_INTENSITY <= intensity <= MAX_INTENSITY:
            raise InvalidParameter("intensity", intensity, "outside 0..255")
        position = bisect.bisect_right(self._lows, int(intensity)) - 1
        return self._ordered[position]

    def resolve(self, intensity: int) -> str:
        return self.range_for(intensity).tile_name

    def positions(self, values: np.ndarray) -> np.ndarray:
        """Vectorised :meth:`range_for`: sorted-range position of every value.

        ``values`` must already lie in ``[0, 255]``.
        """
        return np.searchsorted(self._low_array, values, side="right") - 1


StepLike = Union[StepRange, str]


def validate(ranges: Iterable[StepLike]) -> StepTable:
    """Build a :class:`StepTable` or raise the first validation error found."""
    provided = tuple(parse_step(item) if isinstance(item, str) else item for item in ranges)
    if not provided:
        raise CoverageGap(MIN_INTENSITY, MAX_INTENSITY)
    for step in provided:
        _check_tile_name(step.tile_name, step)
        if isinstance(step.low, bool) or isinstance(step.high, bool):
            raise InvalidRange(step, "bounds must be integers")
        if not isinstance(step.low, (int, np.integer)) or not isinstance(step.high, (int, np.integer)):
            raise InvalidRange(step, "bounds must be integers")
        if not MIN_INTENSITY <= step.low <= MAX_INTENSITY or not MIN_INTENSITY <= step.high <= MAX_INTENSITY:
            raise InvalidRange(step, "bounds must lie within 0..255")
        if step.low > step.high:
            raise InvalidRange(step, "low bound is greater than high bound")

    ordered = sorted(provided, key=lambda step: (step.low, step.high))
    if ordered[0].low != MIN_INTENSITY:
        raise CoverageGap(MIN_INTENSITY, ordered[0].low - 1)
    for previous, current in zip(ordered, ordered[1:]):
        if current.low <= previous.high:
            raise RangeOverlap(previous, current)
        if current.low != previous.high + 1:
            raise CoverageGap(previous.high + 1, current.low - 1)
    if ordered[-1].high != MAX_INTENSITY:
        raise CoverageGap(ordered[-1].high + 1, MAX_INTENSITY)
    return StepTable(provided, ordered)
