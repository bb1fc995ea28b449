"""Tile resolution and grid assembly."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Tuple

import numpy as np

from .blending import blend
from .imaging import IntensityField
from .rng import PseudorandomSource
from .steps import StepTable


# //1.- Ordered, deduplicated tile names; index i + 1 belongs to names[i].
@dataclass(frozen=True)
class TileIndex:
    names: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.names)

    def items(self) -> Iterator[Tuple[int, str]]:
        for position, name in enumerate(self.names):
            yield position + 1, name

    def as_dict(self) -> Dict[int, str]:
        return dict(self.items())

    def index_of(self, name: str) -> int:
        return self.names.index(name) + 1

    def name_of(self, index: int) -> str:
        if not 1 <= index <= len(self.names):
            raise KeyError(index)
        return self.names[index - 1]


# //2.- Row-major matrix of 1-based tile indices matching the field dimensions.
@dataclass(frozen=True)
class TileGrid:
    cells: np.ndarray

    @property
    def width(self) -> int:
        return int(self.cells.shape[1])

    @property
    def height(self) -> int:
        return int(self.cells.shape[0])

    def rows(self) -> Tuple[Tuple[int, ...], ...]:
        return tuple(tuple(int(value) for value in row) for row in self.cells.tolist())

    def __getitem__(self, position: Tuple[int, int]) -> int:
        return int(self.cells[position])


def resolve(table: StepTable, intensity: int) -> str:
    return table.resolve(intensity)


def build(
    field: IntensityField,
    table: StepTable,
    strength: int,
    source: PseudorandomSource,
) -> Tuple[TileGrid, TileIndex]:
    """Resolve every pixel of ``field`` to a tile and index the tiles in use.

    All blending draws are requested at once for the full field, filled in
    row-major order, so the draw sequence depends only on the field shape. Tile
    indices follow the first appearance of each name in the same row-major
    scan, and names whose buckets no pixel lands in are left out.
    """
    # //3.- Perturb first, then look every value up with one vectorised binary search.
    values = blend(field.values, strength, source)
    name_ids = table.name_ids[table.positions(values)]

    # //4.- Order the names in use by the flat row-major offset of their first pixel.
    used, first_offsets = np.unique(name_ids.ravel(), return_index=True)
    order = used[np.argsort(first_offsets, kind="stable")]
    remap = np.zeros(len(table.names), dtype=np.int64)
    remap[order] = np.arange(1, len(order) + 1)

    cells = remap[name_ids].astype(np.uint32)
    cells.setflags(write=False)
    index = TileIndex(names=tuple(table.names[int(position)] for position in order))
    return TileGrid(cells=cells), index
