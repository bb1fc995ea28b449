"""Grayscale intensity fields and the Pillow-backed image loader."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import DimensionMismatch, ImageLoadError, InvalidParameter

LOGGER = logging.getLogger(__name__)


class IntensityField:
    """Immutable ``height x width`` matrix of 8 bit intensities."""

    def __init__(self, values: Union[np.ndarray, Sequence[Sequence[int]]]) -> None:
        self._values = _coerce_field(values)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "IntensityField":
        return cls(rows)

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def width(self) -> int:
        return int(self._values.shape[1])

    @property
    def height(self) -> int:
        return int(self._values.shape[0])

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    def __repr__(self) -> str:
        return f"IntensityField(width={self.width}, height={self.height})"


# //1.- Validate dimensions before dtype so ragged input reports a dimension error.
def _coerce_field(values: Union[np.ndarray, Sequence[Sequence[int]]]) -> np.ndarray:
    if isinstance(values, np.ndarray):
        array = values
    else:
        rows = list(values)
        if not rows:
            raise DimensionMismatch("intensity field is empty")
        widths = set()
        for index, row in enumerate(rows):
            try:
                widths.add(len(row))
            except TypeError as exc:
                raise DimensionMismatch(f"row {index} is not a sequence") from exc
        if len(widths) != 1:
            raise DimensionMismatch(f"intensity field rows have inconsistent lengths {sorted(widths)}")
        array = np.asarray(rows)

    if array.ndim != 2:
        raise DimensionMismatch(f"intensity field must be two dimensional, got {array.ndim} dimensions")
    if array.shape[0] == 0 or array.shape[1] == 0:
        raise DimensionMismatch(f"intensity field is empty ({array.shape[1]}x{array.shape[0]})")
    if array.dtype == np.bool_ or not np.issubdtype(array.dtype, np.integer):
        raise InvalidParameter("intensity field", array.dtype, "expected integer intensities")
    if array.dtype != np.uint8:
        low = int(array.min())
        high = int(array.max())
        if low < 0 or high > 255:
            raise InvalidParameter("intensity field", f"{low}..{high}", "intensities must lie within 0..255")
    field = np.array(array, dtype=np.uint8, copy=True)
    field.setflags(write=False)
    return field


# //2.- Decode any Pillow-readable image and collapse it to 8 bit luma.
def load_grayscale(path: Union[str, Path]) -> IntensityField:
    try:
        with Image.open(path) as image:
            LOGGER.debug("Loaded %s (%s, %dx%d)", path, image.mode, image.width, image.height)
            gray = image.convert("L")
            values = np.asarray(gray, dtype=np.uint8)
    except FileNotFoundError as exc:
        raise ImageLoadError(f"image `{path}` does not exist") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageLoadError(f"unable to decode image `{path}`: {exc}") from exc
    return IntensityField(values)
