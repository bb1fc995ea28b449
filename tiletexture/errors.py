"""Error taxonomy raised while validating texture inputs."""
from __future__ import annotations

from typing import Optional, Tuple


# //1.- Root of every validation failure so callers can catch a single type.
class TextureError(ValueError):
    """Base class for terminal input errors detected before any grid work."""


# //2.- A single step range is malformed on its own (bounds reversed or out of [0,255]).
class InvalidRange(TextureError):
    def __init__(self, step: object, reason: str) -> None:
        super().__init__(f"invalid step range `{step}`: {reason}")
        self.step = step
        self.reason = reason


# //3.- The sorted ranges leave part of [0,255] unmapped.
class CoverageGap(TextureError):
    def __init__(self, low: int, high: int) -> None:
        if low == high:
            span = f"{low}"
        else:
            span = f"{low}..{high}"
        super().__init__(f"steps don't cover intensities {span} of the 0..255 range")
        self.gap: Tuple[int, int] = (low, high)


# //4.- Two ranges claim the same intensity.
class RangeOverlap(TextureError):
    def __init__(self, first: object, second: object) -> None:
        super().__init__(f"step `{second}` overlaps step `{first}`")
        self.ranges = (first, second)


# //5.- The intensity field is empty or ragged.
class DimensionMismatch(TextureError):
    pass


# //6.- Scalar inputs (blending, seed, intensities, config values) out of bounds.
class InvalidParameter(TextureError):
    def __init__(self, name: str, value: object, reason: Optional[str] = None) -> None:
        message = f"invalid {name} `{value}`"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.name = name
        self.value = value


# //7.- A textual step token is not of the form `name:low..high`.
class MalformedStep(TextureError):
    def __init__(self, token: str, reason: str = "expected `tile-name:low..high`") -> None:
        super().__init__(f"malformed step description `{token}`: {reason}")
        self.token = token


class ImageLoadError(TextureError):
    pass


class MalformedTexture(TextureError):
    pass


class OutputWriteError(TextureError):
    pass
