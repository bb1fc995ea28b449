"""Blending pass softening hard edges between adjacent buckets.

Blending does not filter the image. It perturbs every intensity by an
independent random offset before the bucket lookup, so pixels close to a
bucket boundary spill into the neighbouring tile and the edge dissolves into
a speckled transition. The width of the offset grows with the strength:

* ``0`` leaves the intensity untouched and draws nothing,
* ``20`` gives offsets within ``[-51, 51]`` which reads as a smooth transition,
* ``100`` gives offsets within ``[-255, 255]`` which is pure per-pixel noise.
"""
from __future__ import annotations

from typing import Union

import numpy as np

from .errors import InvalidParameter
from .rng import PseudorandomSource
from .steps import MAX_INTENSITY, MIN_INTENSITY

MIN_STRENGTH = 0
MAX_STRENGTH = 100

Intensity = Union[int, np.ndarray]


# //1.- Reject strengths that are not integers inside [0, 100].
def validate_strength(strength: int) -> int:
    if isinstance(strength, bool) or not isinstance(strength, (int, np.integer)):
        raise InvalidParameter("blending", strength, "expected an integer percentage")
    if not MIN_STRENGTH <= strength <= MAX_STRENGTH:
        raise InvalidParameter("blending", strength, "not in 0..100 range")
    return int(strength)


# //2.- Map a percentage onto the half-width of the offset range using integer math only.
def blending_span(strength: int) -> int:
    strength = validate_strength(strength)
    return strength * MAX_INTENSITY // MAX_STRENGTH


# //3.- Perturb one intensity or a whole array; strength 0 is a literal pass-through.
def blend(intensity: Intensity, strength: int, source: PseudorandomSource) -> Intensity:
    span = blending_span(strength)
    if span == 0:
        return intensity
    if np.ndim(intensity) == 0:
        delta = source.next_in_range(-span, span)
        return min(MAX_INTENSITY, max(MIN_INTENSITY, int(intensity) + delta))
    values = np.asarray(intensity, dtype=np.int64)
    delta = source.next_in_range(-span, span, size=values.shape)
    return np.clip(values + delta, MIN_INTENSITY, MAX_INTENSITY).astype(np.uint8)
