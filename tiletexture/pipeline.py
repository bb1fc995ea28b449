"""End-to-end texture baking: validate everything, build the grid, render it."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence, Union

import numpy as np

from .blending import validate_strength
from .config import OUTPUT_FORMATS, TextureSettings
from .errors import InvalidParameter, OutputWriteError
from .grid import TileGrid, TileIndex, build
from .imaging import IntensityField, load_grayscale
from .rng import PseudorandomSource, SeedChoice, seed_choice
from .serializer import RunMetadata, serialize, serialize_json
from .steps import StepLike, validate

LOGGER = logging.getLogger(__name__)

FieldLike = Union[IntensityField, np.ndarray, Sequence[Sequence[int]]]


@dataclass(frozen=True)
class TextureBake:
    grid: TileGrid
    index: TileIndex
    metadata: RunMetadata

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height


def bake_texture(
    field: FieldLike,
    steps: Iterable[StepLike],
    *,
    blending: int = 0,
    seed: Union[int, SeedChoice] = 0,
) -> TextureBake:
    """Validate every input, then map ``field`` onto tiles.

    Nothing is drawn from the pseudorandom source until the strength, the step
    table, the field and the seed have all been accepted.
    """
    # //1.- Fail fast: every check runs before the first random draw.
    strength = validate_strength(blending)
    table = validate(steps)
    if not isinstance(field, IntensityField):
        field = IntensityField(field)
    choice = seed_choice(seed)

    # //2.- The source lives for exactly one build.
    source = PseudorandomSource(choice)
    LOGGER.info(
        "Baking %dx%d texture with %d step(s), blending %d, seed %d",
        field.width,
        field.height,
        len(table),
        strength,
        source.seed,
    )
    grid, index = build(field, table, strength, source)
    LOGGER.debug("Tiles in use: %s", ", ".join(index.names))
    metadata = RunMetadata(seed=source.seed, blending=strength, steps=table)
    return TextureBake(grid=grid, index=index, metadata=metadata)


def render_texture(bake: TextureBake, output_format: str = "lua") -> str:
    if output_format == "lua":
        return serialize(bake.width, bake.height, bake.grid, bake.index, bake.metadata)
    if output_format == "json":
        return serialize_json(bake.width, bake.height, bake.grid, bake.index, bake.metadata)
    raise InvalidParameter("format", output_format, f"expected one of {', '.join(OUTPUT_FORMATS)}")


# //3.- Render fully in memory before touching the destination so no partial file is left.
def write_texture(bake: TextureBake, path: Union[str, Path], output_format: str = "lua") -> Path:
    code = render_texture(bake, output_format)
    destination = Path(path)
    try:
        destination.write_text(code, encoding="utf-8")
    except OSError as exc:
        raise OutputWriteError(f"unable to write `{destination}`: {exc.strerror}") from exc
    LOGGER.info("Wrote %s (%d bytes)", destination, len(code.encode("utf-8")))
    return destination


def bake_image(
    image_path: Union[str, Path],
    output_path: Union[str, Path],
    settings: TextureSettings,
) -> TextureBake:
    # //4.- Validate cheap scalar inputs before paying for image decoding.
    validate_strength(settings.blending)
    validate(settings.steps)
    seed_choice(settings.seed)
    field = load_grayscale(image_path)
    bake = bake_texture(field, settings.steps, blending=settings.blending, seed=settings.seed)
    write_texture(bake, output_path, settings.output_format)
    return bake
