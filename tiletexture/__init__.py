"""Bake grayscale images into deterministic tile textures for scenario scripts.

A texture run splits the intensity range ``[0, 255]`` into named buckets,
optionally perturbs every pixel with a seeded blending pass, resolves each
pixel to a tile and writes the result as a Lua module holding a deduplicated
tile map and a grid of 1-based indices.
"""

from .errors import (
    CoverageGap,
    DimensionMismatch,
    ImageLoadError,
    InvalidParameter,
    InvalidRange,
    MalformedStep,
    MalformedTexture,
    OutputWriteError,
    RangeOverlap,
    TextureError,
)
from .steps import StepRange, StepTable, parse_step, parse_steps, validate
from .rng import AutoSeed, ExplicitSeed, PseudorandomSource, SeedChoice, seed_choice
from .blending import blend, blending_span, validate_strength
from .imaging import IntensityField, load_grayscale
from .grid import TileGrid, TileIndex, build, resolve
from .serializer import LuaTexture, RunMetadata, parse_lua_texture, serialize, serialize_json
from .config import TextureSettings, load_texture_settings
from .pipeline import TextureBake, bake_image, bake_texture, render_texture, write_texture

__version__ = "0.1.0"

__all__ = [
    "TextureError",
    "InvalidRange",
    "CoverageGap",
    "RangeOverlap",
    "DimensionMismatch",
    "InvalidParameter",
    "MalformedStep",
    "ImageLoadError",
    "MalformedTexture",
    "OutputWriteError",
    "StepRange",
    "StepTable",
    "parse_step",
    "parse_steps",
    "validate",
    "AutoSeed",
    "ExplicitSeed",
    "SeedChoice",
    "PseudorandomSource",
    "seed_choice",
    "blend",
    "blending_span",
    "validate_strength",
    "IntensityField",
    "load_grayscale",
    "TileGrid",
    "TileIndex",
    "build",
    "resolve",
    "LuaTexture",
    "RunMetadata",
    "parse_lua_texture",
    "serialize",
    "serialize_json",
    "TextureSettings",
    "load_texture_settings",
    "TextureBake",
    "bake_texture",
    "bake_image",
    "render_texture",
    "write_texture",
]
