"""Tests for Lua and JSON rendering and the Lua reader."""
from __future__ import annotations

import json

import numpy as np
import pytest

from tiletexture import (
    IntensityField,
    MalformedTexture,
    PseudorandomSource,
    RunMetadata,
    build,
    parse_lua_texture,
    serialize,
    serialize_json,
    validate,
)

EXPECTED_REFERENCE = """\
-- tiletexture lua texture --seed 42 --blending 0 --steps a:0..99 b:100..199 c:200..255
local mod = {};
mod.width = 2;
mod.height = 2;
mod.map = {
    [1] = "a",
    [2] = "b",
    [3] = "c",
};
mod.grid = {
    { 1, 2 },
    { 3, 3 },
};
return mod
"""


def _render(rows, steps, strength=0, seed=42, renderer=serialize):
    field = IntensityField.from_rows(rows)
    table = validate(steps)
    source = PseudorandomSource(seed)
    grid, index = build(field, table, strength, source)
    metadata = RunMetadata(seed=source.seed, blending=strength, steps=table)
    return renderer(field.width, field.height, grid, index, metadata)


# //1.- The reference scenario renders to the exact module layout.
def test_serialize_reference_module(abc_steps):
    assert _render([[0, 128], [200, 255]], abc_steps) == EXPECTED_REFERENCE


def test_header_echoes_steps_as_provided():
    code = _render([[0]], ["b:128..255", "a:0..127"], seed=7)
    assert code.splitlines()[0] == "-- tiletexture lua texture --seed 7 --blending 0 --steps b:128..255 a:0..127"


# //2.- Rows hold width entries and there are height rows for non-square fields.
def test_serialize_rectangular_dimensions(abc_steps):
    texture = parse_lua_texture(_render([[0, 50, 100, 150, 200]], abc_steps))
    assert (texture.width, texture.height) == (5, 1)
    assert texture.grid == ((1, 1, 2, 2, 3),)


def test_output_contains_no_floats(abc_steps):
    code = _render([[0, 128], [200, 255]], abc_steps, strength=30)
    body = "\n".join(code.splitlines()[1:])
    assert "." not in body.replace("mod.", "")


# //3.- Parsing the output recovers, at strength 0, the bucket of every raw intensity.
def test_round_trip_resolves_raw_buckets():
    rows = np.random.default_rng(21).integers(0, 256, size=(9, 13)).tolist()
    steps = ["water:0..63", "sand:64..95", "grass-1:96..191", "rock:192..255"]
    table = validate(steps)
    texture = parse_lua_texture(_render(rows, steps))
    assert texture.header.startswith("-- tiletexture lua texture --seed 42")
    for y, row in enumerate(rows):
        for x, value in enumerate(row):
            name = texture.tile_at(y, x)
            assert table.range_for(value).tile_name == name


def test_tile_at_wraps_coordinates(abc_steps):
    texture = parse_lua_texture(_render([[0, 128], [200, 255]], abc_steps))
    assert texture.tile_at(2, 3) == "b"
    assert texture.tile_at(-1, 0) == "c"


# //4.- JSON rendering carries the same content with string keys.
def test_serialize_json(abc_steps):
    payload = json.loads(_render([[0, 128], [200, 255]], abc_steps, renderer=serialize_json))
    assert payload["width"] == 2
    assert payload["height"] == 2
    assert payload["map"] == {"1": "a", "2": "b", "3": "c"}
    assert payload["grid"] == [[1, 2], [3, 3]]
    assert payload["metadata"] == {"seed": 42, "blending": 0, "steps": ["a:0..99", "b:100..199", "c:200..255"]}


# //5.- The reader refuses text that is not a complete module.
@pytest.mark.parametrize(
    "text",
    [
        "local mod = {};\nmod.width = 1;\nmod.height = 1;\nreturn mod\n".replace("mod.height = 1;\n", ""),
        "local mod = {};\nmod.width = 1;\nmod.height = 1;\nmod.map = {\n",
        "local mod = {};\nmod.width = 1;\nmod.height = 1;\n",
        "local mod = {};\nmod.width = one;\nreturn mod\n",
        "mod.width = 1;\nmod.height = 1;\nmod.map = {\n    [1] = dirt,\n};\nreturn mod\n",
        "mod.width = 1;\nmod.height = 1;\nmod.grid = {\n    { 1, x },\n};\nreturn mod\n",
    ],
)
def test_parse_rejects_malformed_modules(text):
    with pytest.raises(MalformedTexture):
        parse_lua_texture(text)
