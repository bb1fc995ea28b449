"""Emit tile grids as Lua modules (or JSON) and read Lua modules back.

The Lua layout is what a scenario script loads at runtime::

    -- tiletexture lua texture --seed 42 --blending 20 --steps dirt:0..127 sand:128..255
    local mod = {};
    mod.width = 2;
    mod.height = 1;
    mod.map = {
        [1] = "dirt",
        [2] = "sand",
    };
    mod.grid = {
        { 1, 2 },
    };
    return mod

``map`` is a 1-based array of tile names and ``grid`` holds one row per
scanline. Any world position is wrapped with modulo ``width``/``height`` to
get a grid cell, whose value is then looked up in ``map``.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .errors import MalformedTexture
from .grid import TileGrid, TileIndex
from .steps import StepTable

HEADER_PREFIX = "-- tiletexture lua texture"
INDENT = "    "


# //1.- Parameters echoed in the artifact header so a run can be replayed.
@dataclass(frozen=True)
class RunMetadata:
    seed: int
    blending: int
    steps: StepTable

    def command_line(self) -> str:
        return f"--seed {self.seed} --blending {self.blending} --steps {self.steps}"

    def as_dict(self) -> dict:
        return {"seed": self.seed, "blending": self.blending, "steps": list(self.steps.tokens())}


def _lua_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def header(metadata: RunMetadata) -> str:
    return f"{HEADER_PREFIX} {metadata.command_line()}"


# //2.- Write the module line by line; every value is an integer or a string.
def serialize(width: int, height: int, grid: TileGrid, index: TileIndex, metadata: RunMetadata) -> str:
    lines = [
        header(metadata),
        "local mod = {};",
        f"mod.width = {int(width)};",
        f"mod.height = {int(height)};",
        "mod.map = {",
    ]
    for tile_index, name in index.items():
        lines.append(f"{INDENT}[{tile_index}] = {_lua_string(name)},")
    lines.append("};")
    lines.append("mod.grid = {")
    for row in grid.rows():
        lines.append(f"{INDENT}{{ {', '.join(str(value) for value in row)} }},")
    lines.append("};")
    lines.append("return mod")
    return "\n".join(lines) + "\n"


# //3.- Same content as a JSON document, keys sorted for stable diffs.
def serialize_json(width: int, height: int, grid: TileGrid, index: TileIndex, metadata: RunMetadata) -> str:
    payload = {
        "width": int(width),
        "height": int(height),
        "map": {str(tile_index): name for tile_index, name in index.items()},
        "grid": [list(row) for row in grid.rows()],
        "metadata": metadata.as_dict(),
    }
    return json.dumps(payload, indent=2, sort_keys=True) + "\n"


# -- Reading ---------------------------------------------------------------


@dataclass(frozen=True)
class LuaTexture:
    width: int
    height: int
    map: Dict[int, str]
    grid: Tuple[Tuple[int, ...], ...]
    header: Optional[str] = None

    def tile_at(self, row: int, column: int) -> str:
        return self.map[self.grid[row % self.height][column % self.width]]


_SCALAR_RE = re.compile(r"^mod\.(width|height)\s*=\s*(\d+)\s*;$")
_MAP_ENTRY_RE = re.compile(r'^\[(\d+)\]\s*=\s*"((?:[^"\\]|\\.)*)"\s*,?$')
_ROW_RE = re.compile(r"^\{([\d,\s]*)\}\s*,?$")


def _unescape(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value)


def parse_lua_texture(text: str) -> LuaTexture:
    """Read a module produced by :func:`serialize` back into plain Python values."""
    scalars: Dict[str, int] = {}
    tiles: Dict[int, str] = {}
    rows: List[Tuple[int, ...]] = []
    comment: Optional[str] = None
    section: Optional[str] = None
    returned = False

    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if line.startswith("--"):
            if comment is None:
                comment = line
            continue
        if section is not None:
            if line == "};":
                section = None
                continue
            if section == "map":
                match = _MAP_ENTRY_RE.match(line)
                if not match:
                    raise MalformedTexture(f"line {number}: unreadable map entry `{line}`")
                key = int(match.group(1))
                if key in tiles:
                    raise MalformedTexture(f"line {number}: duplicate map index {key}")
                tiles[key] = _unescape(match.group(2))
            else:
                match = _ROW_RE.match(line)
                if not match:
                    raise MalformedTexture(f"line {number}: unreadable grid row `{line}`")
                cells = [item.strip() for item in match.group(1).split(",") if item.strip()]
                rows.append(tuple(int(item) for item in cells))
            continue
        if line == "local mod = {};":
            continue
        if line == "mod.map = {":
            section = "map"
            continue
        if line == "mod.grid = {":
            section = "grid"
            continue
        if line == "return mod":
            returned = True
            continue
        match = _SCALAR_RE.match(line)
        if not match:
            raise MalformedTexture(f"line {number}: unexpected statement `{line}`")
        scalars[match.group(1)] = int(match.group(2))

    if section is not None:
        raise MalformedTexture(f"unterminated `{section}` table")
    if not returned:
        raise MalformedTexture("module does not `return mod`")
    for key in ("width", "height"):
        if key not in scalars:
            raise MalformedTexture(f"missing `mod.{key}`")
    return LuaTexture(
        width=scalars["width"],
        height=scalars["height"],
        map=tiles,
        grid=tuple(rows),
        header=comment,
    )
