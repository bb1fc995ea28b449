#!/usr/bin/env python3
"""Check a generated Lua texture against the invariants scenario loaders rely on."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tiletexture import LuaTexture, TextureError, parse_lua_texture, validate  # noqa: E402


def check_dimensions(texture: LuaTexture) -> List[str]:
    problems = []
    if len(texture.grid) != texture.height:
        problems.append(f"grid has {len(texture.grid)} rows, mod.height is {texture.height}")
    for row_index, row in enumerate(texture.grid):
        if len(row) != texture.width:
            problems.append(f"row {row_index + 1} has {len(row)} entries, mod.width is {texture.width}")
    return problems


def check_indices(texture: LuaTexture) -> List[str]:
    problems = []
    expected = set(range(1, len(texture.map) + 1))
    if set(texture.map) != expected:
        problems.append(f"map indices {sorted(texture.map)} are not the sequence 1..{len(texture.map)}")
    used = {value for row in texture.grid for value in row}
    unknown = sorted(used - set(texture.map))
    if unknown:
        problems.append(f"grid references indices missing from the map: {unknown}")
    unused = sorted(set(texture.map) - used)
    if unused:
        problems.append(f"map entries never used by the grid: {unused}")
    return problems


def check_tile_names(texture: LuaTexture, steps: Sequence[str]) -> List[str]:
    table = validate(steps)
    known = set(table.names)
    return [
        f"map entry [{index}] = {name!r} is not a tile of the step table"
        for index, name in sorted(texture.map.items())
        if name not in known
    ]


def verify(path: Path, steps: Optional[Sequence[str]] = None) -> List[str]:
    texture = parse_lua_texture(path.read_text(encoding="utf-8"))
    problems = check_dimensions(texture) + check_indices(texture)
    if steps:
        problems += check_tile_names(texture, steps)
    return problems


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", type=Path, help="Generated lua texture")
    parser.add_argument("--steps", nargs="+", help="Step table the texture was generated from")
    args = parser.parse_args(argv)

    try:
        problems = verify(args.path, args.steps)
    except (OSError, TextureError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    for problem in problems:
        print(f"{args.path}: {problem}", file=sys.stderr)
    if problems:
        return 1
    print(f"{args.path}: ok")
    return 0


if __name__ == "__main__":
    sys.exit(main())
