"""Command line interface: ``tiletexture lua texture``."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from .blending import MAX_STRENGTH, MIN_STRENGTH
from .config import OUTPUT_FORMATS, load_texture_settings
from .errors import TextureError
from .pipeline import bake_image
from .rng import UINT64_MAX

LOGGER = logging.getLogger(__name__)


def blending_value(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not a valid blending percentage") from exc
    if parsed < MIN_STRENGTH or parsed > MAX_STRENGTH:
        raise argparse.ArgumentTypeError(
            f"Blending must be between {MIN_STRENGTH} and {MAX_STRENGTH} (got {parsed})"
        )
    return parsed


def seed_value(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not a valid seed") from exc
    if parsed < 0 or parsed > UINT64_MAX:
        raise argparse.ArgumentTypeError("Seed must be a 64 bit unsigned integer")
    return parsed


def create_parser() -> argparse.ArgumentParser:
    # //1.- Mirror the `lua texture` command nesting so more generators can be added later.
    parser = argparse.ArgumentParser(
        prog="tiletexture",
        description="Command line interface for baking scenario tile textures",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    lua = commands.add_parser("lua", help="Generate lua files based on input parameters")
    lua_commands = lua.add_subparsers(dest="lua_command", required=True)

    texture = lua_commands.add_parser(
        "texture",
        help=(
            "Generate lua texture file using reference image. "
            "The image is automatically converted to grayscale."
        ),
    )
    texture.add_argument(
        "--steps", "-s",
        nargs="+",
        metavar="TILE:LOW..HIGH",
        help=(
            "Range between [0..255] that maps onto the name of a tile. The value is derived "
            "from grayscale. Multiple space-separated steps can be provided at once. "
            "The entire [0..255] range must be covered."
        ),
    )
    texture.add_argument("--image", "-i", required=True, help="Path of an input image")
    texture.add_argument("--output", "-o", required=True, help="Path of a generated lua script")
    texture.add_argument(
        "--blending", "-b",
        type=blending_value,
        default=None,
        help=(
            "Blending noise pass over grayscale, 0-100 (percent). 0 disables the pass, "
            "20 makes smooth transitions and 100 is pure randomness (default: 0)."
        ),
    )
    texture.add_argument(
        "--seed", "-x",
        type=seed_value,
        default=None,
        help="64 bit value that initializes the PRNG, 0 picks a random seed (default: 0)",
    )
    texture.add_argument(
        "--format", "-f",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format of the generated file (default: lua)",
    )
    texture.add_argument(
        "--config", "-c",
        help="JSON file providing steps, blending, seed and format (command line wins)",
    )
    return parser


def _texture(args: argparse.Namespace) -> int:
    # //2.- Resolve settings: environment, then config file, then explicit flags.
    settings = load_texture_settings(args.config).merged(
        steps=args.steps,
        blending=args.blending,
        seed=args.seed,
        output_format=args.output_format,
    )
    if not settings.steps:
        LOGGER.error("No steps provided; pass --steps or set them in the config file")
        return 2
    bake = bake_image(args.image, args.output, settings)
    LOGGER.info(
        "Generated %s with %d tile(s), seed %d",
        args.output,
        len(bake.index),
        bake.metadata.seed,
    )
    return 0


def run(argv: Optional[Sequence[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return _texture(args)
    except TextureError as exc:
        LOGGER.error("%s", exc)
        return 2


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":  # pragma: no cover - exercised by manual runs
    main()
