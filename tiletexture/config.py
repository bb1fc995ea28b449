"""Run settings sourced from JSON files, mappings and environment variables."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional, Sequence, Tuple, Union

from .errors import InvalidParameter

OUTPUT_FORMATS = ("lua", "json")
ENV_PREFIX = "TILETEXTURE"


# //1.- Normalise steps given either as a token list or a single space separated string.
def _coerce_steps(value: Union[str, Sequence[str], None]) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(value.split())
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise InvalidParameter("steps", value, "expected a list of `tile-name:low..high` strings")
    return tuple(value)


def _coerce_int(name: str, value: object) -> int:
    if isinstance(value, bool):
        raise InvalidParameter(name, value, "expected an integer")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise InvalidParameter(name, value, "expected an integer") from exc


def _coerce_format(value: object) -> str:
    fmt = str(value).strip().lower()
    if fmt not in OUTPUT_FORMATS:
        raise InvalidParameter("format", value, f"expected one of {', '.join(OUTPUT_FORMATS)}")
    return fmt


# //2.- Immutable bundle of every knob a texture run accepts.
@dataclass(frozen=True)
class TextureSettings:
    """Parameters of one texture run.

    ``seed`` follows the command line convention where ``0`` asks for a fresh
    random seed. Range checks on ``blending`` and ``seed`` happen when the run
    starts so every input error surfaces through the same validation path.
    """

    steps: Tuple[str, ...] = ()
    blending: int = 0
    seed: int = 0
    output_format: str = "lua"

    # //3.- Build settings from a decoded JSON payload, keeping defaults for missing keys.
    @classmethod
    def from_mapping(cls, payload: Optional[Mapping[str, object]] = None) -> "TextureSettings":
        if not payload:
            return cls()
        defaults = cls()
        return cls(
            steps=_coerce_steps(payload.get("steps")) or defaults.steps,
            blending=_coerce_int("blending", payload.get("blending", defaults.blending)),
            seed=_coerce_int("seed", payload.get("seed", defaults.seed)),
            output_format=_coerce_format(payload.get("format", defaults.output_format)),
        )

    # //4.- Allow overriding settings through prefixed environment variables.
    @classmethod
    def from_environment(
        cls,
        prefix: str = ENV_PREFIX,
        env: Optional[Mapping[str, str]] = None,
    ) -> "TextureSettings":
        source = env if env is not None else os.environ
        mapping = {}
        for key in ("steps", "blending", "seed", "format"):
            value = source.get(f"{prefix}_{key.upper()}")
            if value is not None and value.strip():
                mapping[key] = value
        return cls.from_mapping(mapping)

    # //5.- Layer explicit overrides on top, ignoring the ones left unset.
    def merged(self, **overrides: object) -> "TextureSettings":
        changes = {}
        if overrides.get("steps"):
            changes["steps"] = _coerce_steps(overrides["steps"])
        if overrides.get("blending") is not None:
            changes["blending"] = _coerce_int("blending", overrides["blending"])
        if overrides.get("seed") is not None:
            changes["seed"] = _coerce_int("seed", overrides["seed"])
        if overrides.get("output_format") is not None:
            changes["output_format"] = _coerce_format(overrides["output_format"])
        return replace(self, **changes)


def _read_json_config(path: Union[str, Path]) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except OSError as exc:
        raise InvalidParameter("config", str(path), f"unable to read file ({exc.strerror})") from exc
    except UnicodeDecodeError as exc:
        raise InvalidParameter("config", str(path), f"not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc
    except json.JSONDecodeError as exc:
        raise InvalidParameter("config", str(path), f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    if not isinstance(payload, dict):
        raise InvalidParameter("config", str(path), "top level must be a JSON object")
    return payload


# //6.- Public helper: environment first, then the JSON file on top when one is given.
def load_texture_settings(
    path: Optional[Union[str, Path]] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    env_prefix: str = ENV_PREFIX,
) -> TextureSettings:
    settings = TextureSettings.from_environment(prefix=env_prefix, env=env)
    if path is None:
        return settings
    payload = _read_json_config(path)
    return settings.merged(
        steps=payload.get("steps"),
        blending=payload.get("blending"),
        seed=payload.get("seed"),
        output_format=payload.get("format"),
    )
