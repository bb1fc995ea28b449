"""Tests for settings loading."""
from __future__ import annotations

import json

import pytest

from tiletexture import InvalidParameter, TextureSettings, load_texture_settings


# //1.- Defaults describe a plain run with automatic seeding and Lua output.
def test_defaults():
    settings = TextureSettings()
    assert settings.steps == ()
    assert settings.blending == 0
    assert settings.seed == 0
    assert settings.output_format == "lua"


def test_from_mapping_accepts_string_or_list_steps():
    from_list = TextureSettings.from_mapping({"steps": ["a:0..127", "b:128..255"], "blending": 20})
    from_text = TextureSettings.from_mapping({"steps": "a:0..127 b:128..255", "blending": "20"})
    assert from_list == from_text
    assert from_list.steps == ("a:0..127", "b:128..255")
    assert from_list.blending == 20


def test_from_mapping_rejects_non_numeric_values():
    with pytest.raises(InvalidParameter):
        TextureSettings.from_mapping({"seed": "lots"})
    with pytest.raises(InvalidParameter):
        TextureSettings.from_mapping({"format": "yaml"})


# //2.- Environment variables are read with a configurable prefix.
def test_from_environment():
    env = {
        "TILETEXTURE_STEPS": "a:0..99 b:100..255",
        "TILETEXTURE_BLENDING": "15",
        "TILETEXTURE_SEED": "77",
        "TILETEXTURE_FORMAT": "JSON",
        "UNRELATED": "1",
    }
    settings = TextureSettings.from_environment(env=env)
    assert settings == TextureSettings(steps=("a:0..99", "b:100..255"), blending=15, seed=77, output_format="json")


def test_from_environment_reads_process_env(monkeypatch):
    monkeypatch.setenv("BAKE_SEED", "5")
    assert TextureSettings.from_environment(prefix="BAKE").seed == 5


# //3.- A JSON file layers on top of the environment, and explicit overrides win over both.
def test_load_texture_settings_layers_file_over_environment(tmp_path):
    path = tmp_path / "texture.json"
    path.write_text(json.dumps({"steps": ["x:0..255"], "seed": 9}), encoding="utf-8")
    env = {"TILETEXTURE_BLENDING": "30", "TILETEXTURE_SEED": "1"}
    settings = load_texture_settings(path, env=env)
    assert settings.steps == ("x:0..255",)
    assert settings.blending == 30
    assert settings.seed == 9

    merged = settings.merged(seed=11, blending=None, steps=None, output_format="json")
    assert merged.seed == 11
    assert merged.blending == 30
    assert merged.steps == ("x:0..255",)
    assert merged.output_format == "json"


def test_load_texture_settings_reports_unreadable_files(tmp_path):
    with pytest.raises(InvalidParameter):
        load_texture_settings(tmp_path / "missing.json", env={})
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidParameter):
        load_texture_settings(broken, env={})
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(InvalidParameter):
        load_texture_settings(listing, env={})


# //4.- Steps of the wrong JSON type and non UTF-8 files are reported as parameter errors.
@pytest.mark.parametrize("steps", [5, {"a": "0..255"}, ["a:0..127", 3]])
def test_load_texture_settings_rejects_non_string_steps(tmp_path, steps):
    path = tmp_path / "texture.json"
    path.write_text(json.dumps({"steps": steps}), encoding="utf-8")
    with pytest.raises(InvalidParameter):
        load_texture_settings(path, env={})


def test_load_texture_settings_rejects_invalid_utf8(tmp_path):
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"seed": "\xff"}')
    with pytest.raises(InvalidParameter):
        load_texture_settings(path, env={})
