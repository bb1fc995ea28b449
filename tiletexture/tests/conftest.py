"""Pytest configuration for tiletexture tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# //1.- Ensure repository root is available on the Python path for package imports.
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def abc_steps():
    """Three bucket table used across the scenario tests."""
    return ["a:0..99", "b:100..199", "c:200..255"]
