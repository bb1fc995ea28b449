"""Tests for intensity fields and image loading."""
from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from tiletexture import DimensionMismatch, ImageLoadError, IntensityField, InvalidParameter, load_grayscale


# //1.- Nested rows become a read-only uint8 matrix with width = columns.
def test_field_from_rows():
    field = IntensityField.from_rows([[0, 128, 255], [1, 2, 3]])
    assert field.width == 3
    assert field.height == 2
    assert field.values.dtype == np.uint8
    assert not field.values.flags.writeable


def test_field_copies_input_array():
    source = np.array([[1, 2], [3, 4]], dtype=np.uint8)
    field = IntensityField(source)
    source[0, 0] = 99
    assert field.values[0, 0] == 1


# //2.- Empty and ragged input are dimension errors; bad values are parameter errors.
@pytest.mark.parametrize("rows", [[], [[]], [[1, 2], [3]], [1, 2, 3]])
def test_field_rejects_bad_dimensions(rows):
    with pytest.raises(DimensionMismatch):
        IntensityField.from_rows(rows)


def test_field_rejects_three_dimensional_arrays():
    with pytest.raises(DimensionMismatch):
        IntensityField(np.zeros((2, 2, 3), dtype=np.uint8))


@pytest.mark.parametrize("rows", [[[0, 256]], [[-1, 0]], [[0.5, 1.0]]])
def test_field_rejects_bad_values(rows):
    with pytest.raises(InvalidParameter):
        IntensityField.from_rows(rows)


# //3.- Colour images are converted to 8 bit luma on load.
def test_load_grayscale_converts_rgb(tmp_path):
    path = tmp_path / "input.png"
    image = Image.new("RGB", (3, 2), (255, 255, 255))
    image.putpixel((0, 0), (0, 0, 0))
    image.save(path)

    field = load_grayscale(path)
    assert (field.width, field.height) == (3, 2)
    assert field.values[0, 0] == 0
    assert field.values[1, 2] == 255


def test_load_grayscale_keeps_l_mode_values(tmp_path):
    path = tmp_path / "gray.png"
    values = np.array([[0, 99], [100, 255]], dtype=np.uint8)
    Image.fromarray(values).save(path)
    assert np.array_equal(load_grayscale(path).values, values)


def test_load_grayscale_reports_missing_and_undecodable_files(tmp_path):
    with pytest.raises(ImageLoadError):
        load_grayscale(tmp_path / "missing.png")
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")
    with pytest.raises(ImageLoadError):
        load_grayscale(broken)
