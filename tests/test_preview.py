import os
import sys

import numpy as np
from PIL import Image

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import preview
from terrain import initialize_terrain_generator


def test_render_slice_matches_columns():
    gen = initialize_terrain_generator(7)
    image = preview.render_slice(gen, 0, 6, 20, 4.0, 4.0, fast=True)
    assert image.shape == (20, 6)
    assert image.dtype == np.float32
    column = np.zeros(20, dtype=np.float32)
    gen.fill_density(column, 8, 0, 4.0, 4.0, True)
    # top row is the highest sample
    np.testing.assert_array_equal(image[:, 2], column[::-1])


def test_greyscale_separates_solid_from_air():
    image = np.array([[2.0, 0.5, -0.25, -3.0]], dtype=np.float32)
    grey = preview.to_greyscale(image)
    assert grey.dtype == np.uint8
    assert grey.tolist() == [[255, 207, 75, 0]]


def test_main_writes_png(tmp_path):
    out = str(tmp_path / "slice.png")
    rc = preview.main(["--seed", "3", "--width", "8", "--samples", "10", "--fast", "--out", out])
    assert rc == 0
    im = Image.open(out)
    assert im.size == (8, 10)
    assert im.mode == "L"
