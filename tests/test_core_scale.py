"""
Tests for kernelconv.core.scale helpers.
"""

import numpy as np
import pytest

from kernelconv.core import Raster, down_scale, nearest_resize, up_scale


def _indexed(width, height):
    # pixel (x, y) stores x in R and y in G
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[..., 0] = np.arange(width)[None, :]
    arr[..., 1] = np.arange(height)[:, None]
    arr[..., 3] = 255
    return Raster(arr)


def test_down_scale_samples_every_other_pixel():
    out = down_scale(_indexed(4, 4), 2, 2)
    assert out.size == (2, 2)
    assert out.at(0, 0)[:2] == (0, 0)
    assert out.at(1, 0)[:2] == (2, 0)
    assert out.at(0, 1)[:2] == (0, 2)
    assert out.at(1, 1)[:2] == (2, 2)


def test_up_scale_replicates_blocks():
    src = _indexed(2, 2)
    out = up_scale(src, 4, 4)
    assert out.size == (4, 4)
    arr = out.to_array()
    np.testing.assert_array_equal(arr[0:2, 0:2, 0], 0)
    np.testing.assert_array_equal(arr[0:2, 2:4, 0], 1)
    np.testing.assert_array_equal(arr[2:4, 0:2, 1], 1)
    np.testing.assert_array_equal(arr[..., 3], 255)


def test_wrong_direction_returns_input_unchanged():
    src = _indexed(4, 4)
    assert down_scale(src, 8, 8) is src
    assert up_scale(src, 2, 2) is src


def test_keep_aspect_ratio_fits_inside_target():
    src = _indexed(4, 2)
    out = down_scale(src, 2, 2, keep_aspect_ratio=True)
    assert out.size == (2, 1)
    assert out.at(1, 0)[:2] == (2, 0)

    out = up_scale(src, 12, 12, keep_aspect_ratio=True)
    assert out.size == (12, 6)


def test_independent_axes_without_aspect_ratio():
    out = nearest_resize(_indexed(4, 4), 2, 4)
    assert out.size == (2, 4)
    assert out.at(1, 3)[:2] == (2, 3)


@pytest.mark.parametrize("w,h", [(0, 3), (3, 0), (-1, -1)])
def test_invalid_target_size(w, h):
    with pytest.raises(ValueError):
        down_scale(_indexed(4, 4), w, h)
