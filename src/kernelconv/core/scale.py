# src/kernelconv/core/scale.py
"""Nearest-neighbour up/down scaling of rasters."""
from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from kernelconv.core.raster import Raster
from kernelconv.utils.logging import get_logger

__all__ = [
    "down_scale",
    "up_scale",
    "nearest_resize",
]

logger = get_logger()


def _target_size(
    raster: Raster,
    new_width: int,
    new_height: int,
    keep_aspect_ratio: bool,
) -> Tuple[float, int, int]:
    if new_width < 1 or new_height < 1:
        raise ValueError(f"Target size must be at least 1x1, got {new_width}x{new_height}")

    scale = min(new_width / raster.width, new_height / raster.height)
    if keep_aspect_ratio:
        new_width = max(1, int(raster.width * scale))
        new_height = max(1, int(raster.height * scale))
    return scale, new_width, new_height


def nearest_resize(raster: Raster, new_width: int, new_height: int) -> Raster:
    """
    Resample ``raster`` to ``new_width x new_height`` by nearest neighbour.

    Output pixel ``(x, y)`` copies source pixel
    ``(floor(x / sx), floor(y / sy))`` where ``sx`` and ``sy`` are the
    target/source ratios per axis. Indices are clamped to the source.
    """
    if new_width < 1 or new_height < 1:
        raise ValueError(f"Target size must be at least 1x1, got {new_width}x{new_height}")

    sx = new_width / raster.width
    sy = new_height / raster.height

    cols = np.array([math.floor(x / sx) for x in range(new_width)], dtype=np.intp)
    rows = np.array([math.floor(y / sy) for y in range(new_height)], dtype=np.intp)
    np.clip(cols, 0, raster.width - 1, out=cols)
    np.clip(rows, 0, raster.height - 1, out=rows)

    src = raster.to_array()
    return Raster(np.ascontiguousarray(src[rows[:, None], cols[None, :]]))


def down_scale(
    raster: Raster,
    new_width: int,
    new_height: int,
    keep_aspect_ratio: bool = False,
) -> Raster:
    """
    Shrink a raster with nearest-neighbour sampling.

    If the requested size would enlarge the raster (scale > 1), the input is
    returned unchanged.
    """
    scale, w, h = _target_size(raster, new_width, new_height, keep_aspect_ratio)
    if scale > 1:
        logger.debug("down_scale: scale %.3f > 1, returning input unchanged", scale)
        return raster
    logger.debug("down_scale: %dx%d -> %dx%d", raster.width, raster.height, w, h)
    return nearest_resize(raster, w, h)


def up_scale(
    raster: Raster,
    new_width: int,
    new_height: int,
    keep_aspect_ratio: bool = False,
) -> Raster:
    """
    Enlarge a raster with nearest-neighbour sampling.

    If the requested size would shrink the raster (scale < 1), the input is
    returned unchanged.
    """
    scale, w, h = _target_size(raster, new_width, new_height, keep_aspect_ratio)
    if scale < 1:
        logger.debug("up_scale: scale %.3f < 1, returning input unchanged", scale)
        return raster
    logger.debug("up_scale: %dx%d -> %dx%d", raster.width, raster.height, w, h)
    return nearest_resize(raster, w, h)
