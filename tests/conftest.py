# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from kernelconv.core import Raster
from kernelconv.io import save_image


def _uniform_raster(width: int, height: int, rgba) -> Raster:
    arr = np.empty((height, width, 4), dtype=np.uint8)
    arr[...] = np.asarray(rgba, dtype=np.uint8)
    return Raster(arr)


@pytest.fixture
def uniform_raster() -> Callable[..., Raster]:
    """Factory: uniform_raster(width, height, (r, g, b, a))."""
    return _uniform_raster


@pytest.fixture
def white_3x3() -> Raster:
    return _uniform_raster(3, 3, (255, 255, 255, 255))


@pytest.fixture
def noisy_raster() -> Raster:
    """Deterministic 7x6 raster with random RGBA content."""
    rng = np.random.default_rng(1234)
    arr = rng.integers(0, 256, size=(6, 7, 4), dtype=np.uint8)
    return Raster(arr)


@pytest.fixture
def png_writer(tmp_path: Path) -> Callable[[Raster, str], Path]:
    """Save a raster as PNG under tmp_path and return its path."""

    def _write(raster: Raster, name: str = "input.png") -> Path:
        path = tmp_path / name
        save_image(raster, path)
        return path

    return _write
