"""
kernelconv.core
===============

Raster data model and low-level primitives.

Submodules
----------
- :mod:`kernelconv.core.raster` : RGBA raster container and conversions.
- :mod:`kernelconv.core.scale`  : Nearest-neighbour up/down scaling.
- :mod:`kernelconv.core.errors` : Exception hierarchy.
"""

from .errors import (
    KernelconvError,
    KernelConstructionError,
    UnsupportedFormatError,
    ImageDecodeError,
)
from .raster import (
    Pixel,
    Raster,
    as_uint8,
    image_to_rgba,
)
from .scale import (
    down_scale,
    up_scale,
    nearest_resize,
)

__all__ = [
    # errors
    "KernelconvError",
    "KernelConstructionError",
    "UnsupportedFormatError",
    "ImageDecodeError",
    # raster
    "Pixel",
    "Raster",
    "as_uint8",
    "image_to_rgba",
    # scale
    "down_scale",
    "up_scale",
    "nearest_resize",
]
