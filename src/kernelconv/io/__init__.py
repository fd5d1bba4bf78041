"""
kernelconv.io
=============

Image IO helpers.

This module exposes:
- Raster load/save through Pillow
- The extension → encoder table used when saving

Submodules:
- kernelconv.io.image
"""

from .image import (
    ENCODERS,
    register_encoder,
    get_extension,
    load_image,
    save_image,
)

__all__ = [
    "ENCODERS",
    "register_encoder",
    "get_extension",
    "load_image",
    "save_image",
]
