# src/kernelconv/core/errors.py
"""Exception types raised by kernelconv."""
from __future__ import annotations

__all__ = [
    "KernelconvError",
    "KernelConstructionError",
    "UnsupportedFormatError",
    "ImageDecodeError",
]


class KernelconvError(Exception):
    """Base class for all kernelconv errors."""


class KernelConstructionError(KernelconvError, ValueError):
    """A kernel factory was called with parameters it cannot build from."""


class UnsupportedFormatError(KernelconvError, ValueError):
    """No encoder is registered for the extension of a save target."""


class ImageDecodeError(KernelconvError, OSError):
    """An image file exists but could not be decoded."""
