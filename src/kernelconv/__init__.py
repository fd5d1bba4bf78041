"""
kernelconv
Kernel-based 2D image convolution toolkit.
"""

# Robust version detection that works even when not installed
try:
    from importlib import metadata as _metadata
except ImportError:
    _metadata = None  # type: ignore

try:
    __version__ = _metadata.version("kernelconv") if _metadata else "0.0.0.dev0"
except Exception:
    # Not installed (dev mode) or no metadata available
    __version__ = "0.0.0.dev0"

# Re-export subpackages for convenience
from . import core, io, conv2d  # noqa: E402

__all__ = ["core", "io", "conv2d", "__version__"]
