"""
kernelconv.conv2d
=================

Direct (spatial) 2D convolution of RGBA rasters.

Submodules
----------
- :mod:`kernelconv.conv2d.engine`  : Kernel value, border sampling, ``apply_kernel``.
- :mod:`kernelconv.conv2d.kernels` : Built-in kernels (box, Gaussian, Laplacian, matrix).
"""

from .engine import (
    Kernel,
    PixelEvaluator,
    apply_kernel,
    neighbors,
)
from .kernels import (
    box_blur_kernel,
    gaussian_weights,
    gaussian_blur_kernel,
    laplacian_kernel,
    matrix_kernel,
    gray_intensity,
)

__all__ = [
    # engine
    "Kernel",
    "PixelEvaluator",
    "apply_kernel",
    "neighbors",
    # kernels
    "box_blur_kernel",
    "gaussian_weights",
    "gaussian_blur_kernel",
    "laplacian_kernel",
    "matrix_kernel",
    "gray_intensity",
]
