# src/kernelconv/conv2d/kernels.py
"""Built-in kernels: box blur, Gaussian blur, Laplacian, plain weighted sum."""
from __future__ import annotations

from typing import Iterable

import numpy as np

from kernelconv.core.errors import KernelConstructionError
from kernelconv.core.raster import Pixel, Raster
from kernelconv.conv2d.engine import Kernel, neighbors
from kernelconv.utils.logging import get_logger

__all__ = [
    "box_blur_kernel",
    "gaussian_weights",
    "gaussian_blur_kernel",
    "laplacian_kernel",
    "matrix_kernel",
    "gray_intensity",
    "LAPLACIAN_3X3",
]

ArrayLike = np.ndarray

logger = get_logger()

LAPLACIAN_3X3 = (
    (0.0, 1.0, 0.0),
    (1.0, -4.0, 1.0),
    (0.0, 1.0, 0.0),
)


def _to_pixel(values: Iterable[float]) -> Pixel:
    # truncate toward zero, then keep the low byte
    r, g, b, a = (int(v) & 0xFF for v in values)
    return Pixel(r, g, b, a)


def _weighted_sum(x: int, y: int, kernel: Kernel, source: Raster) -> Pixel:
    rows, cols = kernel.shape
    sum_r = sum_g = sum_b = sum_a = 0.0
    for dx, dy, nx, ny in neighbors(x, y, source, cols, rows):
        w = kernel.weight(dx, dy)
        p = source.at(nx, ny)
        sum_r += p.r * w
        sum_g += p.g * w
        sum_b += p.b * w
        sum_a += p.a * w
    return _to_pixel((sum_r, sum_g, sum_b, sum_a))


# ---------------------------------------------------------------------------
# Box blur
# ---------------------------------------------------------------------------

def box_blur_kernel(size: int) -> Kernel:
    """
    Uniform averaging kernel.

    Parameters
    ----------
    size : int
        Window edge length. Even sizes give an asymmetric window with the
        extra row/column on the negative side.

    Returns
    -------
    Kernel
        Each output channel is the truncated mean of the in-bounds samples
        of the ``size x size`` window.
    """
    if size < 1:
        raise KernelConstructionError(f"box blur size must be >= 1, got {size}")

    def _evaluate(x: int, y: int, k: Kernel, source: Raster) -> Pixel:
        rows, cols = k.shape
        sum_r = sum_g = sum_b = sum_a = 0.0
        count = 0
        for dx, dy, nx, ny in neighbors(x, y, source, cols, rows):
            w = k.weight(dx, dy)
            p = source.at(nx, ny)
            sum_r += p.r * w
            sum_g += p.g * w
            sum_b += p.b * w
            sum_a += p.a * w
            count += 1
        return _to_pixel((sum_r / count, sum_g / count, sum_b / count, sum_a / count))

    logger.debug("box_blur_kernel: size=%d", size)
    return Kernel(np.ones((size, size), dtype=np.float64), _evaluate, name=f"box{size}")


# ---------------------------------------------------------------------------
# Gaussian blur
# ---------------------------------------------------------------------------

def gaussian_weights(size: int, sigma: float) -> ArrayLike:
    """
    Normalized 2D Gaussian weight matrix.

    Parameters
    ----------
    size : int
        Odd, positive edge length.
    sigma : float
        Standard deviation in pixels.

    Returns
    -------
    w : ndarray, shape (size, size)
        ``exp(-(dx² + dy²) / (2σ²)) / (2πσ²)`` divided by its total, so the
        full matrix sums to 1.

    Raises
    ------
    KernelConstructionError
        If ``size`` is even or < 1, or the raw weights sum to zero (or to a
        non-finite value) for the given sigma.
    """
    if size < 1 or size % 2 == 0:
        raise KernelConstructionError(f"Gaussian kernel size must be odd and positive, got {size}")

    half = size // 2
    offsets = np.arange(size, dtype=np.float64) - half
    dy, dx = np.meshgrid(offsets, offsets, indexing="ij")

    s = np.float64(sigma)
    with np.errstate(all="ignore"):
        w = (1.0 / (2.0 * np.pi * s * s)) * np.exp(-(dx * dx + dy * dy) / (2.0 * s * s))
    total = float(np.sum(w))

    if total == 0.0 or not np.isfinite(total):
        raise KernelConstructionError(
            f"Gaussian weights for sigma={sigma!r} sum to {total}; cannot normalize"
        )
    return w / total


def gaussian_blur_kernel(size: int, sigma: float) -> Kernel:
    """
    Gaussian blur with weights from :func:`gaussian_weights`.

    Out-of-bounds neighbours are dropped without renormalizing, so pixels
    near the border receive less than the full weight mass.
    """
    weights = gaussian_weights(size, sigma)
    logger.debug("gaussian_blur_kernel: size=%d sigma=%s", size, sigma)
    return Kernel(weights, _weighted_sum, name=f"gaussian{size}")


# ---------------------------------------------------------------------------
# Laplacian
# ---------------------------------------------------------------------------

def gray_intensity(pixel: Pixel) -> int:
    """
    Mean of R, G and B as an 8-bit intensity; alpha is ignored.

    The mean is taken on 16-bit widened channels (``c * 257``) and shifted
    back down, which can round one step higher than ``(r + g + b) // 3``.
    """
    return ((pixel.r + pixel.g + pixel.b) * 257 // 3) >> 8


def laplacian_kernel() -> Kernel:
    """
    4-connected 3x3 Laplacian on grey intensities.

    Output is an opaque grey pixel whose value is the weighted sum truncated
    toward zero and wrapped to 8 bits (negative responses wrap around).
    """

    def _evaluate(x: int, y: int, k: Kernel, source: Raster) -> Pixel:
        rows, cols = k.shape
        total = 0.0
        for dx, dy, nx, ny in neighbors(x, y, source, cols, rows):
            total += gray_intensity(source.at(nx, ny)) * k.weight(dx, dy)
        v = int(total) & 0xFF
        return Pixel(v, v, v, 255)

    return Kernel(np.array(LAPLACIAN_3X3, dtype=np.float64), _evaluate, name="laplacian")


# ---------------------------------------------------------------------------
# Arbitrary weights
# ---------------------------------------------------------------------------

def matrix_kernel(weights: ArrayLike, name: str = "matrix") -> Kernel:
    """
    Plain per-channel weighted sum with a user-supplied matrix.

    Uses the same border policy as the Gaussian blur: skipped neighbours are
    not compensated for. Any matrix shape is accepted; for even dimensions
    the extra row/column sits on the negative side.
    """
    return Kernel(np.asarray(weights, dtype=np.float64), _weighted_sum, name=name)
