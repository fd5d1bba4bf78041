# src/kernelconv/conv2d/engine.py
"""Per-pixel kernel application: the Kernel value and the convolution pass."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, Tuple, Union

import numpy as np
from PIL import Image

from kernelconv.core.raster import Raster, image_to_rgba
from kernelconv.utils.logging import get_logger

ArrayLike = np.ndarray
PixelLike = Tuple[int, int, int, int]

__all__ = [
    "PixelEvaluator",
    "Kernel",
    "neighbors",
    "apply_kernel",
]

logger = get_logger()


class PixelEvaluator(Protocol):
    """Computes one output pixel from the source raster around ``(x, y)``."""

    def __call__(self, x: int, y: int, kernel: "Kernel", source: Raster) -> PixelLike:
        ...


@dataclass(frozen=True, eq=False)
class Kernel:
    """
    A weight matrix paired with the rule that turns it into output pixels.

    Parameters
    ----------
    weights : ndarray, shape (rows, cols)
        Kernel weights. The engine never inspects them; evaluators read them
        through :meth:`weight`.
    evaluator : PixelEvaluator
        Called as ``evaluator(x, y, kernel, source)`` for every pixel.
    name : str
        Label used in logs and reprs.
    """

    weights: ArrayLike
    evaluator: Optional[PixelEvaluator]
    name: str = "custom"

    def __post_init__(self) -> None:
        w = np.array(self.weights, dtype=np.float64)
        if w.ndim != 2:
            raise ValueError(f"Kernel weights must be 2D, got shape {w.shape}")
        w.setflags(write=False)
        object.__setattr__(self, "weights", w)

    @property
    def shape(self) -> Tuple[int, int]:
        rows, cols = self.weights.shape
        return int(rows), int(cols)

    def weight(self, dx: int, dy: int) -> float:
        """
        Weight for the neighbour at offset ``(dx, dy)`` from the centre.

        Rows follow the vertical offset and columns the horizontal one:
        ``weights[dy + rows // 2, dx + cols // 2]``.
        """
        rows, cols = self.shape
        return float(self.weights[dy + rows // 2, dx + cols // 2])

    def __repr__(self) -> str:
        rows, cols = self.shape
        return f"Kernel(name={self.name!r}, shape={rows}x{cols})"


def _window(size: int) -> range:
    # even sizes put the extra cell on the negative side
    half = size // 2
    return range(-half, size - half)


def neighbors(
    x: int,
    y: int,
    source: Raster,
    width: int,
    height: Optional[int] = None,
) -> Iterator[Tuple[int, int, int, int]]:
    """
    Yield ``(dx, dy, nx, ny)`` for every in-bounds cell of a kernel window.

    Parameters
    ----------
    x, y : int
        Pixel under evaluation.
    source : Raster
        Raster whose bounds decide which neighbours exist.
    width, height : int
        Window size. ``height`` defaults to ``width``.

    Notes
    -----
    Neighbours outside the raster are skipped, not clamped or wrapped, so
    edge and corner pixels see fewer samples than interior ones.
    """
    if height is None:
        height = width
    w, h = source.width, source.height
    rows = _window(height)
    for dx in _window(width):
        nx = x + dx
        if nx < 0 or nx >= w:
            continue
        for dy in rows:
            ny = y + dy
            if ny < 0 or ny >= h:
                continue
            yield dx, dy, nx, ny


def apply_kernel(
    kernel: Kernel,
    image: Union[Raster, Image.Image, ArrayLike],
) -> Raster:
    """
    Run ``kernel`` over every pixel of ``image``.

    Parameters
    ----------
    kernel : Kernel
        Must carry a callable evaluator.
    image : Raster, PIL image or ndarray
        Converted to a private RGBA copy with :func:`image_to_rgba`.

    Returns
    -------
    Raster
        Newly allocated, same width and height as the input. Every evaluator
        call reads the untouched source, so the result does not depend on
        iteration order.

    Raises
    ------
    TypeError
        If the kernel has no callable evaluator.
    """
    evaluator = getattr(kernel, "evaluator", None)
    if evaluator is None or not callable(evaluator):
        raise TypeError(f"Kernel {kernel!r} has no callable evaluator")

    source = image_to_rgba(image)
    out = Raster.blank(source.width, source.height)

    logger.debug(
        "apply_kernel: %r over %dx%d raster",
        kernel,
        source.width,
        source.height,
    )

    for x in range(source.width):
        for y in range(source.height):
            out.set(x, y, evaluator(x, y, kernel, source))

    return out

