# src/kernelconv/core/raster.py
"""8-bit RGBA raster container and conversions into it."""
from __future__ import annotations

from typing import Iterator, NamedTuple, Tuple, Union

import numpy as np
from PIL import Image

ArrayLike = np.ndarray

__all__ = [
    "Pixel",
    "Raster",
    "as_uint8",
    "image_to_rgba",
]


class Pixel(NamedTuple):
    r: int
    g: int
    b: int
    a: int


class Raster:
    """
    A width x height grid of RGBA pixels.

    Pixel data lives in a C-contiguous ``uint8`` array of shape
    ``(height, width, 4)``; coordinates are given as ``(x, y)`` with the
    origin in the top-left corner.

    Parameters
    ----------
    data : ndarray, shape (H, W, 4), uint8
        Pixel buffer. It is used as-is (not copied); use
        :meth:`Raster.from_array` to build a raster from foreign data.
    """

    __slots__ = ("_data",)

    def __init__(self, data: ArrayLike) -> None:
        arr = np.asarray(data)
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValueError(f"Expected (H, W, 4) RGBA array, got shape {arr.shape}")
        if arr.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixel data, got {arr.dtype}")
        if arr.shape[0] < 1 or arr.shape[1] < 1:
            raise ValueError(f"Raster must be at least 1x1, got {arr.shape[1]}x{arr.shape[0]}")
        self._data = arr

    # -- constructors ------------------------------------------------------

    @classmethod
    def blank(cls, width: int, height: int) -> "Raster":
        """All-zero (transparent black) raster."""
        if width < 1 or height < 1:
            raise ValueError(f"Raster must be at least 1x1, got {width}x{height}")
        return cls(np.zeros((height, width, 4), dtype=np.uint8))

    @classmethod
    def from_array(cls, arr: ArrayLike) -> "Raster":
        return cls(np.array(as_uint8(arr), dtype=np.uint8, copy=True))

    # -- geometry ----------------------------------------------------------

    @property
    def width(self) -> int:
        return int(self._data.shape[1])

    @property
    def height(self) -> int:
        return int(self._data.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    # -- pixel access ------------------------------------------------------

    def at(self, x: int, y: int) -> Pixel:
        r, g, b, a = self._data[y, x]
        return Pixel(int(r), int(g), int(b), int(a))

    def set(self, x: int, y: int, pixel: Tuple[int, int, int, int]) -> None:
        # channel values wrap to 8 bits like an unsigned byte store
        self._data[y, x] = [int(c) & 0xFF for c in pixel]

    def pixels(self) -> Iterator[Tuple[int, int, Pixel]]:
        """Iterate ``(x, y, pixel)`` in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y, self.at(x, y)

    # -- conversion --------------------------------------------------------

    def copy(self) -> "Raster":
        return Raster(self._data.copy())

    def to_array(self) -> np.ndarray:
        return self._data.copy()

    def to_pil(self) -> Image.Image:
        return Image.fromarray(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Raster):
            return NotImplemented
        return self._data.shape == other._data.shape and bool(
            np.array_equal(self._data, other._data)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Raster({self.width}x{self.height})"


def as_uint8(x: ArrayLike) -> np.ndarray:
    """
    Convert an array to uint8 pixel values.

    Rules
    -----
    - float: if min>=0 and max<=1 → scale by 255; else clip to [0, 255]
    - bool: False/True → 0/255
    - ints: clipped to [0, 255]
    """
    arr = np.asarray(x)

    if arr.dtype == np.uint8:
        return arr

    if arr.dtype == np.bool_:
        return arr.astype(np.uint8) * 255

    if np.issubdtype(arr.dtype, np.floating):
        arr_f = arr.astype(np.float64)
        vmin = float(np.nanmin(arr_f))
        vmax = float(np.nanmax(arr_f))

        if np.isfinite(vmin) and np.isfinite(vmax) and 0.0 <= vmin and vmax <= 1.0 + 1e-8:
            arr_f = arr_f * 255.0
        arr_f = np.clip(np.nan_to_num(arr_f), 0.0, 255.0)
        return arr_f.astype(np.uint8)

    return np.clip(arr.astype(np.int64), 0, 255).astype(np.uint8)


def image_to_rgba(image: Union[Raster, Image.Image, ArrayLike]) -> Raster:
    """
    Convert any supported image representation into a fresh RGBA raster.

    Parameters
    ----------
    image : Raster, PIL.Image.Image or ndarray
        - Raster: copied.
        - PIL image: converted via ``.convert("RGBA")``.
        - 2D array or (H, W, 1): grey, replicated to RGB.
        - (H, W, 3): RGB.
        - (H, W, 4): RGBA.
        Missing alpha is filled with 255.

    Returns
    -------
    Raster
        Never shares memory with the input.

    Notes
    -----
    Channels are stored straight (not premultiplied by alpha), as Pillow's
    ``RGBA`` mode holds them. Kernels therefore average colour and alpha
    independently, and a blur across the edge of a translucent region
    mixes in the colour of transparent pixels at full strength.
    """
    if isinstance(image, Raster):
        return image.copy()

    if isinstance(image, Image.Image):
        return Raster(np.array(image.convert("RGBA"), dtype=np.uint8))

    arr = as_uint8(np.asarray(image))

    if arr.ndim == 3 and arr.shape[2] == 1:
        arr = arr[..., 0]

    if arr.ndim == 2:
        arr = np.stack([arr, arr, arr], axis=-1)
    elif arr.ndim != 3:
        raise ValueError(f"Expected 2D or 3D image, got shape {arr.shape}")

    c = arr.shape[2]
    if c == 3:
        alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
        arr = np.concatenate([arr, alpha], axis=-1)
    elif c != 4:
        raise ValueError(f"Unsupported channel count {c}")

    return Raster(np.ascontiguousarray(arr, dtype=np.uint8).copy())
