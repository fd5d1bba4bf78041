# kernelconv/io/image.py
"""
Raster load/save via Pillow, with an extension-keyed encoder table."""
from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Callable, Dict, Union

from PIL import Image, UnidentifiedImageError

from kernelconv.core.errors import ImageDecodeError, UnsupportedFormatError
from kernelconv.core.raster import Raster, image_to_rgba
from kernelconv.utils.logging import get_logger

PathLike = Union[str, Path]
Encoder = Callable[[Image.Image, BinaryIO], None]

__all__ = [
    "PNG",
    "JPG",
    "JPEG",
    "ENCODERS",
    "register_encoder",
    "get_extension",
    "load_image",
    "save_image",
]

PNG = ".png"
JPG = ".jpg"
JPEG = ".jpeg"

JPEG_QUALITY = 75

logger = get_logger()


def _pathify(path: PathLike) -> str:
    return str(Path(path))


def _encode_png(img: Image.Image, fp: BinaryIO) -> None:
    img.save(fp, format="PNG")


def _encode_jpeg(img: Image.Image, fp: BinaryIO) -> None:
    # JPEG has no alpha channel
    img.convert("RGB").save(fp, format="JPEG", quality=JPEG_QUALITY)


ENCODERS: Dict[str, Encoder] = {
    PNG: _encode_png,
    JPG: _encode_jpeg,
    JPEG: _encode_jpeg,
}


def register_encoder(extension: str, encoder: Encoder) -> None:
    """
    Add or replace the encoder used for ``extension``.

    ``extension`` includes the leading dot and is matched case-sensitively,
    e.g. ``".webp"``.
    """
    if not extension.startswith("."):
        raise ValueError(f"Extension must start with '.', got {extension!r}")
    ENCODERS[extension] = encoder


def get_extension(path: PathLike) -> str:
    """
    Return everything from the last ``.`` of ``path`` onwards.

    Case is kept as given. A path with no ``.`` at all raises
    :class:`UnsupportedFormatError`.
    """
    p = _pathify(path)
    idx = p.rfind(".")
    if idx < 0:
        raise UnsupportedFormatError(f"Can't save {p!r}: path has no extension")
    return p[idx:]


def load_image(path: PathLike) -> Raster:
    """
    Decode an image file into an RGBA raster.

    Parameters
    ----------
    path : str or Path
        Any format Pillow can read.

    Returns
    -------
    Raster

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ImageDecodeError
        If Pillow cannot identify or decode the data.
    """
    p = _pathify(path)
    try:
        with Image.open(p) as im:
            # Image.open is lazy; pixel data is only read here
            im.load()
            raster = image_to_rgba(im)
    except FileNotFoundError:
        raise
    except UnidentifiedImageError as exc:
        raise ImageDecodeError(f"Can't decode image {p!r}: {exc}") from exc
    except (SyntaxError, ValueError, OSError) as exc:
        # Pillow plugins report truncated or corrupt data this way
        raise ImageDecodeError(f"Can't decode image {p!r}: {exc}") from exc

    logger.debug("load_image: %s (%dx%d)", p, raster.width, raster.height)
    return raster


def save_image(raster: Raster, path: PathLike) -> None:
    """
    Encode ``raster`` to ``path``; the extension picks the encoder.

    Recognized extensions are the keys of :data:`ENCODERS` (``.png``,
    ``.jpg``, ``.jpeg`` by default). The extension is checked before the
    file is opened, so an unsupported target leaves the filesystem untouched.

    Raises
    ------
    UnsupportedFormatError
        If no encoder is registered for the extension, or there is none.
    """
    extension = get_extension(path)
    encoder = ENCODERS.get(extension)
    if encoder is None:
        raise UnsupportedFormatError(f"Can't save {extension} images")

    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    img = image_to_rgba(raster).to_pil()
    with out_path.open("wb") as fp:
        encoder(img, fp)

    logger.debug("save_image: %s (%dx%d)", out_path, raster.width, raster.height)
