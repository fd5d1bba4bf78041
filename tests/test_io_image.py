from pathlib import Path

import numpy as np
import pytest

from kernelconv.core import ImageDecodeError, Raster, UnsupportedFormatError
from kernelconv.io import ENCODERS, get_extension, load_image, save_image


def test_png_roundtrip_keeps_alpha(tmp_path: Path, noisy_raster):
    out_path = tmp_path / "noisy.png"
    save_image(noisy_raster, out_path)

    back = load_image(out_path)
    assert back == noisy_raster


@pytest.mark.parametrize("name", ["photo.jpg", "photo.jpeg"])
def test_jpeg_save_drops_alpha(tmp_path: Path, uniform_raster, name):
    src = uniform_raster(8, 6, (120, 60, 30, 10))
    out_path = tmp_path / name
    save_image(src, out_path)

    back = load_image(out_path)
    assert back.size == (8, 6)
    arr = back.to_array()
    assert np.all(arr[..., 3] == 255)
    # lossy, but a flat colour survives within a few levels
    assert np.max(np.abs(arr[..., :3].astype(int) - [120, 60, 30])) <= 8


def test_unsupported_extension_creates_nothing(tmp_path: Path, white_3x3):
    target = tmp_path / "out.bmp"
    with pytest.raises(UnsupportedFormatError):
        save_image(white_3x3, target)
    assert not target.exists()


def test_unsupported_extension_leaves_existing_file(tmp_path: Path, white_3x3):
    target = tmp_path / "keep.bmp"
    target.write_bytes(b"original")
    with pytest.raises(UnsupportedFormatError):
        save_image(white_3x3, target)
    assert target.read_bytes() == b"original"


def test_extension_match_is_case_sensitive(tmp_path: Path, white_3x3):
    with pytest.raises(UnsupportedFormatError):
        save_image(white_3x3, tmp_path / "LOUD.PNG")


def test_path_without_extension_is_rejected(tmp_path: Path, white_3x3):
    target = tmp_path / "noext"
    with pytest.raises(UnsupportedFormatError):
        save_image(white_3x3, target)
    assert not target.exists()


def test_get_extension_uses_last_dot():
    assert get_extension("archive.tar.png") == ".png"
    assert get_extension("a/b.c/photo.jpeg") == ".jpeg"
    assert get_extension("trailing.") == "."
    with pytest.raises(UnsupportedFormatError):
        get_extension("plainname")


def test_unsupported_format_is_a_value_error():
    with pytest.raises(ValueError):
        get_extension("plainname")


def test_registered_encoder_is_used(tmp_path: Path, white_3x3, monkeypatch):
    seen = []

    def _encode_bmp(img, fp):
        seen.append(img.mode)
        img.convert("RGB").save(fp, format="BMP")

    monkeypatch.setitem(ENCODERS, ".bmp", _encode_bmp)
    target = tmp_path / "ok.bmp"
    save_image(white_3x3, target)

    assert seen == ["RGBA"]
    assert load_image(target) == white_3x3


def test_save_creates_parent_dirs(tmp_path: Path, white_3x3):
    target = tmp_path / "nested" / "dir" / "white.png"
    save_image(white_3x3, target)
    assert target.exists()


def test_load_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / "missing.png")


def test_load_garbage_raises_decode_error(tmp_path: Path):
    bogus = tmp_path / "bogus.png"
    bogus.write_bytes(b"definitely not an image")
    with pytest.raises(ImageDecodeError) as info:
        load_image(bogus)
    assert isinstance(info.value, OSError)


def test_load_truncated_png_raises_decode_error(tmp_path: Path):
    rng = np.random.default_rng(99)
    arr = rng.integers(0, 256, size=(64, 64, 4), dtype=np.uint8)
    path = tmp_path / "cut.png"
    save_image(Raster(arr), path)

    data = path.read_bytes()
    path.write_bytes(data[: len(data) // 2])

    with pytest.raises(ImageDecodeError):
        load_image(path)


def test_load_converts_to_rgba(tmp_path: Path):
    from PIL import Image

    path = tmp_path / "gray.png"
    Image.new("L", (4, 2), 77).save(path)

    r = load_image(path)
    assert isinstance(r, Raster)
    assert r.size == (4, 2)
    assert r.at(3, 1) == (77, 77, 77, 255)
