"""
generate_test_assets.py

Creates tiny synthetic RGBA images for trying out kernelconv.
Generates:
 - img_checker.png
 - img_gradients.png
 - img_translucent.png
"""

from pathlib import Path

import numpy as np
from PIL import Image


# ------------------------------
# Image generator 1: checkerboard
# ------------------------------
def generate_checker(size=64, tile=8):
    yy, xx = np.mgrid[0:size, 0:size]
    mask = ((xx // tile) + (yy // tile)) % 2 == 0
    rgb = np.where(mask[..., None], 255, 0).astype(np.uint8)
    rgb = np.repeat(rgb, 3, axis=-1)
    alpha = np.full((size, size, 1), 255, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=-1)


# ------------------------------
# Image generator 2: channel gradients
# ------------------------------
def generate_gradients(width=96, height=64):
    x = np.linspace(0, 255, width, dtype=np.float64)
    y = np.linspace(0, 255, height, dtype=np.float64)
    xx, yy = np.meshgrid(x, y)
    r = xx
    g = yy
    b = 255.0 - (xx + yy) / 2.0
    a = np.full_like(xx, 255.0)
    return np.stack([r, g, b, a], axis=-1).astype(np.uint8)


# ------------------------------
# Image generator 3: translucent disc
# ------------------------------
def generate_translucent(size=64):
    yy, xx = np.mgrid[0:size, 0:size]
    c = (size - 1) / 2.0
    rho = np.sqrt((xx - c) ** 2 + (yy - c) ** 2) / c
    alpha = np.clip(1.0 - rho, 0.0, 1.0) * 255.0
    rgba = np.zeros((size, size, 4), dtype=np.float64)
    rgba[..., 0] = 200.0
    rgba[..., 1] = 80.0
    rgba[..., 2] = 40.0
    rgba[..., 3] = alpha
    return rgba.astype(np.uint8)


def main(out_folder="samples/input"):
    out = Path(out_folder)
    out.mkdir(parents=True, exist_ok=True)

    Image.fromarray(generate_checker()).save(out / "img_checker.png")
    Image.fromarray(generate_gradients()).save(out / "img_gradients.png")
    Image.fromarray(generate_translucent()).save(out / "img_translucent.png")

    print(f"Assets written to {out.resolve()}")


if __name__ == "__main__":
    main()
