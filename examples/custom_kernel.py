"""
Run built-in and hand-written kernels over an image.

A kernel is a weight matrix plus an evaluator called for every pixel as
``evaluator(x, y, kernel, source)``. The hand-written one below is an
8-connected Laplacian that keeps the source alpha.

Run
---
python examples/custom_kernel.py samples/input/img_checker.png samples/output
"""

from __future__ import annotations

import sys
from pathlib import Path

from kernelconv.conv2d import (
    Kernel,
    apply_kernel,
    box_blur_kernel,
    gaussian_blur_kernel,
    gray_intensity,
    laplacian_kernel,
    neighbors,
)
from kernelconv.core import Pixel, Raster
from kernelconv.io import load_image, save_image


def _edges_keep_alpha(x: int, y: int, k: Kernel, source: Raster) -> Pixel:
    total = 0.0
    for dx, dy, nx, ny in neighbors(x, y, source, 3):
        total += gray_intensity(source.at(nx, ny)) * k.weight(dx, dy)
    v = max(0, min(255, int(total)))
    return Pixel(v, v, v, source.at(x, y).a)


LAPLACIAN_8 = Kernel(
    weights=[[1, 1, 1], [1, -8, 1], [1, 1, 1]],
    evaluator=_edges_keep_alpha,
    name="laplacian8",
)


def main(in_path: str, out_dir: str) -> None:
    src = load_image(in_path)
    out = Path(out_dir)
    stem = Path(in_path).stem

    kernels = {
        "box3": box_blur_kernel(3),
        "gauss5": gaussian_blur_kernel(5, 1.4),
        "laplacian": laplacian_kernel(),
        "laplacian8": LAPLACIAN_8,
    }
    for label, kernel in kernels.items():
        target = out / f"{stem}__{label}.png"
        save_image(apply_kernel(kernel, src), target)
        print(f"{label:>10} -> {target}")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        raise SystemExit("usage: custom_kernel.py IN_IMAGE OUT_DIR")
    main(sys.argv[1], sys.argv[2])
