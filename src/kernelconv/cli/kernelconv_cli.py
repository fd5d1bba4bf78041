from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, Optional

from kernelconv import __version__
from kernelconv.cli.settings import (
    add_settings_args,
    split_settings_argv,
    detect_command,
    read_settings,
    settings_for,
    apply_defaults,
    collect_settings,
    write_settings,
    find_subparser,
)
from kernelconv.conv2d import (
    Kernel,
    apply_kernel,
    box_blur_kernel,
    gaussian_blur_kernel,
    laplacian_kernel,
)
from kernelconv.core import KernelconvError, down_scale, up_scale
from kernelconv.io import load_image, save_image
from kernelconv.io.image import PathLike
from kernelconv.utils.logging import get_logger, set_level

logger = get_logger()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _path(p: PathLike) -> Path:
    return Path(p).expanduser().resolve()


def _parse_params(param_str: str) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for item in param_str.split(","):
        item = item.strip()
        if not item:
            continue
        key, eq, val = item.partition("=")
        if not eq:
            raise ValueError(f"Kernel parameter {item!r} is not of the form key=value.")
        # allow unicode sigma
        key = key.strip().lower().replace("σ", "sigma")
        params[key] = val.strip()
    return params


def parse_kernel_spec(spec: str) -> Kernel:
    """
    Build a kernel from a spec string.

    Accepted forms::

        "box"                       (size 3)
        "box:size=5"
        "gaussian:sigma=1.0"        (size 5)
        "gaussian:size=7,σ=2.0"
        "laplacian"
    """
    if not spec or not spec.strip():
        raise ValueError("Empty kernel spec.")

    kind, _, param_str = spec.partition(":")
    kind = kind.strip().lower()
    params = _parse_params(param_str) if param_str else {}

    if kind == "box":
        return box_blur_kernel(int(params.get("size", 3)))

    if kind == "gaussian":
        if "sigma" not in params:
            raise ValueError("Gaussian kernel requires 'sigma' (e.g. 'gaussian:sigma=1.5').")
        return gaussian_blur_kernel(int(params.get("size", 5)), float(params["sigma"]))

    if kind == "laplacian":
        if params:
            raise ValueError("Laplacian kernel takes no parameters.")
        return laplacian_kernel()

    raise ValueError(f"Unsupported kernel kind {kind!r}; expected box, gaussian or laplacian.")


# ---------------------------------------------------------------------------
# Subcommand implementations
# ---------------------------------------------------------------------------

def _cmd_apply(args: argparse.Namespace) -> int:
    in_path = _path(args.in_path)
    out_path = _path(args.out_path)

    kernels = [parse_kernel_spec(s) for s in args.kernel]

    raster = load_image(in_path)
    for kernel in kernels:
        logger.info("Applying %r to %s", kernel, in_path.name)
        raster = apply_kernel(kernel, raster)

    save_image(raster, out_path)
    logger.info("Wrote %s", out_path)
    return 0


def _cmd_scale(args: argparse.Namespace) -> int:
    in_path = _path(args.in_path)
    out_path = _path(args.out_path)

    raster = load_image(in_path)
    scaler = up_scale if args.direction == "up" else down_scale
    out = scaler(raster, args.width, args.height, keep_aspect_ratio=args.keep_aspect)

    save_image(out, out_path)
    logger.info("Wrote %s (%dx%d)", out_path, out.width, out.height)
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kernelconv",
        description="Apply convolution kernels to images and rescale them.",
    )
    add_settings_args(parser)
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging verbosity.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---- apply ----
    p_apply = subparsers.add_parser(
        "apply",
        help="Run one or more kernels over an image.",
    )
    p_apply.add_argument(
        "--in",
        dest="in_path",
        required=True,
        help="Input image (PNG/JPEG...).",
    )
    p_apply.add_argument(
        "--out",
        dest="out_path",
        required=True,
        help="Output image (.png, .jpg or .jpeg).",
    )
    p_apply.add_argument(
        "--kernel",
        metavar="SPEC",
        action="append",
        required=True,
        help=(
            "Kernel spec, e.g. 'box:size=3', 'gaussian:size=5,sigma=1.4' or "
            "'laplacian'. Repeat to chain kernels in order."
        ),
    )
    p_apply.set_defaults(func=_cmd_apply)

    # ---- scale ----
    p_scale = subparsers.add_parser(
        "scale",
        help="Nearest-neighbour down- or up-scaling.",
    )
    p_scale.add_argument(
        "--in",
        dest="in_path",
        required=True,
        help="Input image (PNG/JPEG...).",
    )
    p_scale.add_argument(
        "--out",
        dest="out_path",
        required=True,
        help="Output image (.png, .jpg or .jpeg).",
    )
    p_scale.add_argument("--width", type=int, required=True, help="Target width in pixels.")
    p_scale.add_argument("--height", type=int, required=True, help="Target height in pixels.")
    p_scale.add_argument(
        "--keep-aspect",
        action="store_true",
        help="Fit inside width x height while keeping the aspect ratio.",
    )
    p_scale.add_argument(
        "--direction",
        choices=["down", "up"],
        default="down",
        help="Only shrink (down) or only enlarge (up); the other case is a no-op.",
    )
    p_scale.set_defaults(func=_cmd_scale)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    cleaned_argv, settings_path, save_path = split_settings_argv(raw_argv)
    command = detect_command(cleaned_argv)

    if settings_path:
        settings = settings_for(read_settings(Path(settings_path)), command)
        apply_defaults(parser, settings, cleaned_argv)
        sub = find_subparser(parser, command)
        if sub is not None:
            apply_defaults(sub, settings, cleaned_argv)

    args = parser.parse_args(cleaned_argv)
    set_level(args.log_level)

    if save_path:
        target = find_subparser(parser, args.command) or parser
        settings_out = collect_settings(args, target)
        settings_out["log_level"] = args.log_level
        write_settings(Path(save_path), settings_out, command=args.command)

    try:
        return args.func(args)
    except (KernelconvError, ValueError, OSError) as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        raise SystemExit(f"kernelconv: {exc}") from exc


if __name__ == "__main__":
    raise SystemExit(main())
