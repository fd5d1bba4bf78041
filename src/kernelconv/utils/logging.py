"""Logging helpers for kernelconv."""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER: Optional[logging.Logger] = None


def get_logger() -> logging.Logger:
    """Return the package logger, attaching a stream handler on first use."""

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger("kernelconv")
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            handler.setFormatter(formatter)
            _LOGGER.addHandler(handler)
        _LOGGER.setLevel(logging.WARNING)
    return _LOGGER


def set_level(level: Union[int, str]) -> None:
    if isinstance(level, str):
        level = level.upper()
    get_logger().setLevel(level)


logger = get_logger()
