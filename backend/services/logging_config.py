"""
Logging Setup - Configure the backend's standard library logging
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL_ENV = "CONTEXTUAL_DIFF_LOG_LEVEL"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def resolve_level(level: str | None = None) -> int:
    """Map a config/env level name to a logging level, INFO when unknown"""
    name = (level or os.environ.get(LOG_LEVEL_ENV) or "").strip().lower()
    return _LEVELS.get(name, logging.INFO)


def setup_logging(level: str | None = None) -> logging.Logger:
    """Attach a single stderr handler to the root logger (idempotent)"""
    root = logging.getLogger()
    root.setLevel(resolve_level(level))

    if not any(getattr(h, "_contextual_diff", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._contextual_diff = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    return root
