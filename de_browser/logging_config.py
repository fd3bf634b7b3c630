from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger import jsonlogger

LOG_FORMAT_ENV = "DE_BROWSER_LOG_FORMAT"
LOG_LEVEL_ENV = "DE_BROWSER_LOG_LEVEL"

# Request logs from the dev server drown out dataset/filter events.
_NOISY_LOGGERS = ("werkzeug",)


def _resolve_format(force_format: Optional[str]) -> str:
    mode = force_format if force_format is not None else os.getenv(LOG_FORMAT_ENV, "json")
    mode = mode.lower()
    return mode if mode in ("json", "plain") else "json"


def _resolve_level(level: int) -> int:
    name = os.getenv(LOG_LEVEL_ENV)
    if not name:
        return level
    resolved = logging.getLevelName(name.upper())
    return resolved if isinstance(resolved, int) else level


def _build_formatter(mode: str) -> logging.Formatter:
    if mode == "plain":
        return logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    # `extra={...}` fields on log calls become top-level JSON keys
    return jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"levelname": "level", "asctime": "ts"},
    )


def configure_logging(
        level: int = logging.INFO,
        force_format: Optional[str] = None,
) -> None:
    """
    Configure the root logger once at startup.

    Format: `force_format` ("json" or "plain"), else DE_BROWSER_LOG_FORMAT,
    else JSON. Level: DE_BROWSER_LOG_LEVEL overrides `level` when it names
    a real level.
    """
    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    handler = logging.StreamHandler()
    handler.setFormatter(_build_formatter(_resolve_format(force_format)))

    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))
