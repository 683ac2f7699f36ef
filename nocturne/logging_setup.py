# nocturne/logging_setup.py
"""Process-wide logging: console always, rotating file when LOG_PATH is set."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from nocturne import config

_CONFIGURED = False


def configure_logging(level: str | None = None, log_path: str | None = None) -> None:
    """Install handlers on the root logger once per process."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    level_name = (level or config.LOG_LEVEL).upper()
    path = config.LOG_PATH if log_path is None else log_path

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if path:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=path,
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    _CONFIGURED = True
