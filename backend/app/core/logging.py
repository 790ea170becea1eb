from __future__ import annotations

import logging
import sys
from typing import Any, Optional, TextIO

from app.core.config import get_settings


def configure_logging(stream: Optional[TextIO] = None) -> None:
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Silence noisy third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("concurrent.futures").setLevel(logging.WARNING)


class ContextLogger:
    """Logger that automatically injects context fields into every log record."""

    def __init__(self, name: str, **context: Any) -> None:
        self._logger = logging.getLogger(name)
        self._context = context

    def _log(self, level: str, message: str, **extra: Any) -> None:
        merged = {**self._context, **extra}
        getattr(self._logger, level)(message, extra=merged)

    def exception(self, message: str, **extra: Any) -> None:
        self._log("exception", message, **extra)

    def debug(self, message: str, **extra: Any) -> None:
        self._log("debug", message, **extra)
