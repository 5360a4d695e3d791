"""Logging utilities for tenantaudit commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

_LOGGER_NAME = "tenantaudit"
_SKIPPED_LOGGER_NAME = f"{_LOGGER_NAME}.skipped"


class SkippedModuleTally(logging.Handler):
    """Remembers which modules were left out of a run because they were unreadable."""

    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.modules: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        module = getattr(record, "module_name", None)
        if isinstance(module, str):
            self.modules.append(module)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the tenantaudit hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def log_skipped_module(module_name: str, reason: str) -> None:
    """Report a module that could not be read; it contributes nothing to the report."""
    logging.getLogger(_SKIPPED_LOGGER_NAME).warning(
        "Skipping %s: %s", module_name, reason, extra={"module_name": module_name}
    )


def skipped_module_tally() -> SkippedModuleTally | None:
    """Return the tally installed by configure_logging, if any."""
    for handler in logging.getLogger(_SKIPPED_LOGGER_NAME).handlers:
        if isinstance(handler, SkippedModuleTally):
            return handler
    return None


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the tenantaudit logger with stderr output, a skip tally and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    skipped_logger = logging.getLogger(_SKIPPED_LOGGER_NAME)
    for owner in (logger, skipped_logger):
        for handler in list(owner.handlers):
            owner.removeHandler(handler)
            handler.close()
    skipped_logger.addHandler(SkippedModuleTally())

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[tenantaudit] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = [
    "SkippedModuleTally",
    "configure_logging",
    "get_logger",
    "log_skipped_module",
    "skipped_module_tally",
]
