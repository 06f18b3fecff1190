"""Logging for Actions runs.

Records are written to stderr with the configured level and format. Warnings
(skipped template regions, for example) are also printed to stdout as
``::warning::`` workflow commands, so the runner shows them as annotations
on the run. Errors are not repeated there: ``main`` reports the fatal error
once through ``ActionOutputs.set_failed``.

Configure via the YAML config (logging.level, logging.format) or env
(LOGGING_LEVEL, LOGGING_FORMAT).
"""

import logging
import sys
from typing import TextIO

from upsert_pr.config import LoggingConfig
from upsert_pr.outputs import escape_data

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant; unknown names give INFO."""
    return LEVELS.get(level.upper().strip(), logging.INFO)


class WorkflowWarningHandler(logging.Handler):
    """Prints WARNING records as ``::warning::`` workflow commands."""

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__(level=logging.WARNING)
        # None: resolve sys.stdout at emit time
        self._stream = stream
        self.addFilter(lambda record: record.levelno == logging.WARNING)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            print(f"::warning::{escape_data(record.getMessage())}", file=self._stream or sys.stdout)
        except Exception:
            self.handleError(record)


def setup_logging(config: LoggingConfig, stream: TextIO | None = None) -> None:
    """Configure the root logger from config and add the warning annotations.

    Calling it again replaces the handlers of the previous call.
    """
    logging.basicConfig(
        level=_resolve_level(config.level),
        format=config.format or DEFAULT_FORMAT,
        force=True,
    )
    logging.getLogger().addHandler(WorkflowWarningHandler(stream))
