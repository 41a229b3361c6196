"""
Logging utilities: console configuration for the CLI and a capture
handler that records what an upload did.
"""
from __future__ import annotations

import logging
from typing import List, Optional


PACKAGE_LOGGER = "clueset_toolkit"


def configure_logging(level: int = logging.INFO, fmt: str = "%(message)s") -> None:
    """
    Configure root logging for command-line use.

    Library modules never call this; only entry points do.

    Args:
        level: Root log level.
        fmt: Log record format.
    """
    logging.basicConfig(level=level, format=fmt, force=True)
    # Capture handlers may lower package logger levels; keep the console at `level`.
    for handler in logging.getLogger().handlers:
        handler.setLevel(level)


class UploadLogCapture(logging.Handler):
    """
    A logging handler that keeps formatted records in memory.

    Attach it around an upload to report the steps that ran.

    Example:
        >>> with UploadLogCapture() as capture:
        ...     result = handle_upload(...)
        >>> capture.messages
        ["Starting upload of 'game.csv' for user-1", ...]
    """

    def __init__(self, level: int = logging.DEBUG, logger_name: Optional[str] = PACKAGE_LOGGER):
        super().__init__(level)
        self.logger_name = logger_name
        self.records: List[logging.LogRecord] = []
        self._previous_level: Optional[int] = None
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    @property
    def messages(self) -> List[str]:
        return [self.format(record) for record in self.records]

    def attach(self) -> UploadLogCapture:
        logger = logging.getLogger(self.logger_name)
        self._previous_level = logger.level
        if logger.getEffectiveLevel() > self.level:
            logger.setLevel(self.level)
        logger.addHandler(self)
        return self

    def detach(self) -> None:
        logger = logging.getLogger(self.logger_name)
        logger.removeHandler(self)
        if self._previous_level is not None:
            logger.setLevel(self._previous_level)
            self._previous_level = None

    def __enter__(self) -> UploadLogCapture:
        return self.attach()

    def __exit__(self, *exc_info) -> None:
        self.detach()
