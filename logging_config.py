from __future__ import annotations

import logging
import os
import sys
from logging.config import dictConfig
from typing import Iterable, Sequence

from services.errors import LogWriteError
from settings import Settings, get_settings

MAX_LOG_BYTES = 100 * 1024 * 1024

_DEFAULT_EXTRA_KEYS = (
    "url",
    "status_code",
    "sensor_id",
    "level",
    "timestamp_ms",
)

_configured = False


class ContextualFormatter(logging.Formatter):

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        extra_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._extra_keys: Sequence[str] = tuple(extra_keys or _DEFAULT_EXTRA_KEYS)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context_parts: list[str] = []
        for key in self._extra_keys:
            if not hasattr(record, key):
                continue
            value = getattr(record, key, None)
            if value is None:
                continue
            context_parts.append(f"{key}={value}")
        if context_parts:
            return f"{message} | {' '.join(context_parts)}"
        return message


class TruncatingFileHandler(logging.FileHandler):
    """Append-only file handler that starts over once the file exceeds ``max_bytes``.

    The file is opened, appended to and closed for every record while the
    handler lock is held, so concurrent fetch threads never interleave lines
    and a log removed by another process is recreated on the next write.
    """

    def __init__(
        self,
        filename: str | os.PathLike[str],
        max_bytes: int = MAX_LOG_BYTES,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(filename, mode="a", encoding=encoding, delay=True)
        self.max_bytes = max_bytes

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if self._is_oversized():
                self._discard()
            if self.stream is None:
                self.stream = self._open()
        except OSError:
            self.handleError(record)
            return
        try:
            super().emit(record)
        finally:
            self._release_stream()

    def handleError(self, record: logging.LogRecord) -> None:
        exc = sys.exc_info()[1]
        error = LogWriteError(f"could not write to {self.baseFilename}: {exc}")
        try:
            sys.stderr.write(f"{type(error).__name__}: {error} (message: {record.getMessage()})\n")
        except (OSError, ValueError):
            pass

    def _is_oversized(self) -> bool:
        try:
            size = os.stat(self.baseFilename).st_size
        except FileNotFoundError:
            return False
        return size > self.max_bytes

    def _discard(self) -> None:
        self._release_stream()
        os.remove(self.baseFilename)

    def _release_stream(self) -> None:
        if self.stream is None:
            return
        stream, self.stream = self.stream, None
        try:
            stream.close()
        except OSError:
            pass


def _resolve_level(level: str | int) -> str | int:
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    return name if isinstance(logging.getLevelName(name), int) else "WARNING"


def configure_logging(settings: Settings | None = None, level: str | int | None = None) -> None:
    """Route diagnostics to the size-capped error log file."""
    global _configured
    if _configured:
        return

    settings = settings or get_settings()
    log_level = _resolve_level(level if level is not None else settings.log_level)

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": "logging_config.ContextualFormatter",
                    "fmt": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                    "datefmt": "%Y/%m/%d %H:%M:%S",
                    "style": "%",
                    "extra_keys": list(_DEFAULT_EXTRA_KEYS),
                }
            },
            "handlers": {
                "error_log": {
                    "class": "logging_config.TruncatingFileHandler",
                    "level": log_level,
                    "formatter": "contextual",
                    "filename": settings.log_file,
                    "max_bytes": MAX_LOG_BYTES,
                }
            },
            "root": {"handlers": ["error_log"], "level": log_level},
        }
    )

    _configured = True
