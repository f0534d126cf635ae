"""Failure types raised inside the monitor and handled where they occur."""

from __future__ import annotations


class MonitorError(Exception):
    """Base class for recoverable monitor failures."""


class NetworkError(MonitorError):
    """The request never produced a response."""


class HTTPStatusError(MonitorError):
    """The data source answered with a non-success status code."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"unexpected status code {status_code}")
        self.status_code = status_code


class BodyReadError(MonitorError):
    """The response body could not be read to completion."""


class ParseError(MonitorError):
    """The response body was not the expected JSON document."""


class SoundPlaybackError(MonitorError):
    """The platform sound command failed."""


class LogWriteError(MonitorError):
    """A diagnostic could not be appended to the error log."""
