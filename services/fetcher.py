"""HTTP access to the seismic network's ground-motion endpoint."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from models.schemas import ResponseEnvelope
from services.errors import (
    BodyReadError,
    HTTPStatusError,
    MonitorError,
    NetworkError,
    ParseError,
)

logger = logging.getLogger(__name__)


class Fetcher:
    """Performs one request/response/parse cycle per call.

    ``fetch`` never raises: every failure is logged and reported as ``None``.
    The underlying ``httpx.Client`` is shared by all fetch threads.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def fetch(self) -> Optional[ResponseEnvelope]:
        try:
            body = self._get_body()
            return self._parse(body)
        except MonitorError as exc:
            extra = {"url": self.url}
            if isinstance(exc, HTTPStatusError):
                extra["status_code"] = exc.status_code
            logger.error("Error fetching data: %s", exc, extra=extra)
            return None

    def _get_body(self) -> bytes:
        try:
            with self._client.stream("GET", self.url) as response:
                if response.status_code != httpx.codes.OK:
                    raise HTTPStatusError(response.status_code)
                try:
                    return response.read()
                except (httpx.HTTPError, httpx.StreamError) as exc:
                    raise BodyReadError(f"error reading response: {exc}") from exc
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as exc:
            raise NetworkError(f"{type(exc).__name__}: {exc}") from exc

    @staticmethod
    def _parse(body: bytes) -> ResponseEnvelope:
        try:
            return ResponseEnvelope.model_validate_json(body)
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "<body>"
            raise ParseError(f"error parsing JSON at {location}: {first['msg']}") from exc
