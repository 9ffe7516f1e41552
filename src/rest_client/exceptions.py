"""REST client exceptions."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    import httpx


class RestClientError(Exception):
    """Base exception for all REST client failures."""


class RestValidationError(RestClientError):
    """Raised when options, paths or response payloads are invalid."""


class RequestError(RestClientError):
    """Raised when a response status is outside the 2xx range."""

    def __init__(
        self,
        method: str,
        url: str,
        status_code: int,
        *,
        body: object = None,
        headers: Mapping[str, str] | None = None,
        request: httpx.Request | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(f'request "{method} {url}" responded with status {status_code}')
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        self.headers: Mapping[str, str] = MappingProxyType(dict(headers or {}))
        self.request = request
        self.response = response
