"""Thin REST client over httpx with mergeable default options."""

from .client import AsyncRestClient, HTTPMethod, RestClient
from .exceptions import RequestError, RestClientError, RestValidationError
from .request_options import RequestOptions

__all__ = [
    "AsyncRestClient",
    "HTTPMethod",
    "RequestError",
    "RequestOptions",
    "RestClient",
    "RestClientError",
    "RestValidationError",
]

__version__ = "0.1.0"
