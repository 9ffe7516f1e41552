"""Synchronous and asynchronous REST clients."""

from __future__ import annotations

import json
import logging
import os
from datetime import date, datetime
from typing import Any, Literal, Mapping, Sequence
from urllib.parse import unquote_plus, urlencode

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from .exceptions import RequestError, RestValidationError
from .request_options import RequestOptions, merge_headers, merge_options, validate_options
from .security import sanitize_headers, validate_base_url

logger = logging.getLogger(__name__)

HTTPMethod = Literal["GET", "HEAD", "POST", "PUT", "DELETE", "CONNECT", "OPTIONS", "TRACE", "PATCH"]
QueryParams = Mapping[str, Any] | Sequence[tuple[str, Any]]

JSON_CONTENT_TYPE = "application/json"


def _coerce_query_value(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _coerce_query_params(params: QueryParams | None) -> list[tuple[str, str]]:
    if params is None:
        return []
    items = params.items() if isinstance(params, Mapping) else params
    normalized: list[tuple[str, str]] = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            normalized.extend((str(key), _coerce_query_value(v)) for v in value if v is not None)
            continue
        normalized.append((str(key), _coerce_query_value(value)))
    return normalized


def _coerce_json_payload(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    return payload


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _encode_json(payload: Any) -> bytes:
    return json.dumps(
        _coerce_json_payload(payload),
        ensure_ascii=False,
        separators=(",", ":"),
        default=_json_default,
    ).encode("utf-8")


def _merge_query(existing: bytes, pairs: list[tuple[str, str]]) -> bytes:
    """Append ``pairs`` to a raw query, dropping existing keys they repeat.

    Pairs keep the order they were given in, including interleaved repeats.
    """
    keys = {key for key, _ in pairs}
    kept = [
        segment
        for segment in existing.decode("ascii").split("&")
        if segment and unquote_plus(segment.partition("=")[0]) not in keys
    ]
    return "&".join([*kept, urlencode(pairs)]).encode("ascii")


def _parse_allow_header(response: httpx.Response) -> list[str]:
    raw = response.headers.get("Allow")
    if raw is None:
        logger.warning("OPTIONS %s returned no Allow header", response.request.url)
        return []
    return [token.strip() for token in raw.split(",") if token.strip()]


class _BaseRestClient:
    default_base_url_env_var = "REST_CLIENT_BASE_URL"
    default_token_env_var = "REST_CLIENT_TOKEN"

    def __init__(
        self,
        base_url: str | None = None,
        default_options: RequestOptions | Mapping[str, Any] | None = None,
        *,
        base_url_env_var: str = default_base_url_env_var,
        token_env_var: str = default_token_env_var,
    ) -> None:
        if base_url is None:
            base_url = os.getenv(base_url_env_var, "")
        if base_url:
            validate_base_url(base_url)
        self.base_url = base_url
        validate_options(default_options)
        self.default_options: RequestOptions = merge_options(default_options, None)

        token = os.getenv(token_env_var)
        if token:
            self.auth(token)

    def update_options(self, options: RequestOptions | Mapping[str, Any]) -> None:
        """Deep-merge ``options`` into the default options.

        Nested mappings such as ``headers`` are merged key by key, so setting
        one header keeps the others.
        """
        validate_options(options)
        self.default_options = merge_options(self.default_options, options)

    def auth(self, token: str) -> None:
        """Set the ``Authentication`` header sent with every request."""
        self.update_options({"headers": {"Authentication": token}})

    def _build_url(self, path: str, params: QueryParams | None) -> httpx.URL:
        if "\x00" in path:
            raise RestValidationError("Invalid path characters")
        if self.base_url:
            url = httpx.URL(self.base_url).join(path)
        else:
            url = httpx.URL(path)
            if not url.is_absolute_url:
                raise RestValidationError(f"Relative path {path!r} requires a base_url")
        query = _coerce_query_params(params)
        if query:
            url = url.copy_with(query=_merge_query(url.query, query))
        return url

    def _prepare(
        self,
        method: HTTPMethod,
        path: str,
        params: QueryParams | None,
        body: Any,
        options: RequestOptions | Mapping[str, Any] | None,
    ) -> tuple[httpx.URL, dict[str, Any], bytes | None]:
        validate_options(options)
        url = self._build_url(path, params)
        merged = dict(merge_options(self.default_options, options))

        content = None
        if body is not None:
            merged["headers"] = merge_headers(merged.get("headers"), {"Content-Type": JSON_CONTENT_TYPE})
            content = _encode_json(body)

        logger.debug("%s %s headers=%s", method, url, sanitize_headers(merged.get("headers") or {}))
        return url, merged, content

    @staticmethod
    def _raise_for_status(method: HTTPMethod, response: httpx.Response) -> None:
        if response.is_success:
            return
        body: object = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = response.text

        url = str(response.request.url)
        logger.debug("%s %s failed with status %s", method, url, response.status_code)
        raise RequestError(
            method,
            url,
            response.status_code,
            body=body,
            headers=response.headers,
            request=response.request,
            response=response,
        )

    @staticmethod
    def _parse_response(method: HTTPMethod, response: httpx.Response, response_model: Any = None) -> Any:
        if method == "HEAD":
            return response.headers
        if method == "OPTIONS":
            return _parse_allow_header(response)
        if method == "CONNECT":
            return None

        if response.status_code == 204 or not response.content:
            data = None
        else:
            data = response.json()

        if response_model is None:
            return data
        try:
            return TypeAdapter(response_model).validate_python(data)
        except ValidationError as exc:
            name = getattr(response_model, "__name__", repr(response_model))
            raise RestValidationError(f"Response from {response.request.url} does not match {name}") from exc


class RestClient(_BaseRestClient):
    """Synchronous client."""

    def __init__(
        self,
        base_url: str | None = None,
        default_options: RequestOptions | Mapping[str, Any] | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
        httpx_client: httpx.Client | None = None,
        base_url_env_var: str = _BaseRestClient.default_base_url_env_var,
        token_env_var: str = _BaseRestClient.default_token_env_var,
    ) -> None:
        super().__init__(
            base_url,
            default_options,
            base_url_env_var=base_url_env_var,
            token_env_var=token_env_var,
        )
        self._httpx = httpx_client or httpx.Client(transport=transport)

    def __enter__(self) -> "RestClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._httpx.close()

    def _send(
        self,
        method: HTTPMethod,
        path: str,
        params: QueryParams | None = None,
        body: Any = None,
        options: RequestOptions | Mapping[str, Any] | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        url, request_kwargs, content = self._prepare(method, path, params, body, options)
        response = self._httpx.request(method, url, content=content, **request_kwargs)
        self._raise_for_status(method, response)
        return self._parse_response(method, response, response_model)

    def get(
        self,
        path: str,
        params: QueryParams | None = None,
        options: RequestOptions | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        return self._send("GET", path, params, None, options, response_model=response_model)

    def head(self, path: str, params: QueryParams | None = None, options: RequestOptions | None = None) -> httpx.Headers:
        return self._send("HEAD", path, params, None, options)

    def post(
        self,
        path: str,
        params: QueryParams | None = None,
        body: Any = None,
        options: RequestOptions | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        return self._send("POST", path, params, body, options, response_model=response_model)

    def put(
        self,
        path: str,
        params: QueryParams | None = None,
        body: Any = None,
        options: RequestOptions | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        return self._send("PUT", path, params, body, options, response_model=response_model)

    def delete(
        self,
        path: str,
        params: QueryParams | None = None,
        body: Any = None,
        options: RequestOptions | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        return self._send("DELETE", path, params, body, options, response_model=response_model)

    def patch(
        self,
        path: str,
        params: QueryParams | None = None,
        body: Any = None,
        options: RequestOptions | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        return self._send("PATCH", path, params, body, options, response_model=response_model)

    def options(
        self,
        path: str,
        params: QueryParams | None = None,
        body: Any = None,
        options: RequestOptions | None = None,
    ) -> list[str]:
        return self._send("OPTIONS", path, params, body, options)

    def connect(self, path: str, params: QueryParams | None = None, options: RequestOptions | None = None) -> None:
        return self._send("CONNECT", path, params, None, options)

    def trace(
        self,
        path: str,
        params: QueryParams | None = None,
        options: RequestOptions | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        return self._send("TRACE", path, params, None, options, response_model=response_model)


class AsyncRestClient(_BaseRestClient):
    """Asynchronous client."""

    def __init__(
        self,
        base_url: str | None = None,
        default_options: RequestOptions | Mapping[str, Any] | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        httpx_client: httpx.AsyncClient | None = None,
        base_url_env_var: str = _BaseRestClient.default_base_url_env_var,
        token_env_var: str = _BaseRestClient.default_token_env_var,
    ) -> None:
        super().__init__(
            base_url,
            default_options,
            base_url_env_var=base_url_env_var,
            token_env_var=token_env_var,
        )
        self._httpx = httpx_client or httpx.AsyncClient(transport=transport)

    async def __aenter__(self) -> "AsyncRestClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._httpx.aclose()

    async def _send(
        self,
        method: HTTPMethod,
        path: str,
        params: QueryParams | None = None,
        body: Any = None,
        options: RequestOptions | Mapping[str, Any] | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        url, request_kwargs, content = self._prepare(method, path, params, body, options)
        response = await self._httpx.request(method, url, content=content, **request_kwargs)
        self._raise_for_status(method, response)
        return self._parse_response(method, response, response_model)

    async def get(
        self,
        path: str,
        params: QueryParams | None = None,
        options: RequestOptions | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        return await self._send("GET", path, params, None, options, response_model=response_model)

    async def head(self, path: str, params: QueryParams | None = None, options: RequestOptions | None = None) -> httpx.Headers:
        return await self._send("HEAD", path, params, None, options)

    async def post(
        self,
        path: str,
        params: QueryParams | None = None,
        body: Any = None,
        options: RequestOptions | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        return await self._send("POST", path, params, body, options, response_model=response_model)

    async def put(
        self,
        path: str,
        params: QueryParams | None = None,
        body: Any = None,
        options: RequestOptions | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        return await self._send("PUT", path, params, body, options, response_model=response_model)

    async def delete(
        self,
        path: str,
        params: QueryParams | None = None,
        body: Any = None,
        options: RequestOptions | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        return await self._send("DELETE", path, params, body, options, response_model=response_model)

    async def patch(
        self,
        path: str,
        params: QueryParams | None = None,
        body: Any = None,
        options: RequestOptions | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        return await self._send("PATCH", path, params, body, options, response_model=response_model)

    async def options(
        self,
        path: str,
        params: QueryParams | None = None,
        body: Any = None,
        options: RequestOptions | None = None,
    ) -> list[str]:
        return await self._send("OPTIONS", path, params, body, options)

    async def connect(self, path: str, params: QueryParams | None = None, options: RequestOptions | None = None) -> None:
        return await self._send("CONNECT", path, params, None, options)

    async def trace(
        self,
        path: str,
        params: QueryParams | None = None,
        options: RequestOptions | None = None,
        *,
        response_model: Any = None,
    ) -> Any:
        return await self._send("TRACE", path, params, None, options, response_model=response_model)
