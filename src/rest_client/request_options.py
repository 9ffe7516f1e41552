"""Default and per-request options for the REST clients."""

from __future__ import annotations

from typing import Any, Mapping, TypedDict

import httpx

from .exceptions import RestValidationError


class RequestOptions(TypedDict, total=False):
    headers: Mapping[str, str]
    auth: Any
    follow_redirects: bool
    timeout: float | httpx.Timeout | None
    extensions: Mapping[str, Any]


ALLOWED_OPTION_KEYS = frozenset(RequestOptions.__annotations__)


def validate_options(options: Mapping[str, Any] | None) -> None:
    if options is None:
        return
    if not isinstance(options, Mapping):
        raise RestValidationError("options must be a mapping")
    unknown = sorted(set(options) - ALLOWED_OPTION_KEYS)
    if unknown:
        raise RestValidationError(f"Unsupported request options: {', '.join(unknown)}")
    headers = options.get("headers")
    if headers is not None and not isinstance(headers, Mapping):
        raise RestValidationError("headers option must be a mapping")


def deep_merge(target: Mapping[str, Any] | None, source: Mapping[str, Any] | None) -> dict[str, Any]:
    """Recursively merge ``source`` into a copy of ``target``.

    Nested mappings are merged key by key, anything else in ``source``
    replaces the value in ``target``. Neither input is modified and the
    result shares no nested dicts with them.
    """
    result: dict[str, Any] = {}
    for key, value in (target or {}).items():
        result[key] = deep_merge(value, None) if isinstance(value, Mapping) else value

    for key, source_value in (source or {}).items():
        target_value = result.get(key)
        if isinstance(source_value, Mapping) and isinstance(target_value, Mapping):
            result[key] = deep_merge(target_value, source_value)
        elif isinstance(source_value, Mapping):
            result[key] = deep_merge(source_value, None)
        else:
            result[key] = source_value
    return result


def merge_headers(target: Mapping[str, str] | None, source: Mapping[str, str] | None) -> dict[str, str]:
    """Merge header mappings, matching names case-insensitively.

    A header in ``source`` replaces any header in ``target`` with the same
    name regardless of spelling; the ``source`` spelling is kept.
    """
    merged: dict[str, str] = {str(key): str(value) for key, value in (target or {}).items()}
    for key, value in (source or {}).items():
        name = str(key)
        for existing in [k for k in merged if k.lower() == name.lower()]:
            del merged[existing]
        merged[name] = str(value)
    return merged


def merge_options(
    defaults: Mapping[str, Any] | None,
    overrides: Mapping[str, Any] | None,
) -> RequestOptions:
    merged = deep_merge(defaults, overrides)
    if (defaults and "headers" in defaults) or (overrides and "headers" in overrides):
        merged["headers"] = merge_headers(
            (defaults or {}).get("headers"),
            (overrides or {}).get("headers"),
        )
    return RequestOptions(**merged)  # type: ignore[typeddict-item]
