"""
Read OAuth callback parameters from framework request objects.

``extract_callback_params`` recognizes the request shapes of common Python
hosts without importing any of them:

- ``CallbackParams`` instances, returned as-is.
- A parsed query mapping: ``request.query_params`` (Starlette/FastAPI),
  ``request.args`` (Flask), ``request.GET`` (Django), ``request.query``
  (aiohttp), or a mapping passed directly. ASGI scopes and WSGI environs are
  mappings too and are read from their raw query string; request-like dicts
  (``{"query": {...}}``, ``{"url": "/cb?code=...", "headers": {...}}``) are
  read through those keys.
- A URL object with a parsed-query accessor: ``request.url.params`` (httpx).
- A raw URL string: ``request.url`` or ``request.path`` (``http.server``),
  resolved against the ``Host`` header.

Hosts with other request types pass their own extractor to
``handle_callback(extractor=...)``.
"""

from typing import Any, Callable, Mapping
from urllib.parse import parse_qs

import httpx

from unioauth.core.config import settings
from unioauth.core.exceptions.types import UnsupportedRequestShapeException
from unioauth.services.oauth.base import CallbackParams


__all__ = ["CallbackParamsExtractor", "extract_callback_params"]

CallbackParamsExtractor = Callable[[Any], CallbackParams]

_QUERY_MAPPING_ATTRS = ("query_params", "args", "GET", "query")
_URL_QUERY_ATTRS = ("params", "query_params", "search_params", "query")
_RAW_URL_ATTRS = ("url", "path")
_CALLBACK_KEYS = ("code", "state", "error", "error_description")


def _is_query_mapping(value: Any) -> bool:
    return (
        value is not None
        and not isinstance(value, (str, bytes))
        and callable(getattr(value, "get", None))
    )


def _from_query_string(query: str | bytes) -> CallbackParams:
    if isinstance(query, bytes):
        query = query.decode("latin-1")
    parsed = parse_qs(query)
    return CallbackParams.from_getter(lambda key: (parsed.get(key) or [None])[0])


def _header(headers: Any, name: str) -> str | None:
    if headers is None:
        return None
    getter = getattr(headers, "get", None)
    if callable(getter):
        value = getter(name) or getter(name.title())
        if value:
            return value
    if isinstance(headers, Mapping):
        for key, value in headers.items():
            if isinstance(key, str) and key.lower() == name:
                return value
    return None


def _from_mapping(request: Mapping) -> CallbackParams:
    if "query_string" in request and "type" in request:
        # ASGI scope
        return _from_query_string(request["query_string"])
    if "QUERY_STRING" in request and "REQUEST_METHOD" in request:
        # WSGI environ
        return _from_query_string(request["QUERY_STRING"])

    # Request-like dicts: {"query": {...}} or {"url": "/cb?code=...", "headers": {...}}
    for key in _QUERY_MAPPING_ATTRS:
        query = request.get(key)
        if isinstance(query, Mapping):
            return CallbackParams.from_getter(query.get)
    if not any(key in request for key in _CALLBACK_KEYS):
        for key in _RAW_URL_ATTRS:
            raw_url = request.get(key)
            if isinstance(raw_url, str) and raw_url:
                return _from_raw_url(raw_url, request.get("headers"))

    return CallbackParams.from_getter(request.get)


def _from_raw_url(raw_url: str, headers: Any) -> CallbackParams:
    host = _header(headers, "host") or settings.DEFAULT_CALLBACK_HOST
    try:
        url = httpx.URL(f"http://{host}").join(raw_url)
    except httpx.InvalidURL as e:
        raise UnsupportedRequestShapeException(
            f"Unable to parse callback URL {raw_url!r}: {e}"
        ) from e
    return CallbackParams.from_getter(url.params.get)


def extract_callback_params(request: Any) -> CallbackParams:
    """
    Extract ``code``, ``state``, ``error`` and ``error_description`` from a request.

    Shapes are checked in order and the first match wins: parsed query
    mapping, URL object with a query accessor, raw URL string.

    Args:
        request: The incoming callback request, in any supported shape.

    Returns:
        CallbackParams: The extracted parameters; absent or empty values are None.

    Raises:
        UnsupportedRequestShapeException: If no supported shape matches.
    """
    if isinstance(request, CallbackParams):
        return request

    for attr in _QUERY_MAPPING_ATTRS:
        query = getattr(request, attr, None)
        if _is_query_mapping(query):
            return CallbackParams.from_getter(query.get)

    if isinstance(request, Mapping):
        return _from_mapping(request)

    url = getattr(request, "url", None)
    if url is not None and not isinstance(url, str):
        for attr in _URL_QUERY_ATTRS:
            query = getattr(url, attr, None)
            if _is_query_mapping(query):
                return CallbackParams.from_getter(query.get)

    for attr in _RAW_URL_ATTRS:
        raw_url = getattr(request, attr, None)
        if isinstance(raw_url, str) and raw_url:
            return _from_raw_url(raw_url, getattr(request, "headers", None))

    raise UnsupportedRequestShapeException()
