from __future__ import annotations

import time
from typing import Optional

import httpx

from revalidator._core._builder import build_conditional_request
from revalidator._core._headers import Headers
from revalidator._core.models import HTTP_1_1, CacheEntry, HttpVersion, Request, StatusLine


def parse_http_version(value: str) -> HttpVersion:
    """
    Converts an httpx version string such as "HTTP/1.1" or "HTTP/2".

    Unknown values are treated as HTTP/1.1.
    """
    _, _, number = value.partition("/")
    major, _, minor = number.partition(".")
    try:
        return HttpVersion(int(major), int(minor or 0))
    except ValueError:
        return HTTP_1_1


def _headers_from_httpx(headers: httpx.Headers) -> Headers:
    # `raw` keeps the original casing and duplicates, `multi_items` lowercases names
    return Headers(
        [(key.decode(headers.encoding), value.decode(headers.encoding)) for key, value in headers.raw]
    )


def httpx_to_internal(request: httpx.Request) -> Request:
    """
    Convert httpx.Request to internal Request.
    """
    return Request(
        method=request.method,
        url=str(request.url),
        version=HTTP_1_1,
        headers=_headers_from_httpx(request.headers),
    )


def internal_to_httpx(request: Request, original: Optional[httpx.Request] = None) -> httpx.Request:
    """
    Convert internal Request to httpx.Request.

    The internal model has no body, so the stream and extensions are taken
    from `original` when it is given.
    """
    if original is None:
        return httpx.Request(
            method=request.method,
            url=request.url,
            headers=request.headers.multi_items(),
        )
    return httpx.Request(
        method=request.method,
        url=request.url,
        headers=request.headers.multi_items(),
        stream=original.stream,
        extensions=dict(original.extensions),
    )


def entry_from_httpx_response(
    response: httpx.Response,
    request_date: Optional[float] = None,
    response_date: Optional[float] = None,
) -> CacheEntry:
    """
    Build a CacheEntry from a received httpx.Response.

    The response body is read. Async responses must be read with
    `await response.aread()` first.
    """
    if response_date is None:
        response_date = time.time()
    return CacheEntry(
        status_line=StatusLine(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            version=parse_http_version(response.http_version),
        ),
        headers=_headers_from_httpx(response.headers),
        body=response.read(),
        request_date=request_date,
        response_date=response_date,
    )


def build_conditional_httpx_request(request: httpx.Request, entry: CacheEntry) -> httpx.Request:
    return internal_to_httpx(build_conditional_request(httpx_to_internal(request), entry), original=request)
