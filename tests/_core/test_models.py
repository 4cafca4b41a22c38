from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from time_machine import travel

from revalidator import (
    HTTP_1_0,
    HTTP_1_1,
    CacheEntry,
    Headers,
    HttpVersion,
    InvalidArgumentError,
    Request,
    StatusLine,
)


def test_http_version() -> None:
    assert str(HTTP_1_1) == "HTTP/1.1"
    assert str(HTTP_1_0) == "HTTP/1.0"
    assert HttpVersion() == HTTP_1_1


def test_status_line() -> None:
    assert str(StatusLine(200, "OK")) == "HTTP/1.1 200 OK"
    assert str(StatusLine(304, version=HTTP_1_0)) == "HTTP/1.0 304"


def test_request_defaults() -> None:
    request = Request("GET", "/")

    assert request.version == HTTP_1_1
    assert request.headers == Headers()


def test_request_copy_is_independent() -> None:
    request = Request("GET", "/", headers=Headers({"Accept": "*/*"}))

    copied = request.copy()
    copied.headers.add("If-None-Match", '"a"')

    assert copied == Request("GET", "/", headers=Headers([("Accept", "*/*"), ("If-None-Match", '"a"')]))
    assert request.headers.multi_items() == [("Accept", "*/*")]


@travel(datetime(2024, 1, 1, 0, 0, 0, tzinfo=ZoneInfo("UTC")), tick=False)
def test_cache_entry_default_dates() -> None:
    entry = CacheEntry(StatusLine(200, "OK"))

    assert entry.request_date == 1704067200.0
    assert entry.response_date == 1704067200.0
    assert entry.body == b""


def test_cache_entry_request_date_falls_back_to_response_date() -> None:
    entry = CacheEntry(StatusLine(200, "OK"), response_date=100.0)

    assert entry.request_date == 100.0
    assert entry.response_date == 100.0


def test_cache_entry_rejects_request_date_after_response_date() -> None:
    with pytest.raises(
        InvalidArgumentError,
        match=r"The request date \(20.0\) must not be after the response date \(10.0\).",
    ):
        CacheEntry(StatusLine(200, "OK"), request_date=20.0, response_date=10.0)


def test_cache_entry_header_lookups() -> None:
    entry = CacheEntry(
        StatusLine(200, "OK"),
        headers=Headers(
            [
                ("Cache-Control", "max-age=5"),
                ("etag", '"v1"'),
                ("cache-control", "must-revalidate"),
                ("Last-Modified", "Mon, 01 Jan 2024 00:00:00 GMT"),
            ]
        ),
        request_date=1.0,
        response_date=2.0,
    )

    assert entry.etag == '"v1"'
    assert entry.last_modified == "Mon, 01 Jan 2024 00:00:00 GMT"
    assert [header.value for header in entry.get_headers("CACHE-CONTROL")] == ["max-age=5", "must-revalidate"]
    assert entry.first_header("Date") is None
    assert entry.is_revalidatable()
