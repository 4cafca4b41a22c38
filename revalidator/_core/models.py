from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List, Optional

from revalidator._core._headers import Header, Headers
from revalidator._exceptions import InvalidArgumentError


@dataclass(frozen=True)
class HttpVersion:
    major: int = 1
    minor: int = 1

    def __str__(self) -> str:
        return f"HTTP/{self.major}.{self.minor}"


HTTP_1_0 = HttpVersion(1, 0)
HTTP_1_1 = HttpVersion(1, 1)


@dataclass(frozen=True)
class StatusLine:
    status_code: int
    reason_phrase: str = ""
    version: HttpVersion = HTTP_1_1

    def __str__(self) -> str:
        return f"{self.version} {self.status_code} {self.reason_phrase}".rstrip()


@dataclass
class Request:
    method: str
    url: str
    version: HttpVersion = HTTP_1_1
    headers: Headers = field(default_factory=Headers)

    def copy(self) -> "Request":
        """
        Returns a copy of the request whose headers can be changed without
        affecting this one.
        """
        return Request(
            method=self.method,
            url=self.url,
            version=self.version,
            headers=self.headers.copy(),
        )


@dataclass(frozen=True)
class CacheEntry:
    """
    A stored response as seen by the revalidation logic.

    `request_date` and `response_date` are POSIX timestamps taken right before
    the request was sent and right after the response arrived. When only the
    response date is known, the request date falls back to it.
    """

    status_line: StatusLine
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    request_date: Optional[float] = None
    response_date: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if self.request_date is None:
            object.__setattr__(self, "request_date", self.response_date)
        elif self.request_date > self.response_date:
            raise InvalidArgumentError(
                f"The request date ({self.request_date}) must not be after the response date ({self.response_date})."
            )

    def first_header(self, name: str) -> Optional[Header]:
        return self.headers.first(name)

    def get_headers(self, name: str) -> List[Header]:
        return self.headers.get_all(name)

    @property
    def etag(self) -> Optional[str]:
        header = self.first_header("ETag")
        return header.value if header is not None else None

    @property
    def last_modified(self) -> Optional[str]:
        header = self.first_header("Last-Modified")
        return header.value if header is not None else None

    def is_revalidatable(self) -> bool:
        """Whether the entry carries a validator the origin can check."""
        return self.etag is not None or self.last_modified is not None
