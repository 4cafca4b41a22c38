from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from revalidator._core._headers import parse_directives
from revalidator._core.models import CacheEntry, Request
from revalidator._exceptions import InvalidArgumentError

logger = logging.getLogger("revalidator.core.builder")

__all__ = (
    "BuilderOptions",
    "ConditionalRequestBuilder",
    "build_conditional_request",
    "build_conditional_request_from_variants",
    "build_unconditional_request",
)

CONDITIONAL_HEADERS = (
    "If-Range",
    "If-Match",
    "If-None-Match",
    "If-Unmodified-Since",
    "If-Modified-Since",
)


@dataclass(frozen=True)
class BuilderOptions:
    """
    Configuration for building revalidation requests.

    Attributes:
    ----------
    end_to_end_directives : tuple[str, ...]
        Response directives that oblige every cache on the path to revalidate
        with the origin once the stored response is stale.

        RFC 9111 Section 5.2.2.2: must-revalidate
        https://www.rfc-editor.org/rfc/rfc9111.html#section-5.2.2.2

        RFC 9111 Section 5.2.2.8: proxy-revalidate
        https://www.rfc-editor.org/rfc/rfc9111.html#section-5.2.2.8

        When any of them is present on the cached entry, the revalidation
        request gets an extra ``Cache-Control`` header so intermediaries
        forward it upstream instead of answering from their own store.

        Default: ("must-revalidate", "proxy-revalidate")

    end_to_end_cache_control : str
        Value of the ``Cache-Control`` header added for forced end-to-end
        revalidation.

        RFC 9111 Section 5.2.1.1: max-age
        https://www.rfc-editor.org/rfc/rfc9111.html#section-5.2.1.1

        ``max-age=0`` tells every cache that no stored response is fresh
        enough for this request.

        Default: "max-age=0"

    Examples:
    --------
    >>> # Only must-revalidate forces end-to-end revalidation
    >>> options = BuilderOptions(end_to_end_directives=("must-revalidate",))
    >>> builder = ConditionalRequestBuilder(options)
    """

    end_to_end_directives: Tuple[str, ...] = ("must-revalidate", "proxy-revalidate")
    """Directive names on the cached entry that force end-to-end revalidation."""

    end_to_end_cache_control: str = "max-age=0"
    """Value of the Cache-Control header added for end-to-end revalidation."""


def _ensure_present(**arguments: object) -> None:
    for name, value in arguments.items():
        if value is None:
            raise InvalidArgumentError(f"The argument '{name}' is required, but got None.")


class ConditionalRequestBuilder:
    """
    Builds the requests a cache sends to its origin to revalidate stored entries.

    The builder never changes the request or the entry it is given. It only
    reads its options, so one instance can be shared between threads.
    """

    def __init__(self, options: Optional[BuilderOptions] = None) -> None:
        self._options = options if options is not None else BuilderOptions()

    @property
    def options(self) -> BuilderOptions:
        return self._options

    def requires_end_to_end_revalidation(self, entry: CacheEntry) -> bool:
        """
        Checks whether the entry's Cache-Control directives forbid intermediate
        caches from answering the revalidation themselves.
        """
        cache_control = [header.value for header in entry.get_headers("Cache-Control")]
        triggers = {name.lower() for name in self._options.end_to_end_directives}
        return any(directive.name in triggers for directive in parse_directives(cache_control))

    def build_conditional_request(self, original: Request, entry: CacheEntry) -> Request:
        """
        Converts a regular request into a conditional request for validation.

        RFC 9111 Section 4.3.1: Sending a Validation Request
        https://www.rfc-editor.org/rfc/rfc9111.html#section-4.3.1

        Parameters:
        ----------
        original : Request
            The request the caller intends to send
        entry : CacheEntry
            The stored response for the same cache key

        Returns:
        -------
        Request
            A copy of ``original`` with its headers in the same order, followed by
            at most one validator header and, when the entry demands it, a
            ``Cache-Control`` header forcing end-to-end revalidation.

        Validator Priority:
        ------------------
        1. If-None-Match: sent when the entry has an ETag
        2. If-Modified-Since: sent when the entry has a Last-Modified
           value but no ETag

        Only one validator is sent. Stored values are copied verbatim,
        quotes included.

        Examples:
        --------
        >>> request = Request("GET", "/theuri", headers=Headers([("Accept-Encoding", "gzip")]))
        >>> entry = CacheEntry(StatusLine(200, "OK"), Headers({"ETag": '"abc"'}))
        >>> builder.build_conditional_request(request, entry).headers.multi_items()
        [('Accept-Encoding', 'gzip'), ('If-None-Match', '"abc"')]
        """
        _ensure_present(original=original, entry=entry)

        conditional = original.copy()

        etag = entry.first_header("ETag")
        last_modified = entry.first_header("Last-Modified")

        if etag is not None:
            conditional.headers.add("If-None-Match", etag.value)
            logger.debug("Validating with If-None-Match")
        elif last_modified is not None:
            conditional.headers.add("If-Modified-Since", last_modified.value)
            logger.debug("Validating with If-Modified-Since")
        else:
            logger.debug("Cache entry has no validators, request stays unconditional")

        if self.requires_end_to_end_revalidation(entry):
            conditional.headers.add("Cache-Control", self._options.end_to_end_cache_control)
            logger.debug("Forcing end-to-end revalidation")

        return conditional

    def build_conditional_request_from_variants(
        self,
        original: Request,
        variants: Iterable[CacheEntry],
    ) -> Request:
        """
        Builds one request that validates several stored variants at once.

        RFC 9110 Section 13.1.2: If-None-Match
        https://www.rfc-editor.org/rfc/rfc9110#section-13.1.2

        The ETags of every variant are listed in a single ``If-None-Match``
        header, so the origin can point at the matching variant in its 304
        response. Variants without an ETag are skipped.
        """
        _ensure_present(original=original, variants=variants)

        etags: List[str] = []
        for variant in variants:
            etag = variant.etag
            if etag is not None:
                etags.append(etag)

        conditional = original.copy()
        if etags:
            conditional.headers["If-None-Match"] = ", ".join(etags)

        logger.debug(f"Validating {len(etags)} variants with If-None-Match")

        return conditional

    def build_unconditional_request(self, original: Request, entry: CacheEntry) -> Request:
        """
        Builds a request that bypasses every cache and carries no preconditions.

        Used when a revalidation answer cannot be applied to the stored entry
        (for example a 304 older than the entry) and the full response has to
        be fetched again.
        """
        _ensure_present(original=original, entry=entry)

        unconditional = original.copy()
        for name in CONDITIONAL_HEADERS:
            unconditional.headers.remove(name)

        unconditional.headers.add("Cache-Control", "no-cache")
        unconditional.headers.add("Pragma", "no-cache")
        logger.debug("Building unconditional request")

        return unconditional


_default_builder = ConditionalRequestBuilder()


def build_conditional_request(original: Request, entry: CacheEntry) -> Request:
    return _default_builder.build_conditional_request(original, entry)


def build_conditional_request_from_variants(original: Request, variants: Iterable[CacheEntry]) -> Request:
    return _default_builder.build_conditional_request_from_variants(original, variants)


def build_unconditional_request(original: Request, entry: CacheEntry) -> Request:
    return _default_builder.build_unconditional_request(original, entry)
