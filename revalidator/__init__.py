from revalidator._core import (
    HTTP_1_0 as HTTP_1_0,
    HTTP_1_1 as HTTP_1_1,
    BuilderOptions as BuilderOptions,
    CacheControl as CacheControl,
    CacheControlDirective as CacheControlDirective,
    CacheEntry as CacheEntry,
    ConditionalRequestBuilder as ConditionalRequestBuilder,
    Header as Header,
    Headers as Headers,
    HttpVersion as HttpVersion,
    Request as Request,
    StatusLine as StatusLine,
    build_conditional_request as build_conditional_request,
    build_conditional_request_from_variants as build_conditional_request_from_variants,
    build_unconditional_request as build_unconditional_request,
    parse_cache_control as parse_cache_control,
    parse_directives as parse_directives,
)
from revalidator._exceptions import (
    InvalidArgumentError as InvalidArgumentError,
    RevalidatorError as RevalidatorError,
)

__all__ = (
    # Builder
    "BuilderOptions",
    "ConditionalRequestBuilder",
    "build_conditional_request",
    "build_conditional_request_from_variants",
    "build_unconditional_request",
    # Models
    "HTTP_1_0",
    "HTTP_1_1",
    "HttpVersion",
    "StatusLine",
    "Request",
    "CacheEntry",
    # Headers
    "Header",
    "Headers",
    "CacheControl",
    "CacheControlDirective",
    "parse_cache_control",
    "parse_directives",
    # Errors
    "RevalidatorError",
    "InvalidArgumentError",
)
