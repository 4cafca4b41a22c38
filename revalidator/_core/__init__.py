from revalidator._core._builder import (
    BuilderOptions as BuilderOptions,
    ConditionalRequestBuilder as ConditionalRequestBuilder,
    build_conditional_request as build_conditional_request,
    build_conditional_request_from_variants as build_conditional_request_from_variants,
    build_unconditional_request as build_unconditional_request,
)
from revalidator._core._headers import (
    CacheControl as CacheControl,
    CacheControlDirective as CacheControlDirective,
    Header as Header,
    Headers as Headers,
    parse_cache_control as parse_cache_control,
    parse_directives as parse_directives,
)
from revalidator._core.models import (
    HTTP_1_0 as HTTP_1_0,
    HTTP_1_1 as HTTP_1_1,
    CacheEntry as CacheEntry,
    HttpVersion as HttpVersion,
    Request as Request,
    StatusLine as StatusLine,
)

__all__ = (
    ## Builder
    "BuilderOptions",
    "ConditionalRequestBuilder",
    "build_conditional_request",
    "build_conditional_request_from_variants",
    "build_unconditional_request",
    ## Headers
    "Header",
    "Headers",
    "CacheControl",
    "CacheControlDirective",
    "parse_cache_control",
    "parse_directives",
    ## Models
    "HTTP_1_0",
    "HTTP_1_1",
    "HttpVersion",
    "StatusLine",
    "Request",
    "CacheEntry",
)
