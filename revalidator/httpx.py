try:
    import httpx  # noqa: F401
except ImportError as e:
    raise ImportError(
        "httpx is required to use revalidator.httpx module. "
        "Please install revalidator with the 'httpx' extra, "
        "e.g., 'pip install revalidator[httpx]'."
    ) from e


from ._integrations._httpx import (
    build_conditional_httpx_request as build_conditional_httpx_request,
    entry_from_httpx_response as entry_from_httpx_response,
    httpx_to_internal as httpx_to_internal,
    internal_to_httpx as internal_to_httpx,
)

__all__ = (
    "build_conditional_httpx_request",
    "entry_from_httpx_response",
    "httpx_to_internal",
    "internal_to_httpx",
)
