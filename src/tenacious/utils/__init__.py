"""Utility functions and helpers for tenacious."""

from tenacious.utils.backoff import Backoff
from tenacious.utils.http_client import (
    CallContext,
    CanceledError,
    ConstructionError,
    DecodeError,
    HTTPClientError,
    PreparedRequest,
    RateLimitedError,
    RequestExecutor,
    RetryableHTTPError,
    RetryableServerFault,
    RetryLimitExceeded,
    RetryPolicy,
    TransportError,
    classify_response,
    create_http_client,
    parse_retry_after,
)
from tenacious.utils.pagination import collect_pages, next_page_body

__all__ = [
    "Backoff",
    "CallContext",
    "CanceledError",
    "ConstructionError",
    "DecodeError",
    "HTTPClientError",
    "PreparedRequest",
    "RateLimitedError",
    "RequestExecutor",
    "RetryLimitExceeded",
    "RetryPolicy",
    "RetryableHTTPError",
    "RetryableServerFault",
    "TransportError",
    "classify_response",
    "collect_pages",
    "create_http_client",
    "next_page_body",
    "parse_retry_after",
]
