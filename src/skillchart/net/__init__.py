"""Network utilities for HTTP requests with retry logic."""

from .network import (
    fetch_bytes,
    post_json,
    request_with_retry,
    RetryConfig,
)

__all__ = [
    "fetch_bytes",
    "post_json",
    "request_with_retry",
    "RetryConfig",
]
