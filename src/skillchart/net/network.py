"""HTTP helpers with retry logic and exponential backoff.

Used for the two raw HTTP calls SkillChart makes outside the Google client
libraries: the spreadsheet PDF export and the webhook POST.

- Retries on rate limiting (429), server errors (5xx) and connection errors
- Jitter to spread out retries
- Client errors (4xx) fail immediately
- The last failure is raised, nothing is swallowed
"""

import random
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests

USER_AGENT = "SkillChart/1.0"


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 3
    base_delay: float = 0.5  # seconds
    max_delay: float = 30.0  # seconds
    exponential_base: float = 2.0
    jitter: bool = True
    retry_on_429: bool = True
    retry_on_5xx: bool = True
    timeout: int = 60  # seconds

    @classmethod
    def from_settings(cls, settings) -> "RetryConfig":
        return cls(
            max_retries=settings.max_retry_attempts,
            base_delay=settings.retry_base_delay,
            timeout=settings.http_timeout,
        )

    def get_delay(self, attempt: int) -> float:
        """Calculate delay for given attempt with exponential backoff and jitter."""
        delay = min(self.base_delay * (self.exponential_base**attempt), self.max_delay)

        if self.jitter:
            delay += random.uniform(0, delay * 0.5)

        return delay

    def should_retry(self, status_code: int) -> bool:
        if status_code == 429:
            return self.retry_on_429
        return 500 <= status_code < 600 and self.retry_on_5xx


DEFAULT_CONFIG = RetryConfig()


def request_with_retry(
    session: requests.Session,
    method: str,
    url: str,
    *,
    config: Optional[RetryConfig] = None,
    **kwargs: Any,
) -> requests.Response:
    """Send a request, retrying transient failures.

    Args:
        session: Session to send with (an AuthorizedSession for Google URLs)
        method: HTTP method
        url: URL to request
        config: Retry configuration (uses default if None)
        **kwargs: Passed through to ``session.request``

    Returns:
        The successful response

    Raises:
        requests.HTTPError: On a 4xx response, or when retries are exhausted
        requests.ConnectionError: If the network keeps failing
        requests.Timeout: If the request keeps timing out
    """
    if config is None:
        config = DEFAULT_CONFIG

    headers = {"User-Agent": USER_AGENT}
    headers.update(kwargs.pop("headers", None) or {})

    for attempt in range(config.max_retries):
        last_attempt = attempt == config.max_retries - 1
        try:
            response = session.request(
                method, url, headers=headers, timeout=config.timeout, **kwargs
            )
        except (requests.ConnectionError, requests.Timeout):
            if last_attempt:
                raise
            time.sleep(config.get_delay(attempt))
            continue

        if config.should_retry(response.status_code) and not last_attempt:
            time.sleep(config.get_delay(attempt))
            continue

        response.raise_for_status()
        return response

    raise RuntimeError(f"Failed to fetch {url} after {config.max_retries} attempts")


def fetch_bytes(
    session: requests.Session,
    url: str,
    *,
    headers: Optional[dict[str, str]] = None,
    config: Optional[RetryConfig] = None,
) -> bytes:
    """GET a URL and return the body."""
    response = request_with_retry(
        session, "GET", url, headers=headers, config=config
    )
    return response.content


def post_json(
    session: requests.Session,
    url: str,
    payload: Any,
    *,
    config: Optional[RetryConfig] = None,
) -> requests.Response:
    """POST a JSON payload."""
    return request_with_retry(session, "POST", url, json=payload, config=config)
