"""
Blocking HTTP client for fetching table resources.

**Conceptual**: This module is a thin wrapper around `requests`. It performs
one GET per resource, buffers the whole body and returns it as bytes. It knows
nothing about CSV; decoding happens in the codec.

**Error handling**: Every transport failure is surfaced as a FetchError
subclass, chaining the original `requests` exception:
  - FetchTimeoutError: connect or read timeout
  - FetchConnectionError: DNS, refused connection, TLS failure
  - FetchHTTPStatusError: any non-2xx final status
  - FetchError: any other `requests` failure

There is no retry; callers decide whether to try again.
"""

import logging
from typing import Optional

import requests

from camtrap_dp.config.settings import HttpSettings


logger = logging.getLogger(__name__)


class FetchError(Exception):
    """
    Base exception for failures fetching a resource over HTTP.

    Attributes:
        url: URL that was requested.
    """

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class FetchTimeoutError(FetchError):
    """Raised when connecting or reading exceeded the configured timeout."""
    pass


class FetchConnectionError(FetchError):
    """
    Raised when no connection could be made.

    Covers DNS resolution failures, refused connections and TLS errors.
    """
    pass


class FetchHTTPStatusError(FetchError):
    """
    Raised when the server answered with a non-2xx status.

    Attributes:
        status_code: HTTP status of the final response (after redirects).
    """

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, url=url)
        self.status_code = status_code


class HttpClient:
    """
    Thin HTTP client returning whole response bodies.

    **Responsibilities**:
      - Validate the URL scheme (http/https)
      - Send a GET with the configured timeout and User-Agent
      - Map transport failures and non-2xx statuses to FetchError subclasses
      - Return the body as bytes

    **Example usage**:
        >>> with HttpClient() as client:
        ...     body = client.fetch_bytes(
        ...         "https://raw.githubusercontent.com/tdwg/camtrap-dp/1.0/example/deployments.csv"
        ...     )
        >>> body[:12]
        b'deploymentID'
    """

    def __init__(self, settings: Optional[HttpSettings] = None):
        """
        Initialize the client.

        Args:
            settings: HTTP configuration (timeout, user agent). Defaults to
                      HttpSettings() when omitted.
        """
        self.settings = settings if settings is not None else HttpSettings()
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": self.settings.user_agent,
            "Accept": "text/csv, text/plain;q=0.9, */*;q=0.1",
        })

    def fetch_bytes(self, url: str) -> bytes:
        """
        GET a resource and return its full body.

        Args:
            url: http:// or https:// URL of the resource.

        Returns:
            Response body as bytes.

        Raises:
            ValueError: If the URL is empty or not http(s).
            FetchTimeoutError: If the request timed out.
            FetchConnectionError: If no connection could be made.
            FetchHTTPStatusError: If the final status is not 2xx.
            FetchError: For any other transport failure.
        """
        if not url or not url.strip():
            raise ValueError("URL cannot be empty")
        url = url.strip()
        if not url.lower().startswith(("http://", "https://")):
            raise ValueError(f"Only http:// and https:// URLs are supported, got: {url}")

        logger.debug("GET %s (timeout %ss)", url, self.settings.timeout_seconds)

        try:
            response = self.session.get(url, timeout=self.settings.timeout_seconds)
        except requests.Timeout as e:
            raise FetchTimeoutError(
                f"Request to {url} timed out after {self.settings.timeout_seconds}s. "
                f"Check network connection or increase CAMTRAP_HTTP_TIMEOUT_SECONDS.",
                url=url,
            ) from e
        except requests.ConnectionError as e:
            raise FetchConnectionError(
                f"Failed to connect to {url}. Check network connection and URL. Error: {e}",
                url=url,
            ) from e
        except requests.RequestException as e:
            raise FetchError(f"HTTP request to {url} failed: {e}", url=url) from e

        if not 200 <= response.status_code < 300:
            raise FetchHTTPStatusError(
                f"GET {url} returned status {response.status_code}. "
                f"Response: {response.text[:200]}",
                url=url,
                status_code=response.status_code,
            )

        body = response.content
        logger.info("Fetched %d bytes from %s", len(body), url)
        return body

    def close(self):
        """Close the HTTP session and release its connections."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
