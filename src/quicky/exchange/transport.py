"""HTTP transport used by the exchange client.

The client depends only on ``HttpTransport``; tests inject a fake and the
CLI injects ``UrllibTransport``. Uses urllib.request (stdlib) since two
plain JSON round trips need no HTTP library.
"""

import http.client
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass

from quicky.exceptions import CreatingHttpRequestError, TransportError
from quicky.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "User-Agent": "quicky/1.0",
}


@dataclass(frozen=True)
class HttpResponse:
    """Status code and raw body of an HTTP reply."""

    status: int
    body: bytes


class HttpTransport(ABC):
    """Abstract blocking HTTP transport."""

    @abstractmethod
    def get(self, url: str, headers: dict[str, str] | None = None) -> HttpResponse:
        """Issue a GET request and return the reply."""
        ...

    @abstractmethod
    def post(
        self, url: str, body: bytes, headers: dict[str, str] | None = None
    ) -> HttpResponse:
        """Issue a POST request with ``body`` and return the reply."""
        ...


class UrllibTransport(HttpTransport):
    """Transport built on urllib.request with a bounded wait per request.

    Args:
        timeout: Seconds to wait for connect and each read. No retries.
    """

    def __init__(self, timeout: float = 10.0) -> None:
        self._timeout = timeout

    def get(self, url: str, headers: dict[str, str] | None = None) -> HttpResponse:
        return self._send(self._build_request(url, "GET", None, headers))

    def post(
        self, url: str, body: bytes, headers: dict[str, str] | None = None
    ) -> HttpResponse:
        return self._send(self._build_request(url, "POST", body, headers))

    def _build_request(
        self,
        url: str,
        method: str,
        body: bytes | None,
        headers: dict[str, str] | None,
    ) -> urllib.request.Request:
        try:
            return urllib.request.Request(
                url,
                data=body,
                headers={**DEFAULT_HEADERS, **(headers or {})},
                method=method,
            )
        except ValueError as e:
            raise CreatingHttpRequestError(f"cannot build {method} request for {url}: {e}") from e

    def _send(self, request: urllib.request.Request) -> HttpResponse:
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as resp:
                return HttpResponse(status=resp.status, body=resp.read())
        except urllib.error.HTTPError as e:
            # Error statuses still carry the exchange's JSON envelope
            body = e.read()
            e.close()
            logger.debug("http_error_status", method=request.get_method(), status=e.code)
            return HttpResponse(status=e.code, body=body)
        except (OSError, http.client.HTTPException) as e:  # URLError, timeouts, truncated reads
            logger.warning(
                "http_transport_error",
                method=request.get_method(),
                host=request.host,
                error=str(e),
            )
            raise TransportError(str(e)) from e
