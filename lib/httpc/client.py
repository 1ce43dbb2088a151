"""
httpc HTTP Client

This module provides the HttpClient class: the transport collaborator every
Request dispatches through. It owns one ``httpx.Client`` (connection pool,
TLS, timeouts, redirects) and exposes a single ``do(request)`` operation.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx

from .constants import (
    DEFAULT_FOLLOW_REDIRECTS,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
)
from .exceptions import ConstructionError, TransportError

if TYPE_CHECKING:
    from .diagnostics import DiagnosticLogger
    from .request import Request

logger = logging.getLogger(__name__)


class HttpClient:
    """Transport collaborator shared by any number of requests.

    The client supports context manager usage for proper resource cleanup:

    Example:
        >>> from lib.httpc import HttpClient
        >>>
        >>> with HttpClient(timeout=10) as client:
        ...     response, body = client.newRequest().setUrl("https://example.com/").send().end()

    Attributes:
        timeout: Request timeout in seconds
        followRedirects: Whether redirects are followed by the transport
        verbose: Default verbose flag for requests created by ``newRequest``
    """

    __slots__ = (
        "timeout",
        "followRedirects",
        "verbose",
        "_httpClient",
    )

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        followRedirects: bool = DEFAULT_FOLLOW_REDIRECTS,
        headers: Optional[Dict[str, str]] = None,
        verify: bool = True,
        verbose: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
        httpClient: Optional[httpx.Client] = None,
    ) -> None:
        """Initialize the client.

        Args:
            timeout: Request timeout in seconds (default: 30)
            followRedirects: Follow redirects (default: True)
            headers: Headers added to every request before the request's own
            verify: Verify TLS certificates (default: True)
            verbose: Default verbose flag for new requests
            transport: Custom httpx transport, e.g. ``httpx.MockTransport`` in tests
            httpClient: Ready ``httpx.Client`` to use instead of creating one
        """
        self.timeout = timeout
        self.followRedirects = followRedirects
        self.verbose = verbose

        if httpClient is None:
            clientHeaders = {"User-Agent": DEFAULT_USER_AGENT}
            clientHeaders.update(headers or {})
            httpClient = httpx.Client(
                timeout=httpx.Timeout(timeout),
                follow_redirects=followRedirects,
                headers=clientHeaders,
                verify=verify,
                transport=transport,
            )
        self._httpClient = httpClient

        logger.debug(f"HttpClient initialized, timeout: {timeout}, followRedirects: {followRedirects}")

    @classmethod
    def fromConfig(cls, config: Dict[str, Any], **kwargs: Any) -> "HttpClient":
        """Create a client from the ``[http]`` configuration section.

        Recognized keys: ``timeout``, ``follow-redirects``, ``verify``,
        ``user-agent``, ``headers`` and ``verbose``. Keyword arguments
        override the configuration.
        """
        headers: Dict[str, str] = {str(k): str(v) for k, v in config.get("headers", {}).items()}
        if "user-agent" in config:
            headers["User-Agent"] = str(config["user-agent"])

        params: Dict[str, Any] = {
            "timeout": float(config.get("timeout", DEFAULT_TIMEOUT)),
            "followRedirects": bool(config.get("follow-redirects", DEFAULT_FOLLOW_REDIRECTS)),
            "verify": bool(config.get("verify", True)),
            "verbose": bool(config.get("verbose", False)),
            "headers": headers,
        }
        params.update(kwargs)
        return cls(**params)

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying httpx client and its connection pool."""
        if not self._httpClient.is_closed:
            self._httpClient.close()
            logger.debug("HTTP client closed")

    def newRequest(self, diagnosticLogger: Optional["DiagnosticLogger"] = None) -> "Request":
        """Create a new request bound to this client."""
        from .request import Request

        return Request(self, diagnosticLogger=diagnosticLogger).setVerbose(self.verbose)

    def buildRequest(self, method: str, url: str, **kwargs: Any) -> httpx.Request:
        """Build a wire request with the client's default headers merged in.

        Raises:
            ConstructionError: If httpx rejects the method, URL or body
        """
        try:
            return self._httpClient.build_request(method, url, **kwargs)
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise ConstructionError(str(e)) from e

    def do(self, request: httpx.Request) -> httpx.Response:
        """Send ``request`` and return the response with its body unread.

        Raises:
            TransportError: If the request could not be delivered
        """
        logger.debug(f"Sending {request.method} request to {request.url}")
        try:
            response = self._httpClient.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.warning(f"Transport error: {type(e).__name__}#{e}")
            raise TransportError(str(e)) from e

        logger.debug(f"Got {response.status_code} for {request.method} {request.url}")
        return response
