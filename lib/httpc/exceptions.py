"""
httpc Exceptions

This module contains the exception classes raised by the request builder and
its terminal operations.
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class HttpcError(Exception):
    """Base exception class for all httpc errors.

    All other exceptions in this module inherit from this base class.

    Attributes:
        message: Human-readable error message
        response: Response the error relates to (if any)
    """

    def __init__(self, message: str, response: Optional[httpx.Response] = None) -> None:
        super().__init__(message)
        self.message = message
        self.response = response
        logger.debug(f"{type(self).__name__}: {message}")

    def __str__(self) -> str:
        return self.message


class ConstructionError(HttpcError):
    """Raised when the wire request cannot be built.

    This typically occurs when the URL is malformed.
    """


class FileIOError(HttpcError):
    """Raised when a local file cannot be opened, read or written.

    This occurs when a multipart file part points to a missing or unreadable
    path, or when the response body cannot be saved.
    """


class TransportError(HttpcError):
    """Raised when the transport fails to dispatch the request.

    This includes connection failures, timeouts, DNS resolution errors,
    unsupported URL schemes and other network-level issues.
    """


class HTTPStatusError(HttpcError):
    """Raised when the response status code is anything other than 200."""


class DecodeError(HttpcError):
    """Raised when the response body cannot be read or decompressed."""
