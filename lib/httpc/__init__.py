"""
httpc: fluent single-shot HTTP request builder

Builds one HTTP request through chained setters, dispatches it through an
httpx-backed transport and decodes the response body (gzip, brotli or identity).

Basic usage:
    >>> from lib.httpc import HttpClient
    >>>
    >>> with HttpClient() as client:
    ...     response, body = client.newRequest().setUrl("https://example.com/").send().end()
    ...     print(body)

Verbose requests log at INFO on the ``lib.httpc.diagnostics`` logger. Call
``lib.logging_utils.initLogging()`` or attach a handler yourself to see them.
"""

from .client import HttpClient
from .constants import (
    CONTENT_TYPE_FORM_URLENCODED,
    NOT_WRITTEN_MESSAGE,
    VERSION,
    EncodingMode,
)
from .diagnostics import DiagnosticRecord, logDiagnostic
from .exceptions import (
    ConstructionError,
    DecodeError,
    FileIOError,
    HttpcError,
    HTTPStatusError,
    TransportError,
)
from .models import Cookie, FilePart
from .request import Request

# Public API
__all__ = [
    # Client and request
    "HttpClient",
    "Request",
    # Models
    "Cookie",
    "FilePart",
    "DiagnosticRecord",
    "logDiagnostic",
    # Constants
    "VERSION",
    "CONTENT_TYPE_FORM_URLENCODED",
    "NOT_WRITTEN_MESSAGE",
    # Enums
    "EncodingMode",
    # Exceptions
    "HttpcError",
    "ConstructionError",
    "FileIOError",
    "TransportError",
    "HTTPStatusError",
    "DecodeError",
]
