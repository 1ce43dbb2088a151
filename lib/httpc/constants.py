"""
httpc Constants

This module contains all constants and enums used by the request builder.
"""

from enum import StrEnum
from typing import Any, Final, Optional

VERSION: Final[str] = "0.1.0"

# Client Configuration
DEFAULT_TIMEOUT: Final[float] = 30.0
DEFAULT_FOLLOW_REDIRECTS: Final[bool] = True
DEFAULT_USER_AGENT: Final[str] = f"httpc/{VERSION}"

# HTTP Methods
HTTP_GET: Final[str] = "GET"
HTTP_POST: Final[str] = "POST"

# Only this status counts as success for end/endBytes/endFile
HTTP_STATUS_OK: Final[int] = 200

# Headers
HEADER_CONTENT_TYPE: Final[str] = "Content-Type"
HEADER_CONTENT_ENCODING: Final[str] = "Content-Encoding"
HEADER_COOKIE: Final[str] = "Cookie"

# Content Types
CONTENT_TYPE_FORM_URLENCODED: Final[str] = "application/x-www-form-urlencoded; charset=UTF-8"
CONTENT_TYPE_MULTIPART: Final[str] = "multipart/form-data"
CONTENT_TYPE_OCTET_STREAM: Final[str] = "application/octet-stream"

# Content-Encoding values
ENCODING_GZIP: Final[str] = "gzip"
ENCODING_BROTLI: Final[str] = "br"

# File sink
NOT_WRITTEN_MESSAGE: Final[str] = "Not written"
SAVED_FILE_MODE: Final[int] = 0o777

# Diagnostics
DIAGNOSTIC_LOGGER_NAME: Final[str] = "lib.httpc.diagnostics"
DIAGNOSTIC_BORDER: Final[str] = "-" * 67


class EncodingMode(StrEnum):
    """Request body encoding strategy"""

    URL_ENCODED = "url"
    JSON = "json"
    MULTIPART = "file"

    @classmethod
    def fromSelector(cls, selector: Optional[Any] = None) -> "EncodingMode":
        """Map a mode selector to an encoding mode.

        ``None``, ``"url"`` and ``"url-encoded"`` select URL_ENCODED, ``"json"``
        selects JSON and anything else selects MULTIPART.
        """
        if isinstance(selector, EncodingMode):
            return selector
        if selector is None or selector in ("url", "url-encoded"):
            return cls.URL_ENCODED
        if selector == "json":
            return cls.JSON
        return cls.MULTIPART
