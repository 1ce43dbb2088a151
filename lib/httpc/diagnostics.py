"""
Verbose-mode diagnostics for httpc requests.

A request in verbose mode hands a DiagnosticRecord to its diagnostic logger
right before the transport is called. The default logger renders the record
as a bordered block on the ``lib.httpc.diagnostics`` logger.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from .constants import DIAGNOSTIC_BORDER, DIAGNOSTIC_LOGGER_NAME, EncodingMode

logger = logging.getLogger(DIAGNOSTIC_LOGGER_NAME)

DiagnosticLogger = Callable[["DiagnosticRecord"], None]


@dataclass
class DiagnosticRecord:
    """Snapshot of a built request, dood!

    Attributes:
        method: HTTP method of the wire request
        url: Target URL as given to the builder
        headers: Headers of the wire request
        cookies: Cookies parsed back from the wire ``Cookie`` header
        mode: Body encoding mode
        body: Mode-specific body representation: form mapping for URL_ENCODED,
            raw text for JSON, ``{"file": {...}, "plain": {...}}`` for MULTIPART
    """

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    cookies: List[str] = field(default_factory=list)
    mode: EncodingMode = EncodingMode.URL_ENCODED
    body: Any = None

    def format(self) -> str:
        """Render the record as a bordered multi-line block."""
        return "\n".join(
            [
                DIAGNOSTIC_BORDER,
                f"Request: {self.method} {self.url}",
                f"Header: {self.headers}",
                f"Cookies: {self.cookies}",
                f"Body: {self.body}",
                DIAGNOSTIC_BORDER,
            ]
        )


def logDiagnostic(record: DiagnosticRecord) -> None:
    """Default diagnostic logger: write the bordered block at INFO level."""
    logger.info(record.format())
