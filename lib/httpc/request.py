"""
httpc Request

This module provides the Request class: a fluent, single-shot request builder.
A request accumulates its parameters through chained setters, is dispatched
once with ``send()`` and is consumed once by ``end()``, ``endBytes()`` or
``endFile()``.

Example:
    >>> from lib.httpc import HttpClient
    >>>
    >>> with HttpClient() as client:
    ...     response, body = (
    ...         client.newRequest()
    ...         .setMethod("post")
    ...         .setUrl("https://example.com/login")
    ...         .setData("user", "bob")
    ...         .send()
    ...         .end()
    ...     )
"""

import logging
import os
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from urllib.parse import urlencode

import httpx

from .client import HttpClient
from .constants import (
    CONTENT_TYPE_FORM_URLENCODED,
    CONTENT_TYPE_MULTIPART,
    CONTENT_TYPE_OCTET_STREAM,
    HEADER_CONTENT_TYPE,
    HEADER_COOKIE,
    HTTP_GET,
    HTTP_POST,
    HTTP_STATUS_OK,
    NOT_WRITTEN_MESSAGE,
    EncodingMode,
)
from .decoder import decodeBody
from .diagnostics import DiagnosticLogger, DiagnosticRecord, logDiagnostic
from .exceptions import FileIOError, HttpcError, HTTPStatusError
from .models import Cookie, FilePart
from .sink import deriveFileName, saveBody

logger = logging.getLogger(__name__)


class Request:
    """Single HTTP request: builder state, dispatcher and response consumer.

    Setters never fail. Failures while building or sending the request are
    stored in ``error`` instead of being raised, so that ``send()`` keeps the
    chain going; once set, the error is sticky and every later operation on
    this instance short-circuits with it.

    Attributes:
        client: Transport collaborator the request is sent through
        method: Uppercased HTTP method (default: GET)
        url: Target URL, validated only when the request is sent
        headers: Header name to value, last write wins
        cookies: Cookies rendered into the Cookie header
        data: Form fields for URL-encoded bodies
        jsonData: Raw JSON text for JSON bodies
        fileParts: Multipart entries, at most one per file/plain category
        verbose: Emit a DiagnosticRecord before the request is sent
        error: Terminal error, if any
        request: Wire request after ``send()``
        response: Wire response after a successful ``send()``
    """

    def __init__(self, client: HttpClient, diagnosticLogger: Optional[DiagnosticLogger] = None) -> None:
        self.client = client
        self.diagnosticLogger: DiagnosticLogger = diagnosticLogger or logDiagnostic

        self.method: str = HTTP_GET
        self.url: str = ""
        self.headers: Dict[str, str] = {}
        self.cookies: List[Cookie] = []
        self.data: Dict[str, str] = {}
        self.jsonData: str = ""
        self.fileParts: List[FilePart] = []
        self.verbose: bool = False

        self.error: Optional[HttpcError] = None
        self.request: Optional[httpx.Request] = None
        self.response: Optional[httpx.Response] = None
        self._consumed = False

    # Builder

    def setMethod(self, name: str) -> "Request":
        self.method = name.upper()
        return self

    def setUrl(self, url: str) -> "Request":
        self.url = url
        return self

    def setHeader(self, name: str, value: str) -> "Request":
        self.headers[name] = value
        return self

    def setCookies(self, cookies: Iterable[Union[Cookie, Tuple[str, str]]]) -> "Request":
        """Replace the cookie list. Accepts Cookie objects or ``(name, value)`` pairs."""
        self.cookies = [c if isinstance(c, Cookie) else Cookie(*c) for c in cookies]
        return self

    def setVerbose(self, verbose: bool) -> "Request":
        """Emit a diagnostic record for the request on ``send()``.

        The default diagnostic logger writes at INFO level to the
        ``lib.httpc.diagnostics`` logger, which has no handler until
        ``initLogging()`` (or the caller's own logging setup) attaches one.
        """
        self.verbose = verbose
        return self

    def setData(self, name: str, value: str) -> "Request":
        self.data[name] = value
        return self

    def setJsonData(self, data: str) -> "Request":
        self.jsonData = data
        return self

    def setFileData(self, name: str, value: str, isFile: bool) -> "Request":
        """Set the multipart entry for the file (``isFile``) or plain category.

        Each category holds a single entry: a later call with the same
        ``isFile`` flag replaces the earlier entry instead of adding to it.
        """
        self.fileParts = [part for part in self.fileParts if part.isFile != isFile]
        self.fileParts.append(FilePart(name, value, isFile))
        return self

    # Dispatch

    def send(self, mode: Optional[Union[EncodingMode, str]] = None) -> "Request":
        """Build the wire request for ``mode`` and send it through the client.

        Args:
            mode: Body encoding; None or "url" for URL-encoded form data,
                "json" for the raw JSON text, anything else for multipart

        Returns:
            Self. Failures are stored in ``error`` rather than raised.

        Raises:
            HttpcError: If the request has already been dispatched
        """
        if self.error is not None:
            logger.debug(f"Not sending {self.method} {self.url}: terminal error already set")
            return self
        if self.response is not None:
            raise HttpcError("Request has already been sent")

        encodingMode = EncodingMode.fromSelector(mode)
        try:
            self.request = self._buildRequest(encodingMode)
            self._applyHeaders(self.request)
            self._applyCookies(self.request)

            if self.verbose:
                self.diagnosticLogger(self._diagnosticRecord(self.request, encodingMode))

            self.response = self.client.do(self.request)
        except HttpcError as e:
            logger.warning(f"{self.method} {self.url} failed: {type(e).__name__}#{e}")
            self.error = e

        return self

    def _buildRequest(self, mode: EncodingMode) -> httpx.Request:
        match mode:
            case EncodingMode.URL_ENCODED:
                body = urlencode(sorted(self.data.items()))
                request = self.client.buildRequest(self.method, self.url, content=body.encode() or None)
                if self.method == HTTP_POST and HEADER_CONTENT_TYPE not in request.headers:
                    request.headers[HEADER_CONTENT_TYPE] = CONTENT_TYPE_FORM_URLENCODED
                return request
            case EncodingMode.JSON:
                return self.client.buildRequest(self.method, self.url, content=self.jsonData.encode() or None)
            case _:
                return self._buildMultipartRequest()

    def _buildMultipartRequest(self) -> httpx.Request:
        files: List[Tuple[str, Tuple[Optional[str], bytes, Optional[str]]]] = []
        for part in self.fileParts:
            if part.isFile:
                try:
                    with open(part.value, "rb") as f:
                        content = f.read()
                except OSError as e:
                    raise FileIOError(str(e)) from e
                files.append((part.fieldName, (os.path.basename(part.value), content, CONTENT_TYPE_OCTET_STREAM)))
            else:
                files.append((part.fieldName, (None, part.value.encode(), None)))

        # httpx picks the boundary up from the Content-Type header
        boundary = os.urandom(16).hex()
        contentType = f"{CONTENT_TYPE_MULTIPART}; boundary={boundary}"
        headers = {HEADER_CONTENT_TYPE: contentType}

        if not files:
            closing = f"--{boundary}--\r\n".encode()
            return self.client.buildRequest(self.method, self.url, headers=headers, content=closing)
        return self.client.buildRequest(self.method, self.url, headers=headers, files=files)

    def _applyHeaders(self, request: httpx.Request) -> None:
        for name, value in self.headers.items():
            request.headers[name] = value

    def _applyCookies(self, request: httpx.Request) -> None:
        for cookie in self.cookies:
            existing = request.headers.get(HEADER_COOKIE, "")
            request.headers[HEADER_COOKIE] = f"{existing}; {cookie.render()}" if existing else cookie.render()

    def _diagnosticRecord(self, request: httpx.Request, mode: EncodingMode) -> DiagnosticRecord:
        body: Any
        match mode:
            case EncodingMode.URL_ENCODED:
                body = dict(self.data)
            case EncodingMode.JSON:
                body = self.jsonData
            case _:
                body = {
                    "file": {p.fieldName: p.value for p in self.fileParts if p.isFile},
                    "plain": {p.fieldName: p.value for p in self.fileParts if not p.isFile},
                }

        cookieHeader = request.headers.get(HEADER_COOKIE, "")
        return DiagnosticRecord(
            method=self.method,
            url=self.url,
            headers=dict(request.headers),
            cookies=[c.strip() for c in cookieHeader.split(";") if c.strip()],
            mode=mode,
            body=body,
        )

    # Terminal operations

    def _takeResponse(self) -> httpx.Response:
        """Return the response for a terminal operation, at most once."""
        if self.error is not None:
            raise type(self.error)(self.error.message) from self.error
        if self.response is None:
            raise HttpcError("Request has not been sent")
        if self._consumed:
            raise HttpcError("Response body has already been consumed")
        self._consumed = True
        return self.response

    def endBytes(self) -> Tuple[httpx.Response, bytes]:
        """Read and decode the whole response body.

        Returns:
            Response and decoded body bytes

        Raises:
            HTTPStatusError: If the status is not 200; ``response`` is set on the error
            DecodeError: If the body cannot be read or decompressed
            HttpcError: Terminal error from ``send()``, re-raised with its message
        """
        response = self._takeResponse()
        if response.status_code != HTTP_STATUS_OK:
            response.close()
            raise HTTPStatusError(f"{response.status_code} {response.reason_phrase}", response)

        return response, decodeBody(response)

    def end(self) -> Tuple[httpx.Response, str]:
        """Same as ``endBytes()`` but returns the body as text."""
        response, data = self.endBytes()
        return response, data.decode(response.charset_encoding or "utf-8", errors="replace")

    def endFile(self, savePath: str, saveFileName: str = "") -> httpx.Response:
        """Save the raw response body to ``savePath + saveFileName``.

        No separator is inserted between the two parts. If ``saveFileName`` is
        empty, the last path segment of the request URL is used.

        Raises:
            HTTPStatusError: "Not written" if the status is not 200
            FileIOError: If the file cannot be written
            HttpcError: Terminal error from ``send()``, re-raised with its message
        """
        response = self._takeResponse()
        if response.status_code != HTTP_STATUS_OK:
            response.close()
            raise HTTPStatusError(NOT_WRITTEN_MESSAGE)

        if not saveFileName and self.request is not None:
            saveFileName = deriveFileName(str(self.request.url))

        saveBody(response, savePath + saveFileName)
        return response
