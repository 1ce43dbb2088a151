"""
Unit tests for httpc HttpClient

Covers client construction (directly and from configuration), request
creation, request building and the transport call.
"""

from unittest.mock import MagicMock

import httpx
import pytest

from lib.httpc.client import HttpClient
from lib.httpc.constants import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from lib.httpc.diagnostics import logDiagnostic
from lib.httpc.exceptions import ConstructionError, TransportError
from lib.httpc.request import Request


def okTransport() -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: httpx.Response(200, stream=httpx.ByteStream(b"ok")))


class TestHttpClient:
    """Test suite for HttpClient class."""

    def test_initialization_defaults(self):
        """Test default settings, dood!"""
        with HttpClient(transport=okTransport()) as client:
            assert client.timeout == DEFAULT_TIMEOUT
            assert client.followRedirects is True
            assert client.verbose is False

    def test_default_headers_are_sent(self):
        with HttpClient(headers={"X-Api-Key": "secret"}, transport=okTransport()) as client:
            request = client.buildRequest("GET", "https://example.com/")
        assert request.headers["User-Agent"] == DEFAULT_USER_AGENT
        assert request.headers["X-Api-Key"] == "secret"

    def test_from_config(self):
        """Test client settings are read from the [http] section, dood!"""
        config = {
            "timeout": 5,
            "follow-redirects": False,
            "verbose": True,
            "user-agent": "tester/2.0",
            "headers": {"Accept": "text/plain"},
        }
        with HttpClient.fromConfig(config, transport=okTransport()) as client:
            assert client.timeout == 5.0
            assert client.followRedirects is False
            assert client.verbose is True
            request = client.buildRequest("GET", "https://example.com/")
        assert request.headers["User-Agent"] == "tester/2.0"
        assert request.headers["Accept"] == "text/plain"

    def test_from_config_empty(self):
        with HttpClient.fromConfig({}, transport=okTransport()) as client:
            assert client.timeout == DEFAULT_TIMEOUT
            assert client.verbose is False

    def test_new_request_inherits_verbose(self):
        with HttpClient(verbose=True, transport=okTransport()) as client:
            request = client.newRequest()
        assert isinstance(request, Request)
        assert request.client is client
        assert request.verbose is True
        assert request.diagnosticLogger is logDiagnostic

    def test_new_request_with_custom_diagnostic_logger(self):
        records = []
        with HttpClient(transport=okTransport()) as client:
            request = client.newRequest(diagnosticLogger=records.append)
        assert request.diagnosticLogger == records.append

    def test_build_request_rejects_invalid_url(self):
        with HttpClient(transport=okTransport()) as client:
            with pytest.raises(ConstructionError):
                client.buildRequest("GET", "https://example.com/\x00")

    def test_do_returns_unread_response(self):
        """Test do() leaves the body stream for the consumer, dood!"""
        with HttpClient(transport=okTransport()) as client:
            response = client.do(client.buildRequest("GET", "https://example.com/"))
            assert response.status_code == 200
            assert not response.is_stream_consumed
            assert b"".join(response.iter_raw()) == b"ok"

    def test_do_wraps_transport_errors(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route to host")

        with HttpClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(TransportError, match="no route to host") as excInfo:
                client.do(client.buildRequest("GET", "https://example.com/"))
        assert isinstance(excInfo.value.__cause__, httpx.ConnectError)

    def test_close_closes_http_client(self):
        mockHttpClient = MagicMock()
        mockHttpClient.is_closed = False

        client = HttpClient(httpClient=mockHttpClient)
        client.close()

        mockHttpClient.close.assert_called_once()

    def test_close_skips_already_closed_client(self):
        mockHttpClient = MagicMock()
        mockHttpClient.is_closed = True

        HttpClient(httpClient=mockHttpClient).close()

        mockHttpClient.close.assert_not_called()
