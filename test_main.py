"""
Tests for the httpc command-line entry point.
"""

from unittest.mock import patch

import httpx
import pytest

import main
from internal.config.manager import ConfigManager
from lib.httpc import Cookie, EncodingMode, FilePart, HttpClient


class RecordingTransport(httpx.MockTransport):
    def __init__(self, status: int = 200, body: bytes = b"response body") -> None:
        self.requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return httpx.Response(status, stream=httpx.ByteStream(body))

        super().__init__(handler)


@pytest.fixture
def emptyConfig(tmp_path) -> ConfigManager:
    return ConfigManager(str(tmp_path / "absent.toml"), dotEnvFile=str(tmp_path / ".env"), required=False)


def runWithTransport(argv, configManager, transport):
    args = main.parse_arguments(argv)
    with patch.object(main.HttpClient, "fromConfig", return_value=HttpClient(transport=transport)):
        return main.run(args, configManager)


class TestParseArguments:
    """Test suite for argument parsing."""

    def test_url_is_required(self):
        with pytest.raises(SystemExit):
            main.parse_arguments([])

    def test_print_config_without_url(self):
        args = main.parse_arguments(["--print-config"])
        assert args.print_config is True
        assert args.url is None

    def test_json_and_form_are_exclusive(self):
        with pytest.raises(SystemExit):
            main.parse_arguments(["https://example.com", "--json", "{}", "-F", "a=b"])


class TestBuildRequest:
    """Test suite for translating arguments into a request."""

    @pytest.fixture
    def client(self):
        with HttpClient(transport=RecordingTransport()) as httpClient:
            yield httpClient

    def test_url_encoded(self, client):
        """Test headers, cookies and form data are applied, dood!"""
        args = main.parse_arguments(
            ["-X", "post", "-H", "X-Trace: abc", "-b", "a=1", "-b", "b=2", "-d", "k=v=w", "https://example.com/"]
        )
        request, mode = main.buildRequest(client, args)

        assert mode == EncodingMode.URL_ENCODED
        assert request.method == "POST"
        assert request.headers == {"X-Trace": "abc"}
        assert request.cookies == [Cookie("a", "1"), Cookie("b", "2")]
        assert request.data == {"k": "v=w"}

    def test_json(self, client):
        args = main.parse_arguments(["--json", '{"a":1}', "https://example.com/"])
        request, mode = main.buildRequest(client, args)

        assert mode == EncodingMode.JSON
        assert request.jsonData == '{"a":1}'

    def test_multipart(self, client):
        args = main.parse_arguments(["-F", "doc=@/tmp/report.csv", "-F", "title=Q1", "https://example.com/"])
        request, mode = main.buildRequest(client, args)

        assert mode == EncodingMode.MULTIPART
        assert request.fileParts == [FilePart("doc", "/tmp/report.csv", True), FilePart("title", "Q1", False)]

    def test_malformed_header(self, client):
        args = main.parse_arguments(["-H", "no-colon-here", "https://example.com/"])
        with pytest.raises(ValueError):
            main.buildRequest(client, args)


class TestRun:
    """Test suite for main.run."""

    def test_prints_body(self, emptyConfig, capsys):
        transport = RecordingTransport(body=b"hello")
        assert runWithTransport(["https://example.com/"], emptyConfig, transport) == 0
        assert capsys.readouterr().out == "hello\n"
        assert len(transport.requests) == 1

    def test_saves_body(self, emptyConfig, tmp_path):
        transport = RecordingTransport(body=b"file body")
        argv = ["-o", str(tmp_path) + "/", "https://example.com/dir/data.bin"]

        assert runWithTransport(argv, emptyConfig, transport) == 0
        assert (tmp_path / "data.bin").read_bytes() == b"file body"

    def test_http_error_exit_status(self, emptyConfig):
        """Test a non-200 response gives exit status 1, dood!"""
        transport = RecordingTransport(status=500)
        assert runWithTransport(["https://example.com/"], emptyConfig, transport) == 1

    def test_invalid_argument_exit_status(self, emptyConfig):
        transport = RecordingTransport()
        assert runWithTransport(["-b", "=oops", "https://example.com/"], emptyConfig, transport) == 1
        assert transport.requests == []
