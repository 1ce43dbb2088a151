"""
Unit tests for httpc body decoding, file saving helpers and encoding modes.
"""

import gzip
import os
import stat

import brotli
import httpx
import pytest

from lib.httpc.constants import EncodingMode
from lib.httpc.decoder import decodeBody, decodeGzip, hasGzipHeader
from lib.httpc.exceptions import DecodeError, FileIOError
from lib.httpc.sink import deriveFileName, saveBody, writeBody


def streamed(body: bytes, headers=None) -> httpx.Response:
    return httpx.Response(200, headers=headers, stream=httpx.ByteStream(body))


class TestEncodingMode:
    """Test suite for EncodingMode.fromSelector."""

    @pytest.mark.parametrize(
        "selector, expected",
        [
            (None, EncodingMode.URL_ENCODED),
            ("url", EncodingMode.URL_ENCODED),
            ("url-encoded", EncodingMode.URL_ENCODED),
            ("json", EncodingMode.JSON),
            ("file", EncodingMode.MULTIPART),
            ("multipart", EncodingMode.MULTIPART),
            ("JSON", EncodingMode.MULTIPART),
            (EncodingMode.JSON, EncodingMode.JSON),
        ],
    )
    def test_from_selector(self, selector, expected):
        assert EncodingMode.fromSelector(selector) is expected


class TestDecoder:
    """Test suite for decoder helpers."""

    def test_gzip_header_detection(self):
        assert hasGzipHeader(gzip.compress(b"x"))
        assert not hasGzipHeader(b"")
        assert not hasGzipHeader(b"\x1f\x8b")
        assert not hasGzipHeader(b"plain text body")

    def test_decode_gzip_swallows_bad_header(self):
        """Test a bad gzip header decodes to nothing instead of failing, dood!"""
        assert decodeGzip(b"not gzip at all") == b""

    def test_decode_gzip_multiple_members(self):
        data = gzip.compress(b"first ") + gzip.compress(b"second")
        assert decodeGzip(data) == b"first second"

    def test_decode_body_encoding_is_case_sensitive(self):
        data = gzip.compress(b"x")
        assert decodeBody(streamed(data, {"Content-Encoding": "GZIP"})) == data

    def test_decode_body_identity(self):
        response = streamed(b"identity")
        assert decodeBody(response) == b"identity"
        assert response.is_closed

    def test_decode_gzip_swallows_truncated_stream(self):
        assert decodeGzip(gzip.compress(b"abc" * 100)[:-6]) == b""

    def test_decode_error_carries_response(self):
        response = streamed(brotli.compress(b"abc " * 200)[:-4], {"Content-Encoding": "br"})
        with pytest.raises(DecodeError) as excInfo:
            decodeBody(response)
        assert excInfo.value.response is response


class TestSink:
    """Test suite for file saving helpers."""

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://h/dir/report.csv", "report.csv"),
            ("https://h/dir/", ""),
            ("https://h/download?id=1", "download?id=1"),
            ("report.csv", ""),
        ],
    )
    def test_derive_file_name(self, url, expected):
        assert deriveFileName(url) == expected

    def test_write_body_permissions(self, tmp_path):
        target = tmp_path / "out.bin"
        oldUmask = os.umask(0)
        try:
            writeBody(str(target), b"data")
        finally:
            os.umask(oldUmask)

        assert target.read_bytes() == b"data"
        assert stat.S_IMODE(target.stat().st_mode) == 0o777

    def test_write_body_truncates_existing_file(self, tmp_path):
        target = tmp_path / "out.txt"
        target.write_bytes(b"a much longer previous content")
        writeBody(str(target), b"new")
        assert target.read_bytes() == b"new"

    def test_write_body_failure(self, tmp_path):
        with pytest.raises(FileIOError):
            writeBody(str(tmp_path / "missing" / "out.txt"), b"data")

    def test_save_body(self, tmp_path):
        target = tmp_path / "saved.txt"
        saveBody(streamed(b"saved"), str(target))
        assert target.read_bytes() == b"saved"
