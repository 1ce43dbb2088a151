"""
Response body decoding.

Reads a streamed httpx response to completion and undoes its Content-Encoding.
Only ``gzip`` and ``br`` are recognized, everything else is passed through.
"""

import gzip
import logging
import zlib

import brotli
import httpx

from .constants import ENCODING_BROTLI, ENCODING_GZIP, HEADER_CONTENT_ENCODING
from .exceptions import DecodeError

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
GZIP_METHOD_DEFLATE = 8
GZIP_HEADER_SIZE = 10


def readRawBody(response: httpx.Response) -> bytes:
    """Read the undecoded body and close the response.

    Raises:
        DecodeError: If the body stream fails mid-read
    """
    try:
        return b"".join(response.iter_raw())
    except (httpx.HTTPError, httpx.StreamError) as e:
        raise DecodeError(f"Failed to read response body: {e}", response) from e
    finally:
        response.close()


def hasGzipHeader(data: bytes) -> bool:
    """Check whether a gzip reader could be opened over ``data``."""
    return (
        len(data) >= GZIP_HEADER_SIZE
        and data[:2] == GZIP_MAGIC
        and data[2] == GZIP_METHOD_DEFLATE
    )


def decodeGzip(data: bytes) -> bytes:
    """Decompress a gzip body.

    Never fails: an invalid header or a corrupted or truncated stream
    yields an empty body.
    """
    if not hasGzipHeader(data):
        logger.debug(f"Invalid gzip header in {len(data)} byte(s) body, returning empty result")
        return b""
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as e:
        logger.debug(f"Corrupted gzip body ({type(e).__name__}#{e}), returning empty result")
        return b""


def decodeBrotli(data: bytes) -> bytes:
    try:
        return brotli.decompress(data)
    except brotli.error as e:
        raise DecodeError(f"brotli: {e}") from e


def decodeBody(response: httpx.Response) -> bytes:
    """Read the whole response body and decompress it.

    Args:
        response: Streamed response, its body must not be consumed yet

    Returns:
        Decoded body bytes

    Raises:
        DecodeError: If the body cannot be read or a brotli body cannot be
            decompressed
    """
    contentEncoding = response.headers.get(HEADER_CONTENT_ENCODING, "")
    data = readRawBody(response)
    logger.debug(f"Read {len(data)} byte(s), Content-Encoding: '{contentEncoding}'")

    try:
        if contentEncoding == ENCODING_GZIP:
            return decodeGzip(data)
        elif contentEncoding == ENCODING_BROTLI:
            return decodeBrotli(data)
        return data
    except DecodeError as e:
        e.response = response
        raise
