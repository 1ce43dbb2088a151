"""
Saving response bodies to local files.
"""

import logging
import os
from typing import List

import httpx

from .constants import SAVED_FILE_MODE
from .exceptions import FileIOError

logger = logging.getLogger(__name__)


def deriveFileName(url: str) -> str:
    """Return the last ``/``-separated segment of ``url``.

    Example:
        >>> deriveFileName("https://h/dir/report.csv")
        'report.csv'
    """
    parts = url.split("/")
    if len(parts) > 1:
        return parts[-1]
    return ""


def writeBody(filePath: str, data: bytes) -> None:
    """Write ``data`` to ``filePath``, creating it with SAVED_FILE_MODE.

    Raises:
        FileIOError: If the file cannot be created or written
    """
    try:
        fd = os.open(filePath, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SAVED_FILE_MODE)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
    except OSError as e:
        raise FileIOError(str(e)) from e


def saveBody(response: httpx.Response, filePath: str) -> None:
    """Read the raw response body and save it to ``filePath``.

    A failed body read is not reported: the bytes received before the
    failure are written, which may leave an empty file.
    """
    chunks: List[bytes] = []
    try:
        for chunk in response.iter_raw():
            chunks.append(chunk)
    except (httpx.HTTPError, httpx.StreamError) as e:
        logger.warning(f"Ignoring body read failure while saving {filePath}: {e}")
    finally:
        response.close()

    data = b"".join(chunks)
    writeBody(filePath, data)
    logger.debug(f"Saved {len(data)} byte(s) to {filePath}")
