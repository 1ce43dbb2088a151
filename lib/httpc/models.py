"""
httpc Models

Plain data holders used by the request builder.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Cookie:
    """Single cookie rendered into the ``Cookie`` request header."""

    name: str
    value: str

    def render(self) -> str:
        return f"{self.name}={self.value}"


@dataclass(frozen=True)
class FilePart:
    """Multipart body entry.

    Attributes:
        fieldName: Form field name
        value: Filesystem path when ``isFile`` is set, literal field value otherwise
        isFile: Whether ``value`` is a path to upload
    """

    fieldName: str
    value: str
    isFile: bool
