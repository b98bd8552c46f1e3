"""Exceptions raised by the upload core."""

from __future__ import annotations

from typing import Any


class UploadError(Exception):
    """Base class for every runtime failure of an upload call."""


class SourceReadError(UploadError):
    """Raised when the byte source fails before all bytes were read."""


class TransportError(UploadError):
    """Raised when the request fails or the response cannot be interpreted."""


class NowAPIError(UploadError):
    """Raised when the files endpoint answers with an ``error`` field.

    ``error`` holds the value exactly as the endpoint sent it.
    """

    def __init__(self, error: Any) -> None:
        self.error = error
        if isinstance(error, dict):
            self.code = error.get("code", "")
            self.message = error.get("message", "")
        else:
            self.code = ""
            self.message = str(error)
        super().__init__(f"Now API error {self.code}: {self.message}" if self.code else f"Now API error: {self.message}")


class DigestStateError(RuntimeError):
    """Raised on update() after finalize() or a second finalize()."""


class SourceLockedError(RuntimeError):
    """Raised when a stream is acquired while locked or after it was consumed."""
