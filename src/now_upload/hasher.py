"""SHA-1 content digests, as expected in the ``x-now-digest`` header."""

from __future__ import annotations

import hashlib
from pathlib import Path

from now_upload.errors import DigestStateError

CHUNK_SIZE = 8192

# SHA-1 of zero bytes
EMPTY_DIGEST = "da39a3ee5e6b4b0d3255bfef95601890afd80709"


class DigestAccumulator:
    """Incremental SHA-1 over successive byte chunks.

    The digest only exists after finalize(); once finalized the
    accumulator accepts no more input.
    """

    def __init__(self) -> None:
        self._sha = hashlib.sha1()
        self._length = 0
        self._digest: str | None = None

    @property
    def length(self) -> int:
        """Total bytes fed so far."""
        return self._length

    @property
    def finalized(self) -> bool:
        return self._digest is not None

    def update(self, chunk: bytes) -> None:
        if self._digest is not None:
            raise DigestStateError("update() called after finalize()")
        if not chunk:
            return
        self._sha.update(chunk)
        self._length += len(chunk)

    def finalize(self) -> str:
        """Return the lowercase hex digest and close the accumulator."""
        if self._digest is not None:
            raise DigestStateError("finalize() called twice")
        self._digest = self._sha.hexdigest()
        return self._digest


def sha1_bytes(data: bytes) -> str:
    """One-shot SHA-1 hex digest of an in-memory payload."""
    acc = DigestAccumulator()
    acc.update(data)
    return acc.finalize()


def sha1_file(path: Path) -> str:
    """Compute the SHA-1 hex digest of a file, reading in chunks."""
    acc = DigestAccumulator()
    with open(path, "rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            acc.update(chunk)
    return acc.finalize()
