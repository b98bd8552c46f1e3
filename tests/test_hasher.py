"""Tests for now_upload.hasher — incremental SHA-1."""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from now_upload.errors import DigestStateError
from now_upload.hasher import EMPTY_DIGEST, DigestAccumulator, sha1_bytes, sha1_file


# ---------------------------------------------------------------------------
# DigestAccumulator
# ---------------------------------------------------------------------------

def test_empty_digest_constant():
    """finalize() with no updates yields the SHA-1 of empty bytes."""
    acc = DigestAccumulator()
    assert acc.finalize() == EMPTY_DIGEST
    assert EMPTY_DIGEST == hashlib.sha1(b"").hexdigest()


@pytest.mark.parametrize(
    "chunks",
    [
        [b"abcdefgh"],
        [b"a", b"bcd", b"efgh"],
        [b"ab", b"", b"cd", b"", b"efgh"],
        [bytes([c]) for c in b"abcdefgh"],
    ],
)
def test_chunk_boundaries_do_not_change_digest(chunks: list[bytes]):
    """Any partition of the same bytes hashes to the one-shot digest."""
    acc = DigestAccumulator()
    for chunk in chunks:
        acc.update(chunk)
    assert acc.finalize() == hashlib.sha1(b"abcdefgh").hexdigest()


def test_zero_length_chunks_are_noops():
    """Empty chunks leave digest and length untouched."""
    acc = DigestAccumulator()
    acc.update(b"")
    acc.update(b"")
    assert acc.length == 0
    assert acc.finalize() == EMPTY_DIGEST


def test_length_counts_bytes():
    acc = DigestAccumulator()
    acc.update(b"ab")
    acc.update(b"cde")
    assert acc.length == 5


def test_update_after_finalize_raises():
    acc = DigestAccumulator()
    acc.update(b"x")
    acc.finalize()
    with pytest.raises(DigestStateError, match="after finalize"):
        acc.update(b"y")


def test_double_finalize_raises():
    acc = DigestAccumulator()
    acc.finalize()
    assert acc.finalized is True
    with pytest.raises(DigestStateError, match="twice"):
        acc.finalize()


def test_digest_is_lowercase_hex():
    """Return value is a 40-character lowercase hex string."""
    digest = sha1_bytes(b"test")
    assert len(digest) == 40
    assert all(c in "0123456789abcdef" for c in digest)


# ---------------------------------------------------------------------------
# sha1_file
# ---------------------------------------------------------------------------

def test_sha1_file_known_content(tmp_path: Path):
    f = tmp_path / "hello.txt"
    f.write_bytes(b"hello")
    assert sha1_file(f) == hashlib.sha1(b"hello").hexdigest()


def test_sha1_file_multichunk(tmp_path: Path):
    """File larger than CHUNK_SIZE (8192) is hashed correctly."""
    data = bytes(range(256)) * 100
    f = tmp_path / "large.bin"
    f.write_bytes(data)
    assert sha1_file(f) == hashlib.sha1(data).hexdigest()


def test_sha1_file_empty(tmp_path: Path):
    f = tmp_path / "empty"
    f.write_bytes(b"")
    assert sha1_file(f) == EMPTY_DIGEST
