"""Byte sources: the two shapes an upload payload can arrive in.

A payload is either a :class:`StreamSource` (ordered chunks, read once) or a
:class:`BufferSource` (every byte available after one awaited read).
:func:`open_source` picks the shape once, from what the handle can do.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
from pathlib import Path
from typing import Any, AsyncIterable, AsyncIterator, Awaitable, BinaryIO, Callable

from now_upload.errors import SourceLockedError, SourceReadError
from now_upload.files import LocalFile

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


def _as_bytes(chunk: Any) -> bytes:
    if isinstance(chunk, bytes):
        return chunk
    if isinstance(chunk, (bytearray, memoryview)):
        return bytes(chunk)
    raise TypeError(f"byte source produced {type(chunk).__name__}, expected bytes")


# ---------------------------------------------------------------------------
# Source variants
# ---------------------------------------------------------------------------


class StreamSource:
    """Ordered byte chunks, consumed exactly once.

    A single reader owns the stream between acquire() and release().
    Chunks already handed out are gone, so a released stream cannot be
    acquired again. aclose() only closes iterators the source owns; a
    caller-supplied iterable is read but left for the caller to close.
    """

    def __init__(self, chunks: AsyncIterable[Any], *, owned: bool = True) -> None:
        self._chunks = chunks
        self._owned = owned
        self._iterator: AsyncIterator[Any] | None = None
        self._locked = False
        self._consumed = False

    @property
    def locked(self) -> bool:
        return self._locked

    def acquire(self) -> AsyncIterator[bytes]:
        """Claim exclusive access and return the chunk reader."""
        if self._locked:
            raise SourceLockedError("stream is locked to another reader")
        if self._consumed:
            raise SourceLockedError("stream has already been consumed")
        self._locked = True
        self._consumed = True
        self._iterator = self._chunks.__aiter__()
        return self._read(self._iterator)

    def release(self) -> None:
        self._locked = False

    async def aclose(self) -> None:
        """Close the iterator that was read, if the source owns it."""
        if not self._owned or self._iterator is None:
            return
        aclose = getattr(self._iterator, "aclose", None)
        if aclose is not None:
            await aclose()

    async def _read(self, iterator: AsyncIterator[Any]) -> AsyncIterator[bytes]:
        while True:
            try:
                chunk = await iterator.__anext__()
            except StopAsyncIteration:
                return
            except Exception as exc:
                raise SourceReadError(f"stream read failed: {exc}") from exc
            yield _as_bytes(chunk)


class BufferSource:
    """A whole payload, available after one awaited read."""

    def __init__(self, load: Callable[[], Awaitable[Any]]) -> None:
        self._load = load

    @classmethod
    def from_bytes(cls, data: bytes) -> BufferSource:
        async def _load() -> bytes:
            return data

        return cls(_load)

    async def read_all(self) -> bytes:
        try:
            data = await self._load()
        except Exception as exc:
            raise SourceReadError(f"buffer read failed: {exc}") from exc
        return _as_bytes(data)


ByteSource = StreamSource | BufferSource


# ---------------------------------------------------------------------------
# Chunk producers
# ---------------------------------------------------------------------------


async def iter_file(fh: BinaryIO, chunk_size: int) -> AsyncIterator[bytes]:
    """Read a blocking binary file in a worker thread, chunk by chunk."""
    while chunk := await asyncio.to_thread(fh.read, chunk_size):
        yield chunk


async def iter_path(path: Path, chunk_size: int) -> AsyncIterator[bytes]:
    with open(path, "rb") as fh:
        async for chunk in iter_file(fh, chunk_size):
            yield chunk


async def iter_async_reader(reader: Any, chunk_size: int) -> AsyncIterator[bytes]:
    while chunk := await reader.read(chunk_size):
        yield chunk


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _local_path(handle: Any) -> Path | None:
    if isinstance(handle, LocalFile):
        return handle.path
    if isinstance(handle, (str, os.PathLike)):
        return Path(handle)
    return None


def open_source(
    handle: Any,
    *,
    stream: bool = True,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> ByteSource:
    """Resolve a file handle into a StreamSource or a BufferSource.

    ``stream=False`` asks for a whole-file read where the handle allows
    both (local paths and blocking file objects). Async iterators and async
    readers are always streamed; in-memory bytes are always a buffer.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    if isinstance(handle, (bytes, bytearray, memoryview)):
        return BufferSource.from_bytes(bytes(handle))

    path = _local_path(handle)
    if path is not None:
        if stream:
            return StreamSource(iter_path(path, chunk_size))
        return BufferSource(lambda: asyncio.to_thread(path.read_bytes))

    if hasattr(handle, "__aiter__"):
        return StreamSource(handle)

    read = getattr(handle, "read", None)
    if callable(read):
        if inspect.iscoroutinefunction(read):
            return StreamSource(iter_async_reader(handle, chunk_size))
        if stream:
            return StreamSource(iter_file(handle, chunk_size))
        return BufferSource(lambda: asyncio.to_thread(read))

    raise TypeError(f"cannot read bytes from {type(handle).__name__}")
