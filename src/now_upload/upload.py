"""Streaming content-addressed upload to the Now files endpoint.

The payload is hashed while it is read; the finalized SHA-1 travels with the
body in the ``x-now-digest`` header so the endpoint can verify and address
the content.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx

from now_upload.errors import NowAPIError, TransportError
from now_upload.files import derive_name
from now_upload.hasher import DigestAccumulator
from now_upload.sources import DEFAULT_CHUNK_SIZE, BufferSource, StreamSource, open_source

logger = logging.getLogger(__name__)

FILES_ENDPOINT = "https://api.zeit.co/v2/now/files"
DIGEST_HEADER = "x-now-digest"
DEFAULT_TIMEOUT = httpx.Timeout(300.0, connect=30.0)

OnUploaded = Callable[[Any], Any]


@dataclass(frozen=True)
class UploadResult:
    """What was uploaded: byte count, SHA-1, display name and the payload."""

    length: int
    digest: str
    name: str
    data: bytes = field(repr=False)

    def as_manifest_entry(self) -> dict[str, Any]:
        """Entry in the shape a Now deployment lists its files in."""
        return {"file": self.name, "sha": self.digest, "size": self.length}


# ---------------------------------------------------------------------------
# Reading + hashing
# ---------------------------------------------------------------------------


async def _consume_stream(source: StreamSource) -> tuple[bytes, str, int]:
    """Hash and buffer every chunk in arrival order."""
    acc = DigestAccumulator()
    buffer = bytearray()
    reader = source.acquire()
    try:
        async for chunk in reader:
            acc.update(chunk)
            buffer.extend(chunk)
            logger.debug("Read chunk of %d bytes (%d total)", len(chunk), acc.length)
    finally:
        # The reader gives up the stream before anything is transmitted
        await reader.aclose()
        source.release()
        await source.aclose()
    return bytes(buffer), acc.finalize(), acc.length


async def _consume_buffer(source: BufferSource) -> tuple[bytes, str, int]:
    data = await source.read_all()
    acc = DigestAccumulator()
    acc.update(data)
    return data, acc.finalize(), acc.length


# ---------------------------------------------------------------------------
# Transmission
# ---------------------------------------------------------------------------


def _build_headers(token: str, digest: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/octet-stream",
        DIGEST_HEADER: digest,
    }


async def _transmit(
    http: httpx.AsyncClient,
    url: str,
    token: str,
    payload: bytes,
    digest: str,
) -> dict[str, Any]:
    """POST the payload once and return the parsed JSON body."""
    try:
        resp = await http.post(url, content=payload, headers=_build_headers(token, digest))
    except httpx.HTTPError as exc:
        raise TransportError(f"upload request failed: {exc}") from exc

    try:
        body = resp.json()
    except ValueError as exc:
        raise TransportError(f"unparseable response from {url} (HTTP {resp.status_code})") from exc
    if not isinstance(body, dict):
        raise TransportError(f"expected a JSON object from {url}, got {type(body).__name__}")

    error = body.get("error")
    if error:
        raise NowAPIError(error)

    try:
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise TransportError(f"upload rejected with HTTP {exc.response.status_code}") from exc
    return body


async def _notify(on_uploaded: OnUploaded | None, handle: Any, name: str) -> None:
    if not callable(on_uploaded):
        return
    try:
        outcome = on_uploaded(handle)
        if inspect.isawaitable(outcome):
            await outcome
    except Exception as exc:
        logger.warning("on_uploaded callback failed for %s: %s", name, exc)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def upload_file(
    handle: Any,
    token: str,
    on_uploaded: OnUploaded | None = None,
    *,
    http: httpx.AsyncClient | None = None,
    url: str = FILES_ENDPOINT,
    stream: bool = True,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    name: str | None = None,
) -> UploadResult:
    """Hash a file while reading it, upload it once, and describe the upload.

    ``handle`` may be a LocalFile, a path, in-memory bytes, a binary file
    object, an async reader or an async iterator of chunks. The endpoint's
    ``error`` value is raised verbatim inside NowAPIError; there are no
    retries. ``on_uploaded(handle)`` runs once after a successful upload.
    When ``http`` is omitted a client is opened for this call only.
    """
    source = open_source(handle, stream=stream, chunk_size=chunk_size)
    if isinstance(source, StreamSource):
        payload, digest, length = await _consume_stream(source)
    else:
        payload, digest, length = await _consume_buffer(source)

    logger.info("Uploading %d bytes (sha1=%s)", length, digest[:12])
    if http is None:
        async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as owned:
            await _transmit(owned, url, token, payload, digest)
    else:
        await _transmit(http, url, token, payload, digest)

    display_name = name if name is not None else derive_name(handle)
    await _notify(on_uploaded, handle, display_name)
    logger.info("Uploaded %s (%d bytes, sha1=%s)", display_name or "<unnamed>", length, digest[:12])

    return UploadResult(length=length, digest=digest, name=display_name, data=payload)
