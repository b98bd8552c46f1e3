"""Settings-bound client for the Now files API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from now_upload.config import Settings
from now_upload.upload import OnUploaded, UploadResult, upload_file

logger = logging.getLogger(__name__)


class NowClient:
    """Uploads files with the token and endpoint from Settings.

    One httpx.AsyncClient is created lazily and shared by every upload made
    through this client, so concurrent uploads reuse its connection pool.
    """

    def __init__(self, settings: Settings) -> None:
        self.token = settings.now_token
        self.files_url = settings.files_url
        self.chunk_size = settings.upload_chunk_size
        self.timeout = settings.http_timeout
        self.connect_timeout = settings.http_connect_timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            logger.debug("Opening HTTP client for %s", self.files_url)
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=self.connect_timeout),
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def upload(
        self,
        handle: Any,
        on_uploaded: OnUploaded | None = None,
        *,
        stream: bool = True,
    ) -> UploadResult:
        """Upload one file handle; see upload_file for what a handle may be."""
        client = await self._get_client()
        return await upload_file(
            handle,
            self.token,
            on_uploaded,
            http=client,
            url=self.files_url,
            stream=stream,
            chunk_size=self.chunk_size,
        )
