"""Batch uploads: collect files, upload concurrently, build a manifest."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

from now_upload.config import Settings
from now_upload.files import LocalFile, collect_files, derive_name
from now_upload.now_client import NowClient
from now_upload.upload import OnUploaded, UploadResult

logger = logging.getLogger(__name__)


async def upload_paths(
    settings: Settings,
    paths: Iterable[Path],
    *,
    stream: bool = True,
    on_uploaded: OnUploaded | None = None,
) -> list[UploadResult | None]:
    """Upload every file under the given paths.

    Uses asyncio.gather with a semaphore to limit concurrency.
    A failed upload leaves None in its slot and does not abort the batch.
    """
    files = collect_files(paths)
    if not files:
        logger.warning("No files to upload")
        return []

    now = NowClient(settings)
    semaphore = asyncio.Semaphore(settings.upload_max_concurrent)

    async def _upload_with_limit(f: LocalFile) -> UploadResult | None:
        async with semaphore:
            try:
                return await now.upload(f, on_uploaded, stream=stream)
            except Exception:
                logger.exception("Failed to upload %s", derive_name(f))
                return None

    try:
        results = await asyncio.gather(*[_upload_with_limit(f) for f in files])
    finally:
        await now.close()

    done = sum(1 for r in results if r is not None)
    logger.info("Uploaded %d of %d files", done, len(files))
    return list(results)


def build_manifest(results: Sequence[UploadResult | None]) -> list[dict[str, Any]]:
    """Manifest entries for the successful uploads, in input order."""
    return [r.as_manifest_entry() for r in results if r is not None]


def save_manifest(path: Path, results: Sequence[UploadResult | None]) -> Path:
    """Write the manifest as JSON and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(build_manifest(results), ensure_ascii=False, indent=2), encoding="utf-8")
    return path
