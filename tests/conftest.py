"""Shared test fixtures for now_upload test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from now_upload.config import Settings


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture()
def test_settings() -> Settings:
    """Settings with a dummy token and a fake API host."""
    return Settings(
        now_token="test-token",
        now_api_url="https://api.test.invalid",
        upload_chunk_size=4,
        upload_max_concurrent=2,
    )


# ---------------------------------------------------------------------------
# Mocked httpx client
# ---------------------------------------------------------------------------

def make_response(body: Any = None, status_code: int = 200) -> MagicMock:
    """A MagicMock standing in for httpx.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.raise_for_status = MagicMock()
    resp.json.return_value = {} if body is None else body
    return resp


@pytest.fixture()
def mock_http() -> AsyncMock:
    """AsyncMock standing in for httpx.AsyncClient; answers {} to every POST."""
    http = AsyncMock()
    http.post = AsyncMock(return_value=make_response())
    http.is_closed = False
    return http


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

@pytest.fixture()
def sample_file(tmp_path: Path) -> Path:
    """Write a small file to tmp_path and return its path."""
    path = tmp_path / "index.html"
    path.write_bytes(b"<html><body>hello now</body></html>\n")
    return path


@pytest.fixture()
def sample_site(tmp_path: Path) -> Path:
    """A small directory tree: site/index.html, site/css/main.css."""
    root = tmp_path / "site"
    (root / "css").mkdir(parents=True)
    (root / "index.html").write_bytes(b"<html></html>")
    (root / "css" / "main.css").write_bytes(b"body { margin: 0 }")
    return root
