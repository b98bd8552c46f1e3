"""Tests for now_upload.config — Settings construction and computed properties."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from now_upload.config import Settings, get_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for var in ("NOW_TOKEN", "NOW_API_URL", "UPLOAD_CHUNK_SIZE", "UPLOAD_MAX_CONCURRENT"):
        monkeypatch.delenv(var, raising=False)


def test_default_values():
    """Default values are applied when not overridden."""
    s = Settings(_env_file=None)
    assert s.now_token == ""
    assert s.now_api_url == "https://api.zeit.co"
    assert s.upload_chunk_size == 64 * 1024
    assert s.upload_max_concurrent == 3
    assert s.http_timeout == 300.0


def test_files_url_computed():
    s = Settings(now_api_url="https://api.example.test/", _env_file=None)
    assert s.files_url == "https://api.example.test/v2/now/files"


def test_default_files_url():
    assert Settings(_env_file=None).files_url == "https://api.zeit.co/v2/now/files"


def test_env_vars(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("NOW_TOKEN", "from-env")
    monkeypatch.setenv("UPLOAD_MAX_CONCURRENT", "8")
    s = Settings(_env_file=None)
    assert s.now_token == "from-env"
    assert s.upload_max_concurrent == 8


def test_token_hidden_from_repr():
    s = Settings(now_token="super-secret", _env_file=None)
    assert "super-secret" not in repr(s)


def test_chunk_size_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(upload_chunk_size=0, _env_file=None)


def test_get_settings_factory():
    """get_settings() returns a Settings instance with overrides."""
    s = get_settings(now_token="x")
    assert isinstance(s, Settings)
    assert s.now_token == "x"
