"""
Tests for environment-driven settings.
"""

from pathlib import Path

from uploader.config import Settings, server_url_from_env


def test_defaults(monkeypatch):
    for var in ("UPLOAD_DIR", "MAX_UPLOAD_BYTES", "CORS_ORIGINS", "HOST", "PORT", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)

    settings = Settings.from_env()

    assert settings.upload_dir == Path("uploads")
    assert settings.max_upload_bytes == 10_485_760
    assert settings.cors_origins == ["http://localhost:5173"]
    assert settings.port == 3001
    assert settings.log_level == "INFO"


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path))
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "2048")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example,")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.upload_dir == tmp_path
    assert settings.max_upload_bytes == 2048
    assert settings.cors_origins == ["http://a.example", "http://b.example"]
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"


def test_server_url(monkeypatch):
    monkeypatch.delenv("UPLOAD_SERVER_URL", raising=False)
    assert server_url_from_env() == "http://localhost:3001"

    monkeypatch.setenv("UPLOAD_SERVER_URL", "http://uploads.internal:8080/")
    assert server_url_from_env() == "http://uploads.internal:8080"
