"""
Runtime settings for the upload server and client.

Read once from the environment and passed explicitly to the app factory
and the store. Nothing here is module-level mutable state.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

# 10 MB per file
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_CORS_ORIGINS = ("http://localhost:5173",)  # Vite dev server
DEFAULT_PORT = 3001
DEFAULT_SERVER_URL = f"http://localhost:{DEFAULT_PORT}"


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    upload_dir: Path = Path("uploads")
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from UPLOAD_DIR, MAX_UPLOAD_BYTES, CORS_ORIGINS, HOST, PORT, LOG_LEVEL."""
        return cls(
            upload_dir=Path(os.getenv("UPLOAD_DIR", "uploads")),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS", ",".join(DEFAULT_CORS_ORIGINS))),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", str(DEFAULT_PORT))),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def server_url_from_env() -> str:
    """Base URL the client talks to."""
    return os.getenv("UPLOAD_SERVER_URL", DEFAULT_SERVER_URL).rstrip("/")
