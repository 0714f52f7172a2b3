"""
Runtime configuration for the relay.
Reads environment variables (and .env) once into an immutable object
that the app factory hands to every component.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

# Load .env variables from the project root
load_dotenv()

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_PORT = 3000


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class RelayConfig:
    """
    Process-wide settings.

    Attributes:
        gemini_api_key: Credential for the Gemini API. None disables generation.
        model_name: Gemini model used by every endpoint.
        timeout_ms: Client-side deadline for one model call (None = no deadline).
        port: Port the development server listens on.
        upload_dir: Directory where scoped uploads are written.
        max_upload_mb: Request body limit enforced by Flask.
        cors_origins: Origins allowed by flask-cors.
    """
    gemini_api_key: Optional[str] = None
    model_name: str = DEFAULT_MODEL
    timeout_ms: Optional[int] = 120_000
    port: int = DEFAULT_PORT
    upload_dir: str = "uploads"
    max_upload_mb: int = 20
    cors_origins: Tuple[str, ...] = field(default_factory=lambda: ("*",))

    @classmethod
    def from_env(cls) -> "RelayConfig":
        timeout_ms = _int_env("GEMINI_TIMEOUT_MS", 120_000)
        origins = tuple(
            o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
        )
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            model_name=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            timeout_ms=timeout_ms if timeout_ms > 0 else None,
            port=_int_env("PORT", DEFAULT_PORT),
            upload_dir=os.path.abspath(os.getenv("UPLOAD_DIR", "uploads")),
            max_upload_mb=_int_env("MAX_UPLOAD_MB", 20),
            cors_origins=origins or ("*",),
        )

    @property
    def max_content_length(self) -> int:
        return self.max_upload_mb * 1024 * 1024
