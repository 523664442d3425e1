"""
Configuration helpers for the Loja DeCastro backend.

Every environment variable the app reads is collected here into a frozen
Settings object so that routers/services never touch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

PROJECT_ROOT = Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    port: int
    log_level: str
    storage_backend: str
    data_dir: str
    database_url: str
    media_backend: str
    uploads_dir: str
    max_upload_bytes: int
    cloudinary_cloud_name: str
    cloudinary_api_key: str
    cloudinary_api_secret: str
    cloudinary_folder: str
    mercadopago_access_token: str
    public_base_url: str
    checkout_success_url: str
    checkout_failure_url: str
    checkout_pending_url: str
    cors_origins: tuple[str, ...]


def _normalize_database_url(url: str) -> str:
    # Render/Heroku hand out postgres://, which SQLAlchemy no longer accepts.
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _choice(value: str | None, allowed: set[str], default: str) -> str:
        candidate = (value or "").strip().lower()
        return candidate if candidate in allowed else default

    public_base_url = os.getenv("PUBLIC_BASE_URL", "http://localhost:3000").rstrip("/")
    cloud_name = os.getenv("CLOUDINARY_CLOUD_NAME", "").strip()
    origins = tuple(
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    )

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        port=_int(os.getenv("PORT", "3000"), 3000),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        storage_backend=_choice(os.getenv("STORAGE_BACKEND"), {"json", "sql"}, "json"),
        data_dir=os.getenv("DATA_DIR") or str(PROJECT_ROOT / "data"),
        database_url=_normalize_database_url((os.getenv("DATABASE_URL") or "").strip()),
        media_backend=_choice(
            os.getenv("MEDIA_BACKEND"),
            {"local", "cloudinary"},
            "cloudinary" if cloud_name else "local",
        ),
        uploads_dir=os.getenv("UPLOADS_DIR") or str(PROJECT_ROOT / "uploads"),
        max_upload_bytes=_int(os.getenv("MAX_UPLOAD_BYTES", "5242880"), 5 * 1024 * 1024),
        cloudinary_cloud_name=cloud_name,
        cloudinary_api_key=os.getenv("CLOUDINARY_API_KEY", ""),
        cloudinary_api_secret=os.getenv("CLOUDINARY_API_SECRET", ""),
        cloudinary_folder=os.getenv("CLOUDINARY_FOLDER", "lojacastro"),
        mercadopago_access_token=os.getenv("MERCADOPAGO_ACCESS_TOKEN", ""),
        public_base_url=public_base_url,
        checkout_success_url=os.getenv("CHECKOUT_SUCCESS_URL") or f"{public_base_url}/sucesso.html",
        checkout_failure_url=os.getenv("CHECKOUT_FAILURE_URL") or f"{public_base_url}/falha.html",
        checkout_pending_url=os.getenv("CHECKOUT_PENDING_URL") or f"{public_base_url}/pendente.html",
        cors_origins=origins or ("*",),
    )
