"""
Image intake for product photos.

Uploads are validated (size and file signature), given a collision-resistant
name and stored either on the local disk (served under /uploads) or on
Cloudinary. The returned reference is usable as the product `imagem` field as
soon as `save` returns.
"""

from __future__ import annotations

import io
import logging
import os
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from .config import Settings
from .errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

JPEG_MAGIC = b"\xFF\xD8\xFF"
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
GIF_MAGICS = (b"GIF87a", b"GIF89a")

LOCAL_URL_PREFIX = "/uploads"


@dataclass(frozen=True)
class ImageUpload:
    filename: str
    content_type: str
    data: bytes


class MediaStorage(Protocol):
    def save(self, upload: ImageUpload) -> str:
        ...


def has_valid_signature(data: bytes) -> bool:
    if data.startswith(JPEG_MAGIC) or data.startswith(PNG_MAGIC):
        return True
    if data.startswith(GIF_MAGICS):
        return True
    return data[:4] == b"RIFF" and data[8:12] == b"WEBP"


def validate_upload(upload: ImageUpload, max_bytes: int) -> None:
    if not upload.data:
        raise ValidationError("Imagem vazia.")
    if max_bytes and len(upload.data) > max_bytes:
        raise ValidationError(f"Imagem excede o limite de {max_bytes // (1024 * 1024) or 1}MB.")
    if not has_valid_signature(upload.data):
        raise ValidationError("Arquivo de imagem invalido (use JPEG, PNG, GIF ou WebP).")


def safe_filename(filename: str | None) -> str:
    base = os.path.basename((filename or "").replace("\\", "/"))
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "_", base).strip("._")
    return cleaned[:100] or "imagem"


def unique_name(filename: str | None, now_ms: int | None = None) -> str:
    """`<epoch millis>-<sanitized original name>`."""
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{stamp}-{safe_filename(filename)}"


class LocalMediaStorage:
    """Writes images under the uploads directory served by the app."""

    def __init__(self, uploads_dir: str | Path, max_upload_bytes: int = 0) -> None:
        self.uploads_dir = Path(uploads_dir)
        self.max_upload_bytes = max_upload_bytes

    def save(self, upload: ImageUpload) -> str:
        validate_upload(upload, self.max_upload_bytes)
        name = unique_name(upload.filename)
        try:
            self.uploads_dir.mkdir(parents=True, exist_ok=True)
            dest = self.uploads_dir / name
            stem, suffix = os.path.splitext(name)
            counter = 1
            while dest.exists():
                dest = self.uploads_dir / f"{stem}-{counter}{suffix}"
                counter += 1
            # "xb" refuses to clobber a file created between the check and the write
            with dest.open("xb") as f:
                f.write(upload.data)
        except OSError as exc:
            raise StorageError(f"Falha ao gravar a imagem {name}.") from exc
        logger.info("Imagem salva em disco: %s (%d bytes)", dest.name, len(upload.data))
        return f"{LOCAL_URL_PREFIX}/{dest.name}"


class CloudinaryMediaStorage:
    """Uploads images to Cloudinary and returns the HTTPS delivery URL."""

    def __init__(
        self,
        *,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "lojacastro",
        max_upload_bytes: int = 0,
    ) -> None:
        if not (cloud_name and api_key and api_secret):
            raise RuntimeError(
                "CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET "
                "must be configured to use the cloudinary media backend."
            )
        cloudinary.config(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret, secure=True)
        self.folder = folder
        self.max_upload_bytes = max_upload_bytes

    def save(self, upload: ImageUpload) -> str:
        validate_upload(upload, self.max_upload_bytes)
        public_id = os.path.splitext(unique_name(upload.filename))[0]
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(upload.data),
                folder=self.folder,
                public_id=public_id,
                format="jpg",
                resource_type="image",
            )
        except (CloudinaryError, OSError) as exc:
            raise StorageError("Falha ao enviar a imagem para o Cloudinary.") from exc
        url = (result or {}).get("secure_url") or (result or {}).get("url")
        if not url:
            raise StorageError("Cloudinary nao retornou a URL da imagem.")
        logger.info("Imagem enviada ao Cloudinary: %s", url)
        return url


def get_media_storage(settings: Settings) -> MediaStorage:
    if settings.media_backend == "cloudinary":
        return CloudinaryMediaStorage(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            folder=settings.cloudinary_folder,
            max_upload_bytes=settings.max_upload_bytes,
        )
    return LocalMediaStorage(settings.uploads_dir, settings.max_upload_bytes)
