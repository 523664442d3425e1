from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Garante que o pacote loja seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from loja.core import config as core_config  # noqa: E402

ENV_VARS = [
    "STORAGE_BACKEND",
    "MEDIA_BACKEND",
    "DATABASE_URL",
    "CLOUDINARY_CLOUD_NAME",
    "PORT",
    "MAX_UPLOAD_BYTES",
    "CORS_ORIGINS",
    "PUBLIC_BASE_URL",
    "CHECKOUT_SUCCESS_URL",
]


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    core_config.get_settings.cache_clear()
    yield monkeypatch
    core_config.get_settings.cache_clear()


def test_defaults(clean_env):
    settings = core_config.get_settings()
    assert settings.storage_backend == "json"
    assert settings.media_backend == "local"
    assert settings.port == 3000
    assert settings.max_upload_bytes == 5 * 1024 * 1024
    assert settings.cors_origins == ("*",)
    assert settings.checkout_success_url == "http://localhost:3000/sucesso.html"


def test_postgres_scheme_is_rewritten(clean_env):
    clean_env.setenv("DATABASE_URL", "postgres://user:pw@db.example.com:5432/loja")
    assert core_config.get_settings().database_url == "postgresql://user:pw@db.example.com:5432/loja"


def test_cloudinary_is_picked_when_configured(clean_env):
    clean_env.setenv("CLOUDINARY_CLOUD_NAME", "demo")
    assert core_config.get_settings().media_backend == "cloudinary"
    core_config.get_settings.cache_clear()
    clean_env.setenv("MEDIA_BACKEND", "local")
    assert core_config.get_settings().media_backend == "local"


def test_invalid_values_fall_back(clean_env):
    clean_env.setenv("PORT", "oito-mil")
    clean_env.setenv("STORAGE_BACKEND", "mongo")
    clean_env.setenv("CORS_ORIGINS", "https://a.com, https://b.com")
    settings = core_config.get_settings()
    assert settings.port == 3000
    assert settings.storage_backend == "json"
    assert settings.cors_origins == ("https://a.com", "https://b.com")
