from __future__ import annotations

import re
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Garante que o pacote loja seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from loja.app import create_app  # noqa: E402
from loja.core import config as core_config  # noqa: E402
import loja.services.contact_service as contact_service  # noqa: E402

ISO_MILLIS_Z = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "json")
    monkeypatch.setenv("MEDIA_BACKEND", "local")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("UPLOADS_DIR", str(tmp_path / "uploads"))
    core_config.get_settings.cache_clear()
    with TestClient(create_app()) as test_client:
        yield test_client
    core_config.get_settings.cache_clear()


def _message(**overrides):
    payload = {"nome": "Ana", "email": "ana@example.com", "assunto": "Pedido", "mensagem": "Quando chega?"}
    payload.update(overrides)
    return {k: v for k, v in payload.items() if v is not None}


def test_create_contact_returns_201_with_server_fields(client):
    resp = client.post("/api/contatos", json=_message())

    assert resp.status_code == 201
    body = resp.json()
    assert body["nome"] == "Ana"
    assert body["assunto"] == "Pedido"
    assert isinstance(body["id"], int)
    assert ISO_MILLIS_Z.match(body["dataEnvio"])


def test_missing_assunto_gets_placeholder(client):
    resp = client.post("/api/contatos", json=_message(assunto=None))
    assert resp.status_code == 201
    assert resp.json()["assunto"] == "Sem Assunto"


@pytest.mark.parametrize("missing", ["nome", "email", "mensagem"])
def test_missing_required_field_is_400_and_nothing_is_stored(client, tmp_path, missing):
    resp = client.post("/api/contatos", json=_message(**{missing: None}))

    assert resp.status_code == 400
    assert missing in resp.json()["message"]
    assert client.get("/api/contatos").json() == []
    assert not (tmp_path / "data" / "contatos.json").exists()


def test_blank_email_is_rejected(client):
    resp = client.post("/api/contatos", json=_message(email="   "))
    assert resp.status_code == 400


def test_body_must_be_a_json_object(client):
    assert client.post("/api/contatos", json=["Ana"]).status_code == 400
    resp = client.post("/api/contatos", content=b"{nope", headers={"content-type": "application/json"})
    assert resp.status_code == 400


def test_html_form_post_is_accepted(client):
    resp = client.post("/api/contatos", data=_message())
    assert resp.status_code == 201
    assert resp.json()["email"] == "ana@example.com"


def test_list_is_newest_first(client, monkeypatch):
    base = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
    stamps = iter([base, base + timedelta(seconds=1), base + timedelta(seconds=2)])
    monkeypatch.setattr(contact_service, "utcnow", lambda: next(stamps))

    for nome in ["Primeiro", "Segundo", "Terceiro"]:
        assert client.post("/api/contatos", json=_message(nome=nome)).status_code == 201

    listed = client.get("/api/contatos").json()
    assert [c["nome"] for c in listed] == ["Terceiro", "Segundo", "Primeiro"]
    assert listed[0]["dataEnvio"] == "2024-03-01T10:00:02.000Z"
