"""
Checkout preference and webhook endpoints, with the gateway faked out.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Garante que o pacote loja seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from loja.app import create_app  # noqa: E402
from loja.core import config as core_config  # noqa: E402
from loja.core import payments  # noqa: E402
from loja.core.errors import PaymentGatewayError  # noqa: E402
from loja.core.payments import MercadoPagoGateway  # noqa: E402


class FakeGateway:
    def __init__(self, preference_id: str = "pref-123", error: Exception | None = None) -> None:
        self.preference_id = preference_id
        self.error = error
        self.received: list[dict] = []

    def create_preference(self, preference):
        self.received.append(preference)
        if self.error:
            raise self.error
        return self.preference_id


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "json")
    monkeypatch.setenv("MEDIA_BACKEND", "local")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("PUBLIC_BASE_URL", "https://loja.example.com/")
    monkeypatch.delenv("CHECKOUT_SUCCESS_URL", raising=False)
    monkeypatch.delenv("CHECKOUT_FAILURE_URL", raising=False)
    monkeypatch.delenv("CHECKOUT_PENDING_URL", raising=False)
    monkeypatch.delenv("MERCADOPAGO_ACCESS_TOKEN", raising=False)
    core_config.get_settings.cache_clear()
    yield create_app()
    core_config.get_settings.cache_clear()


def test_create_preference_returns_gateway_id(app):
    gateway = FakeGateway()
    app.state.checkout_service.gateway = gateway

    with TestClient(app) as client:
        resp = client.post("/api/create-preference")

    assert resp.status_code == 200
    assert resp.json() == {"id": "pref-123"}
    preference = gateway.received[0]
    assert preference["items"] == [{"title": "Livro Loja DeCastro", "unit_price": 50, "quantity": 1}]
    assert preference["back_urls"] == {
        "success": "https://loja.example.com/sucesso.html",
        "failure": "https://loja.example.com/falha.html",
        "pending": "https://loja.example.com/pendente.html",
    }
    assert preference["auto_return"] == "approved"


def test_create_preference_only_accepts_post(app):
    with TestClient(app) as client:
        assert client.get("/api/create-preference").status_code == 405


def test_gateway_failure_is_500(app):
    app.state.checkout_service.gateway = FakeGateway(error=PaymentGatewayError("invalid access token"))
    with TestClient(app) as client:
        resp = client.post("/api/create-preference")
    assert resp.status_code == 500
    assert resp.json() == {"message": "invalid access token"}


def test_missing_access_token_is_500(app):
    with TestClient(app) as client:
        resp = client.post("/api/create-preference")
    assert resp.status_code == 500
    assert "MERCADOPAGO_ACCESS_TOKEN" in resp.json()["message"]


def test_webhook_always_acknowledges(app):
    with TestClient(app) as client:
        json_resp = client.post("/api/webhook?topic=payment&id=42", json={"action": "payment.created"})
        raw_resp = client.post("/api/webhook", content=b"not json")
        empty_resp = client.post("/api/webhook")

    for resp in (json_resp, raw_resp, empty_resp):
        assert resp.status_code == 200
        assert resp.text == "OK"


class _FakePreference:
    def __init__(self, result):
        self.result = result
        self.sent = None

    def create(self, preference):
        self.sent = preference
        return self.result


class _FakeSDK:
    last = None

    def __init__(self, token):
        self.token = token
        _FakeSDK.last = self
        self._preference = _FakePreference(_FakeSDK.result)

    def preference(self):
        return self._preference


def test_mercadopago_gateway_reads_preference_id(monkeypatch):
    _FakeSDK.result = {"status": 201, "response": {"id": "123-abc"}}
    monkeypatch.setattr(payments.mercadopago, "SDK", _FakeSDK)

    preference_id = MercadoPagoGateway("TEST-token").create_preference({"items": []})

    assert preference_id == "123-abc"
    assert _FakeSDK.last.token == "TEST-token"
    assert _FakeSDK.last.preference().sent == {"items": []}


def test_mercadopago_gateway_rejection_raises(monkeypatch):
    _FakeSDK.result = {"status": 400, "response": {"message": "invalid back_urls"}}
    monkeypatch.setattr(payments.mercadopago, "SDK", _FakeSDK)

    with pytest.raises(PaymentGatewayError) as excinfo:
        MercadoPagoGateway("TEST-token").create_preference({"items": []})
    assert excinfo.value.message == "invalid back_urls"
