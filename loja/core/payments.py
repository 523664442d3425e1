"""
Payment gateway adapter (Mercado Pago).

Only checkout preference creation is needed: the gateway answers with an
opaque preference id that the storefront uses to open the checkout.
"""

from __future__ import annotations

import logging
from typing import Any

import mercadopago

from .config import Settings
from .errors import PaymentGatewayError

logger = logging.getLogger(__name__)


class MercadoPagoGateway:
    def __init__(self, access_token: str) -> None:
        self.access_token = access_token
        self._sdk = None

    def _client(self) -> mercadopago.SDK:
        if not self.access_token:
            raise PaymentGatewayError("MERCADOPAGO_ACCESS_TOKEN nao configurado.")
        if self._sdk is None:
            self._sdk = mercadopago.SDK(self.access_token)
        return self._sdk

    def create_preference(self, preference: dict[str, Any]) -> str:
        """Create a checkout preference and return its id."""
        sdk = self._client()
        try:
            result = sdk.preference().create(preference)
        except OSError as exc:
            # requests' exceptions derive from IOError
            raise PaymentGatewayError("Falha de comunicacao com o Mercado Pago.") from exc
        status = (result or {}).get("status")
        body = (result or {}).get("response") or {}
        if status not in (200, 201) or not body.get("id"):
            detail = body.get("message") if isinstance(body, dict) else None
            logger.error("Mercado Pago recusou a preferencia (status=%s): %s", status, body)
            raise PaymentGatewayError(detail or "Erro ao criar a preferencia de pagamento.")
        return str(body["id"])


def get_payment_gateway(settings: Settings) -> MercadoPagoGateway:
    return MercadoPagoGateway(settings.mercadopago_access_token)
