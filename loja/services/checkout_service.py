"""Checkout: builds the fixed preference and hands it to the payment gateway."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from loja.core.config import Settings

logger = logging.getLogger(__name__)

CHECKOUT_ITEM = {"title": "Livro Loja DeCastro", "unit_price": 50, "quantity": 1}


class PaymentGateway(Protocol):
    def create_preference(self, preference: dict[str, Any]) -> str:
        ...


class CheckoutService:
    def __init__(self, gateway: PaymentGateway, settings: Settings) -> None:
        self.gateway = gateway
        self.settings = settings

    def build_preference(self) -> dict[str, Any]:
        return {
            "items": [dict(CHECKOUT_ITEM)],
            "back_urls": {
                "success": self.settings.checkout_success_url,
                "failure": self.settings.checkout_failure_url,
                "pending": self.settings.checkout_pending_url,
            },
            "auto_return": "approved",
        }

    def create_preference(self) -> str:
        preference_id = self.gateway.create_preference(self.build_preference())
        logger.info("Preferencia de pagamento criada: %s", preference_id)
        return preference_id
