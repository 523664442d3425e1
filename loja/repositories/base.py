"""Repository interfaces the services depend on."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol

from loja.domain.catalog import Contact, Product


class ProductRepository(Protocol):
    def list(self) -> list[Product]:
        ...

    def get(self, product_id: int) -> Optional[Product]:
        ...

    def create(self, *, nome: str, preco: float, descricao: Optional[str], imagem: str) -> Product:
        ...

    def update(self, product_id: int, changes: dict[str, Any]) -> Optional[Product]:
        """Apply `changes` and return the stored record, or None when the id is unknown."""
        ...

    def delete(self, product_id: int) -> bool:
        ...


class ContactRepository(Protocol):
    def create(self, *, nome: str, email: str, assunto: str, mensagem: str, data_envio: datetime) -> Contact:
        ...

    def list(self) -> list[Contact]:
        """All contacts, newest first."""
        ...


class AboutRepository(Protocol):
    def get(self, default: Any = None) -> Any:
        """Stored document, or `default` when nothing was ever written."""
        ...

    def set(self, document: Any) -> None:
        ...
