"""Contact inbox use cases."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from loja.domain.catalog import Contact, ContactCreate, parse_input, utcnow
from loja.repositories.base import ContactRepository

logger = logging.getLogger(__name__)


class ContactService:
    def __init__(self, repository: ContactRepository) -> None:
        self.repository = repository

    def create_contact(self, fields: Mapping[str, Any]) -> Contact:
        data = parse_input(ContactCreate, fields)
        contact = self.repository.create(
            nome=data.nome,
            email=data.email,
            assunto=data.assunto,
            mensagem=data.mensagem,
            data_envio=utcnow(),
        )
        logger.info("Mensagem de contato %s salva (%s)", contact.id, contact.email)
        return contact

    def list_contacts(self) -> list[Contact]:
        """Newest first."""
        return self.repository.list()
