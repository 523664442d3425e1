from __future__ import annotations

import logging
from typing import Any

from loja.repositories.base import AboutRepository

logger = logging.getLogger(__name__)


class AboutService:
    """Get/replace the singleton "Sobre" page document."""

    def __init__(self, repository: AboutRepository) -> None:
        self.repository = repository

    def get_content(self) -> Any:
        return self.repository.get(default={})

    def set_content(self, document: Any) -> None:
        self.repository.set(document)
        logger.info("Conteudo da pagina Sobre atualizado")
