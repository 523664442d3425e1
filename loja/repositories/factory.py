"""Pick the storage strategy configured for this deployment."""
from __future__ import annotations

from dataclasses import dataclass

from loja.core.config import Settings
from loja.repositories.base import AboutRepository, ContactRepository, ProductRepository


@dataclass(frozen=True)
class Repositories:
    products: ProductRepository
    contacts: ContactRepository
    about: AboutRepository


def build_repositories(settings: Settings) -> Repositories:
    if settings.storage_backend == "sql":
        from loja.repositories.sql_repository import (
            SQLAboutRepository,
            SQLContactRepository,
            SQLProductRepository,
        )

        return Repositories(SQLProductRepository(), SQLContactRepository(), SQLAboutRepository())

    from loja.repositories.json_storage import (
        JsonAboutRepository,
        JsonContactRepository,
        JsonProductRepository,
    )

    return Repositories(
        JsonProductRepository(settings.data_dir),
        JsonContactRepository(settings.data_dir),
        JsonAboutRepository(settings.data_dir),
    )
