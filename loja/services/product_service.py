"""Product catalog use cases (list, get, create, update, delete)."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from loja.core.errors import NotFoundError, ValidationError
from loja.core.media import ImageUpload, MediaStorage
from loja.domain.catalog import Product, ProductCreate, ProductUpdate, parse_input
from loja.repositories.base import ProductRepository

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Produto não encontrado."


class ProductService:
    """Composes the product repository with image intake."""

    def __init__(self, repository: ProductRepository, media: MediaStorage) -> None:
        self.repository = repository
        self.media = media

    def list_products(self) -> list[Product]:
        return self.repository.list()

    def get_product(self, product_id: int) -> Product:
        product = self.repository.get(product_id)
        if not product:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return product

    def create_product(self, fields: Mapping[str, Any], image: Optional[ImageUpload]) -> Product:
        data = parse_input(ProductCreate, fields)
        if image is None:
            raise ValidationError("É necessário enviar um arquivo de imagem.")
        imagem = self.media.save(image)
        product = self.repository.create(
            nome=data.nome,
            preco=data.preco,
            descricao=data.descricao,
            imagem=imagem,
        )
        logger.info("Produto %s criado (%s)", product.id, product.nome)
        return product

    def update_product(self, product_id: int, fields: Mapping[str, Any], image: Optional[ImageUpload]) -> Product:
        self.get_product(product_id)
        changes = parse_input(ProductUpdate, fields).changes()
        if image is not None:
            changes["imagem"] = self.media.save(image)
        product = self.repository.update(product_id, changes)
        if not product:
            # removed between the lookup and the write
            raise NotFoundError(NOT_FOUND_MESSAGE)
        logger.info("Produto %s atualizado (%s)", product_id, ", ".join(sorted(changes)) or "sem alteracoes")
        return product

    def delete_product(self, product_id: int) -> None:
        if not self.repository.delete(product_id):
            raise NotFoundError(NOT_FOUND_MESSAGE)
        logger.info("Produto %s excluido", product_id)
