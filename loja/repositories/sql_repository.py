"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select, delete

from loja.db.models import AboutContent, Contact as ContactRow, Product as ProductRow
from loja.db.session import get_session
from loja.domain.catalog import DEFAULT_ASSUNTO, Contact, Product

ABOUT_ROW_ID = 1
# Largest value a BIGINT primary key can hold.
MAX_ROW_ID = 2**63 - 1


def _storable_id(row_id: int) -> bool:
    return 0 < row_id <= MAX_ROW_ID


def _to_product(entity: ProductRow) -> Product:
    return Product(
        id=entity.id,
        nome=entity.nome,
        preco=float(entity.preco),
        descricao=entity.descricao,
        imagem=entity.imagem,
    )


def _to_contact(entity: ContactRow) -> Contact:
    created = entity.created_at
    if created is not None and created.tzinfo is None:
        # SQLite drops the offset; values are always written in UTC.
        created = created.replace(tzinfo=timezone.utc)
    return Contact(
        id=entity.id,
        nome=entity.nome,
        email=entity.email,
        assunto=entity.assunto or DEFAULT_ASSUNTO,
        mensagem=entity.mensagem,
        data_envio=created,
    )


class SQLProductRepository:
    """CRUD helpers for the produtos table."""

    def list(self) -> list[Product]:
        with get_session() as session:
            rows = session.execute(select(ProductRow).order_by(ProductRow.id)).scalars().all()
            return [_to_product(row) for row in rows]

    def get(self, product_id: int) -> Optional[Product]:
        if not _storable_id(product_id):
            return None
        with get_session() as session:
            entity = session.get(ProductRow, product_id)
            return _to_product(entity) if entity else None

    def create(self, *, nome: str, preco: float, descricao: Optional[str], imagem: str) -> Product:
        now = datetime.now(timezone.utc)
        entity = ProductRow(
            nome=nome,
            preco=float(preco),
            descricao=descricao,
            imagem=imagem,
            created_at=now,
            updated_at=now,
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return _to_product(entity)

    def update(self, product_id: int, changes: dict[str, Any]) -> Optional[Product]:
        if not _storable_id(product_id):
            return None
        with get_session() as session:
            entity = session.get(ProductRow, product_id)
            if not entity:
                return None
            for field, value in changes.items():
                setattr(entity, field, float(value) if field == "preco" else value)
            entity.updated_at = datetime.now(timezone.utc)
            session.commit()
            session.refresh(entity)
            return _to_product(entity)

    def delete(self, product_id: int) -> bool:
        if not _storable_id(product_id):
            return False
        with get_session() as session:
            result = session.execute(delete(ProductRow).where(ProductRow.id == product_id))
            session.commit()
            return bool(result.rowcount)


class SQLContactRepository:
    """Create/list helpers for the contatos table."""

    def create(self, *, nome: str, email: str, assunto: str, mensagem: str, data_envio: datetime) -> Contact:
        entity = ContactRow(
            nome=nome,
            email=email,
            assunto=assunto,
            mensagem=mensagem,
            created_at=data_envio,
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return _to_contact(entity)

    def list(self) -> list[Contact]:
        with get_session() as session:
            stmt = select(ContactRow).order_by(ContactRow.created_at.desc(), ContactRow.id.desc())
            return [_to_contact(row) for row in session.execute(stmt).scalars().all()]


class SQLAboutRepository:
    """Singleton JSON document kept in row id=1 of the sobre table."""

    def get(self, default: Any = None) -> Any:
        with get_session() as session:
            entity = session.get(AboutContent, ABOUT_ROW_ID)
            return entity.data if entity else default

    def set(self, document: Any) -> None:
        now = datetime.now(timezone.utc)
        with get_session() as session:
            entity = session.get(AboutContent, ABOUT_ROW_ID)
            if not entity:
                entity = AboutContent(id=ABOUT_ROW_ID, data=document, updated_at=now)
                session.add(entity)
            else:
                entity.data = document
                entity.updated_at = now
            session.commit()
