"""One-off migration script: JSON files (DATA_DIR) -> DATABASE_URL."""
from __future__ import annotations

from pathlib import Path
import sys

from sqlalchemy import text

# Garantir que o pacote loja seja importável quando rodado diretamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from loja.core.config import get_settings
from loja.db.create_tables import sync_schema
from loja.db.models import AboutContent, Contact as ContactRow, Product as ProductRow
from loja.db.session import get_session
from loja.repositories.json_storage import JsonAboutRepository, JsonContactRepository, JsonProductRepository
from loja.repositories.sql_repository import ABOUT_ROW_ID


def migrate(data_dir: str | None = None) -> dict[str, int]:
    """Copy products, contacts and the about document, keeping ids. Safe to re-run."""
    source = data_dir or get_settings().data_dir
    sync_schema()

    products = JsonProductRepository(source).list()
    contacts = JsonContactRepository(source).list()
    missing = object()
    about = JsonAboutRepository(source).get(default=missing)

    with get_session() as session:
        for product in products:
            session.merge(
                ProductRow(
                    id=product.id,
                    nome=product.nome,
                    preco=product.preco,
                    descricao=product.descricao,
                    imagem=product.imagem,
                )
            )
        for contact in contacts:
            session.merge(
                ContactRow(
                    id=contact.id,
                    nome=contact.nome,
                    email=contact.email,
                    assunto=contact.assunto,
                    mensagem=contact.mensagem,
                    created_at=contact.data_envio,
                )
            )
        if about is not missing:
            session.merge(AboutContent(id=ABOUT_ROW_ID, data=about))
        session.commit()

        if session.get_bind().dialect.name == "postgresql":
            # ids were inserted explicitly; move the serial sequences past them
            for table in ("produtos", "contatos"):
                session.execute(
                    text(
                        f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                        f"COALESCE((SELECT MAX(id) FROM {table}), 0) + 1, false)"
                    )
                )
            session.commit()

    return {"produtos": len(products), "contatos": len(contacts), "sobre": int(about is not missing)}


if __name__ == "__main__":
    counts = migrate(sys.argv[1] if len(sys.argv) > 1 else None)
    print(
        "JSON data migrated to SQL successfully: "
        + ", ".join(f"{name}={count}" for name, count in counts.items())
    )
