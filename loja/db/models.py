"""SQLAlchemy models mirroring the JSON collections."""
from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    JSON,
    func,
)

from .session import Base

# JSON-store ids are epoch milliseconds; SQLite only autoincrements INTEGER keys.
RecordId = BigInteger().with_variant(Integer, "sqlite")


class Product(Base):
    __tablename__ = "produtos"

    id = Column(RecordId, primary_key=True, autoincrement=True)
    nome = Column(String(255), nullable=False)
    preco = Column(Float, nullable=False)
    descricao = Column(Text, nullable=True)
    imagem = Column(String(1024), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class Contact(Base):
    __tablename__ = "contatos"

    id = Column(RecordId, primary_key=True, autoincrement=True)
    nome = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    assunto = Column(String(255), nullable=True)
    mensagem = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)


class AboutContent(Base):
    __tablename__ = "sobre"

    id = Column(Integer, primary_key=True)
    data = Column(JSON, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
