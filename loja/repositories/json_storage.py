"""
Flat-file JSON persistence adapter.

Each collection lives in one file under DATA_DIR (produtos.json,
contatos.json) and every mutation rewrites the whole file. Writers of the
same file are serialized by a per-path lock; the rewrite goes through a
temporary file + os.replace so readers never see a half-written array.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

from loja.core.errors import StorageError
from loja.domain.catalog import Contact, Product, newest_first, next_timestamp_id

PRODUCTS_FILE = "produtos.json"
CONTACTS_FILE = "contatos.json"
ABOUT_FILE = "sobre.json"

_locks: dict[str, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock


class JsonFile:
    """One JSON document on disk with whole-file read/rewrite."""

    def __init__(self, path: str | Path, default: Callable[[], Any]) -> None:
        self.path = Path(path)
        self.default = default
        self.lock = _lock_for(self.path)

    def load(self) -> Any:
        if not self.path.exists():
            return self.default()
        try:
            with self.path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Arquivo de dados corrompido: {self.path.name}") from exc
        except OSError as exc:
            raise StorageError(f"Falha ao ler {self.path.name}") from exc

    def save(self, data: Any) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise StorageError(f"Falha ao gravar {self.path.name}") from exc


class JsonCollection(JsonFile):
    """A JSON file that always holds an array."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(path, list)

    def load(self) -> list[dict]:
        data = super().load()
        if not isinstance(data, list):
            raise StorageError(f"Arquivo de dados invalido (esperado um array): {self.path.name}")
        return data


class JsonProductRepository:
    def __init__(self, data_dir: str | Path) -> None:
        self.collection = JsonCollection(Path(data_dir) / PRODUCTS_FILE)

    def list(self) -> list[Product]:
        return [Product.from_dict(item) for item in self.collection.load()]

    def get(self, product_id: int) -> Optional[Product]:
        for item in self.collection.load():
            if int(item.get("id", 0)) == product_id:
                return Product.from_dict(item)
        return None

    def create(self, *, nome: str, preco: float, descricao: Optional[str], imagem: str) -> Product:
        with self.collection.lock:
            items = self.collection.load()
            product = Product(
                id=next_timestamp_id(int(item.get("id", 0)) for item in items),
                nome=nome,
                preco=float(preco),
                descricao=descricao,
                imagem=imagem,
            )
            items.append(product.to_dict())
            self.collection.save(items)
        return product

    def update(self, product_id: int, changes: dict[str, Any]) -> Optional[Product]:
        with self.collection.lock:
            items = self.collection.load()
            for index, item in enumerate(items):
                if int(item.get("id", 0)) != product_id:
                    continue
                product = Product.from_dict(item)
                for field, value in changes.items():
                    setattr(product, field, float(value) if field == "preco" else value)
                items[index] = product.to_dict()
                self.collection.save(items)
                return product
        return None

    def delete(self, product_id: int) -> bool:
        with self.collection.lock:
            items = self.collection.load()
            remaining = [item for item in items if int(item.get("id", 0)) != product_id]
            if len(remaining) == len(items):
                return False
            self.collection.save(remaining)
        return True


class JsonContactRepository:
    def __init__(self, data_dir: str | Path) -> None:
        self.collection = JsonCollection(Path(data_dir) / CONTACTS_FILE)

    def create(self, *, nome: str, email: str, assunto: str, mensagem: str, data_envio: datetime) -> Contact:
        with self.collection.lock:
            items = self.collection.load()
            contact = Contact(
                id=next_timestamp_id(int(item.get("id", 0)) for item in items),
                nome=nome,
                email=email,
                assunto=assunto,
                mensagem=mensagem,
                data_envio=data_envio,
            )
            items.append(contact.to_dict())
            self.collection.save(items)
        return contact

    def list(self) -> list[Contact]:
        return newest_first(Contact.from_dict(item) for item in self.collection.load())


_NOT_WRITTEN = object()


class JsonAboutRepository:
    def __init__(self, data_dir: str | Path) -> None:
        self.document = JsonFile(Path(data_dir) / ABOUT_FILE, lambda: _NOT_WRITTEN)

    def get(self, default: Any = None) -> Any:
        # a stored `null` is a real document, only a missing file means "never written"
        document = self.document.load()
        return default if document is _NOT_WRITTEN else document

    def set(self, document: Any) -> None:
        with self.document.lock:
            self.document.save(document)
