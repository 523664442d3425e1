"""
JSON file store: whole-collection rewrites, id assignment and corrupt files.
"""
from __future__ import annotations

import json
import sys
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Garante que o pacote loja seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from loja.core.errors import StorageError  # noqa: E402
from loja.repositories.json_storage import (  # noqa: E402
    JsonAboutRepository,
    JsonContactRepository,
    JsonProductRepository,
)


def _product(repo: JsonProductRepository, nome: str = "Livro", preco: float = 50.0):
    return repo.create(nome=nome, preco=preco, descricao=None, imagem="/uploads/1-capa.png")


def test_missing_file_reads_as_empty_collection(tmp_path):
    repo = JsonProductRepository(tmp_path)
    assert repo.list() == []
    assert repo.get(1) is None
    assert not (tmp_path / "produtos.json").exists()


def test_create_writes_valid_array_with_unique_ids(tmp_path):
    repo = JsonProductRepository(tmp_path)
    first = _product(repo, "A")
    second = _product(repo, "B")
    third = _product(repo, "C")

    assert len({first.id, second.id, third.id}) == 3
    stored = json.loads((tmp_path / "produtos.json").read_text(encoding="utf-8"))
    assert isinstance(stored, list)
    assert [item["nome"] for item in stored] == ["A", "B", "C"]
    assert all(isinstance(item["preco"], float) for item in stored)


def test_update_overwrites_only_given_fields(tmp_path):
    repo = JsonProductRepository(tmp_path)
    created = repo.create(nome="Livro", preco=10, descricao="Capa dura", imagem="/uploads/a.png")

    updated = repo.update(created.id, {"preco": "12.5"})

    assert updated is not None
    assert updated.preco == 12.5
    assert updated.nome == "Livro"
    assert updated.descricao == "Capa dura"
    assert updated.imagem == "/uploads/a.png"
    assert repo.get(created.id) == updated
    assert repo.update(created.id + 999, {"nome": "X"}) is None


def test_delete_reports_missing_ids(tmp_path):
    repo = JsonProductRepository(tmp_path)
    created = _product(repo)
    assert repo.delete(created.id) is True
    assert repo.delete(created.id) is False
    assert repo.list() == []


def test_corrupt_file_fails_loudly(tmp_path):
    (tmp_path / "produtos.json").write_text("{not json", encoding="utf-8")
    repo = JsonProductRepository(tmp_path)
    with pytest.raises(StorageError) as excinfo:
        repo.list()
    assert "produtos.json" in excinfo.value.message
    # the file is left untouched for inspection
    assert (tmp_path / "produtos.json").read_text(encoding="utf-8") == "{not json"


def test_non_array_file_is_rejected(tmp_path):
    (tmp_path / "contatos.json").write_text('{"id": 1}', encoding="utf-8")
    with pytest.raises(StorageError):
        JsonContactRepository(tmp_path).list()


def test_contacts_are_listed_newest_first(tmp_path):
    repo = JsonContactRepository(tmp_path)
    base = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    for offset, nome in enumerate(["Ana", "Bruno", "Carla"]):
        repo.create(
            nome=nome,
            email=f"{nome.lower()}@example.com",
            assunto="Sem Assunto",
            mensagem="Oi",
            data_envio=base + timedelta(minutes=offset),
        )

    listed = repo.list()
    assert [c.nome for c in listed] == ["Carla", "Bruno", "Ana"]
    stored = json.loads((tmp_path / "contatos.json").read_text(encoding="utf-8"))
    assert stored[0]["dataEnvio"] == "2024-05-01T12:00:00.000Z"


def test_concurrent_writers_do_not_lose_records(tmp_path):
    repo = JsonContactRepository(tmp_path)
    now = datetime.now(timezone.utc)

    def worker(idx: int) -> None:
        repo.create(nome=f"n{idx}", email=f"{idx}@x.com", assunto="Sem Assunto", mensagem="m", data_envio=now)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    listed = repo.list()
    assert len(listed) == 20
    assert len({c.id for c in listed}) == 20


def test_about_document_is_replaced_whole(tmp_path):
    repo = JsonAboutRepository(tmp_path)
    assert repo.get() is None
    repo.set({"title": "X", "paragraphs": ["a", "b"]})
    repo.set({"title": "Y"})
    assert repo.get() == {"title": "Y"}


def test_about_distinguishes_stored_null_from_never_written(tmp_path):
    repo = JsonAboutRepository(tmp_path)
    assert repo.get(default={}) == {}
    repo.set(None)
    assert repo.get(default={}) is None
