"""Engine/session helpers for the SQL backend (STORAGE_BACKEND=sql)."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from loja.core.config import get_settings

Base = declarative_base()


def _engine_options(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        # request handlers run in the threadpool; one SQLite connection may serve several threads
        return {"connect_args": {"check_same_thread": False}}
    # managed Postgres hosts drop idle connections
    return {"pool_pre_ping": True, "pool_recycle": 300}


@lru_cache
def get_engine() -> Engine:
    url = (get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL precisa estar configurada para STORAGE_BACKEND=sql.")
    return create_engine(url, future=True, **_engine_options(url))


@lru_cache
def _get_sessionmaker() -> sessionmaker:
    # repositories hand back plain dataclasses built after commit, so nothing needs refreshing
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False, future=True)


@contextmanager
def get_session() -> Iterator[Session]:
    session = _get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()


def reset_engine() -> None:
    """Dispose the cached engine so the next call reads DATABASE_URL again."""
    if get_engine.cache_info().currsize:
        get_engine().dispose()
    _get_sessionmaker.cache_clear()
    get_engine.cache_clear()
