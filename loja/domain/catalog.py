"""Product and Contact records plus the input schemas that guard them."""
from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaError

from loja.core.errors import ValidationError

DEFAULT_ASSUNTO = "Sem Assunto"

_Schema = TypeVar("_Schema", bound=BaseModel)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(value: datetime) -> str:
    """Format like JavaScript's toISOString: UTC, milliseconds, `Z` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = datetime.fromtimestamp(value / 1000 if value > 1e11 else value, tz=timezone.utc)
    else:
        text = str(value or "").strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def next_timestamp_id(existing_ids: Iterable[int], now_ms: int | None = None) -> int:
    """Millisecond timestamp id, bumped past the largest id already taken."""
    candidate = now_ms if now_ms is not None else int(time.time() * 1000)
    highest = max(existing_ids, default=0)
    return candidate if candidate > highest else highest + 1


@dataclass
class Product:
    id: int
    nome: str
    preco: float
    descricao: Optional[str]
    imagem: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "preco": self.preco,
            "descricao": self.descricao,
            "imagem": self.imagem,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Product":
        return cls(
            id=int(data["id"]),
            nome=str(data.get("nome") or ""),
            preco=float(data.get("preco") or 0),
            descricao=data.get("descricao"),
            imagem=str(data.get("imagem") or ""),
        )


@dataclass
class Contact:
    id: int
    nome: str
    email: str
    assunto: str
    mensagem: str
    data_envio: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "email": self.email,
            "assunto": self.assunto,
            "mensagem": self.mensagem,
            "dataEnvio": iso_timestamp(self.data_envio),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Contact":
        return cls(
            id=int(data["id"]),
            nome=str(data.get("nome") or ""),
            email=str(data.get("email") or ""),
            assunto=data.get("assunto") or DEFAULT_ASSUNTO,
            mensagem=str(data.get("mensagem") or ""),
            data_envio=parse_timestamp(data.get("dataEnvio") or data.get("createdAt") or 0),
        )


def newest_first(contacts: Iterable[Contact]) -> list[Contact]:
    return sorted(contacts, key=lambda c: (c.data_envio, c.id), reverse=True)


# -------------------------- input schemas --------------------------
class _Input(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


def _price_text(value: Any) -> Any:
    # Brazilian forms send "12,50"; an empty field means "not sent".
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        return value or None
    return value


class ProductCreate(_Input):
    nome: str = Field(min_length=1, max_length=255)
    preco: float = Field(ge=0, allow_inf_nan=False)
    descricao: Optional[str] = None

    @field_validator("preco", mode="before")
    @classmethod
    def _decimal_comma(cls, value: Any) -> Any:
        return _price_text(value)

    @field_validator("descricao")
    @classmethod
    def _blank_descricao(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class ProductUpdate(_Input):
    nome: Optional[str] = Field(None, min_length=1, max_length=255)
    preco: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    descricao: Optional[str] = None

    @field_validator("preco", mode="before")
    @classmethod
    def _decimal_comma(cls, value: Any) -> Any:
        return _price_text(value)

    @field_validator("descricao")
    @classmethod
    def _blank_descricao(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    def changes(self) -> dict[str, Any]:
        """Fields present in the request; `descricao` may be cleared, the others may not."""
        result: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None and name != "descricao":
                continue
            result[name] = value
        return result


class ContactCreate(_Input):
    nome: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=1, max_length=255)
    assunto: Optional[str] = Field(None, max_length=255, validate_default=True)
    mensagem: str = Field(min_length=1)

    @field_validator("assunto")
    @classmethod
    def _default_assunto(cls, value: Optional[str]) -> str:
        return value or DEFAULT_ASSUNTO


def parse_input(schema: type[_Schema], data: Mapping[str, Any]) -> _Schema:
    """Validate `data` against `schema`, raising ValidationError with the offending fields."""
    try:
        return schema.model_validate(dict(data))
    except SchemaError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ValidationError(
            "Campos obrigatorios ausentes ou invalidos: " + ", ".join(fields or ["corpo"]) + "."
        ) from exc
