from __future__ import annotations

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from loja.core.errors import ValidationError
from loja.services.contact_service import ContactService

router = APIRouter(prefix="/api/contatos", tags=["contatos"])

FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _get_contact_service(request: Request) -> ContactService:
    svc = getattr(getattr(request.app, "state", None), "contact_service", None)
    if not svc:
        raise RuntimeError("ContactService nao configurado")
    return svc


async def _read_payload(request: Request) -> dict:
    """Accept a JSON object (site fetch) or a plain HTML form post."""
    content_type = (request.headers.get("content-type") or "").lower()
    if content_type.startswith(FORM_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}
    body = await request.body()
    if not body.strip():
        return {}
    try:
        payload = await request.json()
    except ValueError as exc:
        raise ValidationError("Corpo da requisicao nao e um JSON valido.") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Corpo da requisicao deve ser um objeto JSON.")
    return payload


@router.get("")
def list_contacts(request: Request):
    svc = _get_contact_service(request)
    return [contact.to_dict() for contact in svc.list_contacts()]


@router.post("", status_code=201)
async def create_contact(request: Request):
    svc = _get_contact_service(request)
    payload = await _read_payload(request)
    contact = await run_in_threadpool(svc.create_contact, payload)
    return contact.to_dict()
