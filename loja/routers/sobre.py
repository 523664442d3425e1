from __future__ import annotations

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from loja.core.errors import ValidationError
from loja.services.about_service import AboutService

router = APIRouter(prefix="/api/sobre", tags=["sobre"])


def _get_about_service(request: Request) -> AboutService:
    svc = getattr(getattr(request.app, "state", None), "about_service", None)
    if not svc:
        raise RuntimeError("AboutService nao configurado")
    return svc


@router.get("")
def get_about(request: Request):
    return _get_about_service(request).get_content()


@router.post("")
async def save_about(request: Request):
    svc = _get_about_service(request)
    try:
        document = await request.json()
    except ValueError as exc:
        raise ValidationError("Corpo da requisicao nao e um JSON valido.") from exc
    await run_in_threadpool(svc.set_content, document)
    return {"message": "Conteúdo salvo com sucesso!"}
