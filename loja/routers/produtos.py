from __future__ import annotations

from fastapi import APIRouter, File, Form, Request, Response, UploadFile
from starlette.concurrency import run_in_threadpool

from loja.core.media import ImageUpload
from loja.services.product_service import ProductService

router = APIRouter(prefix="/api/produtos", tags=["produtos"])


def _get_product_service(request: Request) -> ProductService:
    svc = getattr(getattr(request.app, "state", None), "product_service", None)
    if not svc:
        raise RuntimeError("ProductService nao configurado")
    return svc


async def _read_upload(upload: UploadFile | None) -> ImageUpload | None:
    if upload is None or not upload.filename:
        return None
    data = await upload.read()
    return ImageUpload(filename=upload.filename, content_type=(upload.content_type or "").lower(), data=data)


def _sent_fields(**values: str | None) -> dict[str, str]:
    return {name: value for name, value in values.items() if value is not None}


@router.get("")
def list_products(request: Request):
    svc = _get_product_service(request)
    return [product.to_dict() for product in svc.list_products()]


@router.get("/{product_id}")
def get_product(product_id: int, request: Request):
    svc = _get_product_service(request)
    return svc.get_product(product_id).to_dict()


@router.post("", status_code=201)
async def create_product(
    request: Request,
    nome: str | None = Form(None),
    preco: str | None = Form(None),
    descricao: str | None = Form(None),
    imagem: UploadFile | None = File(None),
):
    svc = _get_product_service(request)
    upload = await _read_upload(imagem)
    # media upload and storage writes block; keep them off the event loop
    product = await run_in_threadpool(
        svc.create_product, _sent_fields(nome=nome, preco=preco, descricao=descricao), upload
    )
    return product.to_dict()


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    request: Request,
    nome: str | None = Form(None),
    preco: str | None = Form(None),
    descricao: str | None = Form(None),
    imagem: UploadFile | None = File(None),
):
    svc = _get_product_service(request)
    upload = await _read_upload(imagem)
    product = await run_in_threadpool(
        svc.update_product, product_id, _sent_fields(nome=nome, preco=preco, descricao=descricao), upload
    )
    return product.to_dict()


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int, request: Request):
    svc = _get_product_service(request)
    svc.delete_product(product_id)
    return Response(status_code=204)
