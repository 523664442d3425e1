from __future__ import annotations

from fastapi import APIRouter, Request

from loja.services.checkout_service import CheckoutService

router = APIRouter(prefix="/api", tags=["pagamentos"])


def _get_checkout_service(request: Request) -> CheckoutService:
    svc = getattr(getattr(request.app, "state", None), "checkout_service", None)
    if not svc:
        raise RuntimeError("CheckoutService nao configurado")
    return svc


@router.post("/create-preference")
def create_preference(request: Request):
    svc = _get_checkout_service(request)
    return {"id": svc.create_preference()}
