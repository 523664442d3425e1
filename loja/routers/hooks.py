import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter(prefix="/api", tags=["hooks"])
logger = logging.getLogger(__name__)


@router.post("/webhook", response_class=PlainTextResponse)
async def payment_webhook(request: Request):
    body = await request.body()
    try:
        payload = json.loads(body) if body else None
    except ValueError:
        payload = body.decode("utf-8", errors="replace")
    logger.info("Webhook recebido: query=%s payload=%s", dict(request.query_params), payload)
    return "OK"
