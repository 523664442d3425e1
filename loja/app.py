import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from loja.core.config import Settings, get_settings
from loja.core.errors import LojaError
from loja.core.logging_setup import configure_logging
from loja.core.media import LOCAL_URL_PREFIX, get_media_storage
from loja.core.payments import get_payment_gateway
from loja.repositories.factory import build_repositories
from loja.routers import checkout as checkout_router
from loja.routers import contatos as contatos_router
from loja.routers import hooks as hooks_router
from loja.routers import produtos as produtos_router
from loja.routers import sobre as sobre_router
from loja.services.about_service import AboutService
from loja.services.checkout_service import CheckoutService
from loja.services.contact_service import ContactService
from loja.services.product_service import ProductService

logger = logging.getLogger(__name__)


class UploadStaticFiles(StaticFiles):
    def file_response(self, *args, **kwargs):
        response = super().file_response(*args, **kwargs)
        # Upload names are unique, a stored file never changes
        response.headers["Cache-Control"] = "public, max-age=31536000, immutable"
        return response


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"message": message}, status_code=status_code)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(LojaError)
    async def loja_error(request: Request, exc: LojaError):
        if exc.status_code >= 500:
            logger.error("%s %s falhou: %s", request.method, request.url.path, exc.message, exc_info=exc)
        else:
            logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return _error_response(exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
        message = "Requisicao invalida: " + (", ".join(fields) or "corpo") + "."
        logger.warning("%s %s -> 400: %s", request.method, request.url.path, message)
        return _error_response(message, 400)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"message": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        logger.error("%s %s: erro de banco de dados", request.method, request.url.path, exc_info=exc)
        return _error_response("Erro ao acessar o banco de dados.", 500)

    @app.exception_handler(OSError)
    async def io_error(request: Request, exc: OSError):
        logger.error("%s %s: erro de E/S", request.method, request.url.path, exc_info=exc)
        return _error_response("Erro de armazenamento.", 500)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error("%s %s: erro nao tratado", request.method, request.url.path, exc_info=exc)
        return _error_response("Erro interno do servidor.", 500)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API with the storage/media backends chosen in Settings."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Loja DeCastro API")
    origins = list(settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    if settings.storage_backend == "sql":
        from loja.db.create_tables import sync_schema

        added = sync_schema()
        logger.info("Banco de dados sincronizado (%d coluna(s) adicionada(s))", len(added))

    repositories = build_repositories(settings)
    media = get_media_storage(settings)
    app.state.settings = settings
    app.state.product_service = ProductService(repositories.products, media)
    app.state.contact_service = ContactService(repositories.contacts)
    app.state.about_service = AboutService(repositories.about)
    app.state.checkout_service = CheckoutService(get_payment_gateway(settings), settings)

    if settings.media_backend == "local":
        os.makedirs(settings.uploads_dir, exist_ok=True)
        app.mount(LOCAL_URL_PREFIX, UploadStaticFiles(directory=settings.uploads_dir), name="uploads")

    app.include_router(produtos_router.router)
    app.include_router(contatos_router.router)
    app.include_router(sobre_router.router)
    app.include_router(checkout_router.router)
    app.include_router(hooks_router.router)
    _register_error_handlers(app)

    logger.info(
        "API pronta (storage=%s, media=%s, env=%s)",
        settings.storage_backend,
        settings.media_backend,
        settings.app_env,
    )
    return app
