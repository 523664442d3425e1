"""
FastAPI routers grouped por recurso (produtos, contatos, sobre, pagamentos).

Each module exposes an APIRouter included by `loja.app.create_app`. Routers
only translate HTTP into service calls; services come from `app.state`.
"""
