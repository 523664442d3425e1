"""
Core utilities shared across the Loja API.

This package hosts:
- configuration helpers (env vars, paths, backend selection)
- the error taxonomy and logging setup
- adapters for external collaborators: image storage (local disk or
  Cloudinary) and the payment gateway (Mercado Pago)

Services depend on these primitives instead of reading the environment or
calling third-party SDKs directly.
"""
