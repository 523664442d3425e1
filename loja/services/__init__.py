"""
High-level use cases for the Loja API.

Each service orchestrates the repositories/adapters it receives in its
constructor (product catalog, contact inbox, "Sobre" content, checkout).
Routers call these services instead of touching storage directly.
"""
