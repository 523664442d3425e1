"""
Persistence adapters.

Two interchangeable strategies live here: flat JSON files (json_storage) and
SQLAlchemy tables (sql_repository). Services depend on the protocols in
`base` and receive the concrete adapters from `factory.build_repositories`.
"""
