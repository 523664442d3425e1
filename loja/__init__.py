"""Loja DeCastro backend: catalog, contact inbox, about page and checkout."""

__version__ = "1.0.0"
