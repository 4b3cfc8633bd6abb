"""
Servicios de aplicacion.

- CardRefreshPipeline: ingesta completa del catalogo (fetch, imagenes, upsert por carta).
"""
from .card_refresh_pipeline import CardRefreshPipeline, RefreshReport

__all__ = [
    "CardRefreshPipeline",
    "RefreshReport",
]
