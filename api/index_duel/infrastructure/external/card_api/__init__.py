"""
Integracion con la API remota del catalogo de cartas.

- `CardApiClient`: descarga el dataset completo y las imagenes de la CDN.
- `schemas`: forma del JSON del upstream y su conversion a entidades de dominio.
"""
from .client import CardApiClient, ImagePayload, resolve_content_type

__all__ = [
    "CardApiClient",
    "ImagePayload",
    "resolve_content_type",
]
