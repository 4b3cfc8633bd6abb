"""
Entidades de dominio.
"""
from .card import Card, CardImage, CardPrice, CardSet

__all__ = [
    "Card",
    "CardImage",
    "CardPrice",
    "CardSet",
]
