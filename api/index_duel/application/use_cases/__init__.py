"""
Casos de uso de la aplicacion.
"""
from .card_sync_use_cases import CardSyncUseCases

__all__ = ["CardSyncUseCases"]
