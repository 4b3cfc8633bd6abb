"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .card_dto import (
    CardDTO,
    CardImageDTO,
    CardPriceDTO,
    CardSetDTO,
    HealthResponseDTO,
    RefreshReportDTO,
    RefreshStartedDTO,
    RefreshStatusDTO,
    SyncRequestDTO,
    SyncResponseDTO,
)

__all__ = [
    "CardDTO",
    "CardImageDTO",
    "CardPriceDTO",
    "CardSetDTO",
    "HealthResponseDTO",
    "RefreshReportDTO",
    "RefreshStartedDTO",
    "RefreshStatusDTO",
    "SyncRequestDTO",
    "SyncResponseDTO",
]
