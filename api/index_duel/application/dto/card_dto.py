"""
DTOs del catalogo de cartas y del protocolo de sincronizacion movil.

Los nombres JSON de la carta siguen el formato del upstream (`frameType`,
`desc`, `def`) para que el cliente movil reciba la misma forma que la API
remota. Los binarios de imagen no viajan en la sincronizacion.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from index_duel.shared.utils.datetime_utils import ensure_utc


class _ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CardSetDTO(_ORMModel):
    id: int
    set_name: str
    set_code: str
    set_rarity: str
    set_rarity_code: str
    set_price: Optional[str] = None


class CardImageDTO(_ORMModel):
    id: int
    image_url: str
    image_url_small: str
    image_url_cropped: str
    content_type: Optional[str] = None
    file_size: Optional[int] = None


class CardPriceDTO(_ORMModel):
    id: int
    cardmarket_price: Optional[str] = None
    tcgplayer_price: Optional[str] = None
    ebay_price: Optional[str] = None
    amazon_price: Optional[str] = None
    coolstuffinc_price: Optional[str] = None


class CardDTO(_ORMModel):
    """Carta completa con sus colecciones hijas."""

    id: int
    name: str
    type: str
    frame_type: str = Field(serialization_alias="frameType")
    description: str = Field(serialization_alias="desc")
    atk: Optional[int] = None
    defense: Optional[int] = Field(None, serialization_alias="def")
    level: Optional[int] = None
    race: str
    attribute: str
    card_sets: List[CardSetDTO] = Field(default_factory=list)
    card_images: List[CardImageDTO] = Field(default_factory=list)
    card_prices: List[CardPriceDTO] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class SyncRequestDTO(BaseModel):
    """
    Request de sincronizacion.

    `last_update` vacio (o null) indica un cliente nuevo: recibe el catalogo completo.
    """

    last_update: Optional[str] = Field(
        "",
        description="Marca de agua devuelta por la sincronizacion anterior (RFC 3339), o vacio"
    )


class SyncResponseDTO(BaseModel):
    """Respuesta de sincronizacion: cartas, nueva marca de agua y total."""

    cards: List[CardDTO]
    last_update: str
    total_cards: int


class HealthResponseDTO(BaseModel):
    status: str
    cards_count: int


class RefreshReportDTO(BaseModel):
    """Resumen del ultimo ciclo de refresco."""

    started_at: datetime
    finished_at: Optional[datetime] = None
    total_cards: int
    persisted_cards: int
    failed_cards: int
    image_failures: int
    failures: List[Tuple[Optional[int], str]] = Field(default_factory=list)


class RefreshStartedDTO(BaseModel):
    status: str
    message: str


class RefreshStatusDTO(BaseModel):
    is_running: bool
    scheduler_state: Optional[str] = None
    last_report: Optional[RefreshReportDTO] = None
