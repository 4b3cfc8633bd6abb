"""
Schemas del JSON que devuelve la API remota.

El upstream usa nombres propios (`frameType`, `desc`, `def`); aqui se mapean a
los nombres de las entidades. Los campos desconocidos se ignoran. En esta etapa
las imagenes solo traen URLs.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from index_duel.domain.entities import Card, CardImage, CardPrice, CardSet


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class UpstreamCardSet(_UpstreamModel):
    set_name: str = ""
    set_code: str = ""
    set_rarity: str = ""
    set_rarity_code: str = ""
    set_price: Optional[str] = None

    def to_entity(self) -> CardSet:
        return CardSet(**self.model_dump())


class UpstreamCardImage(_UpstreamModel):
    image_url: str = ""
    image_url_small: str = ""
    image_url_cropped: str = ""

    def to_entity(self) -> CardImage:
        return CardImage(**self.model_dump())


class UpstreamCardPrice(_UpstreamModel):
    cardmarket_price: Optional[str] = None
    tcgplayer_price: Optional[str] = None
    ebay_price: Optional[str] = None
    amazon_price: Optional[str] = None
    coolstuffinc_price: Optional[str] = None

    def to_entity(self) -> CardPrice:
        return CardPrice(**self.model_dump())


class UpstreamCard(_UpstreamModel):
    id: int
    name: str = ""
    type: str = ""
    frame_type: str = Field("", alias="frameType")
    description: str = Field("", alias="desc")
    atk: Optional[int] = None
    defense: Optional[int] = Field(None, alias="def")
    level: Optional[int] = None
    race: str = ""
    attribute: str = ""
    card_sets: List[UpstreamCardSet] = Field(default_factory=list)
    card_images: List[UpstreamCardImage] = Field(default_factory=list)
    card_prices: List[UpstreamCardPrice] = Field(default_factory=list)

    def to_entity(self) -> Card:
        """Convierte el registro del upstream a la entidad de dominio."""
        return Card(
            id=self.id,
            name=self.name,
            type=self.type,
            frame_type=self.frame_type,
            description=self.description,
            atk=self.atk,
            defense=self.defense,
            level=self.level,
            race=self.race,
            attribute=self.attribute,
            card_sets=[s.to_entity() for s in self.card_sets],
            card_images=[i.to_entity() for i in self.card_images],
            card_prices=[p.to_entity() for p in self.card_prices],
        )


class UpstreamDataset(_UpstreamModel):
    """
    Respuesta completa: `{"data": [Card, ...]}`.

    Cada carta se deja como dict y se valida por separado durante el
    procesamiento: un registro malformado solo afecta a esa carta.
    """

    data: List[Dict[str, Any]] = Field(default_factory=list)
