"""
Entidad de dominio: Card (Carta) y sus colecciones hijas.

Una carta es duena exclusiva de sus sets, imagenes y precios: cada refresco
reemplaza las tres colecciones completas.

Los escalares opcionales usan None para "ausente en el upstream"; un string
vacio significa "presente pero vacio" y se conserva tal cual.
"""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class CardSet:
    """Una edicion/impresion concreta de la carta."""

    set_name: str = ""
    set_code: str = ""
    set_rarity: str = ""
    set_rarity_code: str = ""
    set_price: Optional[str] = None


@dataclass
class CardImage:
    """
    Un slot de imagen de la carta.

    Las URLs vienen del upstream; los campos binarios solo se llenan tras una
    descarga exitosa.
    """

    image_url: str = ""
    image_url_small: str = ""
    image_url_cropped: str = ""
    image_data: Optional[bytes] = None
    image_small_data: Optional[bytes] = None
    image_cropped_data: Optional[bytes] = None
    content_type: Optional[str] = None
    file_size: Optional[int] = None


@dataclass
class CardPrice:
    """Snapshot de precios de mercado (strings opacos del upstream)."""

    cardmarket_price: Optional[str] = None
    tcgplayer_price: Optional[str] = None
    ebay_price: Optional[str] = None
    amazon_price: Optional[str] = None
    coolstuffinc_price: Optional[str] = None


@dataclass
class Card:
    """
    Entidad raiz del catalogo.

    El `id` lo asigna el upstream y es estable entre refrescos.
    """

    id: int
    name: str = ""
    type: str = ""
    frame_type: str = ""
    description: str = ""
    atk: Optional[int] = None
    defense: Optional[int] = None
    level: Optional[int] = None
    race: str = ""
    attribute: str = ""
    card_sets: List[CardSet] = field(default_factory=list)
    card_images: List[CardImage] = field(default_factory=list)
    card_prices: List[CardPrice] = field(default_factory=list)

    def __post_init__(self):
        """Validaciones despues de la inicializacion."""
        if self.id is None:
            raise ValueError("La carta debe tener un id")
