"""
Modelos de base de datos (ORM) del catalogo de cartas.

Las tablas hijas se cargan con `selectin` (una consulta por relacion, sin
JOIN) y las columnas binarias de imagenes son diferidas: solo se leen cuando
se piden explicitamente.
"""
from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, LargeBinary, String, Text
from sqlalchemy.orm import deferred, relationship

from index_duel.infrastructure.database.session import Base


class CardModel(Base):
    """Modelo de base de datos para cartas."""

    __tablename__ = "cards"

    # El id lo asigna el upstream
    id = Column(BigInteger, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False, index=True)
    type = Column(String(100), nullable=False, default="")
    frame_type = Column(String(50), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    atk = Column(Integer, nullable=True)
    defense = Column(Integer, nullable=True)
    level = Column(Integer, nullable=True)
    race = Column(String(100), nullable=False, default="")
    attribute = Column(String(50), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, index=True)

    card_sets = relationship(
        "CardSetModel",
        back_populates="card",
        lazy="selectin",
        order_by="CardSetModel.id",
        passive_deletes=True,
    )
    card_images = relationship(
        "CardImageModel",
        back_populates="card",
        lazy="selectin",
        order_by="CardImageModel.id",
        passive_deletes=True,
    )
    card_prices = relationship(
        "CardPriceModel",
        back_populates="card",
        lazy="selectin",
        order_by="CardPriceModel.id",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Card(id={self.id}, name={self.name}, type={self.type})>"


class CardSetModel(Base):
    """Modelo de base de datos para las ediciones de una carta."""

    __tablename__ = "card_sets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    card_id = Column(BigInteger, ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True)
    set_name = Column(String(255), nullable=False)
    set_code = Column(String(50), nullable=False)
    set_rarity = Column(String(100), nullable=False, default="")
    set_rarity_code = Column(String(50), nullable=False, default="")
    set_price = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    card = relationship("CardModel", back_populates="card_sets")

    def __repr__(self):
        return f"<CardSet(id={self.id}, card_id={self.card_id}, set_code={self.set_code})>"


class CardImageModel(Base):
    """
    Modelo de base de datos para las imagenes de una carta.

    Guarda las tres URLs de la CDN y, si la descarga tuvo exito, el binario de
    cada variante. `content_type` y `file_size` describen la imagen completa.
    """

    __tablename__ = "card_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    card_id = Column(BigInteger, ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(Text, nullable=False, default="")
    image_url_small = Column(Text, nullable=False, default="")
    image_url_cropped = Column(Text, nullable=False, default="")
    image_data = deferred(Column(LargeBinary, nullable=True))
    image_small_data = deferred(Column(LargeBinary, nullable=True))
    image_cropped_data = deferred(Column(LargeBinary, nullable=True))
    content_type = Column(String(100), nullable=True)
    file_size = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    card = relationship("CardModel", back_populates="card_images")

    def __repr__(self):
        return f"<CardImage(id={self.id}, card_id={self.card_id}, content_type={self.content_type})>"


class CardPriceModel(Base):
    """Modelo de base de datos para los precios de mercado de una carta."""

    __tablename__ = "card_prices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    card_id = Column(BigInteger, ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True)
    cardmarket_price = Column(String(50), nullable=True)
    tcgplayer_price = Column(String(50), nullable=True)
    ebay_price = Column(String(50), nullable=True)
    amazon_price = Column(String(50), nullable=True)
    coolstuffinc_price = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    card = relationship("CardModel", back_populates="card_prices")

    def __repr__(self):
        return f"<CardPrice(id={self.id}, card_id={self.card_id})>"
