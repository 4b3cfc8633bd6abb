"""
Implementacion del repositorio de cartas.
Maneja las operaciones de base de datos para CardModel y sus tablas hijas.

Cada operacion abre su propia sesion. `upsert_card` corre en una unica
transaccion: upsert del padre, borrado de hijos e insercion de los hijos
actuales se confirman juntos o no se confirma nada.
"""
from dataclasses import asdict
from datetime import datetime
from typing import List, Optional

from loguru import logger
from sqlalchemy import delete, func, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import undefer

from index_duel.domain.entities import Card
from index_duel.infrastructure.database.models import (
    CardImageModel,
    CardModel,
    CardPriceModel,
    CardSetModel,
)
from index_duel.shared.exceptions import PersistenceException
from index_duel.shared.utils.datetime_utils import ensure_utc, utc_now


# Campos que un refresco puede modificar en una carta existente
_MUTABLE_CARD_FIELDS = (
    "name",
    "type",
    "frame_type",
    "description",
    "atk",
    "defense",
    "level",
    "race",
    "attribute",
)

_CHILD_MODELS = (CardSetModel, CardImageModel, CardPriceModel)

# INSERT ... ON CONFLICT por dialecto (PostgreSQL en produccion, SQLite en tests)
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CardRepository:
    """Repositorio para gestionar cartas en la base de datos."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def upsert_card(self, card: Card) -> None:
        """
        Inserta o actualiza una carta y reemplaza todas sus colecciones hijas.

        Raises:
            PersistenceException: Si cualquier paso falla. La transaccion ya fue
                revertida y la carta queda como estaba antes de la llamada.
        """
        now = utc_now()
        table = CardModel.__tablename__
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.execute(self._build_card_upsert(session, card, now))

                    for model in _CHILD_MODELS:
                        table = model.__tablename__
                        await session.execute(delete(model).where(model.card_id == card.id))

                    table = CardSetModel.__tablename__
                    session.add_all(
                        CardSetModel(card_id=card.id, created_at=now, **asdict(card_set))
                        for card_set in card.card_sets
                    )
                    await session.flush()

                    table = CardImageModel.__tablename__
                    session.add_all(
                        CardImageModel(card_id=card.id, created_at=now, **asdict(image))
                        for image in card.card_images
                    )
                    await session.flush()

                    table = CardPriceModel.__tablename__
                    session.add_all(
                        CardPriceModel(card_id=card.id, created_at=now, updated_at=now, **asdict(price))
                        for price in card.card_prices
                    )
                    await session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error guardando carta {card.id} en tabla {table}: {e}")
            raise PersistenceException(
                f"No se pudo guardar la carta {card.id} (tabla {table}): {e}",
                table=table,
                card_id=card.id,
            ) from e

    def _build_card_upsert(self, session: AsyncSession, card: Card, now: datetime):
        """Construye el INSERT ... ON CONFLICT (id) DO UPDATE de la carta."""
        dialect_name = session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect_name)
        if insert is None:
            raise PersistenceException(
                f"Dialecto sin soporte de upsert: {dialect_name}",
                table=CardModel.__tablename__,
                card_id=card.id,
            )

        values = {field: getattr(card, field) for field in _MUTABLE_CARD_FIELDS}
        stmt = insert(CardModel.__table__).values(
            id=card.id,
            created_at=now,
            updated_at=now,
            **values,
        )
        update_columns = {field: stmt.excluded[field] for field in _MUTABLE_CARD_FIELDS}
        update_columns["updated_at"] = now
        return stmt.on_conflict_do_update(index_elements=["id"], set_=update_columns)

    async def get_card(self, card_id: int) -> Optional[CardModel]:
        """
        Obtiene una carta con sus sets, imagenes y precios.

        Returns:
            La carta, o None si no existe. Un error de base de datos lanza excepcion.
        """
        try:
            async with self._session_factory() as session:
                return await session.get(CardModel, card_id)
        except SQLAlchemyError as e:
            logger.error(f"Error obteniendo carta {card_id}: {e}")
            raise PersistenceException(
                f"No se pudo obtener la carta {card_id}: {e}", table="cards", card_id=card_id
            ) from e

    async def get_card_count(self) -> int:
        """Cuenta las cartas almacenadas. Se usa tambien como prueba de conectividad."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(func.count()).select_from(CardModel))
                return int(result.scalar_one())
        except SQLAlchemyError as e:
            logger.error(f"Error contando cartas: {e}")
            raise PersistenceException(f"No se pudo contar las cartas: {e}", table="cards") from e

    async def get_all_cards(self) -> List[CardModel]:
        """Obtiene todas las cartas ordenadas por id (snapshot completo)."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(CardModel).order_by(CardModel.id))
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error obteniendo todas las cartas: {e}")
            raise PersistenceException(f"No se pudo obtener las cartas: {e}", table="cards") from e

    async def get_cards_updated_since(self, since: datetime) -> List[CardModel]:
        """
        Obtiene las cartas creadas o actualizadas despues de `since`.

        Se comparan ambos timestamps para no perder cartas recien creadas.
        Orden: updated_at descendente.
        """
        since_utc = ensure_utc(since)
        stmt = (
            select(CardModel)
            .where(or_(CardModel.updated_at > since_utc, CardModel.created_at > since_utc))
            .order_by(CardModel.updated_at.desc(), CardModel.id)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error obteniendo cartas actualizadas desde {since_utc.isoformat()}: {e}")
            raise PersistenceException(
                f"No se pudo obtener las cartas actualizadas: {e}", table="cards"
            ) from e

    async def get_card_image(self, card_id: int, image_id: int) -> Optional[CardImageModel]:
        """Obtiene una imagen de una carta incluyendo sus binarios."""
        stmt = (
            select(CardImageModel)
            .where(CardImageModel.id == image_id, CardImageModel.card_id == card_id)
            .options(
                undefer(CardImageModel.image_data),
                undefer(CardImageModel.image_small_data),
                undefer(CardImageModel.image_cropped_data),
            )
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Error obteniendo imagen {image_id} de carta {card_id}: {e}")
            raise PersistenceException(
                f"No se pudo obtener la imagen {image_id}: {e}", table="card_images", card_id=card_id
            ) from e
