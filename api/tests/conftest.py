"""
Configuracion de fixtures para pytest.
"""
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import index_duel.infrastructure.database  # noqa: F401  registra los modelos
from index_duel.core.config import Settings
from index_duel.domain.entities import Card, CardImage, CardPrice, CardSet
from index_duel.infrastructure.database.session import Base, create_session_factory
from index_duel.infrastructure.repositories.card_repository import CardRepository


# URL de base de datos de prueba
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    """Settings completos sin depender del entorno ni de .env."""
    return Settings(
        _env_file=None,
        PG_HOST="localhost",
        PG_PORT=5432,
        PG_DATABASE="index_duel_test",
        PG_USER="tester",
        PG_PASSWORD="secret",
        DATABASE_URL=TEST_DATABASE_URL,
        API_URL="https://upstream.test/api/v7/cardinfo.php",
        LOG_FILE="",
        SCHEDULER_ENABLED=False,
    )


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Engine sobre una base SQLite en memoria.
    StaticPool comparte la unica conexion entre todas las sesiones del test.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(db_engine)


@pytest.fixture
def card_repository(session_factory) -> CardRepository:
    return CardRepository(session_factory)


@pytest.fixture
def make_card() -> Callable[..., Card]:
    """Fabrica de cartas con una edicion, una imagen y un precio."""

    def _make(card_id: int = 46986414, name: str = "Dark Magician", **overrides) -> Card:
        fields = dict(
            id=card_id,
            name=name,
            type="Normal Monster",
            frame_type="normal",
            description="The ultimate wizard in terms of attack and defense.",
            atk=2500,
            defense=2100,
            level=7,
            race="Spellcaster",
            attribute="DARK",
            card_sets=[
                CardSet(
                    set_name="Legend of Blue Eyes White Dragon",
                    set_code="LOB-005",
                    set_rarity="Ultra Rare",
                    set_rarity_code="(UR)",
                    set_price="150.2",
                )
            ],
            card_images=[
                CardImage(
                    image_url=f"https://images.test/cards/{card_id}.jpg",
                    image_url_small=f"https://images.test/cards_small/{card_id}.jpg",
                    image_url_cropped=f"https://images.test/cards_cropped/{card_id}.jpg",
                )
            ],
            card_prices=[CardPrice(cardmarket_price="0.10", tcgplayer_price="0.25")],
        )
        fields.update(overrides)
        return Card(**fields)

    return _make


@pytest.fixture
def make_record() -> Callable[..., dict]:
    """Fabrica de registros crudos con el formato JSON del upstream."""

    def _make(card_id: int = 46986414, name: str = "Dark Magician", **overrides) -> dict:
        record = {
            "id": card_id,
            "name": name,
            "type": "Normal Monster",
            "frameType": "normal",
            "desc": "The ultimate wizard in terms of attack and defense.",
            "atk": 2500,
            "def": 2100,
            "level": 7,
            "race": "Spellcaster",
            "attribute": "DARK",
            "card_sets": [
                {
                    "set_name": "Legend of Blue Eyes White Dragon",
                    "set_code": "LOB-005",
                    "set_rarity": "Ultra Rare",
                    "set_rarity_code": "(UR)",
                    "set_price": "150.2",
                }
            ],
            "card_images": [
                {
                    "id": card_id,
                    "image_url": f"https://images.test/cards/{card_id}.jpg",
                    "image_url_small": f"https://images.test/cards_small/{card_id}.jpg",
                    "image_url_cropped": f"https://images.test/cards_cropped/{card_id}.jpg",
                }
            ],
            "card_prices": [{"cardmarket_price": "0.10", "tcgplayer_price": "0.25"}],
        }
        record.update(overrides)
        return record

    return _make
