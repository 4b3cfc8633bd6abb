"""
Tests del repositorio de cartas sobre SQLite en memoria.

Cubren el upsert transaccional (reemplazo de hijos, atomicidad) y las
consultas que usa la sincronizacion movil.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from index_duel.domain.entities import CardImage, CardSet
from index_duel.infrastructure.database.session import Base
from index_duel.shared.exceptions import PersistenceException
from index_duel.shared.utils.datetime_utils import ensure_utc


REPO_CLOCK = "index_duel.infrastructure.repositories.card_repository.utc_now"

T0 = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_upsert_then_get_returns_full_card(card_repository, make_card):
    await card_repository.upsert_card(make_card())

    stored = await card_repository.get_card(46986414)

    assert stored is not None
    assert stored.name == "Dark Magician"
    assert stored.frame_type == "normal"
    assert stored.defense == 2100
    assert [s.set_code for s in stored.card_sets] == ["LOB-005"]
    assert stored.card_images[0].image_url == "https://images.test/cards/46986414.jpg"
    assert stored.card_prices[0].tcgplayer_price == "0.25"
    assert ensure_utc(stored.created_at) == ensure_utc(stored.updated_at)


@pytest.mark.asyncio
async def test_upsert_with_empty_collections(card_repository, make_card):
    await card_repository.upsert_card(
        make_card(1, "Pot of Greed", atk=None, defense=None, level=None,
                  card_sets=[], card_images=[], card_prices=[])
    )

    stored = await card_repository.get_card(1)

    assert stored.atk is None and stored.defense is None and stored.level is None
    assert stored.card_sets == []
    assert stored.card_images == []
    assert stored.card_prices == []


@pytest.mark.asyncio
async def test_second_upsert_replaces_children_and_keeps_created_at(card_repository, make_card):
    t1, t2 = T0, T0 + timedelta(days=7)

    with patch(REPO_CLOCK, return_value=t1):
        await card_repository.upsert_card(
            make_card(card_sets=[
                CardSet(set_name="LOB", set_code="LOB-005"),
                CardSet(set_name="SDY", set_code="SDY-006"),
            ])
        )

    with patch(REPO_CLOCK, return_value=t2):
        await card_repository.upsert_card(
            make_card(name="Dark Magician (Arkana)", card_sets=[CardSet(set_name="DDS", set_code="DDS-001")])
        )

    stored = await card_repository.get_card(46986414)
    assert stored.name == "Dark Magician (Arkana)"
    assert [s.set_code for s in stored.card_sets] == ["DDS-001"]
    assert ensure_utc(stored.created_at) == t1
    assert ensure_utc(stored.updated_at) == t2
    assert await card_repository.get_card_count() == 1


@pytest.mark.asyncio
async def test_failed_upsert_rolls_back_everything(card_repository, make_card):
    await card_repository.upsert_card(make_card())

    # set_name es NOT NULL: la insercion de card_sets falla a mitad de transaccion
    broken = make_card(name="Renamed", card_sets=[CardSet(set_name=None, set_code="BAD-000")])

    with pytest.raises(PersistenceException) as exc_info:
        await card_repository.upsert_card(broken)

    assert exc_info.value.table == "card_sets"
    assert exc_info.value.card_id == 46986414

    stored = await card_repository.get_card(46986414)
    assert stored.name == "Dark Magician"
    assert [s.set_code for s in stored.card_sets] == ["LOB-005"]
    assert len(stored.card_images) == 1
    assert len(stored.card_prices) == 1


@pytest.mark.asyncio
async def test_failed_first_upsert_leaves_no_rows(card_repository, make_card):
    with pytest.raises(PersistenceException):
        await card_repository.upsert_card(make_card(card_sets=[CardSet(set_name=None)]))

    assert await card_repository.get_card(46986414) is None
    assert await card_repository.get_card_count() == 0


@pytest.mark.asyncio
async def test_get_card_missing_returns_none(card_repository):
    assert await card_repository.get_card(999) is None


@pytest.mark.asyncio
async def test_get_all_cards_ordered_by_id(card_repository, make_card):
    for card_id in (30, 10, 20):
        await card_repository.upsert_card(make_card(card_id, f"Card {card_id}"))

    cards = await card_repository.get_all_cards()

    assert [c.id for c in cards] == [10, 20, 30]
    assert await card_repository.get_card_count() == 3


@pytest.mark.asyncio
async def test_get_cards_updated_since_returns_only_newer(card_repository, make_card):
    with patch(REPO_CLOCK, return_value=T0):
        await card_repository.upsert_card(make_card(1, "Old"))
    with patch(REPO_CLOCK, return_value=T0 + timedelta(hours=1)):
        await card_repository.upsert_card(make_card(2, "Newer"))
    with patch(REPO_CLOCK, return_value=T0 + timedelta(hours=2)):
        await card_repository.upsert_card(make_card(3, "Newest"))

    cards = await card_repository.get_cards_updated_since(T0 + timedelta(minutes=30))

    # updated_at descendente
    assert [c.id for c in cards] == [3, 2]


@pytest.mark.asyncio
async def test_get_cards_updated_since_is_strictly_after(card_repository, make_card):
    with patch(REPO_CLOCK, return_value=T0):
        await card_repository.upsert_card(make_card(1))

    assert await card_repository.get_cards_updated_since(T0) == []
    assert [c.id for c in await card_repository.get_cards_updated_since(T0 - timedelta(microseconds=1))] == [1]


@pytest.mark.asyncio
async def test_get_cards_updated_since_includes_refreshed_cards(card_repository, make_card):
    with patch(REPO_CLOCK, return_value=T0):
        await card_repository.upsert_card(make_card(1))
        await card_repository.upsert_card(make_card(2))
    with patch(REPO_CLOCK, return_value=T0 + timedelta(days=7)):
        await card_repository.upsert_card(make_card(1, "Refreshed"))

    cards = await card_repository.get_cards_updated_since(T0 + timedelta(days=1))

    assert [c.name for c in cards] == ["Refreshed"]


@pytest.mark.asyncio
async def test_get_card_image_loads_binaries(card_repository, make_card):
    image = CardImage(
        image_url="https://images.test/cards/5.png",
        image_data=b"full-bytes",
        image_small_data=b"small-bytes",
        content_type="image/png",
        file_size=10,
    )
    await card_repository.upsert_card(make_card(5, card_images=[image]))
    stored = await card_repository.get_card(5)
    image_id = stored.card_images[0].id

    loaded = await card_repository.get_card_image(5, image_id)

    assert loaded.image_data == b"full-bytes"
    assert loaded.image_small_data == b"small-bytes"
    assert loaded.image_cropped_data is None
    assert loaded.content_type == "image/png"
    assert loaded.file_size == 10


@pytest.mark.asyncio
async def test_get_card_image_of_other_card_returns_none(card_repository, make_card):
    await card_repository.upsert_card(make_card(5))
    await card_repository.upsert_card(make_card(6))
    stored = await card_repository.get_card(5)

    assert await card_repository.get_card_image(6, stored.card_images[0].id) is None


@pytest.mark.asyncio
async def test_read_failure_raises_persistence_error(card_repository, db_engine):
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    with pytest.raises(PersistenceException):
        await card_repository.get_card_count()
