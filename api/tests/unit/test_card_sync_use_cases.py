"""
Tests del protocolo de sincronizacion (snapshot completo vs delta).

Se usa el repositorio real sobre SQLite y relojes fijos para que las marcas
de agua sean deterministas.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio

from index_duel.application.use_cases.card_sync_use_cases import CardSyncUseCases
from index_duel.shared.exceptions import EntityNotFoundException, ValidationException


REPO_CLOCK = "index_duel.infrastructure.repositories.card_repository.utc_now"

T0 = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)


def _fixed_clock(value: datetime):
    return lambda: value


@pytest_asyncio.fixture
async def seeded_repository(card_repository, make_card):
    """Tres cartas escritas a T0, T0+1h y T0+2h."""
    for offset, card_id in enumerate((1, 2, 3)):
        with patch(REPO_CLOCK, return_value=T0 + timedelta(hours=offset)):
            await card_repository.upsert_card(make_card(card_id, f"Card {card_id}"))
    return card_repository


@pytest.mark.asyncio
@pytest.mark.parametrize("last_update", ["", None])
async def test_new_client_receives_full_snapshot(seeded_repository, last_update):
    now = T0 + timedelta(days=1)
    use_cases = CardSyncUseCases(seeded_repository, clock=_fixed_clock(now))

    response = await use_cases.sync_cards(last_update)

    assert [c.id for c in response.cards] == [1, 2, 3]
    assert response.total_cards == 3
    assert response.last_update == "2024-05-02T10:00:00Z"


@pytest.mark.asyncio
async def test_existing_client_receives_delta(seeded_repository):
    use_cases = CardSyncUseCases(seeded_repository, clock=_fixed_clock(T0 + timedelta(days=1)))

    response = await use_cases.sync_cards("2024-05-01T10:30:00Z")

    assert [c.id for c in response.cards] == [3, 2]
    assert response.total_cards == 2


@pytest.mark.asyncio
async def test_up_to_date_client_receives_nothing(seeded_repository):
    use_cases = CardSyncUseCases(seeded_repository, clock=_fixed_clock(T0 + timedelta(days=1)))

    first = await use_cases.sync_cards("")
    second = await use_cases.sync_cards(first.last_update)

    assert second.cards == []
    assert second.total_cards == 0


@pytest.mark.asyncio
async def test_refreshed_card_reaches_client_on_next_sync(seeded_repository, make_card):
    use_cases = CardSyncUseCases(seeded_repository, clock=_fixed_clock(T0 + timedelta(days=1)))
    first = await use_cases.sync_cards("")

    with patch(REPO_CLOCK, return_value=T0 + timedelta(days=7)):
        await seeded_repository.upsert_card(make_card(2, "Card 2 (errata)"))

    second = await use_cases.sync_cards(first.last_update)

    assert [c.name for c in second.cards] == ["Card 2 (errata)"]


@pytest.mark.asyncio
async def test_empty_store_returns_empty_snapshot(card_repository):
    use_cases = CardSyncUseCases(card_repository, clock=_fixed_clock(T0))

    response = await use_cases.sync_cards("")

    assert response.cards == []
    assert response.total_cards == 0
    assert response.last_update == "2024-05-01T10:00:00Z"


@pytest.mark.asyncio
async def test_watermark_keeps_microseconds(card_repository):
    now = datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)
    use_cases = CardSyncUseCases(card_repository, clock=_fixed_clock(now))

    response = await use_cases.sync_cards("")

    assert response.last_update == "2024-05-01T10:00:00.123456Z"


@pytest.mark.asyncio
@pytest.mark.parametrize("last_update", ["yesterday", "2024-02-30T00:00:00Z", "05/01/2024"])
async def test_malformed_watermark_is_rejected(card_repository, last_update):
    use_cases = CardSyncUseCases(card_repository)

    with pytest.raises(ValidationException) as exc_info:
        await use_cases.sync_cards(last_update)

    assert exc_info.value.error_code == "VALIDATION_ERROR"
    assert exc_info.value.details == {"field": "last_update"}


@pytest.mark.asyncio
async def test_watermark_is_taken_before_reading():
    events = []
    repository = MagicMock()

    async def get_all_cards():
        events.append("read")
        return []

    repository.get_all_cards = AsyncMock(side_effect=get_all_cards)

    def clock():
        events.append("clock")
        return T0

    await CardSyncUseCases(repository, clock=clock).sync_cards("")

    assert events == ["clock", "read"]


@pytest.mark.asyncio
async def test_card_dto_serializes_upstream_names(seeded_repository):
    use_cases = CardSyncUseCases(seeded_repository)

    card = await use_cases.get_card(1)
    data = card.model_dump(by_alias=True)

    assert data["frameType"] == "normal"
    assert data["desc"].startswith("The ultimate wizard")
    assert data["def"] == 2100
    assert data["created_at"].tzinfo is not None
    assert "image_data" not in data["card_images"][0]


@pytest.mark.asyncio
async def test_get_card_count(seeded_repository):
    assert await CardSyncUseCases(seeded_repository).get_card_count() == 3


@pytest.mark.asyncio
async def test_get_missing_card_raises_not_found(card_repository):
    with pytest.raises(EntityNotFoundException) as exc_info:
        await CardSyncUseCases(card_repository).get_card(404)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_get_missing_image_raises_not_found(seeded_repository):
    with pytest.raises(EntityNotFoundException):
        await CardSyncUseCases(seeded_repository).get_card_image(1, 9999)
