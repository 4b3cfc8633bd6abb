"""
Casos de uso de lectura del catalogo y protocolo de sincronizacion movil.

Protocolo:
- El cliente envia la marca de agua (`last_update`) recibida en su ultima
  sincronizacion, o vacio si nunca sincronizo.
- Vacio: se devuelve el catalogo completo.
- Con valor: solo las cartas creadas o actualizadas despues de esa marca.
- Siempre se devuelve una marca nueva, tomada antes de leer, que el cliente
  debe presentar en la siguiente llamada.
"""
from __future__ import annotations

from typing import Callable, List, Optional
from datetime import datetime

from loguru import logger

from index_duel.application.dto.card_dto import CardDTO, SyncResponseDTO
from index_duel.infrastructure.database.models import CardImageModel
from index_duel.infrastructure.repositories.card_repository import CardRepository
from index_duel.shared.exceptions import EntityNotFoundException, ValidationException
from index_duel.shared.utils.datetime_utils import parse_rfc3339, to_rfc3339, utc_now


class CardSyncUseCases:
    """Lecturas del catalogo para clientes (sync, health, detalle)."""

    def __init__(self, repository: CardRepository, clock: Callable[[], datetime] = utc_now):
        self._repository = repository
        self._clock = clock

    async def sync_cards(self, last_update: Optional[str]) -> SyncResponseDTO:
        """
        Decide entre snapshot completo y delta a partir de la marca de agua.

        Args:
            last_update: Marca de agua del cliente (RFC 3339) o vacio/None

        Returns:
            SyncResponseDTO con las cartas, la nueva marca y el total

        Raises:
            ValidationException: Si la marca no vacia no es un timestamp valido
            PersistenceException: Si falla la lectura
        """
        # La marca se toma antes de leer: un cambio que confirme durante la
        # lectura vuelve a enviarse en la proxima llamada en lugar de perderse
        watermark = to_rfc3339(self._clock())

        if not last_update:
            logger.info("Cliente nuevo, enviando todas las cartas")
            cards = await self._repository.get_all_cards()
        else:
            try:
                since = parse_rfc3339(last_update)
            except ValueError:
                raise ValidationException(
                    f"last_update no es un timestamp RFC 3339 valido: '{last_update}'",
                    field="last_update",
                )
            logger.info(f"Cliente existente, enviando cartas actualizadas despues de: {to_rfc3339(since)}")
            cards = await self._repository.get_cards_updated_since(since)

        card_dtos: List[CardDTO] = [CardDTO.model_validate(card) for card in cards]
        logger.info(f"Enviando {len(card_dtos)} cartas al cliente. Nueva marca: {watermark}")
        return SyncResponseDTO(
            cards=card_dtos,
            last_update=watermark,
            total_cards=len(card_dtos),
        )

    async def get_card_count(self) -> int:
        """Numero de cartas almacenadas."""
        return await self._repository.get_card_count()

    async def get_card(self, card_id: int) -> CardDTO:
        """
        Obtiene una carta con sus hijos.

        Raises:
            EntityNotFoundException: Si la carta no existe
        """
        card = await self._repository.get_card(card_id)
        if card is None:
            raise EntityNotFoundException("Carta", card_id)
        return CardDTO.model_validate(card)

    async def get_card_image(self, card_id: int, image_id: int) -> CardImageModel:
        """
        Obtiene una imagen con sus binarios.

        Raises:
            EntityNotFoundException: Si la imagen no existe para esa carta
        """
        image = await self._repository.get_card_image(card_id, image_id)
        if image is None:
            raise EntityNotFoundException("Imagen", image_id)
        return image
