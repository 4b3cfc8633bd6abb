"""
Pipeline de refresco del catalogo de cartas.

Diseno (resumen):
- Descarga el catalogo completo de la API remota. Si falla, el ciclo aborta
  sin escribir nada (se reintenta en la proxima ejecucion programada).
- Procesa las cartas en el orden del upstream, en lotes secuenciales con una
  pausa fija entre lotes para no saturar la CDN de imagenes.
- Por carta: descarga best-effort de las tres variantes de cada imagen y
  upsert transaccional. Un fallo de carta se acumula en el reporte y el ciclo
  continua con la siguiente.
- Un solo ciclo a la vez por proceso (lock). Un ciclo pedido mientras otro
  corre se rechaza con RefreshAlreadyRunningException.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Set, Tuple

from loguru import logger

from index_duel.domain.entities import Card, CardImage
from index_duel.infrastructure.external.card_api import CardApiClient, ImagePayload
from index_duel.infrastructure.external.card_api.schemas import UpstreamCard
from index_duel.infrastructure.repositories.card_repository import CardRepository
from index_duel.shared.constants.card_constants import (
    DEFAULT_BATCH_PAUSE_SECONDS,
    DEFAULT_BATCH_SIZE,
    IMAGE_VARIANT_FIELDS,
    ImageVariant,
)
from index_duel.shared.exceptions import (
    AppException,
    ConfigurationException,
    ImageDownloadException,
    RefreshAlreadyRunningException,
)
from index_duel.shared.utils.datetime_utils import utc_now


@dataclass
class RefreshReport:
    """Resultado de un ciclo de refresco."""

    started_at: datetime
    finished_at: Optional[datetime] = None
    total_cards: int = 0
    persisted_cards: int = 0
    image_failures: int = 0
    # (id de carta, error). El id es None si el registro ni siquiera lo traia.
    failures: List[Tuple[Optional[int], str]] = field(default_factory=list)

    @property
    def failed_cards(self) -> int:
        return len(self.failures)


def _record_id(record: Any) -> Optional[int]:
    """Extrae el id de un registro crudo del upstream, si existe."""
    if isinstance(record, dict):
        raw = record.get("id")
        if isinstance(raw, int):
            return raw
        if isinstance(raw, str) and raw.isdigit():
            return int(raw)
    return None


def _apply_payload(image: CardImage, variant: ImageVariant, payload: ImagePayload) -> None:
    """Guarda el binario descargado en el slot correspondiente."""
    _, data_attr = IMAGE_VARIANT_FIELDS[variant]
    setattr(image, data_attr, payload.data)
    # content_type y file_size describen la imagen completa
    if variant is ImageVariant.FULL:
        image.content_type = payload.content_type
        image.file_size = payload.size


class CardRefreshPipeline:
    """
    Orquestador de la ingesta completa del catalogo.
    """

    def __init__(
        self,
        repository: CardRepository,
        api_client: CardApiClient,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_pause_s: float = DEFAULT_BATCH_PAUSE_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size debe ser >= 1")
        self._repository = repository
        self._api_client = api_client
        self._batch_size = batch_size
        self._batch_pause_s = batch_pause_s
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._background_tasks: Set[asyncio.Task] = set()
        self.last_report: Optional[RefreshReport] = None

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def refresh_all(self) -> RefreshReport:
        """
        Ejecuta un ciclo completo de refresco.

        Returns:
            RefreshReport con totales y fallos por carta

        Raises:
            ConfigurationException: Si no hay URL del upstream configurada
            UpstreamFetchException: Si falla la descarga del catalogo
            RefreshAlreadyRunningException: Si ya hay un ciclo en curso
        """
        if self._lock.locked():
            logger.warning("Refresco solicitado mientras otro ciclo sigue en curso. Se omite.")
            raise RefreshAlreadyRunningException()

        async with self._lock:
            report = await self._run_cycle()
            self.last_report = report
            return report

    async def _run_cycle(self) -> RefreshReport:
        if not self._api_client.dataset_url:
            raise ConfigurationException(
                "API_URL no esta configurada: no se puede ejecutar el refresco",
                missing=["API_URL"],
            )

        report = RefreshReport(started_at=utc_now())
        records = await self._api_client.fetch_dataset()
        report.total_cards = len(records)
        logger.info(f"{len(records)} cartas por procesar en lotes de {self._batch_size}")

        for start in range(0, len(records), self._batch_size):
            if start > 0 and self._batch_pause_s > 0:
                await self._sleep(self._batch_pause_s)

            batch = records[start:start + self._batch_size]
            logger.info(f"Procesando lote {start + 1}-{start + len(batch)} de {len(records)} cartas")

            for record in batch:
                card_id = _record_id(record)
                try:
                    card = UpstreamCard.model_validate(record).to_entity()
                    report.image_failures += await self.process_card(card)
                except Exception as e:
                    logger.error(f"Error procesando carta {card_id}: {e}")
                    report.failures.append((card_id, str(e)))
                    continue
                report.persisted_cards += 1
                logger.debug(f"Carta procesada: {card.name} (ID: {card.id})")

        report.finished_at = utc_now()
        logger.success(
            f"Refresco completado: {report.persisted_cards}/{report.total_cards} cartas guardadas, "
            f"{report.failed_cards} con error, {report.image_failures} imagenes fallidas"
        )
        return report

    async def process_card(self, card: Card) -> int:
        """
        Descarga las imagenes de una carta y la persiste.

        Cada variante de imagen se descarga de forma independiente; un fallo
        se registra y deja ese binario vacio.

        Returns:
            Numero de descargas de imagen fallidas

        Raises:
            PersistenceException: Si falla el upsert de la carta
        """
        image_failures = 0
        for image in card.card_images:
            for variant, (url_attr, _) in IMAGE_VARIANT_FIELDS.items():
                url = getattr(image, url_attr)
                if not url:
                    continue
                try:
                    payload = await self._api_client.fetch_image(url)
                except ImageDownloadException as e:
                    image_failures += 1
                    logger.warning(f"No se pudo descargar imagen {variant.value} de carta {card.id} ({url}): {e.message}")
                    continue
                _apply_payload(image, variant, payload)

        await self._repository.upsert_card(card)
        return image_failures

    async def run_safely(self, trigger: str) -> Optional[RefreshReport]:
        """
        Ejecuta un ciclo registrando cualquier error en lugar de propagarlo.
        Pensado para el scheduler y para ejecuciones en background.
        """
        logger.info(f"Iniciando refresco de cartas ({trigger})...")
        try:
            return await self.refresh_all()
        except RefreshAlreadyRunningException:
            return None
        except AppException as e:
            logger.error(f"Refresco de cartas ({trigger}) abortado: {e.message}")
        except Exception as e:
            logger.exception(f"Error inesperado en refresco de cartas ({trigger}): {e}")
        return None

    def start_background_refresh(self, trigger: str = "manual") -> asyncio.Task:
        """
        Lanza un ciclo en background y retorna inmediatamente.

        Raises:
            RefreshAlreadyRunningException: Si ya hay un ciclo en curso
            ConfigurationException: Si no hay URL del upstream configurada
        """
        if self.is_running:
            raise RefreshAlreadyRunningException()
        if not self._api_client.dataset_url:
            raise ConfigurationException(
                "API_URL no esta configurada: no se puede ejecutar el refresco",
                missing=["API_URL"],
            )

        task = asyncio.create_task(self.run_safely(trigger))
        # Mantener referencia hasta que termine
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task
