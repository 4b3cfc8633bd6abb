"""
CLI: ejecuta un ciclo de refresco del catalogo fuera del servidor.

Uso recomendado:
  - Carga inicial de una base nueva sin levantar el API.
  - Refresco puntual desde cron si el scheduler del API esta deshabilitado.

Variables de entorno requeridas:
  - PG_HOST, PG_PORT, PG_DATABASE, PG_USER, PG_PASSWORD (o DATABASE_URL)
  - API_URL

Ejecucion:
  python scripts/refresh_cards.py
  python scripts/refresh_cards.py --batch-size 50 --pause 0.5
  python scripts/refresh_cards.py --limit 100
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

from index_duel.application.services.card_refresh_pipeline import CardRefreshPipeline
from index_duel.core.config import get_settings
from index_duel.infrastructure.database.session import (
    close_db,
    create_engine,
    create_session_factory,
    init_db,
)
from index_duel.infrastructure.external.card_api import CardApiClient
from index_duel.infrastructure.repositories.card_repository import CardRepository
from index_duel.shared.exceptions import AppException


class _LimitedCardApiClient(CardApiClient):
    """Cliente que recorta el catalogo a las primeras `limit` cartas."""

    def __init__(self, dataset_url: str, *, limit: int, timeout_s: float):
        super().__init__(dataset_url, timeout_s=timeout_s)
        self._limit = limit

    async def fetch_dataset(self):
        records = await super().fetch_dataset()
        return records[:self._limit]


async def _run(args: argparse.Namespace) -> int:
    try:
        settings = get_settings()
    except AppException as e:
        logger.error(f"Refresco abortado: {e.message}")
        return 1

    if args.limit:
        api_client = _LimitedCardApiClient(
            settings.API_URL, limit=args.limit, timeout_s=settings.HTTP_TIMEOUT_SECONDS
        )
    else:
        api_client = CardApiClient(settings.API_URL, timeout_s=settings.HTTP_TIMEOUT_SECONDS)

    engine = create_engine(settings)
    try:
        await init_db(engine)
        pipeline = CardRefreshPipeline(
            CardRepository(create_session_factory(engine)),
            api_client,
            batch_size=args.batch_size or settings.REFRESH_BATCH_SIZE,
            batch_pause_s=settings.REFRESH_BATCH_PAUSE_SECONDS if args.pause is None else args.pause,
        )
        report = await pipeline.refresh_all()
    except AppException as e:
        logger.error(f"Refresco abortado: {e.message}")
        return 1
    finally:
        await api_client.aclose()
        await close_db(engine)

    for card_id, error in report.failures:
        logger.warning(f"Carta {card_id} no guardada: {error}")
    return 0 if report.failed_cards == 0 else 2


def main() -> int:
    parser = argparse.ArgumentParser(description="Ejecuta un ciclo de refresco de cartas.")
    parser.add_argument("--batch-size", type=int, default=None, help="Cartas por lote (default: REFRESH_BATCH_SIZE).")
    parser.add_argument("--pause", type=float, default=None, help="Segundos de pausa entre lotes.")
    parser.add_argument("--limit", type=int, default=None, help="Procesar solo las primeras N cartas.")
    args = parser.parse_args()

    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
