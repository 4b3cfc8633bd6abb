"""
Contenedor de dependencias de la aplicacion.

Se construye una sola vez al arrancar y se guarda en `app.state.container`.
Los endpoints lo reciben via dependencias de FastAPI; nada se lee de globales.
"""
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from index_duel.application.services.card_refresh_pipeline import CardRefreshPipeline
from index_duel.application.use_cases.card_sync_use_cases import CardSyncUseCases
from index_duel.core.config import Settings
from index_duel.infrastructure.database.session import close_db, create_engine, create_session_factory
from index_duel.infrastructure.external.card_api import CardApiClient
from index_duel.infrastructure.repositories.card_repository import CardRepository
from index_duel.infrastructure.scheduler.refresh_scheduler import RefreshScheduler


@dataclass
class AppContainer:
    """Componentes cableados de la aplicacion."""

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    card_repository: CardRepository
    card_api_client: CardApiClient
    refresh_pipeline: CardRefreshPipeline
    refresh_scheduler: RefreshScheduler
    card_sync_use_cases: CardSyncUseCases

    async def close(self) -> None:
        """Detiene el scheduler y libera HTTP y base de datos."""
        self.refresh_scheduler.stop()
        await self.card_api_client.aclose()
        await close_db(self.engine)


def build_container(settings: Settings) -> AppContainer:
    """Construye y cablea todos los componentes a partir de la configuracion."""
    engine = create_engine(settings)
    session_factory = create_session_factory(engine)
    repository = CardRepository(session_factory)
    api_client = CardApiClient(settings.API_URL, timeout_s=settings.HTTP_TIMEOUT_SECONDS)
    pipeline = CardRefreshPipeline(
        repository,
        api_client,
        batch_size=settings.REFRESH_BATCH_SIZE,
        batch_pause_s=settings.REFRESH_BATCH_PAUSE_SECONDS,
    )
    scheduler = RefreshScheduler(
        pipeline,
        interval=timedelta(hours=settings.REFRESH_INTERVAL_HOURS),
        run_on_start=settings.REFRESH_ON_STARTUP,
    )
    return AppContainer(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        card_repository=repository,
        card_api_client=api_client,
        refresh_pipeline=pipeline,
        refresh_scheduler=scheduler,
        card_sync_use_cases=CardSyncUseCases(repository),
    )
