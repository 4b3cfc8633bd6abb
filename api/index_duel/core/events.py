"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI
from loguru import logger

from index_duel.core.config import Settings, load_settings
from index_duel.core.container import build_container
from index_duel.infrastructure.database.session import init_db


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Inicializa recursos al inicio de la aplicacion."""
        try:
            # Una configuracion incompleta es fatal
            settings = app.state.settings or load_settings()
            app.state.settings = settings

            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")

            # Configurar logging adicional
            if settings.LOG_FILE:
                app.state.log_sink_id = logger.add(
                    settings.LOG_FILE,
                    rotation="500 MB",
                    retention="10 days",
                    level=settings.LOG_LEVEL
                )

            _validate_config(settings)

            container = build_container(settings)
            app.state.container = container

            # Inicializar base de datos (crea tablas si no existen)
            try:
                await init_db(container.engine)
            except Exception:
                await container.close()
                app.state.container = None
                raise
            logger.info("Base de datos inicializada")

            if settings.SCHEDULER_ENABLED:
                container.refresh_scheduler.start()
            else:
                logger.info("Scheduler de refresco deshabilitado (SCHEDULER_ENABLED=false)")

            logger.success("Aplicacion iniciada correctamente")

            _print_available_urls(settings)

        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise

    return startup


def _validate_config(settings: Settings) -> None:
    """Advierte sobre configuracion opcional ausente."""
    warnings = []

    if not settings.API_URL:
        warnings.append("API_URL no configurada - los ciclos de refresco fallaran")

    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


def _print_available_urls(settings: Settings) -> None:
    """Imprime las URLs disponibles de la aplicacion."""
    if settings.HOST == "0.0.0.0":
        access_host = "localhost"
    else:
        access_host = settings.HOST

    base_url = f"http://{access_host}:{settings.PORT}"

    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")
    logger.opt(colors=True).info("<bold><green>URLS DISPONIBLES:</green></bold>")
    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")
    logger.opt(colors=True).info(f"<cyan>  Health:      GET  {base_url}/api/v1/health</cyan>")
    logger.opt(colors=True).info(f"<cyan>  Sync movil:  POST {base_url}/api/v1/cards/sync</cyan>")
    logger.opt(colors=True).info(f"<cyan>  Swagger UI:  {base_url}/docs</cyan>")
    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")

        container = getattr(app.state, "container", None)
        if container is not None:
            # Detiene el timer; un ciclo en curso no se interrumpe
            await container.close()
            app.state.container = None
            logger.info("Scheduler detenido y conexiones cerradas")

        sink_id = getattr(app.state, "log_sink_id", None)
        if sink_id is not None:
            logger.remove(sink_id)
            app.state.log_sink_id = None

        logger.success("Aplicacion cerrada correctamente")

    return shutdown


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Ciclo de vida de la aplicacion: startup, servir, shutdown."""
    await startup_handler(app)()
    try:
        yield
    finally:
        await shutdown_handler(app)()
