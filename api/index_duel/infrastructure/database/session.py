"""
Gestion del engine y las sesiones de base de datos.

No hay engine global: `create_engine` y `create_session_factory` se invocan
una vez al arrancar y el resultado vive en el contenedor de la aplicacion.
"""
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker
)
from sqlalchemy.orm import declarative_base

from index_duel.core.config import Settings


# Base para modelos de SQLAlchemy
Base = declarative_base()


def _create_engine_args(settings: Settings, database_url: str) -> dict:
    """
    Construye los argumentos del engine segun el tipo de base de datos.
    PostgreSQL usa pool de conexiones, SQLite no lo soporta.
    """
    args = {
        "echo": settings.DEBUG,
    }

    # Configuracion de pool solo para PostgreSQL
    if database_url.startswith("postgresql"):
        args.update({
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_pre_ping": True,  # Verifica conexion antes de usar
        })

    return args


def create_engine(settings: Settings) -> AsyncEngine:
    """Crea el engine async a partir de la configuracion."""
    database_url = settings.effective_database_url
    return create_async_engine(database_url, **_create_engine_args(settings, database_url))


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Crea la fabrica de sesiones ligada al engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


async def init_db(engine: AsyncEngine) -> None:
    """Inicializa la base de datos creando todas las tablas."""
    # Registrar modelos en Base.metadata
    import index_duel.infrastructure.database  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """Cierra las conexiones de la base de datos."""
    await engine.dispose()
