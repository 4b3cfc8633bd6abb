"""
Entorno de Alembic para el esquema del espejo de cartas.

Las tablas del catalogo (cards, card_sets, card_images, card_prices) se
declaran en index_duel.infrastructure.database.models. La conexion sale de
los mismos Settings que usa el API; las migraciones corren con el driver
sincrono psycopg aunque el servidor use asyncpg.
"""
import sys
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import engine_from_config, pool

from alembic import context

API_DIR = Path(__file__).resolve().parent.parent
if str(API_DIR) not in sys.path:
    sys.path.insert(0, str(API_DIR))

from index_duel.core.config import Settings, get_settings  # noqa: E402
from index_duel.infrastructure.database import models  # noqa: E402,F401  registra las tablas del catalogo
from index_duel.infrastructure.database.session import Base  # noqa: E402


config = context.config
target_metadata = Base.metadata


def _migration_url(settings: Settings) -> str:
    """URL del catalogo con driver sincrono, escapada para configparser."""
    url = settings.effective_database_url.replace("+asyncpg", "+psycopg")
    return url.replace("%", "%%")


config.set_main_option("sqlalchemy.url", _migration_url(get_settings()))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def run_migrations_offline() -> None:
    """Emite el SQL de las migraciones del catalogo sin abrir conexion."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Aplica las migraciones del catalogo sobre la base configurada."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        # compare_type detecta cambios BYTEA/TEXT en las columnas de imagen
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
