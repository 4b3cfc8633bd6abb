"""
Script para inicializar la base de datos (crea las tablas si no existen).
"""
import asyncio
import sys
from pathlib import Path

from loguru import logger

_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

from index_duel.core.config import get_settings
from index_duel.infrastructure.database.session import close_db, create_engine, init_db


async def main():
    """Funcion principal para inicializar la base de datos."""
    logger.info("Inicializando base de datos...")

    engine = create_engine(get_settings())
    try:
        await init_db(engine)
        logger.success("Base de datos inicializada correctamente")
    except Exception as e:
        logger.error(f"Error al inicializar base de datos: {e}")
        raise
    finally:
        await close_db(engine)


if __name__ == "__main__":
    asyncio.run(main())
