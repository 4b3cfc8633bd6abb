"""
Script para ejecutar el servidor en modo desarrollo.
"""
import sys
from pathlib import Path

import uvicorn

_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

from index_duel.core.config import get_settings


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True,
        app_dir=str(_API_ROOT),
        log_level=settings.LOG_LEVEL.lower()
    )
