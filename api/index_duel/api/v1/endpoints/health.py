"""
Endpoint de salud del servicio.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse
from loguru import logger

from index_duel.api.v1.dependencies.use_case_deps import get_card_sync_use_cases
from index_duel.application.dto.card_dto import HealthResponseDTO
from index_duel.application.use_cases.card_sync_use_cases import CardSyncUseCases


router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponseDTO,
    summary="Estado del servicio y numero de cartas",
    responses={503: {"description": "Base de datos no disponible"}}
)
async def health_check(
    use_cases: CardSyncUseCases = Depends(get_card_sync_use_cases)
):
    """
    Verifica que la base de datos responde y retorna el total de cartas.

    Returns:
        HealthResponseDTO con status "healthy", o 503 en texto plano si la
        base de datos no responde
    """
    try:
        count = await use_cases.get_card_count()
    except Exception as e:
        logger.error(f"Health check fallido: {e}")
        return PlainTextResponse(
            "Database connection failed",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    return HealthResponseDTO(status="healthy", cards_count=count)
