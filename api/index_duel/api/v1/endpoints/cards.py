"""
Endpoints del catalogo de cartas: sincronizacion movil, detalle, imagenes y
control del refresco.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from loguru import logger

from index_duel.api.v1.dependencies.container_deps import get_refresh_scheduler
from index_duel.api.v1.dependencies.use_case_deps import get_card_sync_use_cases, get_refresh_pipeline
from index_duel.application.dto.card_dto import (
    CardDTO,
    RefreshReportDTO,
    RefreshStartedDTO,
    RefreshStatusDTO,
    SyncRequestDTO,
    SyncResponseDTO,
)
from index_duel.application.services.card_refresh_pipeline import CardRefreshPipeline
from index_duel.application.use_cases.card_sync_use_cases import CardSyncUseCases
from index_duel.infrastructure.external.card_api import resolve_content_type
from index_duel.infrastructure.scheduler.refresh_scheduler import RefreshScheduler
from index_duel.shared.constants.card_constants import IMAGE_VARIANT_FIELDS, ImageVariant
from index_duel.shared.exceptions import AppException, EntityNotFoundException


router = APIRouter(prefix="/cards", tags=["Cards"])


@router.post(
    "/sync",
    response_model=SyncResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Sincronizar el catalogo con un cliente movil"
)
async def sync_cards(
    dto: SyncRequestDTO,
    use_cases: CardSyncUseCases = Depends(get_card_sync_use_cases)
) -> SyncResponseDTO:
    """
    Sincronizacion basada en marca de agua.

    La sincronizacion:
    - Si last_update esta vacio: devuelve todas las cartas
    - Si trae una marca: solo las cartas creadas o actualizadas despues
    - Siempre devuelve la nueva marca para la siguiente llamada

    Returns:
        SyncResponseDTO con cartas, nueva marca y total
    """
    try:
        return await use_cases.sync_cards(dto.last_update)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error en sincronizacion de cartas: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to sync cards: {str(e)}"
        )


@router.post(
    "/refresh",
    response_model=RefreshStartedDTO,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Lanzar un ciclo de refresco en background"
)
async def start_refresh(
    pipeline: CardRefreshPipeline = Depends(get_refresh_pipeline)
) -> RefreshStartedDTO:
    """
    Lanza un refresco completo del catalogo sin esperar a que termine.

    Returns:
        RefreshStartedDTO. 409 si ya hay un ciclo en curso.
    """
    pipeline.start_background_refresh(trigger="manual")
    logger.info("Refresco manual lanzado desde API")
    return RefreshStartedDTO(
        status="accepted",
        message="Refresco de cartas iniciado en background"
    )


@router.get(
    "/refresh/status",
    response_model=RefreshStatusDTO,
    summary="Estado del refresco y resumen del ultimo ciclo"
)
async def refresh_status(
    pipeline: CardRefreshPipeline = Depends(get_refresh_pipeline),
    scheduler: RefreshScheduler = Depends(get_refresh_scheduler)
) -> RefreshStatusDTO:
    report = pipeline.last_report
    return RefreshStatusDTO(
        is_running=pipeline.is_running,
        scheduler_state=scheduler.state.value,
        last_report=RefreshReportDTO(
            started_at=report.started_at,
            finished_at=report.finished_at,
            total_cards=report.total_cards,
            persisted_cards=report.persisted_cards,
            failed_cards=report.failed_cards,
            image_failures=report.image_failures,
            failures=report.failures,
        ) if report else None
    )


@router.get(
    "/{card_id}",
    response_model=CardDTO,
    summary="Obtener una carta por ID"
)
async def get_card(
    card_id: int,
    use_cases: CardSyncUseCases = Depends(get_card_sync_use_cases)
) -> CardDTO:
    """
    Obtiene una carta con sus sets, imagenes y precios.

    Args:
        card_id: ID de la carta
        use_cases: Casos de uso de cartas (inyectado)

    Returns:
        CardDTO: Carta encontrada
    """
    return await use_cases.get_card(card_id)


@router.get(
    "/{card_id}/images/{image_id}",
    summary="Obtener el binario de una imagen de carta",
    response_class=Response,
    responses={200: {"content": {"image/jpeg": {}, "image/png": {}}}}
)
async def get_card_image(
    card_id: int,
    image_id: int,
    variant: ImageVariant = Query(default=ImageVariant.FULL, description="full, small o cropped"),
    use_cases: CardSyncUseCases = Depends(get_card_sync_use_cases)
) -> Response:
    """
    Sirve el binario almacenado de una variante de imagen.

    Returns:
        Response con los bytes de la imagen. 404 si la imagen no existe o
        esa variante no se descargo.
    """
    image = await use_cases.get_card_image(card_id, image_id)

    url_attr, data_attr = IMAGE_VARIANT_FIELDS[variant]
    data = getattr(image, data_attr)
    if not data:
        raise EntityNotFoundException(f"Imagen ({variant.value})", image_id)

    # content_type guardado describe la variante completa
    if variant is ImageVariant.FULL and image.content_type:
        media_type = image.content_type
    else:
        media_type = resolve_content_type(getattr(image, url_attr), None)
    return Response(content=data, media_type=media_type)
