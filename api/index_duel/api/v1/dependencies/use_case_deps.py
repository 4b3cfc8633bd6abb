"""
Dependencias para inyeccion de casos de uso y servicios.
"""
from fastapi import Depends

from index_duel.api.v1.dependencies.container_deps import get_container
from index_duel.application.services.card_refresh_pipeline import CardRefreshPipeline
from index_duel.application.use_cases.card_sync_use_cases import CardSyncUseCases
from index_duel.core.container import AppContainer


def get_card_sync_use_cases(
    container: AppContainer = Depends(get_container)
) -> CardSyncUseCases:
    """
    Dependencia para obtener los casos de uso de sincronizacion.

    Args:
        container: Contenedor de la aplicacion

    Returns:
        CardSyncUseCases: Instancia compartida de casos de uso
    """
    return container.card_sync_use_cases


def get_refresh_pipeline(
    container: AppContainer = Depends(get_container)
) -> CardRefreshPipeline:
    """
    Dependencia para obtener el pipeline de refresco.

    Returns:
        CardRefreshPipeline: Pipeline unico de la aplicacion
    """
    return container.refresh_pipeline
