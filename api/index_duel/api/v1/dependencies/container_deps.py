"""
Dependencias para acceder al contenedor de la aplicacion.
"""
from fastapi import Depends, Request

from index_duel.core.container import AppContainer
from index_duel.infrastructure.scheduler.refresh_scheduler import RefreshScheduler


def get_container(request: Request) -> AppContainer:
    """
    Dependencia para obtener el contenedor creado en el startup.

    Args:
        request: Peticion HTTP

    Returns:
        AppContainer: Componentes cableados de la aplicacion
    """
    return request.app.state.container


def get_refresh_scheduler(
    container: AppContainer = Depends(get_container)
) -> RefreshScheduler:
    return container.refresh_scheduler
