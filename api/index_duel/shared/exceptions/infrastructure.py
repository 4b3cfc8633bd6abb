"""
Excepciones de infraestructura: configuracion, API remota y persistencia.

Las capas bajas lanzan estas excepciones y el llamador decide si el fallo
aborta el ciclo completo, solo la carta en curso, o nada.
"""
from typing import List, Optional

from index_duel.shared.exceptions.base import AppException


class ConfigurationException(AppException):
    """Falta o es invalida una variable de configuracion obligatoria."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="CONFIGURATION_ERROR",
            details={"missing": missing} if missing else None
        )


class UpstreamFetchException(AppException):
    """Fallo al descargar el dataset de la API remota (transporte, timeout o status no 2xx)."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        details = {"url": url}
        if status_code is not None:
            details["upstream_status"] = status_code
        super().__init__(
            message=message,
            status_code=502,
            error_code="UPSTREAM_FETCH_ERROR",
            details=details
        )
        self.url = url
        self.upstream_status = status_code


class ImageDownloadException(UpstreamFetchException):
    """Fallo al descargar una imagen. Nunca aborta el procesamiento de la carta."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message=message, url=url, status_code=status_code)
        self.error_code = "IMAGE_DOWNLOAD_ERROR"


class PersistenceException(AppException):
    """Fallo de base de datos. Cuando ocurre en un upsert la transaccion ya fue revertida."""

    def __init__(self, message: str, table: Optional[str] = None, card_id: Optional[int] = None):
        details = {}
        if table:
            details["table"] = table
        if card_id is not None:
            details["card_id"] = card_id
        super().__init__(
            message=message,
            status_code=500,
            error_code="PERSISTENCE_ERROR",
            details=details
        )
        self.table = table
        self.card_id = card_id


class RefreshAlreadyRunningException(AppException):
    """Se pidio un ciclo de refresco mientras otro sigue en curso."""

    def __init__(self):
        super().__init__(
            message="Ya hay un ciclo de refresco de cartas en curso",
            status_code=409,
            error_code="REFRESH_ALREADY_RUNNING"
        )
