"""
Excepciones de la aplicacion.
"""
from index_duel.shared.exceptions.base import AppException
from index_duel.shared.exceptions.domain import (
    DomainException,
    EntityNotFoundException,
    ValidationException,
)
from index_duel.shared.exceptions.infrastructure import (
    ConfigurationException,
    ImageDownloadException,
    PersistenceException,
    RefreshAlreadyRunningException,
    UpstreamFetchException,
)

__all__ = [
    "AppException",
    "DomainException",
    "EntityNotFoundException",
    "ValidationException",
    "ConfigurationException",
    "ImageDownloadException",
    "PersistenceException",
    "RefreshAlreadyRunningException",
    "UpstreamFetchException",
]
