"""
Cliente HTTP de la API remota del catalogo.

- `fetch_dataset`: descarga el catalogo completo (`{"data": [...]}`).
- `fetch_image`: descarga una imagen de la CDN y resuelve su content type.

Toda llamada lleva un timeout fijo. Los fallos se reportan como excepciones
tipadas; decidir si son fatales es responsabilidad del llamador.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

import httpx
from loguru import logger
from pydantic import ValidationError

from index_duel.shared.constants.card_constants import (
    CONTENT_TYPE_JPEG,
    CONTENT_TYPE_PNG,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
)
from index_duel.shared.exceptions import (
    ConfigurationException,
    ImageDownloadException,
    UpstreamFetchException,
)

from .schemas import UpstreamDataset


@dataclass(frozen=True)
class ImagePayload:
    """Imagen descargada."""

    data: bytes
    content_type: str
    size: int


def resolve_content_type(url: str, header_value: Optional[str]) -> str:
    """
    Determina el content type de una imagen.

    Prioriza el header de la respuesta; si falta, lo infiere de la extension
    del path de la URL. JPEG es el valor por defecto.
    """
    if header_value:
        return header_value

    path = urlsplit(url).path.lower()
    if path.endswith((".jpg", ".jpeg")):
        return CONTENT_TYPE_JPEG
    if path.endswith(".png"):
        return CONTENT_TYPE_PNG
    return CONTENT_TYPE_JPEG


class CardApiClient:
    """
    Cliente HTTP del catalogo de cartas.

    Acepta un `httpx.AsyncClient` externo (tests, transportes propios); si no se
    pasa ninguno crea uno propio y lo cierra en `aclose`.
    """

    def __init__(
        self,
        dataset_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout_s: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
    ) -> None:
        self._dataset_url = dataset_url.strip() if dataset_url else ""
        self._timeout_s = timeout_s
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_s, follow_redirects=True)

    @property
    def dataset_url(self) -> str:
        return self._dataset_url

    async def fetch_dataset(self) -> List[Dict[str, Any]]:
        """
        Descarga el catalogo completo.

        Returns:
            Lista de registros de carta (dicts sin validar individualmente)

        Raises:
            ConfigurationException: Si no hay URL configurada (no se hace ninguna llamada)
            UpstreamFetchException: Transporte, timeout, status no 2xx o cuerpo invalido
        """
        if not self._dataset_url:
            raise ConfigurationException(
                "API_URL no esta configurada: no se puede descargar el catalogo",
                missing=["API_URL"],
            )

        url = self._dataset_url
        logger.info(f"Descargando catalogo de cartas desde: {url}")

        try:
            response = await self._client.get(url, timeout=self._timeout_s)
        except httpx.TimeoutException as e:
            raise UpstreamFetchException(
                f"Timeout ({self._timeout_s}s) descargando catalogo: {e}", url=url
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamFetchException(f"Error de transporte descargando catalogo: {e}", url=url) from e
        except httpx.InvalidURL as e:
            raise UpstreamFetchException(f"URL del catalogo invalida: {e}", url=url) from e
        except RuntimeError as e:
            # Cliente HTTP ya cerrado (shutdown en curso)
            raise UpstreamFetchException(f"Cliente HTTP no disponible: {e}", url=url) from e

        if not response.is_success:
            raise UpstreamFetchException(
                f"La API devolvio status {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        try:
            dataset = UpstreamDataset.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamFetchException(f"Respuesta de la API no es un catalogo valido: {e}", url=url) from e

        logger.info(f"Catalogo descargado: {len(dataset.data)} cartas")
        return dataset.data

    async def fetch_image(self, url: str) -> ImagePayload:
        """
        Descarga una imagen.

        Raises:
            ImageDownloadException: URL invalida, transporte, timeout o status no 2xx
        """
        try:
            response = await self._client.get(url, timeout=self._timeout_s)
        except httpx.TimeoutException as e:
            raise ImageDownloadException(f"Timeout ({self._timeout_s}s) descargando imagen: {e}", url=url) from e
        except httpx.HTTPError as e:
            raise ImageDownloadException(f"Error de transporte descargando imagen: {e}", url=url) from e
        except httpx.InvalidURL as e:
            raise ImageDownloadException(f"URL de imagen invalida: {e}", url=url) from e
        except RuntimeError as e:
            # Cliente HTTP ya cerrado (shutdown en curso)
            raise ImageDownloadException(f"Cliente HTTP no disponible: {e}", url=url) from e

        if not response.is_success:
            raise ImageDownloadException(
                f"La descarga de imagen devolvio status {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        data = response.content
        content_type = resolve_content_type(url, response.headers.get("content-type"))
        return ImagePayload(data=data, content_type=content_type, size=len(data))

    async def aclose(self) -> None:
        """Cierra el cliente HTTP si fue creado por esta instancia."""
        if self._owns_client:
            await self._client.aclose()
