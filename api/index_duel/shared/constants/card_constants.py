"""
Constantes relacionadas con la ingesta y sincronizacion de cartas.
"""
from enum import Enum


class ImageVariant(str, Enum):
    """Variantes de imagen que publica la CDN para cada carta."""
    FULL = "full"
    SMALL = "small"
    CROPPED = "cropped"


class SchedulerState(str, Enum):
    """Estados del scheduler de refresco."""
    IDLE = "idle"
    RUNNING = "running"
    WAITING = "waiting"
    STOPPED = "stopped"


# Variante -> (atributo con la URL, atributo con el binario) en CardImage
IMAGE_VARIANT_FIELDS = {
    ImageVariant.FULL: ("image_url", "image_data"),
    ImageVariant.SMALL: ("image_url_small", "image_small_data"),
    ImageVariant.CROPPED: ("image_url_cropped", "image_cropped_data"),
}

# Content types de imagen
CONTENT_TYPE_JPEG = "image/jpeg"
CONTENT_TYPE_PNG = "image/png"

# Valores por defecto del pipeline de refresco
DEFAULT_BATCH_SIZE = 10
DEFAULT_BATCH_PAUSE_SECONDS = 1.0
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
DEFAULT_REFRESH_INTERVAL_HOURS = 7 * 24
