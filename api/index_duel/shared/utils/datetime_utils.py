"""
Utilidades para manejo de fechas y horas.

Todos los timestamps de la aplicacion se manejan como datetime aware en UTC.
"""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normaliza datetime a UTC (aware).

    SQLite devuelve datetimes naive (ya en UTC); PostgreSQL los devuelve con zona.
    Normalizamos para comparar y serializar de forma consistente.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_rfc3339(dt: datetime) -> str:
    """
    Serializa un datetime a RFC 3339 en UTC con sufijo 'Z'.

    Conserva los microsegundos: la marca de agua devuelta al cliente debe ser
    al menos tan precisa como los `updated_at` que se comparan contra ella.
    """
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")


def parse_rfc3339(value: str) -> datetime:
    """
    Parsea un timestamp ISO 8601 / RFC 3339 a datetime aware en UTC.

    Acepta sufijo 'Z' u offset explicito. Un valor sin zona se interpreta como UTC.

    Raises:
        ValueError: Si el valor no es un timestamp valido
    """
    if not isinstance(value, str) or not value:
        raise ValueError("timestamp vacio")
    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(raw))
