"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.

Las credenciales de PostgreSQL (PG_*) son obligatorias: si falta alguna el
arranque falla. API_URL solo es obligatoria para ejecutar ciclos de refresco.
"""
import json
from functools import lru_cache
from typing import List

from pydantic import AliasChoices, Field, ValidationError, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from index_duel.shared.constants.card_constants import (
    DEFAULT_BATCH_PAUSE_SECONDS,
    DEFAULT_BATCH_SIZE,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_REFRESH_INTERVAL_HOURS,
)
from index_duel.shared.exceptions import ConfigurationException


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno (y .env) y proporciona valores por defecto.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Index Duel Backend")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8080)

    # Base de datos - componentes obligatorios
    PG_HOST: str
    PG_PORT: int
    PG_DATABASE: str
    PG_USER: str
    PG_PASSWORD: str

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)

    # API remota del catalogo
    API_URL: str = Field(default="", validation_alias=AliasChoices("API_URL", "API"))
    HTTP_TIMEOUT_SECONDS: float = Field(default=DEFAULT_HTTP_TIMEOUT_SECONDS, gt=0)

    # Pipeline de refresco
    REFRESH_BATCH_SIZE: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    REFRESH_BATCH_PAUSE_SECONDS: float = Field(default=DEFAULT_BATCH_PAUSE_SECONDS, ge=0)
    REFRESH_INTERVAL_HOURS: float = Field(default=DEFAULT_REFRESH_INTERVAL_HOURS, gt=0)
    REFRESH_ON_STARTUP: bool = Field(default=True)
    SCHEDULER_ENABLED: bool = Field(default=True)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL asyncpg desde los componentes PG_*.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        url = URL.create(
            drivername="postgresql+asyncpg",
            username=self.PG_USER,
            password=self.PG_PASSWORD,
            host=self.PG_HOST,
            port=self.PG_PORT,
            database=self.PG_DATABASE,
        )
        return url.render_as_string(hide_password=False)


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


def load_settings(**overrides) -> Settings:
    """
    Construye Settings desde el entorno.

    Raises:
        ConfigurationException: Si falta alguna variable obligatoria o es invalida
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing = [str(err["loc"][0]) for err in e.errors() if err.get("type") == "missing"]
        invalid = [str(err["loc"][0]) for err in e.errors() if err.get("type") != "missing"]
        if missing:
            message = f"Faltan variables de entorno obligatorias: {', '.join(missing)}"
        else:
            message = f"Variables de entorno invalidas: {', '.join(invalid)}"
        raise ConfigurationException(message, missing=missing or invalid) from e


@lru_cache
def get_settings() -> Settings:
    """Settings cacheados del proceso (se leen una sola vez)."""
    return load_settings()
