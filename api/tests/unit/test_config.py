"""
Tests de carga de configuracion desde variables de entorno.
"""
import pytest

from index_duel.core.config import get_cors_origins, load_settings
from index_duel.shared.exceptions import ConfigurationException


PG_VARS = {
    "PG_HOST": "db.internal",
    "PG_PORT": "5433",
    "PG_DATABASE": "cards",
    "PG_USER": "mirror",
    "PG_PASSWORD": "p@ss:word",
}


@pytest.fixture
def clean_env(monkeypatch):
    """Entorno sin variables de la aplicacion."""
    for name in list(PG_VARS) + ["DATABASE_URL", "API_URL", "API"]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_missing_pg_variables_raise_configuration_error(clean_env):
    clean_env.setenv("PG_HOST", "db.internal")

    with pytest.raises(ConfigurationException) as exc_info:
        load_settings(_env_file=None)

    exc = exc_info.value
    assert exc.error_code == "CONFIGURATION_ERROR"
    assert set(exc.details["missing"]) == {"PG_PORT", "PG_DATABASE", "PG_USER", "PG_PASSWORD"}
    assert "PG_PASSWORD" in exc.message


def test_invalid_pg_port_raises_configuration_error(clean_env):
    for name, value in PG_VARS.items():
        clean_env.setenv(name, value)
    clean_env.setenv("PG_PORT", "not-a-port")

    with pytest.raises(ConfigurationException) as exc_info:
        load_settings(_env_file=None)

    assert exc_info.value.details["missing"] == ["PG_PORT"]


def test_database_url_is_built_from_components(clean_env):
    for name, value in PG_VARS.items():
        clean_env.setenv(name, value)

    settings = load_settings(_env_file=None)

    url = settings.effective_database_url
    assert url.startswith("postgresql+asyncpg://mirror:")
    assert url.endswith("@db.internal:5433/cards")
    # La password se escapa dentro de la URL
    assert "p@ss:word" not in url
    assert settings.PG_PORT == 5433


def test_database_url_override_wins(clean_env):
    for name, value in PG_VARS.items():
        clean_env.setenv(name, value)
    clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///./cards.db")

    settings = load_settings(_env_file=None)

    assert settings.effective_database_url == "sqlite+aiosqlite:///./cards.db"


def test_api_url_is_optional_and_accepts_legacy_name(clean_env):
    for name, value in PG_VARS.items():
        clean_env.setenv(name, value)

    assert load_settings(_env_file=None).API_URL == ""

    clean_env.setenv("API", "https://upstream.test/cardinfo.php")
    assert load_settings(_env_file=None).API_URL == "https://upstream.test/cardinfo.php"


def test_refresh_defaults(clean_env):
    for name, value in PG_VARS.items():
        clean_env.setenv(name, value)

    settings = load_settings(_env_file=None)

    assert settings.REFRESH_BATCH_SIZE == 10
    assert settings.REFRESH_BATCH_PAUSE_SECONDS == 1.0
    assert settings.REFRESH_INTERVAL_HOURS == 168
    assert settings.HTTP_TIMEOUT_SECONDS == 30.0
    assert settings.PORT == 8080


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("*", ["*"]),
        ('["https://a.test", "https://b.test"]', ["https://a.test", "https://b.test"]),
        ("https://a.test, https://b.test", ["https://a.test", "https://b.test"]),
    ],
)
def test_get_cors_origins(raw, expected):
    assert get_cors_origins(raw) == expected
