"""
Configuration.

Two sources, both under config/ at the project root (the directory holding
the ``.project_root`` marker):

    config/.env              secrets only: DB_PASSWORD, JWT_SECRET
    config/settings/*.yaml   everything else, one file per section

Both are read once per process through the cached accessors below.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from inkline.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    FeaturesSchema,
    LoggingSchema,
    NotesSchema,
    SecuritySchema,
)

MARKER = ".project_root"


def find_project_root() -> Path:
    """Walk up from the working directory, then from this file, to the marker."""
    for start in (Path.cwd(), Path(__file__).resolve().parent):
        for directory in (start, *start.parents):
            if (directory / MARKER).exists():
                return directory
    raise RuntimeError(f"Project root not found. Ensure {MARKER} file exists.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    path = find_project_root() / "config" / "settings" / filename
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets from config/.env, overridable by the environment."""

    db_password: str
    jwt_secret: str

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class AppConfig:
    """
    Validated YAML settings, one attribute per file.

    Raises:
        FileNotFoundError: A settings file is missing
        ValueError: A settings file does not match its schema
    """

    application: ApplicationSchema
    database: DatabaseSchema
    logging: LoggingSchema
    features: FeaturesSchema
    security: SecuritySchema
    notes: NotesSchema

    SECTIONS: dict[str, type[BaseModel]] = {
        "application": ApplicationSchema,
        "database": DatabaseSchema,
        "logging": LoggingSchema,
        "features": FeaturesSchema,
        "security": SecuritySchema,
        "notes": NotesSchema,
    }

    def __init__(self) -> None:
        for name, schema in self.SECTIONS.items():
            setattr(self, name, self._load(name, schema))

    @staticmethod
    def _load(name: str, schema: type[BaseModel]) -> BaseModel:
        filename = f"{name}.yaml"
        try:
            return schema(**load_yaml_config(filename))
        except ValidationError as e:
            raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=str(find_project_root() / "config" / ".env"))


@lru_cache
def get_app_config() -> AppConfig:
    return AppConfig()


def get_database_url() -> str:
    """
    SQLAlchemy URL for the configured database.

    SQLite drivers read ``name`` as a file path and never touch the secrets.
    """
    db = get_app_config().database
    if db.driver.startswith("sqlite"):
        return f"{db.driver}:///{db.name}"
    return f"{db.driver}://{db.user}:{get_settings().db_password}@{db.host}:{db.port}/{db.name}"


def get_server_base_url() -> tuple[str, float]:
    """(base URL, request timeout in seconds) for clients of the local server."""
    application = get_app_config().application
    server = application.server
    return f"http://{server.host}:{server.port}", float(application.timeouts.external_api)
