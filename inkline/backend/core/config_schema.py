"""
Configuration Schemas.

One pydantic model per file in config/settings/. AppConfig validates each
file against its model when it loads, so a typo in a YAML key or a wrong
type stops the process at startup.

    application.yaml -> ApplicationSchema
    database.yaml    -> DatabaseSchema
    logging.yaml     -> LoggingSchema
    features.yaml    -> FeaturesSchema
    security.yaml    -> SecuritySchema
    notes.yaml       -> NotesSchema
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Section(BaseModel):
    """Unknown keys are errors."""

    model_config = ConfigDict(extra="forbid")


# application.yaml

class ServerSchema(_Section):
    host: str
    port: int = Field(gt=0, lt=65536)


class CorsSchema(_Section):
    origins: list[str]


class TimeoutsSchema(_Section):
    database: int
    external_api: int


class ApplicationSchema(_Section):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str
    # Base URL used to build share links
    public_origin: str
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema


# database.yaml

class DatabaseSchema(_Section):
    driver: str
    host: str
    port: int
    name: str
    user: str
    pool_size: int
    max_overflow: int
    pool_timeout: int
    pool_recycle: int
    echo: bool


# logging.yaml

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConsoleHandlerSchema(_Section):
    enabled: bool


class FileHandlerSchema(_Section):
    enabled: bool
    path: str
    max_bytes: int = Field(gt=0)
    backup_count: int = Field(ge=0)


class HandlersSchema(_Section):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_Section):
    level: LogLevel
    format: Literal["json", "console"]
    handlers: HandlersSchema
    # Event fields whose values are masked before any handler sees them
    redact_fields: list[str] = Field(
        default_factory=lambda: ["body", "access_token", "authorization", "password"]
    )

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value


# features.yaml

class FeaturesSchema(_Section):
    api_detailed_errors: bool
    api_request_logging: bool
    database_create_tables: bool
    sharing_enabled: bool
    export_enabled: bool


# security.yaml

class JwtSchema(_Section):
    algorithm: str
    access_token_expire_minutes: int = Field(gt=0)
    audience: str


class SecuritySchema(_Section):
    jwt: JwtSchema


# notes.yaml

class QuotaPolicy(str, Enum):
    """Which notes count toward the creation quota."""

    ACTIVE = "active"
    COMBINED = "combined"


class NotesSchema(_Section):
    note_limit: int = Field(gt=0)
    quota_policy: QuotaPolicy
    max_title_length: int = Field(gt=0)
    max_body_length: int = Field(gt=0)
    autosave_debounce_seconds: float = Field(gt=0)
    saved_display_seconds: float = Field(ge=0)
    recent_notes_count: int = Field(ge=0)
