"""
Configuration settings for rowmapper.

Uses Pydantic Settings to load environment variables for the database
connection, the optional timestamped columns and logging.

TIMESTAMPED_FIELDS is a JSON object; when present both keys must be set,
each to a column name or to false:

    TIMESTAMPED_FIELDS='{"created": "created_at", "updated": false}'
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rowmapper.errors import ConfigurationError


class TimestampConfig(BaseModel):
    """Columns stamped with the dialect's current time; ``False`` disables one."""

    created: Union[str, bool]
    updated: Union[str, bool]

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("created", "updated")
    @classmethod
    def _string_or_false(cls, value: Union[str, bool], info: ValidationInfo) -> Union[str, bool]:
        if value is True or (isinstance(value, str) and not value.strip()):
            raise ValueError(f"timestampedFields for {info.field_name} must be a string or false")
        return value

    @property
    def created_column(self) -> Optional[str]:
        return self.created or None

    @property
    def updated_column(self) -> Optional[str]:
        return self.updated or None


class Settings(BaseSettings):
    # Database
    db_dialect: str = Field("sqlite", alias="DB_DIALECT")
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(3306, alias="DB_PORT")
    db_user: str = Field("root", alias="DB_USER")
    db_password: str = Field("", alias="DB_PASSWORD")
    db_name: str = Field("rowmapper", alias="DB_NAME")
    sqlite_path: str = Field("rowmapper.db", alias="SQLITE_PATH")
    db_connect_retries: int = Field(3, alias="DB_CONNECT_RETRIES")

    # Mapping
    timestamped_fields: Optional[TimestampConfig] = Field(None, alias="TIMESTAMPED_FIELDS")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


def load_settings(**overrides) -> Settings:
    """
    Build Settings, surfacing validation problems as ConfigurationError.
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return load_settings()


__all__ = ["Settings", "TimestampConfig", "get_settings", "load_settings"]
