"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
PortInt = Annotated[int, Field(gt=0, le=65_535)]

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./mimi-chat.db"


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    host: NonEmptyStr = Field(default="localhost", validation_alias="HOST")
    port: PortInt = Field(default=8080, validation_alias="PORT")
    database_url: NonEmptyStr = Field(
        default=DEFAULT_DATABASE_URL,
        validation_alias="DATABASE_URL",
    )
    auto_create_schema: bool = Field(default=True, validation_alias="AUTO_CREATE_SCHEMA")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()
