"""Runtime configuration loaded from environment variables and .env."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STORE_MEMORY = "memory"
STORE_NEO4J = "neo4j"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    # Store
    store: Literal["memory", "neo4j"] = Field(
        default=STORE_MEMORY, alias="CONTACTLINK_STORE"
    )
    neo4j_uri: str = Field(default="bolt://localhost:7687", alias="NEO4J_URI")
    neo4j_user: str = Field(default="neo4j", alias="NEO4J_USER")
    neo4j_password: str = Field(default="password", alias="NEO4J_PASSWORD")
    neo4j_database: str | None = Field(default=None, alias="NEO4J_DATABASE")

    # Matching
    default_region: str | None = Field(
        default=None,
        alias="CONTACTLINK_DEFAULT_REGION",
        description="Region for phone numbers written without a leading +",
    )
    transitive_matching: bool = Field(
        default=False, alias="CONTACTLINK_TRANSITIVE_MATCH"
    )
    strict_consistency: bool = Field(
        default=False,
        alias="CONTACTLINK_STRICT_CONSISTENCY",
        description="Refuse requests whose matched contacts have no primary",
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("store", mode="before")
    @classmethod
    def _lower_store(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("default_region", "neo4j_database", mode="before")
    @classmethod
    def _blank_is_none(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("default_region", "log_level")
    @classmethod
    def _upper(cls, value):
        return value.upper() if value else value
