from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    supabase_url: str = Field(default="", validation_alias="SUPABASE_URL")
    supabase_key: str = Field(default="", validation_alias="SUPABASE_KEY")
    supabase_timeout_seconds: float = Field(
        default=15.0,
        validation_alias="SUPABASE_TIMEOUT_SECONDS",
        description="Timeout for one REST round-trip to the data store",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str = Field(default="", validation_alias="LOG_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("supabase_url", "supabase_key")
    @classmethod
    def validate_required(cls, value: str) -> str:
        """Validate data store credentials are provided.

        Empty values are allowed for local development and tests, where an
        in-memory store is used instead of the REST backend.
        """
        if not value:
            logger.warning(
                "SUPABASE_URL and/or SUPABASE_KEY are not set. "
                "The REST data store will not be reachable. "
                "Set them in .env file or environment variables."
            )
        return value.strip()

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, value: str) -> str:
        """Strip a trailing slash and any REST suffix pasted from the dashboard."""
        value = value.rstrip("/")
        if value.endswith("/rest/v1"):
            value = value[: -len("/rest/v1")]
        return value


settings = Settings()
