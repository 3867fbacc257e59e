"""Configuration schema using Pydantic."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class LoggingConfig(BaseModel):
    """Loguru sink settings applied by the CLI."""

    model_config = ConfigDict(extra="ignore")

    level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"
    colorize: bool | None = None


class TelemetryConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = False


class ChainSettings(BaseSettings):
    """Root configuration for handlerchain."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        env_prefix="HANDLERCHAIN_",
        env_nested_delimiter="__",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    drain_unawaited: bool = True
