"""Configuration module for handlerchain."""

from handlerchain.config.loader import get_config_path, load_config, save_config
from handlerchain.config.schema import ChainSettings, LoggingConfig, TelemetryConfig

__all__ = [
    "ChainSettings",
    "LoggingConfig",
    "TelemetryConfig",
    "get_config_path",
    "load_config",
    "save_config",
]
