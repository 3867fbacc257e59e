"""Configuration loading utilities."""

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from handlerchain.config.schema import ChainSettings
from handlerchain.core.errors import ConfigError


def get_data_path() -> Path:
    """Get the handlerchain home directory.

    Respects HANDLERCHAIN_HOME environment variable; falls back to ~/.handlerchain.
    """
    home = os.environ.get("HANDLERCHAIN_HOME", "").strip()
    if home:
        return Path(home).expanduser()
    return Path.home() / ".handlerchain"


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return get_data_path() / "config.json"


def load_config(config_path: Path | None = None) -> ChainSettings:
    """
    Load configuration from file, falling back to environment and defaults.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded settings object.

    Raises:
        ConfigError: The file exists but is not valid JSON or fails validation.
    """
    path = config_path or get_config_path()

    if not path.exists():
        logger.debug("no config file at {}, using environment and defaults", path)
        return ChainSettings()

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON in {path}: {e}", original=e) from e

    if not isinstance(raw, dict):
        raise ConfigError(f"config root must be a JSON object: {path}")

    try:
        return ChainSettings.model_validate(convert_keys(raw))
    except ValidationError as e:
        raise ConfigError(f"invalid config {path}: {e}", original=e) from e


def save_config(config: ChainSettings, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = convert_to_camel(config.model_dump(mode="json"))
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    os.replace(tmp, path)


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def snake_to_camel(name: str) -> str:
    components = name.split("_")
    return components[0] + "".join(x.title() for x in components[1:])
