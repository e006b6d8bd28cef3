"""Read bridge settings from a JSON file."""

import json
import re
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from tychobridge.config.schema import BridgeSettings

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def get_config_path() -> Path:
    return Path.home() / ".tychobridge" / "config.json"


def load_config(config_path: Path | None = None) -> BridgeSettings:
    """
    Build settings from a JSON file.

    Keys may be camelCase. Values from the file take precedence over
    ``TYCHO_BRIDGE_*`` environment variables; a missing file means env
    and defaults only.

    Raises:
        ValueError: the file exists but is not a valid settings object.
    """
    path = config_path or get_config_path()
    if not path.exists():
        logger.debug("No config file at {}, using environment and defaults", path)
        return BridgeSettings()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError("top-level value must be an object")
        settings = BridgeSettings(**convert_keys(raw))
    except (json.JSONDecodeError, PydanticValidationError, ValueError) as e:
        raise ValueError(f"Failed to load config from {path}: {e}") from e
    logger.debug("Loaded config from {} (engine={})", path, settings.engine.module)
    return settings


def convert_keys(data: Any) -> Any:
    """Recursively rename camelCase keys to snake_case."""
    if isinstance(data, dict):
        return {camel_to_snake(key): convert_keys(value) for key, value in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()
