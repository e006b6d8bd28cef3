"""Process-wide settings cache, one entry per resolved config file."""

from __future__ import annotations

import os
import threading
from pathlib import Path

from tychobridge.config.loader import get_config_path, load_config
from tychobridge.config.schema import BridgeSettings

CONFIG_PATH_ENV = "TYCHO_BRIDGE_CONFIG"

_settings_lock = threading.RLock()
_settings: dict[Path, BridgeSettings] = {}


def _resolve(config_path: Path | str | None) -> Path:
    if config_path is None:
        config_path = os.environ.get(CONFIG_PATH_ENV) or get_config_path()
    return Path(config_path).expanduser().resolve()


def get_config(*, config_path: Path | str | None = None, force_reload: bool = False) -> BridgeSettings:
    """Return settings for ``config_path`` (``$TYCHO_BRIDGE_CONFIG`` or the default file otherwise)."""
    path = _resolve(config_path)
    with _settings_lock:
        settings = None if force_reload else _settings.get(path)
        if settings is None:
            settings = load_config(path)
            _settings[path] = settings
        return settings


def clear_config_cache(*, config_path: Path | str | None = None) -> None:
    with _settings_lock:
        if config_path is None:
            _settings.clear()
        else:
            _settings.pop(_resolve(config_path), None)
