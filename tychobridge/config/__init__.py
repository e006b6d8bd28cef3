"""Configuration module for tychobridge."""

from tychobridge.config.loader import load_config, get_config_path
from tychobridge.config.schema import BridgeSettings, EngineConfig, RpcConfig
from tychobridge.config.access import get_config, clear_config_cache

__all__ = [
    "BridgeSettings",
    "EngineConfig",
    "RpcConfig",
    "load_config",
    "get_config_path",
    "get_config",
    "clear_config_cache",
]
