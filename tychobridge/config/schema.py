"""Configuration schema using Pydantic."""

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tychobridge.executor.types import VERBOSITY_LEVELS


class EngineConfig(BaseModel):
    """Native emulator engine configuration."""
    module: str = "tycho_emulator"  # importable module or "module:object" entry
    verbosity: str = "short"  # default VM log verbosity for calls that don't set one

    @field_validator("verbosity")
    @classmethod
    def _known_verbosity(cls, value: str) -> str:
        if value not in VERBOSITY_LEVELS:
            raise ValueError(f"unknown verbosity level: {value}")
        return value


class RpcConfig(BaseModel):
    """Remote account-state JSON-RPC endpoint."""
    url: str = ""
    timeout: float = 10.0


class BridgeSettings(BaseSettings):
    """Root configuration for tychobridge."""
    engine: EngineConfig = Field(default_factory=EngineConfig)
    rpc: RpcConfig = Field(default_factory=RpcConfig)

    model_config = SettingsConfigDict(
        env_prefix="TYCHO_BRIDGE_",
        env_nested_delimiter="__",
    )
