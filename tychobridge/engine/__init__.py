"""Native emulator engine contract and loader."""

from .contracts import ENGINE_METHODS, EmulatorEngine
from .loader import DEFAULT_ENGINE_MODULE, load_engine

__all__ = ["DEFAULT_ENGINE_MODULE", "ENGINE_METHODS", "EmulatorEngine", "load_engine"]
