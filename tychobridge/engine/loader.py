"""Native engine loader (importlib entry resolution + contract check)."""

from __future__ import annotations

import importlib
from typing import Any

from loguru import logger

from tychobridge.engine.contracts import ENGINE_METHODS, EmulatorEngine
from tychobridge.utils.exceptions import EngineUnavailableError

DEFAULT_ENGINE_MODULE = "tycho_emulator"


def _missing_methods(target: Any) -> list[str]:
    return [name for name in ENGINE_METHODS if not callable(getattr(target, name, None))]


def _resolve_entry(entry: str) -> Any:
    module_ref, _, obj_name = entry.partition(":")
    module_ref = module_ref.strip()
    if not module_ref:
        raise EngineUnavailableError(entry, "entry module is required")
    try:
        module = importlib.import_module(module_ref)
    except ImportError as exc:
        raise EngineUnavailableError(module_ref, str(exc)) from exc
    object_name = obj_name.strip()
    if object_name:
        if not hasattr(module, object_name):
            raise EngineUnavailableError(entry, f"entry object not found: {object_name}")
        return getattr(module, object_name)
    # Bindings either export the functions at module level or an `engine` object.
    if _missing_methods(module) and hasattr(module, "engine"):
        return getattr(module, "engine")
    return module


def load_engine(entry: str = DEFAULT_ENGINE_MODULE) -> EmulatorEngine:
    """Import a native engine by ``module`` or ``module:object`` reference.

    Classes are instantiated with no arguments. The result must expose every
    callable of :class:`EmulatorEngine`.
    """
    target = _resolve_entry(entry)
    if isinstance(target, type):
        target = target()
    missing = _missing_methods(target)
    if missing:
        raise EngineUnavailableError(entry, f"missing engine methods: {', '.join(missing)}")
    logger.debug("Loaded emulator engine from {}", entry)
    return target
