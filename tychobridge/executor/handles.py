"""Single-slot cache of the native emulator handle."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from tychobridge.engine.contracts import EmulatorEngine
from tychobridge.utils.exceptions import HandleLifecycleError, sanitize_error_message


@dataclass(frozen=True, slots=True)
class HandleKey:
    config: str
    verbosity: int


class EngineHandleCache:
    """Owns at most one live engine handle, keyed by ``(config, verbosity)``.

    Not safe for interleaved use; callers serialize access (see
    :class:`tychobridge.executor.executor.TychoExecutor`).
    """

    def __init__(self, engine: EmulatorEngine):
        self._engine = engine
        self._handle: int | None = None
        self._key: HandleKey | None = None
        self.last_destroy_error: Exception | None = None

    @property
    def handle(self) -> int | None:
        return self._handle

    @property
    def key(self) -> HandleKey | None:
        return self._key

    def ensure_handle(self, config: str, verbosity: int) -> int:
        """Return the cached handle, recreating it when the key changed."""
        key = HandleKey(config=config, verbosity=int(verbosity))
        if self._handle is not None and self._key == key:
            return self._handle
        if self._handle is not None:
            self._release(strict=False)
        return self._create(key)

    def close(self) -> None:
        """Destroy the live handle, if any."""
        if self._handle is not None:
            self._release(strict=True)

    def _release(self, *, strict: bool) -> None:
        handle = self._handle
        self._handle = None
        self._key = None
        try:
            self._engine.destroy_emulator(handle)
        except Exception as exc:
            self.last_destroy_error = exc
            logger.error("Failed to destroy emulator handle {}: {}", handle, sanitize_error_message(str(exc)))
            if strict:
                raise HandleLifecycleError("destroy", str(exc), handle=handle) from exc
            return
        logger.debug("Destroyed emulator handle {}", handle)

    def _create(self, key: HandleKey) -> int:
        try:
            handle = self._engine.create_emulator(key.config, key.verbosity)
        except Exception as exc:
            raise HandleLifecycleError("create", str(exc)) from exc
        if not handle:
            raise HandleLifecycleError("create", "engine returned a null handle")
        self._handle = int(handle)
        self._key = key
        logger.debug("Created emulator handle {} (verbosity={})", self._handle, key.verbosity)
        return self._handle
