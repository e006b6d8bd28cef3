"""Execution façade over the native emulator engine."""

from __future__ import annotations

import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from loguru import logger

from tychobridge.engine import EmulatorEngine, load_engine
from tychobridge.executor.codec import (
    decode_response,
    decode_version,
    encode_cell,
    encode_emulation_params,
    encode_get_method_params,
)
from tychobridge.executor.handles import EngineHandleCache
from tychobridge.executor.normalizer import normalize_emulation, normalize_get_method
from tychobridge.executor.types import (
    EmulationResult,
    GetMethodArgs,
    GetMethodResult,
    RunCommonArgs,
    RunTickTockArgs,
    RunTransactionArgs,
    Verbosity,
    VersionInfo,
    verbosity_to_ordinal,
)
from tychobridge.utils.exceptions import BridgeError, ValidationError

if TYPE_CHECKING:
    from tychobridge.config.schema import BridgeSettings

T = TypeVar("T")


class TychoExecutor:
    """Runs get-methods and transactions on a native emulator engine.

    Every public method is a coroutine. Native calls are executed on a
    single worker thread owned by the executor, and each ensure-handle +
    emulate sequence runs under a per-instance lock: the engine keeps exactly
    one handle, so a call that switches config or verbosity would otherwise
    destroy a handle another in-flight call is still using. Separate
    executors share nothing and may run in parallel.
    """

    def __init__(self, engine: EmulatorEngine, *, default_verbosity: Verbosity | int = "short"):
        self._engine = engine
        self._handles = EngineHandleCache(engine)
        self._default_verbosity = verbosity_to_ordinal(default_verbosity)
        self._lock = asyncio.Lock()
        self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tycho-emulator")
        self._closed = False

    @classmethod
    async def create(
        cls,
        engine: EmulatorEngine | None = None,
        *,
        settings: BridgeSettings | None = None,
    ) -> TychoExecutor:
        """Build an executor, loading the configured engine module when none is given."""
        if settings is None:
            from tychobridge.config import get_config

            settings = get_config()
        if engine is None:
            engine = load_engine(settings.engine.module)
        return cls(engine, default_verbosity=settings.engine.verbosity)

    @property
    def handles(self) -> EngineHandleCache:
        return self._handles

    async def __aenter__(self) -> TychoExecutor:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def run_get_method(self, args: GetMethodArgs) -> GetMethodResult:
        """Run a get-method. Does not touch the cached transaction emulator handle."""
        verbosity = self._resolve_verbosity(args.verbosity)
        params = encode_get_method_params(args, verbosity)
        stack = encode_cell(args.stack, "stack")
        config = _check_config(args.config)
        async with self._lock:
            raw = await self._call(self._engine.run_get_method, params, stack, config)
        return normalize_get_method(decode_response(raw))

    async def run_transaction(self, args: RunTransactionArgs) -> EmulationResult:
        """Emulate an ordinary transaction triggered by ``args.message``."""
        return await self._run_common(args, encode_cell(args.message, "message"))

    async def run_tick_tock(self, args: RunTickTockArgs) -> EmulationResult:
        """Emulate a tick or tock transaction; these never carry an inbound message."""
        return await self._run_common(args, None)

    async def get_version(self) -> VersionInfo:
        raw = await self._call(self._engine.version)
        return decode_version(raw)

    async def close(self) -> None:
        """Destroy the live engine handle and stop the worker thread."""
        if self._closed:
            return
        async with self._lock:
            self._closed = True
            try:
                await asyncio.get_running_loop().run_in_executor(self._pool, self._handles.close)
            finally:
                self._pool.shutdown(wait=False)

    async def _run_common(self, args: RunCommonArgs, message: str | None) -> EmulationResult:
        verbosity = self._resolve_verbosity(args.verbosity)
        params = encode_emulation_params(args)
        libs = encode_cell(args.libs, "libs") if args.libs is not None else None
        shard_account = encode_cell(args.shard_account, "shard_account")
        config = _check_config(args.config)
        async with self._lock:
            handle = await self._call(self._handles.ensure_handle, config, verbosity)
            raw = await self._call(
                self._engine.emulate_with_emulator,
                handle,
                libs,
                shard_account,
                message,
                params,
            )
        result = normalize_emulation(decode_response(raw))
        logger.debug("Emulation finished: success={}", result.result.success)
        return result

    def _resolve_verbosity(self, level: Verbosity | int | None) -> int:
        if level is None:
            return self._default_verbosity
        return verbosity_to_ordinal(level)

    async def _call(self, fn: Callable[..., T], *args: Any) -> T:
        if self._closed:
            raise BridgeError("executor is closed", code="EXECUTOR_CLOSED")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._pool, functools.partial(fn, *args))


def _check_config(config: str) -> str:
    if not isinstance(config, str) or not config.strip():
        raise ValidationError("config must be a non-empty base64 string", field="config")
    return config
