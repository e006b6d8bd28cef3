"""Call contract of the native emulator engine."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

ENGINE_METHODS = (
    "create_emulator",
    "destroy_emulator",
    "run_get_method",
    "emulate_with_emulator",
    "version",
)


@runtime_checkable
class EmulatorEngine(Protocol):
    """Synchronous native engine; all payloads cross the boundary as JSON / base64 strings."""

    def create_emulator(self, config: str, verbosity: int) -> int: ...
    def destroy_emulator(self, handle: int) -> None: ...
    def run_get_method(self, params: str, stack: str, config: str | None) -> str: ...
    def emulate_with_emulator(
        self,
        handle: int,
        libs: str | None,
        shard_account: str,
        message: str | None,
        params: str,
    ) -> str: ...
    def version(self) -> str: ...
