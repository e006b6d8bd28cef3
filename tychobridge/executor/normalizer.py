"""Normalize decoded engine responses into typed executor results.

The engine reports VM-level failures in two shapes that differ only by the
presence of ``vm_log``: with it the failure happened during the compute
phase, without it the transaction was rejected earlier (e.g. not enough
balance to pay for gas). The variant is decided here once, so callers only
ever look at ``TransactionFailure.vm_results``.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from tychobridge.executor.codec import decode_big
from tychobridge.executor.protocol import CallResponse, ErrResponse
from tychobridge.executor.types import (
    EmulationResult,
    GetMethodFailure,
    GetMethodResult,
    GetMethodSuccess,
    TransactionFailure,
    TransactionSuccess,
    VmResults,
)
from tychobridge.utils.exceptions import EmulationError, ProtocolError, sanitize_error_message


def _require_str(output: dict[str, Any], key: str) -> str:
    value = output.get(key)
    if not isinstance(value, str):
        raise ProtocolError(f"engine output field '{key}' must be a string")
    return value


def _optional_str(output: dict[str, Any], key: str) -> str | None:
    value = output.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ProtocolError(f"engine output field '{key}' must be a string or null")
    return value


def _require_int(output: dict[str, Any], key: str) -> int:
    value = output.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProtocolError(f"engine output field '{key}' must be an integer")
    return value


def _elapsed(output: dict[str, Any]) -> float | None:
    value = output.get("elapsed_time")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return None


def _raise_for_error(response: CallResponse, operation: str) -> None:
    if isinstance(response, ErrResponse):
        logger.warning("Engine rejected {}: {}", operation, sanitize_error_message(response.message))
        raise EmulationError(response.message, operation=operation)


def normalize_emulation(response: CallResponse) -> EmulationResult:
    """Map a transaction/tick-tock response onto ``TransactionSuccess | TransactionFailure``."""
    _raise_for_error(response, "emulation")
    output = response.output
    debug_logs = _optional_str(output, "debug_log") or ""

    if output["success"]:
        result: TransactionSuccess | TransactionFailure = TransactionSuccess(
            transaction=_require_str(output, "transaction"),
            shard_account=_require_str(output, "shard_account"),
            vm_log=_require_str(output, "vm_log"),
            actions=_optional_str(output, "actions"),
            elapsed_time=_elapsed(output),
        )
    else:
        vm_results = None
        if "vm_log" in output:
            vm_results = VmResults(
                vm_log=_optional_str(output, "vm_log") or "",
                vm_exit_code=_require_int(output, "vm_exit_code"),
            )
        result = TransactionFailure(
            error=_optional_str(output, "error") or "",
            vm_results=vm_results,
            external_not_accepted=bool(output.get("external_not_accepted", False)),
            elapsed_time=_elapsed(output),
        )
    return EmulationResult(result=result, logs=response.logs, debug_logs=debug_logs)


def normalize_get_method(response: CallResponse) -> GetMethodResult:
    """Map a get-method response onto the two-state ``GetMethodSuccess | GetMethodFailure``."""
    _raise_for_error(response, "get method")
    output = response.output
    debug_logs = _optional_str(output, "debug_log") or ""

    if output["success"]:
        result: GetMethodSuccess | GetMethodFailure = GetMethodSuccess(
            stack=_require_str(output, "stack"),
            gas_used=decode_big(output.get("gas_used", 0), "gas_used"),
            vm_exit_code=_require_int(output, "vm_exit_code"),
            vm_log=_optional_str(output, "vm_log") or "",
            missing_library=_optional_str(output, "missing_library"),
        )
    else:
        result = GetMethodFailure(error=_optional_str(output, "error") or "")
    return GetMethodResult(output=result, logs=response.logs, debug_logs=debug_logs)
