"""Typed call arguments and normalized results of the executor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Literal, Union

from tychobridge.utils.exceptions import ValidationError

VERBOSITY_LEVELS: dict[str, int] = {
    "short": 0,
    "full": 1,
    "full_location": 2,
    "full_location_gas": 3,
    "full_location_stack": 4,
    "full_location_stack_verbose": 5,
}

Verbosity = Literal[
    "short",
    "full",
    "full_location",
    "full_location_gas",
    "full_location_stack",
    "full_location_stack_verbose",
]

# Cells cross the boundary as base64 BOC; raw BOC bytes are accepted too.
CellLike = Union[str, bytes]


def verbosity_to_ordinal(level: Verbosity | int) -> int:
    """Map a symbolic verbosity level (or an ordinal) onto the engine's 0..5 scale."""
    if isinstance(level, bool):
        raise ValidationError(f"invalid verbosity: {level!r}", field="verbosity")
    if isinstance(level, int):
        if 0 <= level <= 5:
            return level
        raise ValidationError(f"verbosity out of range: {level}", field="verbosity")
    ordinal = VERBOSITY_LEVELS.get(str(level))
    if ordinal is None:
        raise ValidationError(f"unknown verbosity level: {level!r}", field="verbosity")
    return ordinal


# === Requests ===


@dataclass(slots=True, kw_only=True)
class GetMethodArgs:
    code: CellLike
    data: CellLike
    address: str
    config: str
    method_id: int
    stack: CellLike
    balance: int
    gas_limit: int
    random_seed: bytes
    unix_time: int
    verbosity: Verbosity | int | None = None
    libs: CellLike | None = None
    extra_currency: dict[int, int] | None = None
    prev_blocks_info: CellLike | None = None
    debug_enabled: bool = False


@dataclass(slots=True, kw_only=True)
class RunCommonArgs:
    """Parameters shared by ordinary and tick-tock transactions."""

    config: str
    shard_account: CellLike
    now: int
    lt: int
    random_seed: bytes | None = None
    verbosity: Verbosity | int | None = None
    libs: CellLike | None = None
    ignore_chksig: bool = False
    debug_enabled: bool = False
    prev_blocks_info: CellLike | None = None
    disable_delete_frozen_accounts: bool | None = None
    charge_action_fees_on_fail: bool | None = None
    full_body_in_bounced: bool | None = None
    strict_extra_currency: bool | None = None
    authority_marks_enabled: bool | None = None


@dataclass(slots=True, kw_only=True)
class RunTransactionArgs(RunCommonArgs):
    message: CellLike


@dataclass(slots=True, kw_only=True)
class RunTickTockArgs(RunCommonArgs):
    which: Literal["tick", "tock"]


CallRequest = Union[GetMethodArgs, RunTransactionArgs, RunTickTockArgs]


# === Results ===


@dataclass(slots=True)
class GetMethodSuccess:
    success: ClassVar[bool] = True

    stack: str
    gas_used: int
    vm_exit_code: int
    vm_log: str
    missing_library: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "stack": self.stack,
            "gasUsed": self.gas_used,
            "vmExitCode": self.vm_exit_code,
            "vmLog": self.vm_log,
            "missingLibrary": self.missing_library,
        }


@dataclass(slots=True)
class GetMethodFailure:
    success: ClassVar[bool] = False

    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "error": self.error}


@dataclass(slots=True)
class GetMethodResult:
    output: GetMethodSuccess | GetMethodFailure
    logs: str = ""
    debug_logs: str = ""


@dataclass(slots=True)
class VmResults:
    """Compute-phase detail of a failure that happened inside the VM."""

    vm_log: str
    vm_exit_code: int


@dataclass(slots=True)
class TransactionSuccess:
    success: ClassVar[bool] = True

    transaction: str
    shard_account: str
    vm_log: str
    actions: str | None
    elapsed_time: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "transaction": self.transaction,
            "shardAccount": self.shard_account,
            "vmLog": self.vm_log,
            "actions": self.actions,
        }


@dataclass(slots=True)
class TransactionFailure:
    success: ClassVar[bool] = False

    error: str
    vm_results: VmResults | None = None
    external_not_accepted: bool = False
    elapsed_time: float | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": False, "error": self.error}
        if self.vm_results is not None:
            out["vmLog"] = self.vm_results.vm_log
            out["vmExitCode"] = self.vm_results.vm_exit_code
        return out


@dataclass(slots=True)
class EmulationResult:
    result: TransactionSuccess | TransactionFailure
    logs: str = ""
    debug_logs: str = ""


@dataclass(slots=True)
class VersionInfo:
    commit_hash: str
    commit_date: str
