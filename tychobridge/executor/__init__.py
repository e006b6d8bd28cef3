"""Execution bridge: wire codec, engine handle cache, result normalizer and façade."""

from .executor import TychoExecutor
from .handles import EngineHandleCache, HandleKey
from .protocol import CallResponse, ErrResponse, OkResponse
from .types import (
    EmulationResult,
    GetMethodArgs,
    GetMethodFailure,
    GetMethodResult,
    GetMethodSuccess,
    RunCommonArgs,
    RunTickTockArgs,
    RunTransactionArgs,
    TransactionFailure,
    TransactionSuccess,
    VersionInfo,
    VmResults,
    verbosity_to_ordinal,
)

__all__ = [
    "TychoExecutor",
    "EngineHandleCache",
    "HandleKey",
    "CallResponse",
    "ErrResponse",
    "OkResponse",
    "EmulationResult",
    "GetMethodArgs",
    "GetMethodFailure",
    "GetMethodResult",
    "GetMethodSuccess",
    "RunCommonArgs",
    "RunTickTockArgs",
    "RunTransactionArgs",
    "TransactionFailure",
    "TransactionSuccess",
    "VersionInfo",
    "VmResults",
    "verbosity_to_ordinal",
]
