"""Wire codec between typed executor arguments and the engine's JSON schema."""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any

from loguru import logger

from tychobridge.executor.protocol import CallResponse, ErrResponse, OkResponse
from tychobridge.executor.types import (
    CellLike,
    GetMethodArgs,
    RunCommonArgs,
    RunTickTockArgs,
    VersionInfo,
    verbosity_to_ordinal,
)
from tychobridge.utils.exceptions import ProtocolError, ValidationError, sanitize_error_message

RAND_SEED_LEN = 32
UINT32_MAX = 2**32 - 1
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
_DECIMAL_RE = re.compile(r"-?[0-9]+")

BEHAVIOUR_FLAGS = (
    "disable_delete_frozen_accounts",
    "charge_action_fees_on_fail",
    "full_body_in_bounced",
    "strict_extra_currency",
    "authority_marks_enabled",
)


# === Field encoders ===


def encode_cell(value: CellLike, field: str) -> str:
    """Encode a serialized cell tree as base64 BOC."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a base64 BOC string or bytes", field=field)
    text = value.strip()
    try:
        base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(f"{field} is not valid base64", field=field) from exc
    return text


def encode_seed(value: bytes, field: str = "random_seed") -> str:
    if not isinstance(value, (bytes, bytearray)) or len(value) != RAND_SEED_LEN:
        raise ValidationError(f"{field} must be {RAND_SEED_LEN} bytes", field=field)
    return bytes(value).hex()


def _check_int(value: Any, field: str, *, low: int, high: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer", field=field)
    if value < low or (high is not None and value > high):
        raise ValidationError(f"{field} out of range: {value}", field=field)
    return value


def encode_big(value: int, field: str) -> str:
    """Arbitrary-precision unsigned integers always travel as decimal strings."""
    return str(_check_int(value, field, low=0))


def decode_big(value: Any, field: str) -> int:
    """Inverse of :func:`encode_big`; accepts only decimal strings or ints."""
    if isinstance(value, bool):
        raise ProtocolError(f"{field} is not an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _DECIMAL_RE.fullmatch(value.strip()):
        return int(value.strip())
    raise ProtocolError(f"{field} is not a decimal integer: {value!r}")


def encode_extra_currencies(extra: dict[int, int]) -> dict[str, str]:
    out: dict[str, str] = {}
    for currency_id, amount in extra.items():
        key = _check_int(currency_id, "extra_currency", low=INT32_MIN, high=INT32_MAX)
        out[str(key)] = encode_big(amount, "extra_currency")
    return out


# === Request encoders ===


def get_method_params(args: GetMethodArgs, verbosity: int | None = None) -> dict[str, Any]:
    """Build the flat get-method parameter object; absent optionals are omitted."""
    if verbosity is None:
        verbosity = verbosity_to_ordinal(args.verbosity if args.verbosity is not None else "short")
    params: dict[str, Any] = {
        "code": encode_cell(args.code, "code"),
        "data": encode_cell(args.data, "data"),
        "verbosity": verbosity,
        "address": _check_address(args.address),
        "unixtime": _check_int(args.unix_time, "unix_time", low=0, high=UINT32_MAX),
        "balance": encode_big(args.balance, "balance"),
        "rand_seed": encode_seed(args.random_seed),
        "gas_limit": encode_big(args.gas_limit, "gas_limit"),
        "method_id": _check_int(args.method_id, "method_id", low=INT32_MIN, high=INT32_MAX),
        "debug_enabled": bool(args.debug_enabled),
    }
    if args.libs is not None:
        params["libs"] = encode_cell(args.libs, "libs")
    if args.prev_blocks_info is not None:
        params["prev_blocks_info"] = encode_cell(args.prev_blocks_info, "prev_blocks_info")
    if args.extra_currency is not None:
        params["extra_currencies"] = encode_extra_currencies(args.extra_currency)
    return params


def emulation_params(args: RunCommonArgs) -> dict[str, Any]:
    """Common transaction parameter translation, plus the tick-tock discriminant."""
    params: dict[str, Any] = {
        "utime": _check_int(args.now, "now", low=0, high=UINT32_MAX),
        "lt": encode_big(args.lt, "lt"),
        "rand_seed": "" if args.random_seed is None else encode_seed(args.random_seed),
        "ignore_chksig": bool(args.ignore_chksig),
        "debug_enabled": bool(args.debug_enabled),
    }
    if args.prev_blocks_info is not None:
        params["prev_blocks_info"] = encode_cell(args.prev_blocks_info, "prev_blocks_info")
    for flag in BEHAVIOUR_FLAGS:
        value = getattr(args, flag)
        if value is not None:
            params[flag] = bool(value)
    if isinstance(args, RunTickTockArgs):
        if args.which not in ("tick", "tock"):
            raise ValidationError(f"unknown tick-tock kind: {args.which!r}", field="which")
        params["is_tick_tock"] = True
        params["is_tock"] = args.which == "tock"
    return params


def encode_params(params: dict[str, Any]) -> str:
    return json.dumps(params, ensure_ascii=False)


def encode_get_method_params(args: GetMethodArgs, verbosity: int | None = None) -> str:
    return encode_params(get_method_params(args, verbosity))


def encode_emulation_params(args: RunCommonArgs) -> str:
    return encode_params(emulation_params(args))


def _check_address(address: str) -> str:
    value = str(address or "").strip()
    if not value:
        raise ValidationError("address is required", field="address")
    return value


# === Response decoders ===


def _malformed(message: str, raw: str | bytes) -> ProtocolError:
    text = raw if isinstance(raw, str) else repr(raw)
    logger.debug("Malformed engine response ({}): {}", message, sanitize_error_message(text[:200]))
    return ProtocolError(message, raw=text)


def _load_json(raw: str | bytes) -> Any:
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError, UnicodeDecodeError) as exc:
        raise _malformed(f"engine returned invalid JSON: {exc}", raw) from exc


def decode_response(raw: str | bytes) -> CallResponse:
    """Decode the ``{ok, output, logs}`` / ``{ok, message}`` envelope."""
    payload = _load_json(raw)
    if not isinstance(payload, dict):
        raise _malformed("engine response is not a JSON object", raw)
    ok = payload.get("ok")
    if not isinstance(ok, bool):
        raise _malformed("engine response has no boolean 'ok' discriminant", raw)
    if not ok:
        message = payload.get("message")
        if not isinstance(message, str):
            raise _malformed("engine error response has no 'message'", raw)
        return ErrResponse(message=message)
    output = payload.get("output")
    if not isinstance(output, dict) or not isinstance(output.get("success"), bool):
        raise _malformed("engine output has no boolean 'success' discriminant", raw)
    logs = payload.get("logs")
    return OkResponse(output=output, logs=logs if isinstance(logs, str) else "")


def decode_version(raw: str | bytes) -> VersionInfo:
    row = _load_json(raw)
    if not isinstance(row, dict):
        raise _malformed("version response is not a JSON object", raw)
    commit_hash = row.get("emulatorLibCommitHash")
    commit_date = row.get("emulatorLibCommitDate")
    if not isinstance(commit_hash, str) or not isinstance(commit_date, str):
        raise _malformed("version response lacks commit hash/date", raw)
    return VersionInfo(commit_hash=commit_hash, commit_date=commit_date)
