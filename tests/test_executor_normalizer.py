import pytest
from loguru import logger

from tychobridge.executor.normalizer import normalize_emulation, normalize_get_method
from tychobridge.executor.protocol import ErrResponse, OkResponse
from tychobridge.executor.types import TransactionFailure, TransactionSuccess
from tychobridge.utils.exceptions import EmulationError, ProtocolError


def test_success_has_all_fields():
    result = normalize_emulation(
        OkResponse(
            output={
                "success": True,
                "transaction": "dHg=",
                "shard_account": "c2E=",
                "vm_log": "log",
                "actions": None,
                "elapsed_time": 0.5,
            },
            logs="executor",
        )
    )
    assert isinstance(result.result, TransactionSuccess)
    assert result.result.to_dict() == {
        "success": True,
        "transaction": "dHg=",
        "shardAccount": "c2E=",
        "vmLog": "log",
        "actions": None,
    }
    assert result.result.elapsed_time == 0.5
    assert result.logs == "executor"


def test_failure_inside_vm_carries_vm_results():
    result = normalize_emulation(
        OkResponse(output={"success": False, "error": "compute failed", "vm_log": "trace", "vm_exit_code": 9})
    )
    failure = result.result
    assert isinstance(failure, TransactionFailure)
    assert failure.vm_results is not None
    assert failure.vm_results.vm_exit_code == 9
    assert failure.to_dict() == {
        "success": False,
        "error": "compute failed",
        "vmLog": "trace",
        "vmExitCode": 9,
    }


def test_failure_before_vm_omits_vm_fields():
    result = normalize_emulation(
        OkResponse(output={"success": False, "error": "not enough balance", "external_not_accepted": True})
    )
    failure = result.result
    assert failure.vm_results is None
    assert failure.external_not_accepted is True
    data = failure.to_dict()
    assert "vmLog" not in data
    assert "vmExitCode" not in data


def test_vm_log_without_exit_code_is_malformed():
    with pytest.raises(ProtocolError):
        normalize_emulation(OkResponse(output={"success": False, "error": "x", "vm_log": ""}))


def test_success_without_transaction_is_malformed():
    with pytest.raises(ProtocolError):
        normalize_emulation(OkResponse(output={"success": True, "shard_account": "c2E="}))


def test_debug_log_goes_to_debug_channel():
    result = normalize_emulation(
        OkResponse(
            output={
                "success": True,
                "transaction": "dHg=",
                "shard_account": "c2E=",
                "vm_log": "",
                "actions": "YWN0",
                "debug_log": "DUMP 1",
            },
            logs="plain",
        )
    )
    assert result.debug_logs == "DUMP 1"
    assert result.logs == "plain"


@pytest.mark.parametrize("normalize", [normalize_emulation, normalize_get_method])
def test_error_response_raises_with_engine_message(normalize):
    with pytest.raises(EmulationError) as exc_info:
        normalize(ErrResponse(message="Failed to unpack config"))
    assert exc_info.value.message == "Failed to unpack config"
    assert exc_info.value.details["operation"] in ("emulation", "get method")


def test_get_method_success():
    result = normalize_get_method(
        OkResponse(
            output={
                "success": True,
                "stack": "c3RhY2s=",
                "gas_used": "2613",
                "vm_exit_code": 0,
                "vm_log": "",
                "missing_library": None,
                "debug_log": "#DEBUG#",
            }
        )
    )
    assert result.output.success is True
    assert result.output.gas_used == 2613
    assert result.output.to_dict()["gasUsed"] == 2613
    assert result.debug_logs == "#DEBUG#"
    assert result.logs == ""


def test_get_method_failure_is_two_state():
    result = normalize_get_method(OkResponse(output={"success": False, "error": "cannot deserialize stack"}))
    assert result.output.success is False
    assert result.output.to_dict() == {"success": False, "error": "cannot deserialize stack"}


def test_rejection_is_logged_redacted_but_raised_verbatim():
    secret = "ab" * 32
    messages = []
    sink_id = logger.add(messages.append, level="WARNING", format="{message}")
    try:
        with pytest.raises(EmulationError) as exc_info:
            normalize_emulation(ErrResponse(message=f"cannot apply rand_seed {secret}"))
    finally:
        logger.remove(sink_id)
    assert secret in exc_info.value.message
    logged = "".join(messages)
    assert "cannot apply rand_seed" in logged
    assert secret not in logged


def test_success_without_vm_log_is_malformed():
    with pytest.raises(ProtocolError, match="vm_log"):
        normalize_emulation(
            OkResponse(output={"success": True, "transaction": "dHg=", "shard_account": "c2E=", "actions": None})
        )
