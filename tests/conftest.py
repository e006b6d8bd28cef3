"""Pytest hooks and fixtures."""

import importlib.util
import json
import os

import pytest

from tychobridge.engine import DEFAULT_ENGINE_MODULE

TX_SUCCESS = json.dumps(
    {
        "ok": True,
        "output": {
            "success": True,
            "transaction": "dHg=",
            "shard_account": "c2E=",
            "vm_log": "execute SETCP 0",
            "actions": None,
        },
        "logs": "executor log",
    }
)

GET_METHOD_SUCCESS = json.dumps(
    {
        "ok": True,
        "output": {
            "success": True,
            "stack": "c3RhY2s=",
            "gas_used": "1234",
            "vm_exit_code": 0,
            "vm_log": "",
            "missing_library": None,
        },
        "logs": "",
    }
)

VERSION = json.dumps({"emulatorLibCommitHash": "abc123", "emulatorLibCommitDate": "2025-01-01"})


def pytest_configure(config):
    """Register custom markers (also in pyproject.toml)."""
    config.addinivalue_line(
        "markers",
        "requires_engine: needs an importable native engine and TYCHO_BRIDGE_TEST_FIXTURES",
    )


def pytest_collection_modifyitems(config, items):
    """Skip requires_engine tests when no native engine or fixtures file is available."""
    engine_module = os.environ.get("TYCHO_BRIDGE_ENGINE__MODULE", DEFAULT_ENGINE_MODULE).partition(":")[0]
    fixtures = os.environ.get("TYCHO_BRIDGE_TEST_FIXTURES")
    if fixtures and importlib.util.find_spec(engine_module) is not None:
        return
    skip = pytest.mark.skip(reason="Requires a native emulator engine (set TYCHO_BRIDGE_TEST_FIXTURES)")
    for item in items:
        if "requires_engine" in item.keywords:
            item.add_marker(skip)


class FakeEngine:
    """In-memory engine recording every native call."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.live: set[int] = set()
        self.next_handle = 1
        self.get_method_response = GET_METHOD_SUCCESS
        self.emulate_response = TX_SUCCESS
        self.version_response = VERSION
        self.create_error: Exception | None = None
        self.destroy_error: Exception | None = None
        self.null_handle = False

    def create_emulator(self, config, verbosity):
        self.calls.append(("create", config, verbosity))
        if self.create_error is not None:
            raise self.create_error
        if self.null_handle:
            return 0
        handle = self.next_handle
        self.next_handle += 1
        self.live.add(handle)
        return handle

    def destroy_emulator(self, handle):
        self.calls.append(("destroy", handle))
        if self.destroy_error is not None:
            raise self.destroy_error
        self.live.discard(handle)

    def run_get_method(self, params, stack, config):
        self.calls.append(("get_method", json.loads(params), stack, config))
        return self.get_method_response

    def emulate_with_emulator(self, handle, libs, shard_account, message, params):
        assert handle in self.live, f"emulate on dead handle {handle}"
        self.calls.append(("emulate", handle, libs, shard_account, message, json.loads(params)))
        return self.emulate_response

    def version(self):
        self.calls.append(("version",))
        return self.version_response

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def engine():
    return FakeEngine()
