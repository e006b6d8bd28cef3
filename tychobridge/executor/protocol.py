"""Response envelopes crossing the native engine boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(slots=True)
class OkResponse:
    """``{"ok": true, "output": {...}, "logs": "..."}``"""

    output: dict[str, Any] = field(default_factory=dict)
    logs: str = ""

    @property
    def ok(self) -> bool:
        return True


@dataclass(slots=True)
class ErrResponse:
    """``{"ok": false, "message": "..."}``"""

    message: str

    @property
    def ok(self) -> bool:
        return False


CallResponse = Union[OkResponse, ErrResponse]
