"""
Exception hierarchy and error handling utilities for tychobridge.

Provides:
- Custom exception classes with error codes
- Error categories (fatal, protocol, validation)
- Redaction of key material before messages reach the logs
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    FATAL = "fatal"
    PROTOCOL = "protocol"
    VALIDATION = "validation"


class BridgeError(Exception):
    """Base exception for all tychobridge errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationError(BridgeError):
    """Call argument validation error."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", category=ErrorCategory.VALIDATION, details=details)


class ProtocolError(BridgeError):
    """Malformed or unenvelopable response from the native boundary."""

    def __init__(self, message: str, raw: str | None = None):
        details = {"raw": raw[:200]} if raw else {}
        super().__init__(message, code="PROTOCOL_ERROR", category=ErrorCategory.PROTOCOL, details=details)


class EmulationError(BridgeError):
    """The engine explicitly reported a failed call (``ok: false``)."""

    def __init__(self, message: str, operation: str | None = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message, code="EMULATION_ERROR", category=ErrorCategory.FATAL, details=details)


class HandleLifecycleError(BridgeError):
    """Native create/destroy of an engine handle failed."""

    def __init__(self, operation: str, message: str, handle: int | None = None):
        details: dict[str, Any] = {"operation": operation}
        if handle is not None:
            details["handle"] = handle
        super().__init__(
            f"Engine {operation} failed: {message}",
            code="HANDLE_LIFECYCLE_ERROR",
            category=ErrorCategory.FATAL,
            details=details,
        )
        self.operation = operation


class RemoteLookupError(BridgeError):
    """Account-state RPC returned a bad status or an unexpected shape."""

    def __init__(self, message: str, status_code: int | None = None, address: str | None = None):
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if address:
            details["address"] = address
        super().__init__(message, code="REMOTE_LOOKUP_ERROR", category=ErrorCategory.FATAL, details=details)
        self.status_code = status_code


class EngineUnavailableError(BridgeError):
    """Native engine module could not be imported or lacks the call contract."""

    def __init__(self, module: str, message: str):
        super().__init__(
            f"Engine '{module}' unavailable: {message}",
            code="ENGINE_UNAVAILABLE",
            category=ErrorCategory.FATAL,
            details={"module": module},
        )


_SENSITIVE_PATTERNS = [
    re.compile(r"(private[_-]?key|secret[_-]?key|seed|token|password)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"\b[0-9a-fA-F]{64,}\b"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove key material and credentials from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized
