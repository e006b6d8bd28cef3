"""Utility functions for tychobridge."""

from tychobridge.utils.exceptions import (
    BridgeError,
    EmulationError,
    EngineUnavailableError,
    ErrorCategory,
    HandleLifecycleError,
    ProtocolError,
    RemoteLookupError,
    ValidationError,
    sanitize_error_message,
)
from tychobridge.utils.sign import (
    SIGNATURE_DOMAIN_EMPTY_HASH,
    TL_ID_SIGNATURE_DOMAIN_EMPTY,
    TL_ID_SIGNATURE_DOMAIN_L2,
    SignatureDomain,
    SigningContext,
    signature_domain_prefix,
    signature_id_prefix,
)

__all__ = [
    "BridgeError",
    "EmulationError",
    "EngineUnavailableError",
    "ErrorCategory",
    "HandleLifecycleError",
    "ProtocolError",
    "RemoteLookupError",
    "ValidationError",
    "sanitize_error_message",
    "SIGNATURE_DOMAIN_EMPTY_HASH",
    "TL_ID_SIGNATURE_DOMAIN_EMPTY",
    "TL_ID_SIGNATURE_DOMAIN_L2",
    "SignatureDomain",
    "SigningContext",
    "signature_domain_prefix",
    "signature_id_prefix",
]
