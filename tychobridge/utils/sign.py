"""Signature domains and explicit Ed25519 signing contexts."""

from __future__ import annotations

import hashlib
import struct
import zlib
from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ed25519
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

# Ed25519: seed 32 bytes (or 64-byte seed||public secret key), public 32 bytes, signature 64 bytes
SEED_LEN = 32
SECRET_KEY_LEN = 64
PUBLIC_KEY_LEN = 32
DOMAIN_HASH_LEN = 32

TL_ID_SIGNATURE_DOMAIN_EMPTY = zlib.crc32(b"signatureDomain.empty = SignatureDomain")
TL_ID_SIGNATURE_DOMAIN_L2 = zlib.crc32(b"signatureDomain.l2 global_id:int = SignatureDomain")

SIGNATURE_DOMAIN_EMPTY_HASH = hashlib.sha256(struct.pack("<I", TL_ID_SIGNATURE_DOMAIN_EMPTY)).digest()


@dataclass(frozen=True, slots=True)
class SignatureDomain:
    """Domain a signature is bound to: empty, an L2 network, or an explicit hash."""

    kind: str
    global_id: int | None = None
    hash_bytes: bytes | None = None

    def __post_init__(self) -> None:
        if self.kind == "l2":
            if self.global_id is None:
                raise ValueError("l2 domain requires a global id")
            _check_int32(self.global_id)
        elif self.kind == "hash":
            if self.hash_bytes is None or len(self.hash_bytes) != DOMAIN_HASH_LEN:
                raise ValueError(f"signature domain hash must be {DOMAIN_HASH_LEN} bytes")
        elif self.kind != "empty":
            raise ValueError(f"unknown signature domain kind: {self.kind!r}")

    @classmethod
    def empty(cls) -> SignatureDomain:
        return cls(kind="empty")

    @classmethod
    def l2(cls, global_id: int) -> SignatureDomain:
        return cls(kind="l2", global_id=global_id)

    @classmethod
    def from_hash(cls, value: bytes) -> SignatureDomain:
        return cls(kind="hash", hash_bytes=bytes(value))

    def tl_bytes(self) -> bytes:
        """TL serialization of the domain (little-endian constructor id + fields)."""
        if self.kind == "empty":
            return struct.pack("<I", TL_ID_SIGNATURE_DOMAIN_EMPTY)
        if self.kind == "l2":
            return struct.pack("<Ii", TL_ID_SIGNATURE_DOMAIN_L2, self.global_id)
        raise ValueError("hash domains have no TL representation")

    def domain_hash(self) -> bytes:
        if self.kind == "hash":
            return bytes(self.hash_bytes)
        return hashlib.sha256(self.tl_bytes()).digest()


def _check_int32(value: int) -> None:
    if not -(2**31) <= value < 2**31:
        raise ValueError(f"global id out of int32 range: {value}")


def signature_domain_prefix(domain: SignatureDomain | None) -> bytes:
    """Bytes prepended to signing input for the domain; empty for the empty domain."""
    if domain is None:
        return b""
    digest = domain.domain_hash()
    if digest == SIGNATURE_DOMAIN_EMPTY_HASH:
        return b""
    return digest


def signature_id_prefix(global_id: int | None) -> bytes:
    """Legacy signature-id prefix: the global id as a signed 4-byte big-endian integer."""
    if global_id is None:
        return b""
    _check_int32(global_id)
    return struct.pack(">i", global_id)


def _private_key(secret_key: bytes) -> ed25519.Ed25519PrivateKey:
    if len(secret_key) not in (SEED_LEN, SECRET_KEY_LEN):
        raise ValueError(f"Ed25519 secret key must be {SEED_LEN} or {SECRET_KEY_LEN} bytes")
    return ed25519.Ed25519PrivateKey.from_private_bytes(bytes(secret_key[:SEED_LEN]))


def public_key_from_secret(secret_key: bytes) -> bytes:
    return _private_key(secret_key).public_key().public_bytes(encoding=Encoding.Raw, format=PublicFormat.Raw)


@dataclass(frozen=True, slots=True)
class SigningContext:
    """Signing parameters passed explicitly into every sign/verify call."""

    prefix: bytes = b""

    @classmethod
    def with_signature_id(cls, global_id: int | None) -> SigningContext:
        return cls(prefix=signature_id_prefix(global_id))

    @classmethod
    def with_signature_domain(cls, domain: SignatureDomain | None) -> SigningContext:
        return cls(prefix=signature_domain_prefix(domain))

    def signing_input(self, data: bytes) -> bytes:
        return self.prefix + data

    def sign(self, data: bytes, secret_key: bytes) -> bytes:
        return _private_key(secret_key).sign(self.signing_input(data))

    def verify(self, data: bytes, signature: bytes, public_key: bytes) -> bool:
        if len(public_key) != PUBLIC_KEY_LEN:
            raise ValueError(f"Ed25519 public key must be {PUBLIC_KEY_LEN} bytes")
        key = ed25519.Ed25519PublicKey.from_public_bytes(bytes(public_key))
        try:
            key.verify(signature, self.signing_input(data))
        except InvalidSignature:
            return False
        return True
