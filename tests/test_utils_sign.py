import hashlib
import os
import struct

import pytest

from tychobridge.utils.sign import (
    SIGNATURE_DOMAIN_EMPTY_HASH,
    TL_ID_SIGNATURE_DOMAIN_L2,
    SignatureDomain,
    SigningContext,
    public_key_from_secret,
    signature_domain_prefix,
    signature_id_prefix,
)

DATA = b"Hello world!"


@pytest.fixture
def seed() -> bytes:
    return os.urandom(32)


def test_empty_context_matches_plain_signature(seed):
    public = public_key_from_secret(seed)
    plain = SigningContext()
    legacy_none = SigningContext.with_signature_id(None)
    signature = legacy_none.sign(DATA, seed)
    assert signature == plain.sign(DATA, seed)
    assert plain.verify(DATA, signature, public)


def test_signature_id_changes_signature(seed):
    public = public_key_from_secret(seed)
    plain = SigningContext()
    scoped = SigningContext.with_signature_id(123)
    target = plain.sign(DATA, seed)
    signature = scoped.sign(DATA, seed)

    assert signature != target
    assert scoped.verify(DATA, signature, public)
    assert not scoped.verify(DATA, target, public)
    assert not plain.verify(DATA, signature, public)


def test_negative_global_id_prefix(seed):
    assert signature_id_prefix(-6001) == struct.pack(">i", -6001)
    assert signature_id_prefix(-239) == b"\xff\xff\xff\x11"
    ctx = SigningContext.with_signature_id(-6001)
    assert ctx.verify(DATA, ctx.sign(DATA, seed), public_key_from_secret(seed))


def test_signature_id_out_of_range():
    with pytest.raises(ValueError):
        signature_id_prefix(2**31)


def test_sixty_four_byte_secret_key(seed):
    public = public_key_from_secret(seed)
    ctx = SigningContext.with_signature_id(7)
    assert ctx.sign(DATA, seed + public) == ctx.sign(DATA, seed)


def test_domain_prefixes():
    assert signature_domain_prefix(None) == b""
    assert signature_domain_prefix(SignatureDomain.empty()) == b""
    assert signature_domain_prefix(SignatureDomain.from_hash(SIGNATURE_DOMAIN_EMPTY_HASH)) == b""

    l2 = signature_domain_prefix(SignatureDomain.l2(42))
    assert l2 == hashlib.sha256(struct.pack("<Ii", TL_ID_SIGNATURE_DOMAIN_L2, 42)).digest()
    assert len(l2) == 32

    explicit = bytes(range(32))
    assert signature_domain_prefix(SignatureDomain.from_hash(explicit)) == explicit


def test_domain_context_verifies_only_within_domain(seed):
    public = public_key_from_secret(seed)
    ctx = SigningContext.with_signature_domain(SignatureDomain.l2(42))
    other = SigningContext.with_signature_domain(SignatureDomain.l2(43))
    signature = ctx.sign(DATA, seed)
    assert ctx.verify(DATA, signature, public)
    assert not other.verify(DATA, signature, public)


def test_invalid_domain_and_keys():
    with pytest.raises(ValueError):
        SignatureDomain.from_hash(b"\x00" * 31)
    with pytest.raises(ValueError):
        SignatureDomain.l2(-(2**31) - 1)
    with pytest.raises(ValueError):
        SigningContext().sign(DATA, b"\x00" * 16)
    with pytest.raises(ValueError):
        SigningContext().verify(DATA, b"\x00" * 64, b"\x00" * 31)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"kind": "hash"},
        {"kind": "hash", "hash_bytes": b"\x01" * 33},
        {"kind": "l2"},
        {"kind": "l2", "global_id": 2**31},
        {"kind": "masterchain"},
    ],
)
def test_direct_construction_is_validated(kwargs):
    with pytest.raises(ValueError):
        SignatureDomain(**kwargs)
