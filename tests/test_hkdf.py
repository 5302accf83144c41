# MIT License © 2025 Motohiro Suzuki
from contextlib import contextmanager

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ecies_kem import hkdf as hkdf_mod, zeroize
from ecies_kem.errors import DerivationLengthError, UnsupportedParameterError
from ecies_kem.hkdf import (
    HashType,
    build_ikm,
    compute_ecies_hkdf_symmetric_key,
    hkdf,
    max_output_length,
)


# RFC 5869 appendix A
def test_rfc5869_case1_sha256():
    ikm = b"\x0b" * 22
    salt = bytes(range(0x00, 0x0D))
    info = bytes(range(0xF0, 0xFA))
    okm = hkdf(ikm, salt, info, HashType.SHA256, 42)
    assert okm.hex() == (
        "3cb25f25faacd57a90434f64d0362f2a2d2d0a90cf1a5a4c5db02d56ecc4c5bf"
        "34007208d5b887185865"
    )


def test_rfc5869_case3_empty_salt_and_info():
    okm = hkdf(b"\x0b" * 22, b"", b"", "SHA-256", 42)
    assert okm.hex() == (
        "8da4e775a563c18f715f802a063c5a31b8a11f5c5ee1879ec3454e5f3c738d2d"
        "9d201395faa4b61a96c8"
    )


def test_rfc5869_case4_sha1():
    ikm = b"\x0b" * 11
    salt = bytes(range(0x00, 0x0D))
    info = bytes(range(0xF0, 0xFA))
    okm = hkdf(ikm, salt, info, "HmacSha1", 42)
    assert okm.hex() == (
        "085a01ea1b10f36933068b56efa5ad81a4f14b822f5b091568a9cdd4f155fda2"
        "c22e422478d305f3f896"
    )


@pytest.mark.parametrize(
    "hash_type,algo",
    [
        (HashType.SHA224, hashes.SHA224()),
        (HashType.SHA384, hashes.SHA384()),
        (HashType.SHA512, hashes.SHA512()),
    ],
)
def test_matches_cryptography_hkdf(hash_type, algo):
    ikm = bytes(range(40))
    salt = b"salt-value"
    info = b"context"
    want = HKDF(algorithm=algo, length=100, salt=salt, info=info).derive(ikm)
    assert hkdf(ikm, salt, info, hash_type, 100) == want


def test_hash_parse_aliases():
    assert HashType.parse("SHA-256") is HashType.SHA256
    assert HashType.parse("sha384") is HashType.SHA384
    assert HashType.parse("HmacSha512") is HashType.SHA512
    with pytest.raises(UnsupportedParameterError):
        HashType.parse("MD5")


def test_max_output_length():
    assert max_output_length(HashType.SHA1) == 255 * 20
    assert max_output_length(HashType.SHA256) == 255 * 32
    assert max_output_length(HashType.SHA512) == 255 * 64


def test_length_bounds():
    assert len(hkdf(b"k", b"", b"", HashType.SHA256, 255 * 32)) == 255 * 32
    with pytest.raises(DerivationLengthError):
        hkdf(b"k", b"", b"", HashType.SHA256, 255 * 32 + 1)
    with pytest.raises(DerivationLengthError):
        hkdf(b"k", b"", b"", HashType.SHA256, 0)
    with pytest.raises(DerivationLengthError):
        hkdf(b"k", b"", b"", HashType.SHA256, 1.8)
    with pytest.raises(DerivationLengthError):
        hkdf(b"k", b"", b"", HashType.SHA256, True)


def test_derivation_length_error_is_value_error():
    with pytest.raises(ValueError):
        hkdf(b"k", b"", b"", HashType.SHA1, -1)


def test_build_ikm_is_kem_bytes_then_secret():
    assert bytes(build_ikm(b"\x04abc", b"secret")) == b"\x04abcsecret"


def test_ecies_symmetric_key_uses_concatenated_ikm():
    kem = b"\x04" + b"\x11" * 64
    ss = b"\x22" * 32
    got = compute_ecies_hkdf_symmetric_key(kem, ss, HashType.SHA256, b"salt", b"info", 32)
    assert got == hkdf(kem + ss, b"salt", b"info", HashType.SHA256, 32)


def test_ecies_symmetric_key_leaves_caller_secret_untouched():
    ss = bytearray(b"\x22" * 32)
    compute_ecies_hkdf_symmetric_key(b"\x04", ss, HashType.SHA256, b"", b"", 16)
    assert ss == bytearray(b"\x22" * 32)


def test_prk_and_expand_blocks_wiped(monkeypatch):
    boxes = []

    @contextmanager
    def spy(data):
        with zeroize.secret_scope(data) as box:
            boxes.append(box)
            yield box

    monkeypatch.setattr(hkdf_mod, "secret_scope", spy)
    okm = hkdf(b"\x0b" * 22, b"", b"", HashType.SHA256, 42)

    assert okm.hex().startswith("8da4e775a563c18f")
    # prk, expand block, okm accumulator
    assert len(boxes) == 3
    assert all(len(b) > 0 and b.is_wiped() for b in boxes)
