# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

import hashlib
import hmac
from enum import Enum

from ecies_kem.errors import DerivationLengthError, UnsupportedParameterError
from ecies_kem.zeroize import secret_scope


class HashType(str, Enum):
    SHA1 = "sha1"
    SHA224 = "sha224"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"

    @property
    def digest_size(self) -> int:
        return hashlib.new(self.value).digest_size

    @classmethod
    def parse(cls, value: "HashType | str") -> "HashType":
        """Accepts "SHA-256", "sha256", "HmacSha256", "SHA256"."""
        if isinstance(value, HashType):
            return value
        key = str(value).strip().lower().replace("-", "").replace("_", "")
        if key.startswith("hmac"):
            key = key[4:]
        try:
            return cls(key)
        except ValueError as e:
            raise UnsupportedParameterError(f"unsupported hash: {value!r}") from e


def max_output_length(hash_type: HashType | str) -> int:
    return 255 * HashType.parse(hash_type).digest_size


def check_output_length(hash_type: HashType | str, length: int) -> int:
    if isinstance(length, bool) or not isinstance(length, int):
        raise DerivationLengthError("size must be an integer")
    if length <= 0:
        raise DerivationLengthError("size must be positive")
    limit = max_output_length(hash_type)
    if length > limit:
        raise DerivationLengthError(f"size too large: {length} > {limit} for {HashType.parse(hash_type).name}")
    return length


def hkdf(ikm: bytes, salt: bytes, info: bytes, hash_type: HashType | str, length: int) -> bytes:
    """
    RFC 5869 HKDF-Extract then HKDF-Expand.

    An empty salt is the RFC's "not provided" case; as an HMAC key it is
    equivalent to HashLen zero bytes.
    """
    h = HashType.parse(hash_type)
    check_output_length(h, length)

    with secret_scope(hmac.new(bytes(salt), ikm, h.value).digest()) as prk:
        with secret_scope(bytearray()) as block, secret_scope(bytearray()) as okm:
            c = 1
            while len(okm) < length:
                mac = hmac.new(prk.buffer(), block.buffer(), h.value)
                mac.update(bytes(info))
                mac.update(bytes([c]))
                block.buffer()[:] = mac.digest()
                okm.buffer().extend(block.buffer())
                c += 1
            return bytes(memoryview(okm.buffer())[:length])


def build_ikm(kem_bytes: bytes, shared_secret: bytes | bytearray) -> bytearray:
    """
    ECIES-HKDF-KEM input keying material:
        IKM = encapsulated_key || shared_secret
    """
    ikm = bytearray(kem_bytes)
    ikm += shared_secret
    return ikm


def compute_ecies_hkdf_symmetric_key(
    kem_bytes: bytes,
    shared_secret: bytes | bytearray,
    hash_type: HashType | str,
    salt: bytes,
    info: bytes,
    length: int,
) -> bytes:
    with secret_scope(build_ikm(kem_bytes, shared_secret)) as ikm:
        return hkdf(ikm.buffer(), salt, info, hash_type, length)
