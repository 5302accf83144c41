# MIT License © 2025 Motohiro Suzuki
"""
ecies_kem/curves.py

Curve engine used by the KEM:
- NIST prime curves P-256 / P-384 / P-521 (backed by `cryptography`)
- ephemeral key generation, ECDH shared secret, point encode / decode

Point formats:
    UNCOMPRESSED        : 0x04 || x || y
    COMPRESSED          : 0x02|0x03 || x
    LEGACY_UNCOMPRESSED : x || y   (no marker byte, older encoders)
"""

from __future__ import annotations

from enum import Enum

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from ecies_kem.errors import (
    CurveComputationError,
    InvalidKeyError,
    PointEncodingError,
    RandomnessFailure,
    UnsupportedParameterError,
)


class CurveType(Enum):
    NIST_P256 = ("secp256r1", 32)
    NIST_P384 = ("secp384r1", 48)
    NIST_P521 = ("secp521r1", 66)

    def __init__(self, curve_name: str, field_size: int) -> None:
        self.curve_name = curve_name
        self.field_size = field_size

    def ec_curve(self) -> ec.EllipticCurve:
        return _EC_CURVES[self.curve_name]()

    @classmethod
    def parse(cls, value: "CurveType | str") -> "CurveType":
        if isinstance(value, CurveType):
            return value
        key = str(value).strip().upper().replace("-", "").replace("_", "")
        for member in cls:
            if key in (member.name.replace("_", ""), member.name[5:], member.curve_name.upper()):
                return member
        raise UnsupportedParameterError(f"unsupported curve: {value!r}")


_EC_CURVES = {
    "secp256r1": ec.SECP256R1,
    "secp384r1": ec.SECP384R1,
    "secp521r1": ec.SECP521R1,
}


class PointFormat(str, Enum):
    UNCOMPRESSED = "UNCOMPRESSED"
    COMPRESSED = "COMPRESSED"
    LEGACY_UNCOMPRESSED = "LEGACY_UNCOMPRESSED"

    @classmethod
    def parse(cls, value: "PointFormat | str") -> "PointFormat":
        if isinstance(value, PointFormat):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError as e:
            raise UnsupportedParameterError(f"unsupported point format: {value!r}") from e


def curve_type_of(key: ec.EllipticCurvePublicKey | ec.EllipticCurvePrivateKey) -> CurveType:
    name = getattr(getattr(key, "curve", None), "name", None)
    for member in CurveType:
        if member.curve_name == name:
            return member
    raise InvalidKeyError(f"unsupported curve: {name}")


def encoding_size(curve: CurveType, fmt: PointFormat) -> int:
    fmt = PointFormat.parse(fmt)
    if fmt is PointFormat.UNCOMPRESSED:
        return 2 * curve.field_size + 1
    if fmt is PointFormat.COMPRESSED:
        return curve.field_size + 1
    return 2 * curve.field_size


def generate_key_pair(curve: CurveType) -> ec.EllipticCurvePrivateKey:
    """Fresh key pair from the OS CSPRNG (through OpenSSL)."""
    try:
        return ec.generate_private_key(curve.ec_curve())
    except Exception as e:
        raise RandomnessFailure(f"cannot generate {curve.name} key pair") from e


def private_key_from_scalar(curve: CurveType, scalar: int | bytes) -> ec.EllipticCurvePrivateKey:
    if isinstance(scalar, (bytes, bytearray)):
        scalar = int.from_bytes(scalar, "big")
    try:
        return ec.derive_private_key(int(scalar), curve.ec_curve())
    except (TypeError, ValueError) as e:
        raise InvalidKeyError(f"invalid private scalar for {curve.name}") from e


def compute_shared_secret(
    private_key: ec.EllipticCurvePrivateKey,
    public_key: ec.EllipticCurvePublicKey,
) -> bytes:
    """Affine x-coordinate of private_key * public_key, field_size bytes."""
    curve = curve_type_of(private_key)
    if curve_type_of(public_key) is not curve:
        raise CurveComputationError("private and public key are on different curves")
    try:
        secret = private_key.exchange(ec.ECDH(), public_key)
    except ValueError as e:
        raise CurveComputationError("ECDH failed") from e
    if len(secret) != curve.field_size:
        raise CurveComputationError("ECDH returned a malformed shared secret")
    return secret


def encode_point(curve: CurveType, fmt: PointFormat, public_key: ec.EllipticCurvePublicKey) -> bytes:
    fmt = PointFormat.parse(fmt)
    if curve_type_of(public_key) is not curve:
        raise InvalidKeyError("public key is not on the requested curve")

    if fmt is PointFormat.COMPRESSED:
        return public_key.public_bytes(
            serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint
        )

    raw = public_key.public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint
    )
    if fmt is PointFormat.LEGACY_UNCOMPRESSED:
        return raw[1:]
    return raw


def decode_point(curve: CurveType, fmt: PointFormat, data: bytes) -> ec.EllipticCurvePublicKey:
    """
    Decode and validate an encoded point.

    Raises PointEncodingError if the length / marker byte does not match `fmt`
    or the point is not on `curve`.
    """
    fmt = PointFormat.parse(fmt)
    data = bytes(data)
    want = encoding_size(curve, fmt)
    if len(data) != want:
        raise PointEncodingError(f"encoded point must be {want} bytes, got {len(data)}")

    if fmt is PointFormat.LEGACY_UNCOMPRESSED:
        data = b"\x04" + data
    elif fmt is PointFormat.UNCOMPRESSED and data[0] != 0x04:
        raise PointEncodingError("uncompressed point must start with 0x04")
    elif fmt is PointFormat.COMPRESSED and data[0] not in (0x02, 0x03):
        raise PointEncodingError("compressed point must start with 0x02 or 0x03")

    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(curve.ec_curve(), data)
    except ValueError as e:
        raise PointEncodingError(f"point is not on {curve.name}") from e


def public_key_from_encoded(curve: CurveType, fmt: PointFormat, data: bytes) -> ec.EllipticCurvePublicKey:
    try:
        return decode_point(curve, fmt, data)
    except PointEncodingError as e:
        raise InvalidKeyError(str(e)) from e


def public_key_from_affine(curve: CurveType, x: int, y: int) -> ec.EllipticCurvePublicKey:
    try:
        return ec.EllipticCurvePublicNumbers(int(x), int(y), curve.ec_curve()).public_key()
    except ValueError as e:
        raise InvalidKeyError(f"point is not on {curve.name}") from e
