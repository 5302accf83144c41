# MIT License © 2025 Motohiro Suzuki
"""
ecies_kem/sender_kem.py

HKDF-based ECIES-KEM, sender side.

generate_key():
    1. fresh ephemeral key pair on the recipient's curve
    2. shared_secret = x(ephemeral_sk * recipient_pk)
    3. kem_bytes     = encode(ephemeral_pk, point_format)
    4. symmetric_key = HKDF(kem_bytes || shared_secret, salt, info, hash, length)

Fail-closed: any error aborts the call, nothing partial is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from cryptography.hazmat.primitives.asymmetric import ec

from ecies_kem import curves
from ecies_kem.config import DerivationParameters
from ecies_kem.curves import CurveType, PointFormat
from ecies_kem.errors import InvalidKeyError, RandomnessFailure
from ecies_kem.hkdf import HashType, check_output_length, compute_ecies_hkdf_symmetric_key
from ecies_kem.zeroize import secret_scope

log = logging.getLogger(__name__)

KeyPairSource = Callable[[CurveType], ec.EllipticCurvePrivateKey]


@dataclass(frozen=True)
class KemKey:
    encapsulated_key: bytes
    symmetric_key: bytes = field(repr=False)


class SenderKem:
    """
    Bound to one recipient public key; stateless per call and safe to share
    between threads.

    key_pair_source is called once per generate_key() and must return a new
    ephemeral private key on the given curve (default: OS CSPRNG). Tests pass
    a fixed-scalar source to get reproducible output.
    """
    __slots__ = ("_recipient_public_key", "_curve", "_key_pair_source")

    def __init__(
        self,
        recipient_public_key: ec.EllipticCurvePublicKey,
        *,
        key_pair_source: Optional[KeyPairSource] = None,
    ) -> None:
        if not isinstance(recipient_public_key, ec.EllipticCurvePublicKey):
            raise InvalidKeyError(
                f"expected an EC public key, got {type(recipient_public_key).__name__}"
            )
        self._curve = curves.curve_type_of(recipient_public_key)
        self._recipient_public_key = recipient_public_key
        self._key_pair_source = key_pair_source or curves.generate_key_pair

    @classmethod
    def from_encoded(
        cls,
        curve: CurveType | str,
        data: bytes,
        point_format: PointFormat | str = PointFormat.UNCOMPRESSED,
        **kw,
    ) -> "SenderKem":
        c = CurveType.parse(curve)
        return cls(curves.public_key_from_encoded(c, PointFormat.parse(point_format), data), **kw)

    @classmethod
    def from_affine(cls, curve: CurveType | str, x: int, y: int, **kw) -> "SenderKem":
        return cls(curves.public_key_from_affine(CurveType.parse(curve), x, y), **kw)

    @property
    def recipient_public_key(self) -> ec.EllipticCurvePublicKey:
        return self._recipient_public_key

    @property
    def curve(self) -> CurveType:
        return self._curve

    def _new_ephemeral(self) -> ec.EllipticCurvePrivateKey:
        try:
            sk = self._key_pair_source(self._curve)
        except RandomnessFailure:
            raise
        except Exception as e:
            raise RandomnessFailure("ephemeral key source failed") from e
        msg = f"ephemeral key source returned no {self._curve.name} private key"
        if not isinstance(sk, ec.EllipticCurvePrivateKey):
            raise RandomnessFailure(msg)
        try:
            curve = curves.curve_type_of(sk)
        except InvalidKeyError as e:
            raise RandomnessFailure(msg) from e
        if curve is not self._curve:
            raise RandomnessFailure(msg)
        return sk

    def generate_key(
        self,
        hash: HashType | str,
        salt: bytes,
        info: bytes,
        output_length: int,
        point_format: PointFormat | str,
    ) -> KemKey:
        h = HashType.parse(hash)
        fmt = PointFormat.parse(point_format)
        salt = bytes(salt or b"")
        info = bytes(info or b"")
        # Reject impossible lengths before consuming randomness.
        check_output_length(h, output_length)

        ephemeral_sk = self._new_ephemeral()
        try:
            with secret_scope(
                curves.compute_shared_secret(ephemeral_sk, self._recipient_public_key)
            ) as shared:
                kem_bytes = curves.encode_point(self._curve, fmt, ephemeral_sk.public_key())
                symmetric_key = compute_ecies_hkdf_symmetric_key(
                    kem_bytes, shared.buffer(), h, salt, info, output_length
                )
        finally:
            del ephemeral_sk

        log.debug(
            "encapsulated: curve=%s hash=%s format=%s kem_len=%d key_len=%d",
            self._curve.name, h.name, fmt.name, len(kem_bytes), len(symmetric_key),
        )
        return KemKey(encapsulated_key=kem_bytes, symmetric_key=symmetric_key)

    def encapsulate(self, params: DerivationParameters) -> KemKey:
        return self.generate_key(
            params.hash, params.salt, params.info, params.output_length, params.point_format
        )
