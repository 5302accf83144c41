# MIT License © 2025 Motohiro Suzuki
"""
ecies_kem/recipient_kem.py

HKDF-based ECIES-KEM, recipient side: recovers the sender's symmetric key
from kem_bytes (the encoded ephemeral public key) and the recipient's
private key.
"""

from __future__ import annotations

import logging

from cryptography.hazmat.primitives.asymmetric import ec

from ecies_kem import curves
from ecies_kem.config import DerivationParameters
from ecies_kem.curves import CurveType, PointFormat
from ecies_kem.errors import InvalidKeyError
from ecies_kem.hkdf import HashType, check_output_length, compute_ecies_hkdf_symmetric_key
from ecies_kem.zeroize import secret_scope

log = logging.getLogger(__name__)


class RecipientKem:
    __slots__ = ("_private_key", "_curve")

    def __init__(self, private_key: ec.EllipticCurvePrivateKey) -> None:
        if not isinstance(private_key, ec.EllipticCurvePrivateKey):
            raise InvalidKeyError(f"expected an EC private key, got {type(private_key).__name__}")
        self._curve = curves.curve_type_of(private_key)
        self._private_key = private_key

    @classmethod
    def from_scalar(cls, curve: CurveType | str, scalar: int | bytes) -> "RecipientKem":
        return cls(curves.private_key_from_scalar(CurveType.parse(curve), scalar))

    @property
    def curve(self) -> CurveType:
        return self._curve

    def public_key(self) -> ec.EllipticCurvePublicKey:
        return self._private_key.public_key()

    def decapsulate(
        self,
        kem_bytes: bytes,
        hash: HashType | str,
        salt: bytes,
        info: bytes,
        output_length: int,
        point_format: PointFormat | str,
    ) -> bytes:
        """
        Raises PointEncodingError if kem_bytes is not a valid point on this
        key's curve in `point_format`.
        """
        h = HashType.parse(hash)
        fmt = PointFormat.parse(point_format)
        check_output_length(h, output_length)

        kem_bytes = bytes(kem_bytes)
        ephemeral_pk = curves.decode_point(self._curve, fmt, kem_bytes)
        with secret_scope(curves.compute_shared_secret(self._private_key, ephemeral_pk)) as shared:
            key = compute_ecies_hkdf_symmetric_key(
                kem_bytes, shared.buffer(), h, bytes(salt or b""), bytes(info or b""), output_length
            )
        log.debug("decapsulated: curve=%s hash=%s format=%s", self._curve.name, h.name, fmt.name)
        return key

    def decapsulate_with(self, kem_bytes: bytes, params: DerivationParameters) -> bytes:
        return self.decapsulate(
            kem_bytes, params.hash, params.salt, params.info, params.output_length, params.point_format
        )
