# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations


class EciesKemError(Exception):
    pass


class InvalidKeyError(EciesKemError):
    """Key is malformed, on an unsupported curve, or not a valid curve point."""
    pass


class RandomnessFailure(EciesKemError):
    pass


class CurveComputationError(EciesKemError):
    """ECDH produced an invalid result (e.g. the point at infinity)."""
    pass


class PointEncodingError(EciesKemError):
    pass


class DerivationLengthError(EciesKemError, ValueError):
    """Requested key length is not positive or exceeds 255 * HashLen."""
    pass


class UnsupportedParameterError(EciesKemError, ValueError):
    pass
