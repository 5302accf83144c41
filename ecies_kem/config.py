# MIT License © 2025 Motohiro Suzuki
"""
ecies_kem/config.py

DerivationParameters: per-call HKDF / encoding settings for the KEM.

YAML form (load_parameters):

    hash: SHA-256
    salt: abcdef              # hex, optional
    info: 1234123412341234    # hex, optional; digit-only values are read as written
    output_length: 32
    point_format: UNCOMPRESSED
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from ecies_kem.curves import PointFormat
from ecies_kem.errors import UnsupportedParameterError
from ecies_kem.hkdf import HashType, check_output_length


def _as_bytes(name: str, v: Any) -> bytes:
    if v is None:
        return b""
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v)
    if isinstance(v, str):
        try:
            return bytes.fromhex(v)
        except ValueError as e:
            raise UnsupportedParameterError(f"{name} must be hex: {v!r}") from e
    if isinstance(v, int) and not isinstance(v, bool):
        raise UnsupportedParameterError(f"{name} must be a hex string, got the number {v}; quote hex values")
    raise UnsupportedParameterError(f"{name} must be bytes or hex string, got {type(v).__name__}")


@dataclass(frozen=True)
class DerivationParameters:
    hash: HashType
    salt: bytes = b""
    info: bytes = b""
    output_length: int = 32
    point_format: PointFormat = PointFormat.UNCOMPRESSED

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "hash", HashType.parse(self.hash))
        object.__setattr__(self, "point_format", PointFormat.parse(self.point_format))
        object.__setattr__(self, "salt", _as_bytes("salt", self.salt))
        object.__setattr__(self, "info", _as_bytes("info", self.info))
        check_output_length(self.hash, self.output_length)

    @classmethod
    def from_mapping(cls, m: Mapping[str, Any]) -> "DerivationParameters":
        if "hash" not in m:
            raise UnsupportedParameterError("hash is required")
        return cls(
            hash=m["hash"],
            salt=m.get("salt"),
            info=m.get("info"),
            output_length=m.get("output_length", 32),
            point_format=m.get("point_format") or PointFormat.UNCOMPRESSED,
        )


_YAML_INT = "tag:yaml.org,2002:int"


def load_parameters(path: str | Path) -> DerivationParameters:
    text = Path(path).read_text()
    data = yaml.safe_load(text)
    if not isinstance(data, Mapping):
        raise UnsupportedParameterError(f"{path}: expected a mapping")
    data = dict(data)

    # Unquoted hex like 00001111 resolves to an int; keep the text as written.
    root = yaml.compose(text, Loader=yaml.SafeLoader)
    for key_node, value_node in root.value:
        if key_node.value in ("salt", "info") and isinstance(value_node, yaml.ScalarNode):
            if value_node.tag == _YAML_INT:
                data[key_node.value] = value_node.value
    return DerivationParameters.from_mapping(data)
