# MIT License © 2025 Motohiro Suzuki
"""
ecies_kem/zeroize.py

Best-effort secret zeroization utilities.

Reality check (Python):
- 'bytes' is immutable; the original object cannot be wiped in place.
- 'bytearray' can be wiped in place.

Secrets produced during encapsulation (shared secret, HKDF input, PRK,
expand blocks) are held in a SecretBox inside `secret_scope`, which wipes
them on every exit path.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator


def wipe_bytearray(b: bytearray) -> None:
    """In-place wipe for mutable buffer."""
    for i in range(len(b)):
        b[i] = 0


class SecretBox:
    """
    Holds a bytearray so it can be wiped in-place.

    A bytearray passed in is adopted (not copied), so wiping the box wipes
    the caller's buffer too.
    """
    __slots__ = ("_buf",)

    def __init__(self, data: bytes | bytearray) -> None:
        self._buf = data if isinstance(data, bytearray) else bytearray(data)

    def bytes(self) -> bytes:
        return bytes(self._buf)

    def buffer(self) -> bytearray:
        return self._buf

    def wipe(self) -> None:
        wipe_bytearray(self._buf)

    def is_wiped(self) -> bool:
        return not any(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    def __repr__(self) -> str:
        return f"SecretBox(<{len(self._buf)} bytes>)"


@contextmanager
def secret_scope(data: bytes | bytearray) -> Iterator[SecretBox]:
    """Yield `data` in a SecretBox that is wiped when the block exits."""
    box = SecretBox(data)
    try:
        yield box
    finally:
        box.wipe()
