"""
Memory Zeroization Utilities
============================

Provides explicit wiping of key and buffer material.

Security Properties:
- Explicit zeroization (no GC reliance)
- Exception-safe cleanup via ZeroizeContext

Limitations:
- Immutable ``bytes`` cannot be wiped; keep secrets in ``bytearray``
- Python and the crypto backend may hold internal copies
- Best-effort mitigation, not a guarantee
"""

from __future__ import annotations

import ctypes
from contextlib import contextmanager
from typing import Iterator


def secure_zero(data: bytearray | memoryview) -> None:
    """
    Securely zero a mutable byte buffer.

    Uses ctypes memset on bytearrays (zero, 0xFF, zero) and falls back
    to element-wise zeroing for memoryviews or buffers ctypes cannot map.

    Args:
        data: Mutable byte buffer to zero

    Raises:
        TypeError: If data is immutable (e.g. bytes)
    """
    if isinstance(data, (bytes, str)):
        raise TypeError("Cannot zero an immutable buffer")

    size = len(data)
    if size == 0:
        return

    if isinstance(data, bytearray):
        try:
            addr = ctypes.addressof((ctypes.c_char * size).from_buffer(data))
        except (TypeError, ValueError, BufferError):
            addr = None
        if addr is not None:
            ctypes.memset(addr, 0, size)
            ctypes.memset(addr, 0xFF, size)
            ctypes.memset(addr, 0, size)
            return

    for i in range(size):
        data[i] = 0


@contextmanager
def ZeroizeContext(*buffers: bytearray) -> Iterator[None]:
    """
    Context manager that zeroizes buffers on exit.

    Always zeroizes, whether exit is normal or exceptional.

    Usage:
        key = bytearray(derived)
        with ZeroizeContext(key):
            encrypt(data, key)
        # key is now zeroed
    """
    try:
        yield
    finally:
        for buf in buffers:
            secure_zero(buf)
