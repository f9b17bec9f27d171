"""
filecrypt Memory Security Module
================================

Best-effort wiping of derived keys and working buffers.
"""

from filecrypt.core.memory.zeroization import secure_zero, ZeroizeContext

__all__ = [
    "secure_zero",
    "ZeroizeContext",
]
