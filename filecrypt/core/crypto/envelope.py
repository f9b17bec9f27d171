"""
Envelope Codec
==============

Assembles and parses the fixed-length trailer carried by symmetric envelopes.

Layout (low to high offset, no delimiters):
    ciphertext | nonce_or_iv (fixed per mode) | salt (SALT_LEN)

Because the trailer fields have fixed lengths known to both sides,
metadata recovery is a pure suffix slice. It never inspects the
ciphertext, so ciphertext bytes that happen to equal a real nonce or
salt cannot confuse the parser.
"""

from __future__ import annotations

from dataclasses import dataclass

from filecrypt.core.crypto.errors import EnvelopeTooShortError
from filecrypt.core.crypto.kdf import SALT_LEN


@dataclass(frozen=True, slots=True)
class Envelope:
    """
    Parsed components of a symmetric envelope.

    Attributes:
        ciphertext: Encrypted payload (including the GCM tag where present)
        nonce: Mode-specific nonce or IV
        salt: KDF salt
    """

    ciphertext: bytes
    nonce: bytes
    salt: bytes

    def to_bytes(self) -> bytes:
        """Serialize back to ``ciphertext || nonce || salt``."""
        return assemble(self.ciphertext, self.nonce, self.salt)

    def __repr__(self) -> str:
        return (
            f"Envelope(ciphertext_len={len(self.ciphertext)}, "
            f"nonce_len={len(self.nonce)})"
        )


def trailer_len(nonce_len: int) -> int:
    """Number of trailing bytes holding the nonce/IV and salt."""
    return nonce_len + SALT_LEN


def assemble(ciphertext: bytes, nonce: bytes, salt: bytes) -> bytes:
    """
    Build ``ciphertext || nonce || salt``.

    Raises:
        ValueError: If salt is not SALT_LEN bytes or nonce is empty
    """
    if len(salt) != SALT_LEN:
        raise ValueError(f"Salt must be exactly {SALT_LEN} bytes")
    if not nonce:
        raise ValueError("Nonce must not be empty")
    return b"".join((bytes(ciphertext), bytes(nonce), bytes(salt)))


def split_trailer(trailer: bytes, nonce_len: int) -> tuple[bytes, bytes]:
    """Split a trailer read on its own into (nonce, salt)."""
    if len(trailer) != trailer_len(nonce_len):
        raise EnvelopeTooShortError(len(trailer), trailer_len(nonce_len))
    return bytes(trailer[:nonce_len]), bytes(trailer[nonce_len:])


def parse(data: bytes, nonce_len: int) -> Envelope:
    """
    Parse an envelope by slicing from the end.

    Args:
        data: Complete envelope bytes
        nonce_len: Nonce/IV length for the envelope's mode

    Returns:
        Envelope with ciphertext, nonce and salt

    Raises:
        EnvelopeTooShortError: If data cannot hold the trailer
    """
    minimum = trailer_len(nonce_len)
    if len(data) < minimum:
        raise EnvelopeTooShortError(len(data), minimum)

    view = memoryview(data)
    return Envelope(
        ciphertext=bytes(view[: len(data) - minimum]),
        nonce=bytes(view[len(data) - minimum : len(data) - SALT_LEN]),
        salt=bytes(view[len(data) - SALT_LEN :]),
    )
