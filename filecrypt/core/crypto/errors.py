"""
Cryptographic Error Taxonomy
============================

Every failure raised by the cryptographic core derives from
FileCryptError. The core never terminates the process; callers
decide whether to abort, retry, or report.

Backend exceptions (argon2, cryptography) are always re-raised as
one of these types, chained with ``from`` so the original cause is
kept for debugging.
"""

from __future__ import annotations


class FileCryptError(Exception):
    """Base class for all filecrypt failures."""
    pass


class KeyDerivationError(FileCryptError):
    """Raised when a key cannot be derived (randomness or KDF failure)."""
    pass


class CipherInitError(FileCryptError):
    """Raised when a cipher cannot be constructed or a nonce/IV generated."""
    pass


class AuthenticationError(FileCryptError):
    """
    Raised when integrity verification fails.

    This covers a GCM tag mismatch (tampering, wrong passphrase, or a
    corrupted envelope). No plaintext is ever released alongside it.
    """
    pass


class PaddingError(AuthenticationError):
    """Raised when OAEP padding does not validate (wrong key or corrupted ciphertext)."""
    pass


class KeyParseError(FileCryptError):
    """Raised when PEM/PKIX/PKCS#1 key material is malformed or not RSA."""
    pass


class PlaintextTooLargeError(FileCryptError):
    """Raised when a message exceeds the OAEP bound for the given key."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"Plaintext of {size} bytes exceeds the OAEP limit of {limit} bytes for this key"
        )
        self.size = size
        self.limit = limit


class MissingKeyError(FileCryptError):
    """Raised when no passphrase or key material was supplied."""
    pass


class EnvelopeTooShortError(FileCryptError):
    """Raised when input is shorter than the minimum envelope for its mode."""

    def __init__(self, size: int, minimum: int) -> None:
        super().__init__(
            f"Envelope of {size} bytes is shorter than the {minimum}-byte minimum"
        )
        self.size = size
        self.minimum = minimum


class UnsupportedModeError(FileCryptError, ValueError):
    """Raised when an unknown cipher mode is requested."""
    pass
