"""
Key Derivation Functions
========================

Turns a passphrase (or key-file contents) plus a salt into a 256-bit key.

Implements:
    - Argon2id (RFC 9106) for memory-hard passphrase stretching
    - Fresh salt generation when none is supplied

KDF format version 1:
    Argon2id, time_cost=3, memory_cost=65536 KiB, parallelism=4,
    32-byte output, 32-byte salt.

Envelopes are only interchangeable between implementations that use the
same KDF version. Changing any default below is a format change and must
bump KDF_VERSION.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Final, Optional

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw

from filecrypt.core.crypto.errors import KeyDerivationError, MissingKeyError
from filecrypt.core.memory import secure_zero

KDF_VERSION: Final[int] = 1

SALT_LEN: Final[int] = 32
KEY_LEN: Final[int] = 32  # AES-256

# Argon2id parameters (OWASP recommended)
ARGON2_TIME_COST: Final[int] = 3
ARGON2_MEMORY_COST: Final[int] = 65536  # 64 MB
ARGON2_PARALLELISM: Final[int] = 4

RandBytes = Callable[[int], bytes]

_log = logging.getLogger("filecrypt.kdf")


@dataclass(frozen=True, slots=True)
class KdfParams:
    """Argon2id cost parameters."""

    time_cost: int = ARGON2_TIME_COST
    memory_cost: int = ARGON2_MEMORY_COST
    parallelism: int = ARGON2_PARALLELISM

    def __post_init__(self) -> None:
        if self.time_cost < 1:
            raise ValueError("time_cost must be at least 1")
        if self.parallelism < 1:
            raise ValueError("parallelism must be at least 1")
        if self.memory_cost < 8 * self.parallelism:
            raise ValueError("memory_cost must be at least 8 KiB per lane")


DEFAULT_KDF_PARAMS: Final[KdfParams] = KdfParams()


@dataclass(frozen=True, slots=True)
class DerivedKey:
    """
    A derived symmetric key and the salt it was derived with.

    The key is a bytearray so it can be wiped after use.
    """

    key: bytearray
    salt: bytes

    def wipe(self) -> None:
        """Zero the key material in place."""
        secure_zero(self.key)

    def __repr__(self) -> str:
        """Safe representation without exposing key material."""
        return f"DerivedKey(key_len={len(self.key)}, salt_len={len(self.salt)})"


def generate_salt(randbytes: Optional[RandBytes] = None) -> bytes:
    """
    Generate a fresh random salt of SALT_LEN bytes.

    Raises:
        KeyDerivationError: If the randomness source is unavailable
    """
    source = randbytes or secrets.token_bytes
    try:
        salt = source(SALT_LEN)
    except (OSError, NotImplementedError) as exc:
        raise KeyDerivationError("Secure randomness source unavailable") from exc
    if len(salt) != SALT_LEN:
        raise KeyDerivationError(
            f"Randomness source returned {len(salt)} bytes, expected {SALT_LEN}"
        )
    return salt


def derive_key(
    passphrase: bytes | bytearray,
    salt: Optional[bytes] = None,
    params: Optional[KdfParams] = None,
    randbytes: Optional[RandBytes] = None,
) -> DerivedKey:
    """
    Derive a 256-bit key from passphrase bytes using Argon2id.

    Args:
        passphrase: Passphrase or key-file bytes (must not be empty)
        salt: Salt recovered from an envelope. If None, a new one is generated.
        params: Argon2id cost parameters (defaults to KDF version 1)
        randbytes: Randomness source used only when salt is None

    Returns:
        DerivedKey holding the key and the salt actually used

    Raises:
        MissingKeyError: If passphrase is empty or None
        KeyDerivationError: If salt is malformed, randomness is unavailable,
            or Argon2 fails

    Security:
        - Deterministic: same passphrase + salt + params = same key
        - Caller must wipe() the result after use
    """
    if not passphrase:
        raise MissingKeyError("No passphrase or key material supplied")

    if salt is None:
        salt = generate_salt(randbytes)
    elif len(salt) != SALT_LEN:
        raise KeyDerivationError(f"Salt must be exactly {SALT_LEN} bytes")

    params = params or DEFAULT_KDF_PARAMS

    try:
        raw = hash_secret_raw(
            secret=bytes(passphrase),
            salt=bytes(salt),
            time_cost=params.time_cost,
            memory_cost=params.memory_cost,
            parallelism=params.parallelism,
            hash_len=KEY_LEN,
            type=Type.ID,
        )
    except HashingError as exc:
        raise KeyDerivationError(f"Argon2id derivation failed: {exc}") from exc

    _log.debug(
        "Derived key (kdf v%d, t=%d, m=%d, p=%d)",
        KDF_VERSION, params.time_cost, params.memory_cost, params.parallelism,
    )
    return DerivedKey(key=bytearray(raw), salt=bytes(salt))
