"""
AES-256-GCM Authenticated Encryption
====================================

Default filecrypt mode: passphrase-derived AES-256-GCM.

Security Properties:
    - 256-bit key derived per operation (Argon2id, fresh salt)
    - 96-bit random nonce (NIST recommended)
    - 128-bit authentication tag
    - No associated data

Envelope:
    ciphertext (+16-byte tag) | nonce (12) | salt (32)

Any single-bit change anywhere in the envelope makes decryption fail
with AuthenticationError: a flipped salt or nonce bit yields a different
key or keystream, and a flipped ciphertext or tag bit breaks the tag.
"""

from __future__ import annotations

import logging
import secrets
from typing import Final, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from filecrypt.core.crypto import envelope
from filecrypt.core.crypto.errors import (
    AuthenticationError,
    CipherInitError,
    EnvelopeTooShortError,
)
from filecrypt.core.crypto.kdf import SALT_LEN, KdfParams, RandBytes, derive_key
from filecrypt.core.memory import ZeroizeContext

GCM_NONCE_SIZE: Final[int] = 12  # 96 bits
GCM_TAG_SIZE: Final[int] = 16  # 128 bits
GCM_MIN_ENVELOPE: Final[int] = GCM_TAG_SIZE + GCM_NONCE_SIZE + SALT_LEN


def _new_aead(key: bytearray) -> AESGCM:
    try:
        return AESGCM(key)
    except (TypeError, ValueError) as exc:
        raise CipherInitError(f"Cannot initialise AES-GCM: {exc}") from exc


class AesGcmCipher:
    """
    AES-256-GCM envelope cipher keyed by a passphrase.

    Usage:
        cipher = AesGcmCipher()
        sealed = cipher.encrypt(b"attack at dawn", b"correct horse")
        plaintext = cipher.decrypt(sealed, b"correct horse")

    Security Notes:
        - The derived key is wiped as soon as the transform completes
        - Integrity is verified BEFORE any plaintext is returned
    """

    __slots__ = ("_params", "_randbytes", "_log")

    def __init__(
        self,
        kdf_params: Optional[KdfParams] = None,
        randbytes: Optional[RandBytes] = None,
    ) -> None:
        """
        Args:
            kdf_params: Argon2id parameters (default: KDF version 1)
            randbytes: Randomness source for salt and nonce (default: secrets)
        """
        self._params = kdf_params
        self._randbytes = randbytes or secrets.token_bytes
        self._log = logging.getLogger("filecrypt.gcm")

    def generate_nonce(self) -> bytes:
        """
        Generate a fresh 96-bit nonce.

        Raises:
            CipherInitError: If the randomness source is unavailable
        """
        try:
            nonce = self._randbytes(GCM_NONCE_SIZE)
        except (OSError, NotImplementedError) as exc:
            raise CipherInitError("Secure randomness source unavailable") from exc
        if len(nonce) != GCM_NONCE_SIZE:
            raise CipherInitError(f"Nonce must be exactly {GCM_NONCE_SIZE} bytes")
        return nonce

    def encrypt(self, plaintext: bytes, key_material: bytes) -> bytes:
        """
        Seal plaintext into a GCM envelope.

        Args:
            plaintext: Data to encrypt (can be empty)
            key_material: Passphrase or key-file bytes

        Returns:
            ``ciphertext || nonce || salt``

        Raises:
            MissingKeyError: If key_material is empty
            KeyDerivationError: If the key cannot be derived
            CipherInitError: If the cipher or nonce cannot be created
        """
        derived = derive_key(key_material, None, self._params, self._randbytes)
        with ZeroizeContext(derived.key):
            nonce = self.generate_nonce()
            ciphertext = _new_aead(derived.key).encrypt(nonce, plaintext, None)

        self._log.debug("Sealed %d bytes with AES-256-GCM", len(plaintext))
        return envelope.assemble(ciphertext, nonce, derived.salt)

    def decrypt(self, data: bytes, key_material: bytes) -> bytes:
        """
        Open a GCM envelope.

        Args:
            data: Envelope produced by encrypt()
            key_material: Passphrase or key-file bytes used to encrypt

        Returns:
            Recovered plaintext

        Raises:
            EnvelopeTooShortError: If data cannot hold tag, nonce and salt
            MissingKeyError: If key_material is empty
            AuthenticationError: If the tag does not verify (tampering,
                wrong passphrase, or corruption)
        """
        if len(data) < GCM_MIN_ENVELOPE:
            raise EnvelopeTooShortError(len(data), GCM_MIN_ENVELOPE)

        parts = envelope.parse(data, GCM_NONCE_SIZE)
        derived = derive_key(key_material, parts.salt, self._params)
        with ZeroizeContext(derived.key):
            try:
                plaintext = _new_aead(derived.key).decrypt(parts.nonce, parts.ciphertext, None)
            except InvalidTag as exc:
                self._log.warning("GCM authentication failed")
                raise AuthenticationError(
                    "Authentication failed: wrong key or corrupted data"
                ) from exc

        return plaintext
