"""
RSA-OAEP Asymmetric Encryption
==============================

Public-key wrap/unwrap of short payloads (typically symmetric keys).

Security Properties:
    - OAEP padding, SHA-512 for both the OAEP hash and MGF1 by default
    - No OAEP label
    - Masking randomness from the cryptography backend's CSPRNG
    - Output is exactly modulus_bytes long, with no trailer

Key Formats:
    - Public:  PEM, X.509 SubjectPublicKeyInfo (PKIX); PKCS#1 also accepted
    - Private: PEM, PKCS#1 ("RSA PRIVATE KEY"); PKCS#8 also accepted

Limits:
    len(plaintext) <= modulus_bytes - 2 * hash_len - 2
    (126 bytes for RSA-2048 with SHA-512, 382 bytes for RSA-4096)

Keys are parsed on every call and never cached. The hash is chosen per
call; nothing here holds module-level mutable state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from filecrypt.core.crypto.errors import (
    CipherInitError,
    KeyParseError,
    MissingKeyError,
    PaddingError,
    PlaintextTooLargeError,
)

RSA_DEFAULT_KEY_SIZE: Final[int] = 4096
RSA_MIN_KEY_SIZE: Final[int] = 2048
RSA_PUBLIC_EXPONENT: Final[int] = 65537

_log = logging.getLogger("filecrypt.rsa")


@dataclass(frozen=True, slots=True)
class RsaKeyPair:
    """PEM-encoded RSA key pair (PKCS#1 private, PKIX public)."""

    private_pem: bytes
    public_pem: bytes

    def __repr__(self) -> str:
        """Safe representation without exposing key material."""
        return f"RsaKeyPair(public_pem_len={len(self.public_pem)})"


def _oaep(hash_algorithm: hashes.HashAlgorithm) -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hash_algorithm),
        algorithm=hash_algorithm,
        label=None,
    )


def modulus_bytes(key: rsa.RSAPublicKey | rsa.RSAPrivateKey) -> int:
    """Length of the RSA modulus in bytes."""
    return (key.key_size + 7) // 8


def max_plaintext_len(
    key: rsa.RSAPublicKey | rsa.RSAPrivateKey,
    hash_algorithm: Optional[hashes.HashAlgorithm] = None,
) -> int:
    """Largest message OAEP can encrypt under key with the given hash."""
    digest_size = (hash_algorithm or hashes.SHA512()).digest_size
    return modulus_bytes(key) - 2 * digest_size - 2


def load_public_key(pem: bytes) -> rsa.RSAPublicKey:
    """
    Parse an RSA public key from PEM.

    Raises:
        MissingKeyError: If pem is empty
        KeyParseError: If pem is malformed or not an RSA key
    """
    if not pem:
        raise MissingKeyError("No public key supplied")
    try:
        key = serialization.load_pem_public_key(bytes(pem))
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyParseError("Failed to parse public key") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyParseError("PEM does not contain an RSA public key")
    return key


def load_private_key(pem: bytes, password: Optional[bytes] = None) -> rsa.RSAPrivateKey:
    """
    Parse an RSA private key from PEM.

    Args:
        pem: PKCS#1 (or PKCS#8) PEM bytes
        password: Passphrase for an encrypted PEM

    Raises:
        MissingKeyError: If pem is empty
        KeyParseError: If pem is malformed, encrypted without a password
            being given, or not an RSA key
    """
    if not pem:
        raise MissingKeyError("No private key supplied")
    try:
        key = serialization.load_pem_private_key(bytes(pem), password=password)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyParseError("Failed to parse private key") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyParseError("PEM does not contain an RSA private key")
    return key


def generate_keypair(key_size: int = RSA_DEFAULT_KEY_SIZE) -> RsaKeyPair:
    """
    Generate a new RSA key pair.

    Raises:
        CipherInitError: If key_size is below RSA_MIN_KEY_SIZE
    """
    if key_size < RSA_MIN_KEY_SIZE:
        raise CipherInitError(f"RSA key size must be at least {RSA_MIN_KEY_SIZE} bits")

    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=key_size,
    )
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    _log.debug("Generated RSA-%d key pair", key_size)
    return RsaKeyPair(private_pem=private_pem, public_pem=public_pem)


class RsaOaepCipher:
    """
    RSA-OAEP cipher over PEM key material.

    Usage:
        pair = generate_keypair(2048)
        cipher = RsaOaepCipher()
        wrapped = cipher.encrypt(aes_key, pair.public_pem)
        aes_key = cipher.decrypt(wrapped, pair.private_pem)
    """

    __slots__ = ()

    def encrypt(
        self,
        plaintext: bytes,
        public_pem: bytes,
        hash_algorithm: Optional[hashes.HashAlgorithm] = None,
    ) -> bytes:
        """
        Encrypt plaintext to the holder of public_pem.

        Args:
            plaintext: Message no longer than the OAEP bound
            public_pem: PKIX (or PKCS#1) PEM public key
            hash_algorithm: OAEP/MGF1 hash (default SHA-512)

        Returns:
            Ciphertext of exactly modulus_bytes

        Raises:
            KeyParseError: If the key cannot be parsed
            PlaintextTooLargeError: If plaintext exceeds the OAEP bound
        """
        hash_algorithm = hash_algorithm or hashes.SHA512()
        key = load_public_key(public_pem)

        limit = max_plaintext_len(key, hash_algorithm)
        if len(plaintext) > limit:
            raise PlaintextTooLargeError(len(plaintext), limit)

        try:
            ciphertext = key.encrypt(bytes(plaintext), _oaep(hash_algorithm))
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise CipherInitError(f"RSA-OAEP encryption failed: {exc}") from exc

        _log.debug("Wrapped %d bytes with RSA-%d OAEP", len(plaintext), key.key_size)
        return ciphertext

    def decrypt(
        self,
        ciphertext: bytes,
        private_pem: bytes,
        hash_algorithm: Optional[hashes.HashAlgorithm] = None,
        password: Optional[bytes] = None,
    ) -> bytes:
        """
        Decrypt an OAEP ciphertext.

        Args:
            ciphertext: Output of encrypt()
            private_pem: PKCS#1 (or PKCS#8) PEM private key
            hash_algorithm: OAEP/MGF1 hash (must match encryption)
            password: Passphrase for an encrypted PEM

        Raises:
            KeyParseError: If the key cannot be parsed
            PaddingError: If padding does not validate (wrong key,
                wrong hash, or corrupted ciphertext)
        """
        hash_algorithm = hash_algorithm or hashes.SHA512()
        key = load_private_key(private_pem, password)

        try:
            plaintext = key.decrypt(bytes(ciphertext), _oaep(hash_algorithm))
        except ValueError as exc:
            _log.warning("RSA-OAEP padding check failed")
            raise PaddingError("Decryption failed: wrong key or corrupted data") from exc

        return plaintext
