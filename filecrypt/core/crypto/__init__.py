"""
filecrypt Cryptographic Core
============================

Passphrase and public-key envelope encryption.

Architecture:
    1. Argon2id: passphrase + salt -> 256-bit key
    2. AES-256-GCM: authenticated symmetric mode (default)
    3. AES-256-CTR: unauthenticated streaming mode
    4. RSA-OAEP/SHA-512: public-key wrap of short payloads

Security Properties:
    - Fresh salt and nonce/IV for every encryption
    - Derived keys wiped after use
    - Typed errors; the core never exits the process

WARNING: CTR mode provides confidentiality only. Tampering is not detected.
"""

from filecrypt.core.crypto.aes_ctr import AesCtrCipher, CHUNK_SIZE, CTR_IV_SIZE
from filecrypt.core.crypto.aes_gcm import AesGcmCipher, GCM_NONCE_SIZE, GCM_TAG_SIZE
from filecrypt.core.crypto.engine import CipherMode, CryptoEngine
from filecrypt.core.crypto.envelope import Envelope
from filecrypt.core.crypto.errors import (
    AuthenticationError,
    CipherInitError,
    EnvelopeTooShortError,
    FileCryptError,
    KeyDerivationError,
    KeyParseError,
    MissingKeyError,
    PaddingError,
    PlaintextTooLargeError,
    UnsupportedModeError,
)
from filecrypt.core.crypto.kdf import KdfParams, SALT_LEN, derive_key
from filecrypt.core.crypto.rsa_oaep import RsaKeyPair, RsaOaepCipher, generate_keypair

__all__ = [
    "AesCtrCipher",
    "AesGcmCipher",
    "RsaOaepCipher",
    "CryptoEngine",
    "CipherMode",
    "Envelope",
    "KdfParams",
    "RsaKeyPair",
    "derive_key",
    "generate_keypair",
    "SALT_LEN",
    "GCM_NONCE_SIZE",
    "GCM_TAG_SIZE",
    "CTR_IV_SIZE",
    "CHUNK_SIZE",
    "FileCryptError",
    "KeyDerivationError",
    "CipherInitError",
    "AuthenticationError",
    "PaddingError",
    "KeyParseError",
    "PlaintextTooLargeError",
    "MissingKeyError",
    "EnvelopeTooShortError",
    "UnsupportedModeError",
]
