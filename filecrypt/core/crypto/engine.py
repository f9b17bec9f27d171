"""
Cipher Mode Dispatch
====================

Routes encrypt/decrypt calls to the cipher for the selected mode.

Modes:
    GCM: AES-256-GCM, passphrase-derived key, authenticated (default)
    CTR: AES-256-CTR, passphrase-derived key, NOT authenticated
    RSA: RSA-OAEP/SHA-512, PEM key material, no trailer
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, BinaryIO, Optional

from filecrypt.core.crypto.aes_ctr import CHUNK_SIZE, AesCtrCipher
from filecrypt.core.crypto.aes_gcm import AesGcmCipher
from filecrypt.core.crypto.errors import UnsupportedModeError
from filecrypt.core.crypto.kdf import KdfParams, RandBytes
from filecrypt.core.crypto.rsa_oaep import RsaOaepCipher

if TYPE_CHECKING:
    from filecrypt.core.config import FileCryptConfig


class CipherMode(Enum):
    """Supported cipher modes."""

    GCM = "gcm"
    CTR = "ctr"
    RSA = "rsa"

    @classmethod
    def parse(cls, name: str) -> CipherMode:
        """Case-insensitive lookup, raising UnsupportedModeError."""
        try:
            return cls(name.strip().lower())
        except ValueError as exc:
            raise UnsupportedModeError(f"Invalid cipher mode: {name!r}") from exc

    @property
    def authenticated(self) -> bool:
        """Whether tampering is detected on decrypt."""
        return self is not CipherMode.CTR


class CryptoEngine:
    """
    Single entry point over the three filecrypt ciphers.

    Usage:
        engine = CryptoEngine()
        sealed = engine.encrypt(data, b"passphrase")                # GCM
        sealed = engine.encrypt(data, b"passphrase", CipherMode.CTR)
        wrapped = engine.encrypt(aes_key, public_pem, CipherMode.RSA)

    For GCM/CTR ``key`` is passphrase or key-file bytes; for RSA it is
    the PEM public key (encrypt) or private key (decrypt).
    """

    __slots__ = ("_gcm", "_ctr", "_rsa", "_log")

    def __init__(
        self,
        kdf_params: Optional[KdfParams] = None,
        randbytes: Optional[RandBytes] = None,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        self._gcm = AesGcmCipher(kdf_params, randbytes)
        self._ctr = AesCtrCipher(kdf_params, randbytes, chunk_size)
        self._rsa = RsaOaepCipher()
        self._log = logging.getLogger("filecrypt.engine")

    @classmethod
    def from_config(cls, config: FileCryptConfig) -> CryptoEngine:
        """Build an engine from loaded configuration."""
        return cls(
            kdf_params=config.crypto.kdf_params(),
            chunk_size=config.crypto.chunk_size,
        )

    def _check_mode(self, mode: CipherMode) -> None:
        if not isinstance(mode, CipherMode):
            raise UnsupportedModeError(f"Invalid cipher mode: {mode!r}")
        if not mode.authenticated:
            self._log.warning(
                "AES-CTR mode does not authenticate data; tampering will not be detected"
            )

    def encrypt(self, data: bytes, key: bytes, mode: CipherMode = CipherMode.GCM) -> bytes:
        """Encrypt data under key with the given mode."""
        self._check_mode(mode)
        if mode is CipherMode.GCM:
            return self._gcm.encrypt(data, key)
        if mode is CipherMode.CTR:
            return self._ctr.encrypt(data, key)
        return self._rsa.encrypt(data, key)

    def decrypt(self, data: bytes, key: bytes, mode: CipherMode = CipherMode.GCM) -> bytes:
        """Decrypt data under key with the given mode."""
        self._check_mode(mode)
        if mode is CipherMode.GCM:
            return self._gcm.decrypt(data, key)
        if mode is CipherMode.CTR:
            return self._ctr.decrypt(data, key)
        return self._rsa.decrypt(data, key)

    def encrypt_stream(self, src: BinaryIO, dst: BinaryIO, key: bytes) -> int:
        """CTR-mode encryption from file object to file object."""
        self._check_mode(CipherMode.CTR)
        return self._ctr.encrypt_stream(src, dst, key)

    def decrypt_stream(self, src: BinaryIO, dst: BinaryIO, key: bytes) -> int:
        """CTR-mode decryption from a seekable file object."""
        self._check_mode(CipherMode.CTR)
        return self._ctr.decrypt_stream(src, dst, key)
