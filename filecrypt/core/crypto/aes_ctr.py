"""
AES-256-CTR Stream Encryption
=============================

Alternate filecrypt mode: passphrase-derived AES-256 in counter mode.

CTR turns AES into a stream cipher by encrypting an incrementing counter
block (seeded with a random 128-bit IV) and XORing the resulting keystream
with the input. Data is processed in CHUNK_SIZE pieces through a single
bounded working buffer, so encrypt_stream()/decrypt_stream() can handle
inputs of any size.

Envelope:
    ciphertext | IV (16) | salt (32)

WARNING:
    This mode is NOT authenticated. A flipped ciphertext bit decrypts,
    without any error, to plaintext with the same bit flipped. Use it
    only when confidentiality alone is acceptable (e.g. very large files
    where GCM's shape is undesirable). Prefer AesGcmCipher otherwise.
"""

from __future__ import annotations

import io
import logging
import secrets
from typing import BinaryIO, Final, Optional

from cryptography.hazmat.primitives.ciphers import Cipher, CipherContext, algorithms, modes

from filecrypt.core.crypto import envelope
from filecrypt.core.crypto.errors import CipherInitError, EnvelopeTooShortError
from filecrypt.core.crypto.kdf import SALT_LEN, KdfParams, RandBytes, derive_key
from filecrypt.core.memory import ZeroizeContext, secure_zero

CTR_IV_SIZE: Final[int] = algorithms.AES.block_size // 8  # 16
CHUNK_SIZE: Final[int] = 1024
CTR_MIN_ENVELOPE: Final[int] = CTR_IV_SIZE + SALT_LEN


def _new_keystream(key: bytearray, iv: bytes) -> CipherContext:
    try:
        return Cipher(algorithms.AES(key), modes.CTR(iv)).encryptor()
    except (TypeError, ValueError) as exc:
        raise CipherInitError(f"Cannot initialise AES-CTR: {exc}") from exc


class AesCtrCipher:
    """
    AES-256-CTR envelope cipher keyed by a passphrase (unauthenticated).

    Usage:
        cipher = AesCtrCipher()
        sealed = cipher.encrypt(data, b"passphrase")
        data = cipher.decrypt(sealed, b"passphrase")

        with open("big.bin", "rb") as src, open("big.enc", "wb") as dst:
            cipher.encrypt_stream(src, dst, b"passphrase")
    """

    __slots__ = ("_params", "_randbytes", "_chunk_size", "_log")

    def __init__(
        self,
        kdf_params: Optional[KdfParams] = None,
        randbytes: Optional[RandBytes] = None,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self._params = kdf_params
        self._randbytes = randbytes or secrets.token_bytes
        self._chunk_size = chunk_size
        self._log = logging.getLogger("filecrypt.ctr")

    @property
    def chunk_size(self) -> int:
        """Size of the working buffer in bytes."""
        return self._chunk_size

    def generate_iv(self) -> bytes:
        """
        Generate a fresh random 128-bit IV (initial counter block).

        Raises:
            CipherInitError: If the randomness source is unavailable
        """
        try:
            iv = self._randbytes(CTR_IV_SIZE)
        except (OSError, NotImplementedError) as exc:
            raise CipherInitError("Secure randomness source unavailable") from exc
        if len(iv) != CTR_IV_SIZE:
            raise CipherInitError(f"IV must be exactly {CTR_IV_SIZE} bytes")
        return iv

    def _xor_stream(
        self,
        ctx: CipherContext,
        src: BinaryIO,
        dst: BinaryIO,
        limit: Optional[int] = None,
    ) -> int:
        """
        XOR src into dst one chunk at a time.

        Reads at most ``limit`` bytes when given. The working buffer is
        owned by this loop and wiped before returning.
        """
        buf = bytearray(self._chunk_size)
        view = memoryview(buf)
        remaining = limit
        written = 0
        try:
            while remaining is None or remaining > 0:
                want = self._chunk_size if remaining is None else min(self._chunk_size, remaining)
                n = src.readinto(view[:want])
                if not n:
                    break
                dst.write(ctx.update(view[:n]))
                written += n
                if remaining is not None:
                    remaining -= n
            dst.write(ctx.finalize())
        finally:
            del view
            secure_zero(buf)
        return written

    def encrypt_stream(self, src: BinaryIO, dst: BinaryIO, key_material: bytes) -> int:
        """
        Encrypt everything readable from src, writing an envelope to dst.

        Args:
            src: Binary readable supporting readinto()
            dst: Binary writable
            key_material: Passphrase or key-file bytes

        Returns:
            Number of plaintext bytes encrypted

        Raises:
            MissingKeyError: If key_material is empty
            KeyDerivationError: If the key cannot be derived
            CipherInitError: If the cipher or IV cannot be created
        """
        derived = derive_key(key_material, None, self._params, self._randbytes)
        with ZeroizeContext(derived.key):
            iv = self.generate_iv()
            written = self._xor_stream(_new_keystream(derived.key, iv), src, dst)

        dst.write(iv)
        dst.write(derived.salt)
        self._log.debug("Encrypted %d bytes with AES-256-CTR", written)
        return written

    def decrypt_stream(self, src: BinaryIO, dst: BinaryIO, key_material: bytes) -> int:
        """
        Decrypt an envelope from a seekable src into dst.

        The trailer is read first, then exactly
        ``size - CTR_IV_SIZE - SALT_LEN`` ciphertext bytes are transformed.

        Returns:
            Number of plaintext bytes written

        Raises:
            ValueError: If src is not seekable
            EnvelopeTooShortError: If src cannot hold the IV and salt
        """
        if not src.seekable():
            raise ValueError("decrypt_stream requires a seekable source")

        start = src.tell()
        size = src.seek(0, io.SEEK_END) - start
        if size < CTR_MIN_ENVELOPE:
            raise EnvelopeTooShortError(size, CTR_MIN_ENVELOPE)

        src.seek(start + size - CTR_MIN_ENVELOPE)
        iv, salt = envelope.split_trailer(src.read(CTR_MIN_ENVELOPE), CTR_IV_SIZE)
        src.seek(start)

        derived = derive_key(key_material, salt, self._params)
        with ZeroizeContext(derived.key):
            written = self._xor_stream(
                _new_keystream(derived.key, iv), src, dst, limit=size - CTR_MIN_ENVELOPE
            )

        self._log.debug("Decrypted %d bytes with AES-256-CTR", written)
        return written

    def encrypt(self, plaintext: bytes, key_material: bytes) -> bytes:
        """
        Encrypt plaintext into ``ciphertext || IV || salt``.

        No integrity protection: see module warning.
        """
        out = io.BytesIO()
        self.encrypt_stream(io.BytesIO(plaintext), out, key_material)
        return out.getvalue()

    def decrypt(self, data: bytes, key_material: bytes) -> bytes:
        """
        Decrypt a CTR envelope.

        A wrong passphrase or tampered ciphertext is NOT detected; the
        result is simply different bytes.

        Raises:
            EnvelopeTooShortError: If data cannot hold the IV and salt
            MissingKeyError: If key_material is empty
        """
        out = io.BytesIO()
        self.decrypt_stream(io.BytesIO(data), out, key_material)
        return out.getvalue()
