"""Tests for the AES-256-CTR envelope cipher."""

from __future__ import annotations

import io
import os

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from filecrypt.core.crypto.aes_ctr import CHUNK_SIZE, CTR_IV_SIZE, CTR_MIN_ENVELOPE, AesCtrCipher
from filecrypt.core.crypto.errors import CipherInitError, EnvelopeTooShortError, MissingKeyError
from filecrypt.core.crypto.kdf import SALT_LEN, derive_key


class _NonSeekable(io.BytesIO):
    def seekable(self) -> bool:
        return False


@pytest.mark.parametrize("size", [0, 1, CHUNK_SIZE - 1, CHUNK_SIZE, CHUNK_SIZE + 1, 5000])
def test_round_trip(ctr, size):
    plaintext = os.urandom(size)
    sealed = ctr.encrypt(plaintext, b"passphrase")

    assert len(sealed) == size + CTR_IV_SIZE + SALT_LEN
    assert ctr.decrypt(sealed, b"passphrase") == plaintext


def test_iv_is_block_size():
    assert CTR_IV_SIZE == 16


def test_matches_plain_ctr_keystream(fast_params, counter_randbytes):
    plaintext = os.urandom(3000)
    sealed = AesCtrCipher(kdf_params=fast_params, randbytes=counter_randbytes).encrypt(plaintext, b"pw")

    salt = b"\x01" * SALT_LEN
    iv = b"\x02" * CTR_IV_SIZE
    assert sealed[-SALT_LEN:] == salt
    assert sealed[-SALT_LEN - CTR_IV_SIZE : -SALT_LEN] == iv

    key = bytes(derive_key(b"pw", salt, fast_params).key)
    expected = Cipher(algorithms.AES(key), modes.CTR(iv)).encryptor().update(plaintext)
    assert sealed[: len(plaintext)] == expected


def test_output_independent_of_chunk_size(fast_params):
    def fixed(n: int) -> bytes:
        return b"\x42" * n

    plaintext = os.urandom(4099)
    small = AesCtrCipher(kdf_params=fast_params, randbytes=fixed, chunk_size=7)
    large = AesCtrCipher(kdf_params=fast_params, randbytes=fixed, chunk_size=65536)

    assert small.encrypt(plaintext, b"pw") == large.encrypt(plaintext, b"pw")


def test_bit_flip_is_not_detected(ctr):
    plaintext = b"attack at dawn, not at dusk"
    sealed = bytearray(ctr.encrypt(plaintext, b"pw"))

    for offset in range(len(plaintext)):
        tampered = bytearray(sealed)
        tampered[offset] ^= 0x01
        recovered = ctr.decrypt(bytes(tampered), b"pw")

        expected = bytearray(plaintext)
        expected[offset] ^= 0x01
        assert recovered == bytes(expected)


def test_wrong_passphrase_returns_garbage(ctr):
    sealed = ctr.encrypt(b"attack at dawn", b"correct horse")
    recovered = ctr.decrypt(sealed, b"wrong passphrase")

    assert len(recovered) == len(b"attack at dawn")
    assert recovered != b"attack at dawn"


def test_encryption_is_not_deterministic(ctr):
    assert ctr.encrypt(b"same", b"pw") != ctr.encrypt(b"same", b"pw")


@pytest.mark.parametrize("size", [0, CTR_MIN_ENVELOPE - 1])
def test_too_short_envelope(ctr, size):
    with pytest.raises(EnvelopeTooShortError):
        ctr.decrypt(b"\x00" * size, b"pw")


def test_empty_passphrase(ctr):
    with pytest.raises(MissingKeyError):
        ctr.encrypt(b"data", b"")


def test_stream_round_trip_through_files(ctr, tmp_path):
    plaintext = os.urandom(10 * CHUNK_SIZE + 123)
    source = tmp_path / "plain.bin"
    sealed = tmp_path / "plain.enc"
    restored = tmp_path / "plain.out"
    source.write_bytes(plaintext)

    with open(source, "rb") as src, open(sealed, "wb") as dst:
        assert ctr.encrypt_stream(src, dst, b"pw") == len(plaintext)
    with open(sealed, "rb") as src, open(restored, "wb") as dst:
        assert ctr.decrypt_stream(src, dst, b"pw") == len(plaintext)

    assert sealed.stat().st_size == len(plaintext) + CTR_IV_SIZE + SALT_LEN
    assert restored.read_bytes() == plaintext


def test_stream_and_bytes_apis_interoperate(ctr):
    out = io.BytesIO()
    ctr.encrypt_stream(io.BytesIO(b"mixed apis"), out, b"pw")
    assert ctr.decrypt(out.getvalue(), b"pw") == b"mixed apis"


def test_decrypt_stream_from_current_position(ctr):
    sealed = ctr.encrypt(b"after a header", b"pw")
    src = io.BytesIO(b"HDR" + sealed)
    src.seek(3)

    out = io.BytesIO()
    ctr.decrypt_stream(src, out, b"pw")
    assert out.getvalue() == b"after a header"


def test_decrypt_stream_requires_seekable(ctr):
    sealed = ctr.encrypt(b"data", b"pw")
    with pytest.raises(ValueError):
        ctr.decrypt_stream(_NonSeekable(sealed), io.BytesIO(), b"pw")


def test_iv_failure_raises_cipher_init_error(fast_params):
    def randbytes(n: int) -> bytes:
        if n == CTR_IV_SIZE:
            raise OSError("no entropy")
        return os.urandom(n)

    cipher = AesCtrCipher(kdf_params=fast_params, randbytes=randbytes)
    with pytest.raises(CipherInitError):
        cipher.encrypt(b"data", b"pw")


def test_invalid_chunk_size():
    with pytest.raises(ValueError):
        AesCtrCipher(chunk_size=0)
