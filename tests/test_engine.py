"""Tests for mode dispatch."""

from __future__ import annotations

import logging

import pytest

from filecrypt.core.config import CryptoConfig, FileCryptConfig
from filecrypt.core.crypto.aes_gcm import AesGcmCipher
from filecrypt.core.crypto.engine import CipherMode, CryptoEngine
from filecrypt.core.crypto.errors import AuthenticationError, UnsupportedModeError


@pytest.fixture
def engine(fast_params) -> CryptoEngine:
    return CryptoEngine(kdf_params=fast_params)


@pytest.mark.parametrize(
    "name, mode",
    [("GCM", CipherMode.GCM), ("gcm", CipherMode.GCM), (" ctr ", CipherMode.CTR), ("RSA", CipherMode.RSA)],
)
def test_parse_mode(name, mode):
    assert CipherMode.parse(name) is mode


def test_parse_unknown_mode():
    with pytest.raises(UnsupportedModeError):
        CipherMode.parse("ECB")
    with pytest.raises(ValueError):
        CipherMode.parse("cbc")


def test_only_ctr_is_unauthenticated():
    assert CipherMode.GCM.authenticated
    assert CipherMode.RSA.authenticated
    assert not CipherMode.CTR.authenticated


@pytest.mark.parametrize("mode", [CipherMode.GCM, CipherMode.CTR])
def test_symmetric_round_trip(engine, mode):
    sealed = engine.encrypt(b"attack at dawn", b"correct horse", mode)
    assert engine.decrypt(sealed, b"correct horse", mode) == b"attack at dawn"


def test_default_mode_is_gcm(engine):
    sealed = engine.encrypt(b"attack at dawn", b"correct horse")
    with pytest.raises(AuthenticationError):
        engine.decrypt(sealed, b"wrong passphrase")


def test_rsa_round_trip(engine, rsa_pair):
    wrapped = engine.encrypt(b"\x01" * 32, rsa_pair.public_pem, CipherMode.RSA)
    assert engine.decrypt(wrapped, rsa_pair.private_pem, CipherMode.RSA) == b"\x01" * 32


def test_mode_must_be_enum(engine):
    with pytest.raises(UnsupportedModeError):
        engine.encrypt(b"data", b"pw", "gcm")


def test_ctr_logs_integrity_warning(engine, caplog):
    with caplog.at_level(logging.WARNING, logger="filecrypt.engine"):
        engine.encrypt(b"data", b"pw", CipherMode.CTR)
    assert any("does not authenticate" in r.getMessage() for r in caplog.records)


def test_gcm_does_not_warn(engine, caplog):
    with caplog.at_level(logging.WARNING, logger="filecrypt.engine"):
        engine.encrypt(b"data", b"pw", CipherMode.GCM)
    assert not caplog.records


def test_from_config_uses_kdf_settings(fast_params):
    config = FileCryptConfig(
        crypto=CryptoConfig(
            kdf_time_cost=fast_params.time_cost,
            kdf_memory_cost=fast_params.memory_cost,
            kdf_parallelism=fast_params.parallelism,
        )
    )
    sealed = CryptoEngine.from_config(config).encrypt(b"data", b"pw")
    assert AesGcmCipher(kdf_params=fast_params).decrypt(sealed, b"pw") == b"data"
