"""Shared fixtures for the filecrypt test suite."""

from __future__ import annotations

import logging

import pytest

from filecrypt.core.config import FileCryptConfig
from filecrypt.core.crypto.aes_ctr import AesCtrCipher
from filecrypt.core.crypto.aes_gcm import AesGcmCipher
from filecrypt.core.crypto.kdf import KdfParams
from filecrypt.core.crypto.rsa_oaep import RsaKeyPair, generate_keypair

# Cheap Argon2id costs so tests stay fast; the defaults are covered separately.
FAST_KDF = KdfParams(time_cost=1, memory_cost=256, parallelism=1)


@pytest.fixture
def fast_params() -> KdfParams:
    return FAST_KDF


@pytest.fixture
def gcm() -> AesGcmCipher:
    return AesGcmCipher(kdf_params=FAST_KDF)


@pytest.fixture
def ctr() -> AesCtrCipher:
    return AesCtrCipher(kdf_params=FAST_KDF)


@pytest.fixture
def counter_randbytes():
    """Deterministic randomness source: 0x01, 0x02, ... per call."""
    calls = {"n": 0}

    def randbytes(n: int) -> bytes:
        calls["n"] += 1
        return bytes([calls["n"]]) * n

    return randbytes


@pytest.fixture(scope="session")
def rsa_pair() -> RsaKeyPair:
    return generate_keypair(2048)


@pytest.fixture(scope="session")
def other_rsa_pair() -> RsaKeyPair:
    return generate_keypair(2048)


@pytest.fixture(autouse=True)
def _reset_logging_and_config():
    yield
    logger = logging.getLogger("filecrypt")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    FileCryptConfig.reset_instance()
