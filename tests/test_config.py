"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from filecrypt.core.config import (
    CryptoConfig,
    FileCryptConfig,
    LoggingConfig,
    PathConfig,
)
from filecrypt.core.crypto.kdf import DEFAULT_KDF_PARAMS, KdfParams


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    import os

    for key in list(os.environ):
        if key.startswith("FILECRYPT_"):
            monkeypatch.delenv(key)


def test_defaults():
    config = FileCryptConfig.load()

    assert config.crypto.kdf_params() == DEFAULT_KDF_PARAMS
    assert config.crypto.chunk_size == 1024
    assert config.crypto.default_mode == "gcm"
    assert config.logging.level == "WARNING"
    assert config.logging.enable_file is False
    assert config.paths.log_dir.is_absolute()


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("FILECRYPT_LOGGING__LEVEL", "DEBUG")
    monkeypatch.setenv("FILECRYPT_LOGGING__ENABLE_FILE", "true")
    monkeypatch.setenv("FILECRYPT_CRYPTO__KDF_TIME_COST", "1")
    monkeypatch.setenv("FILECRYPT_CRYPTO__KDF_MEMORY_COST", "256")
    monkeypatch.setenv("FILECRYPT_CRYPTO__KDF_PARALLELISM", "1")
    monkeypatch.setenv("FILECRYPT_CRYPTO__CHUNK_SIZE", "4096")
    monkeypatch.setenv("FILECRYPT_CRYPTO__DEFAULT_MODE", "ctr")
    monkeypatch.setenv("FILECRYPT_PATHS__LOG_DIR", str(tmp_path))

    config = FileCryptConfig.load()

    assert config.logging.level == "DEBUG"
    assert config.logging.enable_file is True
    assert config.crypto.kdf_params() == KdfParams(time_cost=1, memory_cost=256, parallelism=1)
    assert config.crypto.chunk_size == 4096
    assert config.crypto.default_mode == "ctr"
    assert config.paths.log_dir == Path(tmp_path)


def test_sensitive_keys_are_ignored(monkeypatch):
    monkeypatch.setenv("FILECRYPT_CRYPTO__PASSPHRASE", "hunter2")
    monkeypatch.setenv("FILECRYPT_AES_KEY", "00ff")
    monkeypatch.setenv("FILECRYPT_LOGGING__LEVEL", "INFO")

    overrides = FileCryptConfig._parse_env_overrides("FILECRYPT")

    assert overrides == {"logging.level": "INFO"}


def test_custom_prefix(monkeypatch):
    monkeypatch.setenv("OTHER_LOGGING__LEVEL", "ERROR")
    assert FileCryptConfig.load(env_prefix="other").logging.level == "ERROR"


@pytest.mark.parametrize(
    "factory",
    [
        lambda: LoggingConfig(level="LOUD"),
        lambda: CryptoConfig(chunk_size=0),
        lambda: CryptoConfig(default_mode="ecb"),
        lambda: CryptoConfig(kdf_time_cost=0),
        lambda: PathConfig(log_dir=Path("relative/logs")),
    ],
)
def test_invalid_values(factory):
    with pytest.raises(ValueError):
        factory()


def test_invalid_env_value(monkeypatch):
    monkeypatch.setenv("FILECRYPT_CRYPTO__KDF_TIME_COST", "fast")
    with pytest.raises(ValueError):
        FileCryptConfig.load()


def test_config_is_immutable():
    config = FileCryptConfig()
    with pytest.raises(AttributeError):
        config.crypto = CryptoConfig()
    with pytest.raises(AttributeError):
        config.crypto.chunk_size = 1


def test_hash_and_repr():
    first = FileCryptConfig()
    second = FileCryptConfig(crypto=CryptoConfig(chunk_size=2048))

    assert first.config_hash != second.config_hash
    assert first.config_hash in repr(first)


def test_singleton():
    first = FileCryptConfig.get_instance()
    assert FileCryptConfig.get_instance() is first
    FileCryptConfig.reset_instance()
    assert FileCryptConfig.get_instance() is not first
