"""
Configuration Module
====================

Provides immutable, environment-aware configuration with security-first defaults.

Security Features:
- Immutable configuration after initialization
- Environment variable override support
- Sensitive-looking keys are never read from the environment here
- OS-aware log directory
"""

from __future__ import annotations

import hashlib
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Optional

from filecrypt.core.crypto.aes_ctr import CHUNK_SIZE
from filecrypt.core.crypto.kdf import (
    ARGON2_MEMORY_COST,
    ARGON2_PARALLELISM,
    ARGON2_TIME_COST,
    KdfParams,
)

_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "passphrase", "secret", "key", "token",
    "private", "credential", "auth", "salt",
})

_VALID_MODES: Final[frozenset[str]] = frozenset({"gcm", "ctr", "rsa"})


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


def _get_default_log_dir() -> Path:
    """Get OS-appropriate default log directory."""
    system = platform.system().lower()

    if system == "windows":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return base / "filecrypt" / "Logs"
    elif system == "darwin":
        return Path.home() / "Library" / "Logs" / "filecrypt"
    else:  # Linux and others
        return Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state")) / "filecrypt" / "logs"


@dataclass(frozen=True, slots=True)
class PathConfig:
    """Immutable path configuration with OS-aware defaults."""

    log_dir: Path = field(default_factory=_get_default_log_dir)

    def __post_init__(self) -> None:
        if not self.log_dir.is_absolute():
            raise ValueError(f"log_dir must be an absolute path: {self.log_dir}")


@dataclass(frozen=True, slots=True)
class CryptoConfig:
    """
    Immutable cipher configuration.

    Changing the KDF costs changes the keys derived from a passphrase:
    envelopes must be decrypted with the same values they were made with.
    """

    kdf_time_cost: int = ARGON2_TIME_COST
    kdf_memory_cost: int = ARGON2_MEMORY_COST  # KiB
    kdf_parallelism: int = ARGON2_PARALLELISM
    chunk_size: int = CHUNK_SIZE
    default_mode: str = "gcm"

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        if self.default_mode.lower() not in _VALID_MODES:
            raise ValueError(f"Invalid default mode: {self.default_mode}")
        # Raises ValueError on bad costs
        self.kdf_params()

    def kdf_params(self) -> KdfParams:
        """Argon2id parameters for this configuration."""
        return KdfParams(
            time_cost=self.kdf_time_cost,
            memory_cost=self.kdf_memory_cost,
            parallelism=self.kdf_parallelism,
        )


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "WARNING"
    max_file_size_bytes: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5
    enable_console: bool = True
    enable_file: bool = False

    def __post_init__(self) -> None:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {self.level}")


class FileCryptConfig:
    """
    Centralized, immutable configuration loader with environment override support.

    Usage:
        config = FileCryptConfig.load()
        params = config.crypto.kdf_params()
        level = config.logging.level

    Environment variables are prefixed with FILECRYPT_ and use double
    underscores for nested values.
    """

    __slots__ = ("_paths", "_crypto", "_logging", "_frozen", "_config_hash")

    _instance: Optional[FileCryptConfig] = None

    def __init__(
        self,
        paths: Optional[PathConfig] = None,
        crypto: Optional[CryptoConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ) -> None:
        """Initialize configuration. Use FileCryptConfig.load() for standard initialization."""
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_paths", paths or PathConfig())
        object.__setattr__(self, "_crypto", crypto or CryptoConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_config_hash", self._compute_hash())
        object.__setattr__(self, "_frozen", True)

    def _compute_hash(self) -> str:
        """Compute a hash of the configuration for integrity checking."""
        config_str = f"{self._paths}|{self._crypto}|{self._logging}"
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]

    @property
    def paths(self) -> PathConfig:
        return self._paths

    @property
    def crypto(self) -> CryptoConfig:
        return self._crypto

    @property
    def logging(self) -> LoggingConfig:
        return self._logging

    @property
    def config_hash(self) -> str:
        return self._config_hash

    @classmethod
    def load(cls, env_prefix: str = "FILECRYPT") -> FileCryptConfig:
        """
        Load configuration with environment variable overrides.

        Examples:
            FILECRYPT_LOGGING__LEVEL=DEBUG
            FILECRYPT_LOGGING__ENABLE_FILE=true
            FILECRYPT_CRYPTO__KDF_TIME_COST=4
            FILECRYPT_CRYPTO__CHUNK_SIZE=65536
            FILECRYPT_PATHS__LOG_DIR=/var/log/filecrypt

        Args:
            env_prefix: Prefix for environment variables (default: FILECRYPT)

        Returns:
            Configured FileCryptConfig instance

        Raises:
            ValueError: If an override is malformed or out of range
        """
        env_overrides = cls._parse_env_overrides(env_prefix)

        paths_kwargs: dict[str, Any] = {}
        if "paths.log_dir" in env_overrides:
            paths_kwargs["log_dir"] = Path(env_overrides["paths.log_dir"])

        crypto_kwargs: dict[str, Any] = {}
        for name in ("kdf_time_cost", "kdf_memory_cost", "kdf_parallelism", "chunk_size"):
            if f"crypto.{name}" in env_overrides:
                crypto_kwargs[name] = int(env_overrides[f"crypto.{name}"])
        if "crypto.default_mode" in env_overrides:
            crypto_kwargs["default_mode"] = env_overrides["crypto.default_mode"]

        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in env_overrides:
            logging_kwargs["level"] = env_overrides["logging.level"]
        if "logging.enable_console" in env_overrides:
            logging_kwargs["enable_console"] = env_overrides["logging.enable_console"].lower() == "true"
        if "logging.enable_file" in env_overrides:
            logging_kwargs["enable_file"] = env_overrides["logging.enable_file"].lower() == "true"

        return cls(
            paths=PathConfig(**paths_kwargs) if paths_kwargs else None,
            crypto=CryptoConfig(**crypto_kwargs) if crypto_kwargs else None,
            logging=LoggingConfig(**logging_kwargs) if logging_kwargs else None,
        )

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in os.environ.items():
            if key.startswith(prefix_upper):
                # FILECRYPT_SECTION__KEY -> section.key
                config_key = key[len(prefix_upper):].lower().replace("__", ".")

                if _is_sensitive_key(config_key):
                    continue

                overrides[config_key] = value

        return overrides

    @classmethod
    def get_instance(cls) -> FileCryptConfig:
        """Get or create the singleton configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. Use only for testing."""
        cls._instance = None

    def __repr__(self) -> str:
        """Safe string representation without sensitive data."""
        return f"FileCryptConfig(hash={self._config_hash})"

    def __setattr__(self, name: str, value: Any) -> None:
        """Prevent modification after initialization."""
        if hasattr(self, "_frozen") and self._frozen:
            raise AttributeError("FileCryptConfig is immutable after initialization")
        super().__setattr__(name, value)
