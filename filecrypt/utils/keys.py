"""
Key Sources
===========

Loads key material for the core from key files, the environment, or
an interactive prompt. Nothing here performs cryptography.

Environment:
    RSA_PUB_KEY: PEM public key used when no key file is given
    RSA_PRI_KEY: PEM private key used when no key file is given
"""

from __future__ import annotations

import getpass
import os
from pathlib import Path
from typing import Final, Mapping, Optional

from filecrypt.core.crypto.errors import MissingKeyError

RSA_PUB_ENV: Final[str] = "RSA_PUB_KEY"
RSA_PRI_ENV: Final[str] = "RSA_PRI_KEY"


def read_key_file(path: str | Path) -> bytes:
    """
    Read a key file as raw bytes.

    A single trailing newline is stripped so files written by editors
    derive the same key as the bytes without it.

    Raises:
        MissingKeyError: If the file does not exist or is empty
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except FileNotFoundError as exc:
        raise MissingKeyError(f"Key file not found: {path}") from exc

    if data.endswith(b"\r\n"):
        data = data[:-2]
    elif data.endswith(b"\n"):
        data = data[:-1]

    if not data:
        raise MissingKeyError(f"Key file is empty: {path}")
    return data


def key_from_env(name: str, environ: Optional[Mapping[str, str]] = None) -> bytes:
    """
    Read PEM key material from an environment variable.

    Raises:
        MissingKeyError: If the variable is unset or empty
    """
    value = (os.environ if environ is None else environ).get(name, "")
    if not value:
        raise MissingKeyError(f"Environment variable {name} is not set")
    return value.encode("utf-8")


def prompt_passphrase(confirm: bool = False) -> bytes:
    """
    Prompt for a passphrase on the controlling terminal.

    Args:
        confirm: Ask twice and require both entries to match (encrypt)

    Raises:
        MissingKeyError: If the passphrase is empty or entries differ
    """
    passphrase = getpass.getpass("Passphrase: ")
    if not passphrase:
        raise MissingKeyError("Empty passphrase")
    if confirm and getpass.getpass("Confirm passphrase: ") != passphrase:
        raise MissingKeyError("Passphrases do not match")
    return passphrase.encode("utf-8")
