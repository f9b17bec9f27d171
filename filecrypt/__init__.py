"""
filecrypt - Passphrase and Public-Key File Encryption
=====================================================

Encrypts byte payloads with AES-256-GCM (default), AES-256-CTR, or
RSA-OAEP, bundling ciphertext with the salt and nonce needed to reverse it.

Security Notice:
- No secrets are logged
- Fresh salt and nonce for every encryption
- CTR mode is not authenticated
"""

from filecrypt.core.config import FileCryptConfig
from filecrypt.core.crypto import CipherMode, CryptoEngine, FileCryptError
from filecrypt.core.logging import get_secure_logger

__version__ = "0.1.0"

__all__ = [
    "CipherMode",
    "CryptoEngine",
    "FileCryptConfig",
    "FileCryptError",
    "get_secure_logger",
    "__version__",
]
