"""
Core module - Contains configuration, logging, and the cryptographic core.
"""

from filecrypt.core.config import FileCryptConfig
from filecrypt.core.logging import get_secure_logger, SecureLogFilter

__all__ = ["FileCryptConfig", "get_secure_logger", "SecureLogFilter"]
