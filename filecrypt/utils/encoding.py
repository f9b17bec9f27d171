"""
Transport Encodings
===================

Optional text-safe wrapping of raw envelope bytes (base64 or hex).

Encryption output is encoded after the core runs; decryption input is
decoded before it. Surrounding whitespace (e.g. a trailing newline from
a terminal or editor) is ignored when decoding.
"""

from __future__ import annotations

import base64
import binascii
from enum import Enum

from filecrypt.utils.validators import ValidationError


class Encoding(Enum):
    """Transport encoding applied around raw envelope bytes."""

    RAW = "raw"
    BASE64 = "base64"
    HEX = "hex"

    @classmethod
    def from_flags(cls, use_base64: bool, use_hex: bool) -> Encoding:
        """Base64 wins when both flags are set."""
        if use_base64:
            return cls.BASE64
        if use_hex:
            return cls.HEX
        return cls.RAW


def encode_output(data: bytes, encoding: Encoding) -> bytes:
    """Encode raw bytes for output."""
    if encoding is Encoding.BASE64:
        return base64.b64encode(data)
    if encoding is Encoding.HEX:
        return binascii.hexlify(data)
    return data


def decode_input(data: bytes, encoding: Encoding) -> bytes:
    """
    Decode transport-encoded input back to raw bytes.

    Raises:
        ValidationError: If data is not valid for the encoding
    """
    if encoding is Encoding.RAW:
        return data

    text = b"".join(data.split())
    try:
        if encoding is Encoding.BASE64:
            return base64.b64decode(text, validate=True)
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(f"Input is not valid {encoding.value}: {exc}") from exc
