"""
Utils module - I/O-side helpers used by the command line.

Nothing in this package performs cryptography.
"""

from filecrypt.utils.encoding import Encoding, decode_input, encode_output
from filecrypt.utils.keys import key_from_env, prompt_passphrase, read_key_file
from filecrypt.utils.validators import ValidationError, validate_path_safe

__all__ = [
    "Encoding",
    "decode_input",
    "encode_output",
    "key_from_env",
    "prompt_passphrase",
    "read_key_file",
    "ValidationError",
    "validate_path_safe",
]
