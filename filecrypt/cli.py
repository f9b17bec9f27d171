"""
Command Line Interface
======================

Thin I/O layer around the cryptographic core.

Examples:
    filecrypt -i notes.txt -o notes.enc                  # AES-256-GCM, prompt for passphrase
    filecrypt -d -i notes.enc --stdout                   # decrypt to stdout
    filecrypt -m CTR -k -f aes.key -i big.iso -o big.enc # stream a large file with a key file
    filecrypt --stdin --stdout -B < msg.txt > msg.b64    # base64 transport encoding
    filecrypt --gen-rsa 4096 --pub pub.pem --pri pri.pem
    filecrypt --rsa -k --pub pub.pem -i aes.key -o aes.key.enc
    RSA_PRI_KEY="$(cat pri.pem)" filecrypt --rsa -d -i aes.key.enc --stdout

Exit status: 0 on success, 1 on any cryptographic or I/O failure,
2 on usage errors. The core raises; only this module decides to exit.
"""

from __future__ import annotations

import argparse
import logging
import platform
import stat
import sys
from pathlib import Path
from typing import Optional

from filecrypt import __version__
from filecrypt.core.config import FileCryptConfig
from filecrypt.core.crypto import CipherMode, CryptoEngine, FileCryptError, generate_keypair
from filecrypt.core.logging import configure_logging
from filecrypt.utils.encoding import Encoding, decode_input, encode_output
from filecrypt.utils.keys import (
    RSA_PRI_ENV,
    RSA_PUB_ENV,
    key_from_env,
    prompt_passphrase,
    read_key_file,
)
from filecrypt.utils.validators import validate_path_safe

_log = logging.getLogger("filecrypt.cli")


class UsageError(Exception):
    """Raised for invalid flag combinations (exit status 2)."""
    pass


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="filecrypt",
        description="Encrypt or decrypt data with AES-256-GCM, AES-256-CTR, or RSA-OAEP.",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("--rsa", action="store_true", help="Use RSA-OAEP encryption")
    ap.add_argument("-d", "--decrypt", action="store_true", help="Decrypt")
    ap.add_argument("--stdin", action="store_true", help="Read input from stdin")
    ap.add_argument("--stdout", action="store_true", help="Write output to stdout")
    ap.add_argument("-H", dest="use_hex", action="store_true", help="Hexadecimal encoding/decoding")
    ap.add_argument("-B", dest="use_base64", action="store_true",
                    help="Base64 encoding/decoding (wins over -H)")
    ap.add_argument("-k", dest="use_key_file", action="store_true",
                    help="Read keys from files (-f for AES, --pub/--pri for RSA)")
    ap.add_argument("-m", dest="mode", default=None, help="AES mode: GCM (default) or CTR")
    ap.add_argument("-i", dest="infile", default=None, help="Input file")
    ap.add_argument("-o", dest="outfile", default=None, help="Output file")
    ap.add_argument("-f", dest="key_file", default=None, help="AES key file")
    ap.add_argument("--pub", dest="pub_file", default=None, help="RSA public key file")
    ap.add_argument("--pri", dest="pri_file", default=None, help="RSA private key file")
    ap.add_argument("--gen-rsa", dest="gen_rsa", type=int, default=None, metavar="BITS",
                    help="Generate an RSA key pair into --pub and --pri, then exit")
    ap.add_argument("--log-level", default=None,
                    choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
                    help="Override the configured log level")
    return ap


def _select_mode(args: argparse.Namespace, config: FileCryptConfig) -> CipherMode:
    if args.rsa:
        return CipherMode.RSA
    return CipherMode.parse(args.mode or config.crypto.default_mode)


def _validate_args(args: argparse.Namespace) -> None:
    if not args.stdin and not args.infile:
        raise UsageError("No input: use -i <file> or --stdin")
    if args.stdin and args.infile:
        raise UsageError("Use either -i or --stdin, not both")
    if not args.stdout and not args.outfile:
        raise UsageError("No output: use -o <file> or --stdout")
    if args.stdout and args.outfile:
        raise UsageError("Use either -o or --stdout, not both")


def _symmetric_key(args: argparse.Namespace) -> bytes:
    if args.use_key_file:
        if not args.key_file:
            raise UsageError("-k requires -f <key file> for AES modes")
        return read_key_file(args.key_file)
    return prompt_passphrase(confirm=not args.decrypt)


def _rsa_key(args: argparse.Namespace) -> bytes:
    if args.decrypt:
        if args.use_key_file:
            if not args.pri_file:
                raise UsageError("-k requires --pri <path> to decrypt with RSA")
            return read_key_file(args.pri_file)
        return key_from_env(RSA_PRI_ENV)

    if args.use_key_file:
        if not args.pub_file:
            raise UsageError("-k requires --pub <path> to encrypt with RSA")
        return read_key_file(args.pub_file)
    return key_from_env(RSA_PUB_ENV)


def _read_input(args: argparse.Namespace) -> bytes:
    if args.stdin:
        return sys.stdin.buffer.read()
    return validate_path_safe(args.infile, must_exist=True).read_bytes()


def _write_output(args: argparse.Namespace, data: bytes) -> None:
    if args.stdout:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return
    path = validate_path_safe(args.outfile)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def _write_private(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    if platform.system().lower() != "windows":
        path.chmod(stat.S_IRUSR | stat.S_IWUSR)  # 600 - owner only


def _generate_keys(args: argparse.Namespace) -> None:
    if not args.pub_file or not args.pri_file:
        raise UsageError("--gen-rsa requires --pub <path> and --pri <path>")
    pair = generate_keypair(args.gen_rsa)
    _write_private(validate_path_safe(args.pri_file), pair.private_pem)
    pub_path = validate_path_safe(args.pub_file)
    pub_path.parent.mkdir(parents=True, exist_ok=True)
    pub_path.write_bytes(pair.public_pem)
    _log.info("Wrote RSA-%d key pair", args.gen_rsa)


def _stream_ctr(args: argparse.Namespace, engine: CryptoEngine, key: bytes) -> int:
    src_path = validate_path_safe(args.infile, must_exist=True)
    dst_path = validate_path_safe(args.outfile)
    if src_path == dst_path:
        raise UsageError("Input and output must be different files")
    dst_path.parent.mkdir(parents=True, exist_ok=True)

    with open(src_path, "rb") as src, open(dst_path, "wb") as dst:
        if args.decrypt:
            return engine.decrypt_stream(src, dst, key)
        return engine.encrypt_stream(src, dst, key)


def run(args: argparse.Namespace, config: FileCryptConfig) -> None:
    """Execute one encrypt/decrypt (or key generation) request."""
    if args.gen_rsa is not None:
        _generate_keys(args)
        return

    _validate_args(args)
    mode = _select_mode(args, config)
    encoding = Encoding.from_flags(args.use_base64, args.use_hex)
    engine = CryptoEngine.from_config(config)

    key = _rsa_key(args) if mode is CipherMode.RSA else _symmetric_key(args)

    if mode is CipherMode.CTR and encoding is Encoding.RAW and args.infile and args.outfile:
        processed = _stream_ctr(args, engine, key)
        _log.info("Streamed %d bytes (ctr)", processed)
        return

    data = _read_input(args)
    if args.decrypt:
        result = engine.decrypt(decode_input(data, encoding), key, mode)
    else:
        result = encode_output(engine.encrypt(data, key, mode), encoding)

    _write_output(args, result)
    _log.info("%s %d bytes (%s)", "Decrypted" if args.decrypt else "Encrypted", len(data), mode.value)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point. Returns the process exit status."""
    args = _build_parser().parse_args(argv)

    try:
        config = FileCryptConfig.load()
        configure_logging(config, args.log_level)
        run(args, config)
    except UsageError as exc:
        print(f"filecrypt: {exc}", file=sys.stderr)
        return 2
    except (FileCryptError, ValueError, OSError) as exc:
        print(f"filecrypt: error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("filecrypt: interrupted", file=sys.stderr)
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
