"""Core high-level operations for file encryption/decryption."""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from types import TracebackType
from typing import IO, Literal, Optional, Type

from ciphershell.container.format import HEADER_LEN, FileHeader, build_header, read_header_from_stream
from ciphershell.container.naming import decrypted_path_for, encrypted_path_for, split_file_name
from ciphershell.crypto.cipher import BAD_PASSPHRASE_OR_CORRUPTED, decrypt_stream, encrypt_stream
from ciphershell.crypto.kdf import derive_key, generate_initial_vector, generate_salt
from ciphershell.crypto.secure_memory import secure_zeroize
from ciphershell.errors import StreamError, UsageError

ModeLiteral = Literal["encrypt", "decrypt"]

_MODE_SELECTORS: dict[str, ModeLiteral] = {
    "encrypt": "encrypt",
    "-e": "encrypt",
    "decrypt": "decrypt",
    "-d": "decrypt",
}

logger = logging.getLogger(__name__)

__all__ = [
    "ModeLiteral",
    "decrypt_file",
    "encrypt_file",
    "inspect_file",
    "normalize_mode",
    "process_file",
]


class _AtomicOutput:
    """Temporary file beside ``target`` that replaces it only on success."""

    def __init__(self, target: Path) -> None:
        self.target = target
        self._handle: IO[bytes] | None = None

    def __enter__(self) -> IO[bytes]:
        self._handle = tempfile.NamedTemporaryFile(
            dir=self.target.parent,
            prefix=f".{self.target.name}.",
            suffix=".part",
            delete=False,
        )
        return self._handle

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> Literal[False]:
        if self._handle is None:
            return False
        temp_path = Path(self._handle.name)
        try:
            self._handle.close()
            if exc_type is None:
                os.replace(temp_path, self.target)
                return False
        except OSError as close_exc:
            temp_path.unlink(missing_ok=True)
            if exc_type is None:
                raise StreamError(BAD_PASSPHRASE_OR_CORRUPTED) from close_exc
            return False
        temp_path.unlink(missing_ok=True)
        logger.debug("Discarded partial output for %s", self.target)
        return False


def _require_file(path: Path) -> None:
    if path.exists() and not path.is_file():
        raise UsageError(f"File '{path}' is not a regular file.")
    if not path.is_file():
        raise UsageError(f"File '{path}' does not exist.")


def encrypt_file(in_path: Path, passphrase: bytearray, *, out_path: Path | None = None) -> Path:
    """Encrypt ``in_path`` into ``<stem>.enc`` and return the written path.

    ``passphrase`` is zeroed as soon as the key is derived, and on every error path.
    """
    key: bytearray | None = None
    try:
        _require_file(in_path)
        target = out_path or encrypted_path_for(in_path)

        salt = generate_salt()
        iv = generate_initial_vector()
        key = derive_key(passphrase, salt)
        secure_zeroize(passphrase)
        header = build_header(split_file_name(in_path).extension, salt, iv)

        try:
            with in_path.open("rb") as source, _AtomicOutput(target) as dest:
                dest.write(header)
                encrypt_stream(source, dest, key, iv)
        except OSError as exc:
            raise StreamError(BAD_PASSPHRASE_OR_CORRUPTED) from exc
    finally:
        secure_zeroize(passphrase, key)

    logger.debug("Encrypted %s -> %s", in_path, target)
    return target


def decrypt_file(in_path: Path, passphrase: bytearray, *, out_path: Path | None = None) -> Path:
    """Decrypt a file produced by :func:`encrypt_file` and return the written path.

    The header is read and its magic checked before any key derivation or
    cipher work. ``passphrase`` is zeroed as soon as the key is derived, and on
    every error path.
    """
    key: bytearray | None = None
    try:
        _require_file(in_path)
        try:
            with in_path.open("rb") as source:
                header = read_header_from_stream(source)
                target = out_path or decrypted_path_for(in_path, header)
                key = derive_key(passphrase, header.salt)
                secure_zeroize(passphrase)

                with _AtomicOutput(target) as dest:
                    decrypt_stream(source, dest, key, header.iv)
        except OSError as exc:
            raise StreamError(BAD_PASSPHRASE_OR_CORRUPTED) from exc
    finally:
        secure_zeroize(passphrase, key)

    logger.debug("Decrypted %s -> %s", in_path, target)
    return target


def process_file(mode: ModeLiteral, in_path: Path, passphrase: bytearray) -> Path:
    if mode == "encrypt":
        return encrypt_file(in_path, passphrase)
    return decrypt_file(in_path, passphrase)


def inspect_file(in_path: Path) -> FileHeader:
    """Return the validated header of an encrypted file without decrypting it."""
    _require_file(in_path)
    with in_path.open("rb") as source:
        header = read_header_from_stream(source)
    logger.debug("Read %d-byte header from %s", HEADER_LEN, in_path)
    return header


def normalize_mode(selector: str) -> ModeLiteral:
    """Map an operation selector (``encrypt``/``-e``, ``decrypt``/``-d``) to a mode."""
    try:
        return _MODE_SELECTORS[selector.lower()]
    except KeyError:
        raise UsageError(f"Unknown argument: {selector}. Use 'encrypt' or 'decrypt'.") from None
