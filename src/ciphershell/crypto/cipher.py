"""AES-256-CBC with PKCS7 padding applied to file streams in bounded chunks."""
from __future__ import annotations

import logging
from typing import IO, Literal

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, CipherContext, algorithms, modes

from ciphershell.errors import CryptoError, StreamError

STREAM_CHUNK_SIZE = 8 * 1024
BLOCK_SIZE_BITS = algorithms.AES.block_size

CipherDirection = Literal["encrypt", "decrypt"]

BAD_PASSPHRASE_OR_CORRUPTED = "Bad passphrase or corrupted file"

logger = logging.getLogger(__name__)


def init_cipher(
    direction: CipherDirection, key: bytes | bytearray, iv: bytes
) -> tuple[CipherContext, padding.PaddingContext]:
    """Build the cipher and padding contexts for one pass over a stream."""

    try:
        cipher = Cipher(algorithms.AES(key), modes.CBC(iv))
    except (UnsupportedAlgorithm, ValueError, TypeError) as exc:
        raise CryptoError(f"Cipher initialisation failed: {exc}") from exc

    pkcs7 = padding.PKCS7(BLOCK_SIZE_BITS)
    if direction == "encrypt":
        return cipher.encryptor(), pkcs7.padder()
    return cipher.decryptor(), pkcs7.unpadder()


def encrypt_stream(in_file: IO[bytes], out_file: IO[bytes], key: bytes | bytearray, iv: bytes) -> int:
    """Pad and encrypt ``in_file`` until EOF, appending ciphertext to ``out_file``.

    Returns the number of ciphertext bytes written.
    """

    encryptor, padder = init_cipher("encrypt", key, iv)
    written = 0
    try:
        while True:
            chunk = in_file.read(STREAM_CHUNK_SIZE)
            if not chunk:
                break
            ciphertext = encryptor.update(padder.update(chunk))
            if ciphertext:
                out_file.write(ciphertext)
                written += len(ciphertext)

        final_chunk = encryptor.update(padder.finalize()) + encryptor.finalize()
        out_file.write(final_chunk)
        written += len(final_chunk)
    except OSError as exc:
        raise StreamError(BAD_PASSPHRASE_OR_CORRUPTED) from exc

    logger.debug("Encrypted stream: %d ciphertext bytes", written)
    return written


def decrypt_stream(in_file: IO[bytes], out_file: IO[bytes], key: bytes | bytearray, iv: bytes) -> int:
    """Decrypt ``in_file`` from its current position to EOF and strip padding.

    A wrong key almost always surfaces as invalid padding on the final block and
    is raised as :class:`StreamError`, exactly like a truncated or damaged body.
    Returns the number of plaintext bytes written.
    """

    decryptor, unpadder = init_cipher("decrypt", key, iv)
    written = 0
    try:
        while True:
            chunk = in_file.read(STREAM_CHUNK_SIZE)
            if not chunk:
                break
            plaintext = unpadder.update(decryptor.update(chunk))
            if plaintext:
                out_file.write(plaintext)
                written += len(plaintext)

        final_chunk = unpadder.update(decryptor.finalize()) + unpadder.finalize()
        if final_chunk:
            out_file.write(final_chunk)
            written += len(final_chunk)
    except (OSError, ValueError) as exc:
        raise StreamError(BAD_PASSPHRASE_OR_CORRUPTED) from exc

    logger.debug("Decrypted stream: %d plaintext bytes", written)
    return written
