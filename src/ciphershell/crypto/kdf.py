"""Key derivation helpers using PBKDF2-HMAC-SHA256."""

from __future__ import annotations

import logging
import os

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ciphershell.crypto.secure_memory import SecureBuffer
from ciphershell.errors import CryptoError

PBKDF2_ITERATIONS = 65536
DERIVED_KEY_LEN = 32  # 256-bit AES key
SALT_LEN = 16
IV_LEN = 16

logger = logging.getLogger(__name__)


def _random_nonzero(length: int) -> bytes:
    value = os.urandom(length)
    while not any(value):
        value = os.urandom(length)
    return value


def generate_salt() -> bytes:
    """Return a fresh random 16-byte salt."""

    return _random_nonzero(SALT_LEN)


def generate_initial_vector() -> bytes:
    """Return a fresh random 16-byte initialisation vector."""

    return _random_nonzero(IV_LEN)


def derive_key(passphrase: bytes | bytearray, salt: bytes) -> bytearray:
    """Derive a 256-bit key from a UTF-8 passphrase and salt.

    The passphrase is copied into a buffer owned by this function, which is
    zeroed before returning or raising. The caller keeps ownership of (and must
    clear) both ``passphrase`` and the returned key.
    """

    if len(salt) != SALT_LEN:
        raise CryptoError(f"Salt must be {SALT_LEN} bytes long, got {len(salt)}")

    secret = SecureBuffer.copy_of(passphrase)
    try:
        with secret as material:
            kdf = PBKDF2HMAC(
                algorithm=hashes.SHA256(),
                length=DERIVED_KEY_LEN,
                salt=salt,
                iterations=PBKDF2_ITERATIONS,
            )
            key = bytearray(kdf.derive(material))
    except (UnsupportedAlgorithm, ValueError, TypeError) as exc:
        raise CryptoError(f"Key generation failed: {exc}") from exc

    logger.debug("Derived %d-bit key with %d PBKDF2 iterations", DERIVED_KEY_LEN * 8, PBKDF2_ITERATIONS)
    return key
