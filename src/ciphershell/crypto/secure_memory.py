"""Zeroing buffers for passphrase and key material.

Python cannot guarantee that a secret never gets copied, but every buffer this
package owns is a ``bytearray`` that is overwritten in place once it is no
longer needed. Where libc is reachable the buffer is also mlock'ed so it is not
paged out while alive.
"""
from __future__ import annotations

import ctypes
import ctypes.util
import logging
import platform

logger = logging.getLogger(__name__)

_libc: ctypes.CDLL | None = None

if platform.system() != "Windows":
    try:
        _libc_name = ctypes.util.find_library("c")
        if _libc_name:
            _libc = ctypes.CDLL(_libc_name, use_errno=True)
    except OSError:
        _libc = None


def mlock_available() -> bool:
    """Return True if mlock can be attempted on this platform."""
    return _libc is not None


def _address_of(buffer: bytearray) -> int:
    return ctypes.addressof((ctypes.c_char * len(buffer)).from_buffer(buffer))


class SecureBuffer:
    """Fixed-size ``bytearray`` that is zeroed (and munlocked) on close.

    Usage::

        with SecureBuffer.copy_of(passphrase) as secret:
            kdf.derive(secret)
        # secret is all zero here
    """

    def __init__(self, size: int) -> None:
        self._buffer = bytearray(size)
        self._locked = False

        if _libc is not None and size:
            try:
                if _libc.mlock(_address_of(self._buffer), size) == 0:
                    self._locked = True
                else:
                    logger.debug("mlock failed (errno=%d), proceeding without lock", ctypes.get_errno())
            except (AttributeError, TypeError, ValueError):
                logger.debug("mlock unavailable, proceeding without lock")

    @classmethod
    def copy_of(cls, data: bytes | bytearray) -> SecureBuffer:
        secure = cls(len(data))
        secure._buffer[:] = data
        return secure

    def __enter__(self) -> bytearray:
        return self._buffer

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Zero the buffer and release the memory lock."""
        secure_zeroize(self._buffer)

        if self._locked and _libc is not None:
            try:
                _libc.munlock(_address_of(self._buffer), len(self._buffer))
            except (AttributeError, TypeError, ValueError):
                logger.debug("munlock failed")
            self._locked = False

    @property
    def buffer(self) -> bytearray:
        return self._buffer


def secure_zeroize(*buffers: bytearray | None) -> None:
    """Overwrite each given bytearray with zero bytes in place."""
    for data in buffers:
        if data is None:
            continue
        length = len(data)
        for i in range(length):
            data[i] = 0
        # Read back so the stores have an observable use
        if length > 0:
            _ = data[0]
