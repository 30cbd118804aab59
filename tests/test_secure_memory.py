"""Tests for secure memory utilities."""
from __future__ import annotations

from ciphershell.crypto.secure_memory import SecureBuffer, mlock_available, secure_zeroize


def test_secure_buffer_zeroes_on_close() -> None:
    buf = SecureBuffer(32)
    with buf as data:
        data[:] = b"\xff" * 32
        assert data == bytearray(b"\xff" * 32)
    assert buf.buffer == bytearray(32)


def test_copy_of_holds_a_private_copy() -> None:
    original = bytearray(b"secret_material!")
    secure = SecureBuffer.copy_of(original)
    with secure as data:
        assert data == original
        assert data is not original
    assert secure.buffer == bytearray(16)
    assert original == b"secret_material!"


def test_secure_zeroize_many_buffers() -> None:
    first = bytearray(b"sensitive data here!")
    second = bytearray(b"more")
    secure_zeroize(first, None, second)
    assert first == bytearray(len(first))
    assert second == bytearray(4)


def test_secure_zeroize_none() -> None:
    secure_zeroize(None)


def test_empty_buffer_close() -> None:
    SecureBuffer(0).close()


def test_mlock_available_returns_bool() -> None:
    assert isinstance(mlock_available(), bool)
