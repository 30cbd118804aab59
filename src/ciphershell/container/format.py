"""Container header format helpers.

Layout (42 bytes, no length prefixes, no byte-order concerns)::

    0..5    magic      b"ENC737"
    6..9    extension  original extension, space padded / truncated
    10..25  salt       PBKDF2 salt
    26..41  iv         AES-CBC initialisation vector

The ciphertext body follows immediately after the header.
"""

from __future__ import annotations

from dataclasses import dataclass
from struct import Struct
from typing import IO

from ciphershell.errors import FormatError

MAGIC = b"ENC737"
MAGIC_LEN = 6
EXTENSION_LEN = 4
SALT_LEN = 16
IV_LEN = 16

_HEADER_STRUCT = Struct(f"{MAGIC_LEN}s{EXTENSION_LEN}s{SALT_LEN}s{IV_LEN}s")
HEADER_LEN = _HEADER_STRUCT.size  # 42


@dataclass(frozen=True)
class FileHeader:
    magic: bytes
    extension: bytes
    salt: bytes
    iv: bytes

    @property
    def extension_name(self) -> str:
        """Stored extension with the padding spaces removed."""
        return self.extension.decode("utf-8", errors="ignore").rstrip(" ")

    def to_bytes(self) -> bytes:
        return _HEADER_STRUCT.pack(self.magic, self.extension, self.salt, self.iv)


def encode_extension(extension: str) -> bytes:
    """Fit ``extension`` into the fixed 4-byte field.

    Longer extensions are truncated (lossy), never split inside a multi-byte
    character; shorter ones are right-padded with spaces.
    """
    encoded = b""
    for char in extension:
        char_bytes = char.encode("utf-8")
        if len(encoded) + len(char_bytes) > EXTENSION_LEN:
            break
        encoded += char_bytes
    return encoded.ljust(EXTENSION_LEN, b" ")


def build_header(extension: str, salt: bytes, iv: bytes) -> bytes:
    if len(salt) != SALT_LEN:
        raise ValueError(f"salt must be {SALT_LEN} bytes")
    if len(iv) != IV_LEN:
        raise ValueError(f"iv must be {IV_LEN} bytes")
    return FileHeader(MAGIC, encode_extension(extension), salt, iv).to_bytes()


def parse_header(data: bytes) -> FileHeader:
    """Split a raw header into its fields. Only the length is checked."""
    if len(data) != HEADER_LEN:
        raise FormatError(f"Header must be {HEADER_LEN} bytes, got {len(data)}")
    magic, extension, salt, iv = _HEADER_STRUCT.unpack(data)
    return FileHeader(magic=magic, extension=extension, salt=salt, iv=iv)


def validate_magic(header: FileHeader) -> None:
    if header.magic != MAGIC:
        raise FormatError("File was not encrypted using this application")


def read_header_from_stream(f: IO[bytes]) -> FileHeader:
    """Read, parse and magic-check the header, leaving ``f`` at the body."""
    data = f.read(HEADER_LEN)
    if len(data) < HEADER_LEN:
        raise FormatError("File was not encrypted using this application (too short for a header)")
    header = parse_header(data)
    validate_magic(header)
    return header


__all__ = [
    "EXTENSION_LEN",
    "FileHeader",
    "HEADER_LEN",
    "IV_LEN",
    "MAGIC",
    "MAGIC_LEN",
    "SALT_LEN",
    "build_header",
    "encode_extension",
    "parse_header",
    "read_header_from_stream",
    "validate_magic",
]
