"""Public container API re-exported for external users.

The objects listed in ``__all__`` form the supported public surface for
Python consumers. Everything else in :mod:`ciphershell.container` is
considered internal and may change without notice.
"""
from __future__ import annotations

from ciphershell.container.core import (
    ModeLiteral,
    decrypt_file,
    encrypt_file,
    inspect_file,
    normalize_mode,
    process_file,
)
from ciphershell.container.format import (
    HEADER_LEN,
    MAGIC,
    FileHeader,
    build_header,
    parse_header,
    read_header_from_stream,
    validate_magic,
)
from ciphershell.container.naming import ENCRYPTED_FILE_EXTENSION, split_file_name
from ciphershell.crypto.cipher import STREAM_CHUNK_SIZE

__all__ = [
    "ENCRYPTED_FILE_EXTENSION",
    "FileHeader",
    "HEADER_LEN",
    "MAGIC",
    "ModeLiteral",
    "STREAM_CHUNK_SIZE",
    "build_header",
    "decrypt_file",
    "encrypt_file",
    "inspect_file",
    "normalize_mode",
    "parse_header",
    "process_file",
    "read_header_from_stream",
    "split_file_name",
    "validate_magic",
]
