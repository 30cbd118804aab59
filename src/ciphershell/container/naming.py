"""Output path rules for encrypted and decrypted files."""
from __future__ import annotations

from pathlib import Path
from typing import NamedTuple

from ciphershell.container.format import FileHeader
from ciphershell.errors import FormatError

ENCRYPTED_FILE_EXTENSION = "enc"

_SEPARATORS = frozenset("/\\")


class FileNameParts(NamedTuple):
    stem: str
    extension: str


def split_file_name(path: Path) -> FileNameParts:
    """Split the final path component at its last dot."""
    return FileNameParts(stem=path.stem, extension=path.suffix[1:])


def encrypted_path_for(path: Path) -> Path:
    return path.with_name(f"{split_file_name(path).stem}.{ENCRYPTED_FILE_EXTENSION}")


def _check_extension(extension: str) -> None:
    if any(ch in _SEPARATORS or not ch.isprintable() for ch in extension):
        raise FormatError(f"Header holds an unusable file extension: {extension!r}")


def decrypted_path_for(path: Path, header: FileHeader) -> Path:
    """Return ``<stem>.<extension>`` beside ``path``.

    Raises :class:`FormatError` when the stored extension contains a path
    separator or a control character.
    """
    stem = split_file_name(path).stem
    extension = header.extension_name
    _check_extension(extension)
    # A file that had no extension is restored without one
    if not extension:
        return path.with_name(stem)
    return path.with_name(f"{stem}.{extension}")
