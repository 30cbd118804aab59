from __future__ import annotations

from pathlib import Path

import ciphershell.container as container_api
from ciphershell.container import (
    ENCRYPTED_FILE_EXTENSION,
    HEADER_LEN,
    decrypt_file,
    encrypt_file,
    inspect_file,
    process_file,
)
from ciphershell.passphrase import ScriptedPassphraseReader, request_passphrase

PASSPHRASE = "This is my super duper secret passphrase."


def test_public_round_trip(tmp_path: Path) -> None:
    source = tmp_path / "secret.txt"
    source.write_text("top secret", encoding="utf-8")

    encrypted = encrypt_file(source, bytearray(PASSPHRASE.encode()))
    assert encrypted.suffix == f".{ENCRYPTED_FILE_EXTENSION}"

    output = decrypt_file(encrypted, bytearray(PASSPHRASE.encode()), out_path=tmp_path / "secret.out")
    assert output.read_text(encoding="utf-8") == "top secret"
    assert inspect_file(encrypted).extension_name == "txt"


def test_acquire_then_process(tmp_path: Path) -> None:
    source = tmp_path / "plan.txt"
    source.write_text("the plan", encoding="utf-8")

    reader = ScriptedPassphraseReader([PASSPHRASE, PASSPHRASE, PASSPHRASE])
    encrypted = process_file("encrypt", source, request_passphrase(reader, "encrypt"))
    assert encrypted.stat().st_size > HEADER_LEN
    source.unlink()

    restored = process_file("decrypt", encrypted, request_passphrase(reader, "decrypt"))
    assert restored == source
    assert restored.read_text(encoding="utf-8") == "the plan"


def test_all_exports_resolve() -> None:
    for name in container_api.__all__:
        assert hasattr(container_api, name), name
