import pytest

from ciphershell.container.format import (
    EXTENSION_LEN,
    HEADER_LEN,
    MAGIC,
    FileHeader,
    build_header,
    encode_extension,
    parse_header,
    validate_magic,
)
from ciphershell.errors import FormatError

SALT = bytes(range(16))
IV = bytes(range(15, -1, -1))


def test_build_and_parse_header() -> None:
    header_bytes = build_header("txt", SALT, IV)

    assert len(header_bytes) == HEADER_LEN == 42

    parsed = parse_header(header_bytes)
    assert parsed.magic == MAGIC
    assert parsed.extension == b"txt "
    assert parsed.salt == SALT
    assert parsed.iv == IV
    assert parsed.extension_name == "txt"


def test_field_offsets() -> None:
    header_bytes = build_header("pdf", SALT, IV)

    assert header_bytes[0:6] == b"ENC737"
    assert header_bytes[6:10] == b"pdf "
    assert header_bytes[10:26] == SALT
    assert header_bytes[26:42] == IV


def test_long_extension_is_truncated() -> None:
    parsed = parse_header(build_header("markdown", SALT, IV))
    assert parsed.extension == b"mark"
    assert parsed.extension_name == "mark"


def test_empty_extension_is_all_spaces() -> None:
    parsed = parse_header(build_header("", SALT, IV))
    assert parsed.extension == b" " * EXTENSION_LEN
    assert parsed.extension_name == ""


def test_multibyte_extension_never_split() -> None:
    # "é" is two bytes: two of them fill the field, a third would not fit
    assert encode_extension("ééé") == "éé".encode("utf-8")
    assert encode_extension("aéé") == "aé".encode("utf-8") + b" "


def test_to_bytes_matches_build_header() -> None:
    header = FileHeader(magic=MAGIC, extension=b"jpg ", salt=SALT, iv=IV)
    assert header.to_bytes() == build_header("jpg", SALT, IV)


@pytest.mark.parametrize("length", [0, 41, 43])
def test_parse_rejects_wrong_length(length: int) -> None:
    with pytest.raises(FormatError):
        parse_header(b"\x00" * length)


def test_parse_does_not_check_magic() -> None:
    data = bytearray(build_header("txt", SALT, IV))
    data[0:6] = b"BADMAG"

    parsed = parse_header(bytes(data))
    assert parsed.magic == b"BADMAG"


def test_invalid_magic() -> None:
    data = bytearray(build_header("txt", SALT, IV))
    data[5] ^= 0x01

    with pytest.raises(FormatError):
        validate_magic(parse_header(bytes(data)))


def test_build_rejects_bad_salt_and_iv() -> None:
    with pytest.raises(ValueError):
        build_header("txt", b"\x01" * 8, IV)
    with pytest.raises(ValueError):
        build_header("txt", SALT, b"\x02" * 8)
