import string

from hypothesis import given, settings
from hypothesis import strategies as st

from ciphershell.container.format import (
    EXTENSION_LEN,
    HEADER_LEN,
    MAGIC,
    build_header,
    encode_extension,
    parse_header,
)

_sixteen_bytes = st.binary(min_size=16, max_size=16)


@given(extension=st.text(max_size=12), salt=_sixteen_bytes, iv=_sixteen_bytes)
@settings(max_examples=200)
def test_header_is_always_fixed_size(extension: str, salt: bytes, iv: bytes) -> None:
    header_bytes = build_header(extension, salt, iv)
    assert len(header_bytes) == HEADER_LEN

    parsed = parse_header(header_bytes)
    assert parsed.magic == MAGIC
    assert parsed.salt == salt
    assert parsed.iv == iv
    assert parsed.extension == encode_extension(extension)
    assert len(parsed.extension) == EXTENSION_LEN


@given(
    extension=st.text(alphabet=string.ascii_letters + string.digits, max_size=12),
    salt=_sixteen_bytes,
    iv=_sixteen_bytes,
)
def test_ascii_extension_padded_or_truncated(extension: str, salt: bytes, iv: bytes) -> None:
    parsed = parse_header(build_header(extension, salt, iv))

    assert parsed.extension == extension[:4].ljust(4).encode("ascii")
    assert parsed.extension_name == extension[:4]


@given(data=st.binary(min_size=HEADER_LEN, max_size=HEADER_LEN))
def test_parse_splits_any_42_bytes_positionally(data: bytes) -> None:
    parsed = parse_header(data)
    assert parsed.magic + parsed.extension + parsed.salt + parsed.iv == data
