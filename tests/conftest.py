import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture
def passphrase() -> bytearray:
    return bytearray("This is my super duper secret passphrase.".encode("utf-8"))


@pytest.fixture
def report(tmp_path: Path) -> Path:
    source = tmp_path / "report.txt"
    source.write_bytes(b"Quarterly numbers\n" * 100)
    return source
