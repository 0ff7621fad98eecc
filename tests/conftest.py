"""
Shared fixtures for manifest engine tests.
Creates isolated temporary directories with controlled test files.
"""
import os
import sys
import tempfile
from pathlib import Path
from typing import Dict

import pytest

# Add src/ to sys.path so 'mirrorlink' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

# Fixed modification time for files that must look identical to the index
FIXED_MTIME_NS = 1_600_000_000 * 10**9


def write_file(path: Path, content: bytes, mtime_ns: int = FIXED_MTIME_NS) -> Path:
    """Creates `path` (and parents) with `content` and a controlled mtime."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    os.utime(path, ns=(mtime_ns, mtime_ns))
    return path


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mirror_tree(temp_dir) -> Dict[str, Path]:
    """
    Creates a small mirror layout:
    - a/x.bin and b/x.bin: identical 16 bytes of 0xFF, same mtime
    - docs/README.txt: unique text
    - B.txt and a.txt at the root to exercise case-insensitive ordering
    """
    files = {
        "a_x": write_file(temp_dir / "a" / "x.bin", b"\xff" * 16),
        "b_x": write_file(temp_dir / "b" / "x.bin", b"\xff" * 16),
        "readme": write_file(temp_dir / "docs" / "README.txt", b"read me\n"),
        "upper_b": write_file(temp_dir / "B.txt", b"bee"),
        "lower_a": write_file(temp_dir / "a.txt", b"ay"),
    }
    return files
