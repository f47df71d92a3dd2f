from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Isolation of the user data directory (config and logs) per test.
3. Shared filesystem trees and synthetic snapshots.
"""

import os
import sys
from pathlib import Path

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from dirmap.domain.models import DirectoryRecord, FileRecord, FileType, Snapshot  # noqa: E402


# -----------------------------------------------------------------------------
# Environment Isolation
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolated_user_data(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect the user data directory (~/.dirmap) into the test sandbox."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("LOCALAPPDATA", str(home / "AppData" / "Local"))
    return home


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    Create a small directory tree on disk.

    Structure:
    /root
      /A
        a.bin        (100 bytes)
      /B
        b.PNG        (50 bytes)
        /C
          c.jpeg     (25 bytes)
      /empty
    """
    root = tmp_path / "root"
    (root / "A").mkdir(parents=True)
    (root / "B" / "C").mkdir(parents=True)
    (root / "empty").mkdir()

    (root / "A" / "a.bin").write_bytes(b"a" * 100)
    (root / "B" / "b.PNG").write_bytes(b"b" * 50)
    (root / "B" / "C" / "c.jpeg").write_bytes(b"c" * 25)

    return root


@pytest.fixture
def synthetic_snapshot() -> Snapshot:
    """
    Return a hand-built snapshot with own sizes (not yet aggregated).

    root -> {A, B}; A holds 100 bytes; B holds 50 bytes and child C;
    C holds 25 bytes.
    """
    return {
        "root": DirectoryRecord(size=0, files=[], children=["root/A", "root/B"]),
        "root/A": DirectoryRecord(
            size=100,
            files=[FileRecord(type=FileType.OTHER, name="a.bin", size=100)],
        ),
        "root/B": DirectoryRecord(
            size=50,
            files=[FileRecord(type=FileType.PNG, name="b.png", size=50)],
            children=["root/B/C"],
        ),
        "root/B/C": DirectoryRecord(
            size=25,
            files=[FileRecord(type=FileType.JPEG, name="c.jpg", size=25)],
        ),
    }
