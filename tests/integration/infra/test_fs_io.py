from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates cross-platform data directory resolution, snapshot key
normalization and atomic artifact persistence.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from dirmap.infra.fs import (
    get_user_data_dir,
    lossy_text,
    to_snapshot_key,
    write_bytes_atomic,
)

# -----------------------------------------------------------------------------
# PATH RESOLUTION TESTS
# -----------------------------------------------------------------------------

def test_get_user_data_dir_windows() -> None:
    """TC-01: Verify resolution of %LOCALAPPDATA% on Windows systems."""
    mock_appdata = "C:/Users/Test/AppData/Local"
    with patch("os.name", "nt"):
        with patch.dict(os.environ, {"LOCALAPPDATA": mock_appdata}):
            with patch("os.makedirs"):
                path = get_user_data_dir()
                assert "dirmap" in path
                assert path.lower().startswith(os.path.abspath(mock_appdata).lower())


def test_get_user_data_dir_unix() -> None:
    """TC-01: Verify resolution of ~/.dirmap on Unix-like systems."""
    mock_home = "/home/testuser"
    with patch("os.name", "posix"):
        with patch("os.path.expanduser", return_value=mock_home):
            with patch("os.makedirs"):
                path = get_user_data_dir()
                assert path.replace("\\", "/").endswith("/home/testuser/.dirmap")


# -----------------------------------------------------------------------------
# SNAPSHOT KEYS
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("raw, expected", [
    ("root/./A", "root/A"),
    ("root//A/", "root/A"),
    ("root/A/../B", "root/B"),
    (".", "."),
])
def test_to_snapshot_key_normalizes(raw: str, expected: str) -> None:
    assert to_snapshot_key(raw) == expected


def test_to_snapshot_key_uses_forward_slashes() -> None:
    with patch("os.sep", "\\"), patch("os.path.normpath", return_value="root\\A\\B"):
        assert to_snapshot_key("root\\A\\B") == "root/A/B"


def test_lossy_text_replaces_undecodable_bytes() -> None:
    name = b"bad\xffname".decode("utf-8", "surrogateescape")

    assert lossy_text(name) == "bad\ufffdname"
    assert lossy_text("ok.png") == "ok.png"


def test_undecodable_names_can_share_a_key() -> None:
    first = b"dir\xff".decode("utf-8", "surrogateescape")
    second = b"dir\xfe".decode("utf-8", "surrogateescape")

    assert first != second
    assert to_snapshot_key(first) == to_snapshot_key(second) == "dir\ufffd"


# -----------------------------------------------------------------------------
# ARTIFACT PERSISTENCE
# -----------------------------------------------------------------------------

def test_write_bytes_atomic_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "deep" / "nested" / "map"

    write_bytes_atomic(str(target), b"payload")

    assert target.read_bytes() == b"payload"
    assert os.listdir(target.parent) == ["map"]


def test_write_bytes_atomic_replaces_existing(tmp_path: Path) -> None:
    target = tmp_path / "map"
    target.write_bytes(b"old")

    write_bytes_atomic(str(target), b"new")

    assert target.read_bytes() == b"new"


def test_write_bytes_atomic_leaves_no_partial_file(tmp_path: Path) -> None:
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    target = out_dir / "map"
    target.write_bytes(b"previous")

    with patch("os.replace", side_effect=OSError("rename failed")):
        with pytest.raises(OSError, match="rename failed"):
            write_bytes_atomic(str(target), b"new payload")

    assert target.read_bytes() == b"previous"
    assert os.listdir(out_dir) == ["map"]
