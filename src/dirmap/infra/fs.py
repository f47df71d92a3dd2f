from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path manipulation, snapshot key normalization and
safe artifact persistence. Acts as an abstraction over the 'os' module to
ensure uniform behavior across Windows and Unix-like systems.
"""

import os
import tempfile

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "dirmap"
UNIX_APP_DIR_NAME = ".dirmap"
SNAPSHOT_SEPARATOR = "/"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/dirmap
    - Linux/Mac: ~/.dirmap

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    # Posix fallback (Linux/Mac)
    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def to_snapshot_key(path: str) -> str:
    """
    Convert a host path into the snapshot key convention.

    Collapses redundant separators and '.' segments, then rewrites the host
    separator as a forward slash. Names that are not valid UTF-8 on disk are
    decoded lossily so that every key can be serialized.

    Args:
        path: Host filesystem path.

    Returns:
        str: Platform independent key.
    """
    key = os.path.normpath(path)
    if os.sep != SNAPSHOT_SEPARATOR:
        key = key.replace(os.sep, SNAPSHOT_SEPARATOR)
    return lossy_text(key)


def lossy_text(name: str) -> str:
    """Replace undecodable filename bytes (surrogate escapes) with U+FFFD."""
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")

# -----------------------------------------------------------------------------
# ARTIFACT PERSISTENCE API
# -----------------------------------------------------------------------------

def write_bytes_atomic(path: str, data: bytes) -> None:
    """
    Persist a binary artifact so that readers never observe a partial file.

    The payload goes to a temporary sibling first and is then moved over the
    destination in a single rename.

    Args:
        path: Destination file path.
        data: Payload to write.

    Raises:
        OSError: If the directory is not writable or the rename fails.
    """
    target = os.path.abspath(path)
    parent = os.path.dirname(target)
    os.makedirs(parent, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=".dirmap-", dir=parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_path, target)
    except OSError:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
