from __future__ import annotations

from dirmap.core.engine import map_tree, unmap_tree
from dirmap.domain.errors import DirmapError
from dirmap.domain.models import DirectoryRecord, FileRecord, FileType, Snapshot

map = map_tree
unmap = unmap_tree

__all__ = [
    "map",
    "unmap",
    "map_tree",
    "unmap_tree",
    "DirmapError",
    "DirectoryRecord",
    "FileRecord",
    "FileType",
    "Snapshot",
]
