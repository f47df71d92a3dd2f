from __future__ import annotations

"""
Snapshot Domain Data Models.

Defines the per-directory and per-file records that make up a snapshot,
and the Snapshot mapping itself (normalized directory key -> record).
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterable, List

# -----------------------------------------------------------------------------
# CLASSIFICATION
# -----------------------------------------------------------------------------

class FileType(IntEnum):
    """Coarse file classification. Values are the 1-byte wire codes."""
    PNG = 0
    JPEG = 1
    WEBP = 2
    SVG = 3
    GIF = 4
    OTHER = 5


# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass
class FileRecord:
    """
    Represents a file directly contained in a directory.

    Attributes:
        type: Classification derived from the extension.
        name: Base name of the file (no path component).
        size: Byte length at scan time.
    """
    type: FileType
    name: str
    size: int


@dataclass
class DirectoryRecord:
    """
    Bookkeeping for a single directory of the snapshot.

    The size field is dual-phase: right after the walk it holds the sum of
    the immediate files only; after aggregation it holds the recursive
    subtree size.

    Attributes:
        size: Own size or aggregated size (see above).
        files: Files directly contained, in walk insertion order.
        children: Normalized keys of the direct subdirectories.
    """
    size: int = 0
    files: List[FileRecord] = field(default_factory=list)
    children: List[str] = field(default_factory=list)

    def add_file(self, file: FileRecord) -> None:
        self.size += file.size
        self.files.append(file)

    def add_child(self, child: str) -> None:
        self.children.append(child)

    def remove_files(self, names: Iterable[str]) -> None:
        """
        Drop every file whose name is listed and reset size to own size.

        Any previously aggregated value is discarded; run the aggregator
        again to restore recursive sizes.
        """
        doomed = set(names)
        self.files = [f for f in self.files if f.name not in doomed]
        self.size = sum(f.size for f in self.files)

    def remove_children(self, children: Iterable[str]) -> None:
        doomed = set(children)
        self.children = [c for c in self.children if c not in doomed]


Snapshot = Dict[str, DirectoryRecord]
