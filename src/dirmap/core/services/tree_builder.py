from __future__ import annotations

"""
Concurrent Directory Tree Builder.

Walks the filesystem below a start path and produces the Snapshot mapping
(normalized directory key -> DirectoryRecord) with every record's size set
to the sum of its immediate files.

The work is split in two fork-join phases over a pre-enumerated entry list:
Phase A registers every directory, Phase B attaches files and child links to
their parents. A single lock guards the mapping and a second one guards the
error slot. Once an error is recorded, pending work items stop before they
mutate anything.
"""

import logging
import os
import stat
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional, Sequence

from dirmap.core.classifier import classify_file
from dirmap.domain.errors import DirmapError, MetadataError, MissingParentError
from dirmap.domain.models import DirectoryRecord, FileRecord, Snapshot
from dirmap.infra.fs import lossy_text, to_snapshot_key

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class WalkEntry:
    """
    A filesystem entry found during enumeration.

    Attributes:
        path: Host path of the entry.
        is_dir: True for directories, False for file candidates.
        parent: Host path of the containing directory, None for the root.
    """
    path: str
    is_dir: bool
    parent: Optional[str] = None


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_tree(start_path: str, max_workers: Optional[int] = None) -> Snapshot:
    """
    Walk start_path and return its snapshot with own (non-recursive) sizes.

    Args:
        start_path: Root directory of the scan.
        max_workers: Thread count for both phases (None: executor default).

    Returns:
        Snapshot: Mapping of every reachable directory.

    Raises:
        MetadataError: If a file's metadata could not be read.
        MissingParentError: If an entry's parent was never registered.
    """
    return TreeBuilder(max_workers=max_workers).build(start_path)


def make_file_record(path: str) -> Optional[FileRecord]:
    """
    Build the FileRecord for a file candidate.

    Symbolic links and special files (sockets, FIFOs, devices) are not
    regular files and yield None.

    Args:
        path: Host path of the candidate.

    Returns:
        Optional[FileRecord]: The record, or None if the entry is not a file.

    Raises:
        MetadataError: If the entry cannot be stat'ed.
    """
    try:
        st = os.lstat(path)
    except OSError as e:
        raise MetadataError(path, e.strerror or str(e)) from e

    if not stat.S_ISREG(st.st_mode):
        return None

    name = lossy_text(os.path.basename(path))
    return FileRecord(type=classify_file(name), name=name, size=st.st_size)


class TreeBuilder:
    """
    Builds a Snapshot from the filesystem using a thread pool.

    Attributes:
        max_workers: Thread count handed to the executor.
        skipped: Keys of entries that could not be enumerated in the last build.
    """

    def __init__(self, max_workers: Optional[int] = None) -> None:
        self.max_workers = max_workers or None
        self.skipped: List[str] = []

        self._dirs: Snapshot = {}
        self._lock = threading.Lock()
        self._error: Optional[DirmapError] = None
        self._error_lock = threading.Lock()

    def build(self, start_path: str) -> Snapshot:
        """Enumerate and populate in one call."""
        logger.info(f"Scanning directory tree: {start_path}")
        entries = self.enumerate(start_path)
        return self.populate(entries)

    def enumerate(self, start_path: str) -> List[WalkEntry]:
        """
        List every directory and file candidate below start_path, root included.

        Directories that cannot be listed are skipped and reported in
        'skipped'. Symbolic links to directories are not followed.

        Args:
            start_path: Root directory of the scan.

        Returns:
            List[WalkEntry]: Entries in walk order.
        """
        self.skipped = []
        entries: List[WalkEntry] = []

        def _on_walk_error(err: OSError) -> None:
            path = str(err.filename) if err.filename is not None else start_path
            logger.warning(f"Skipping unreadable entry '{path}': {err.strerror or err}")
            self.skipped.append(to_snapshot_key(path))

        root_seen = False
        for root, dirs, files in os.walk(start_path, onerror=_on_walk_error):
            if not root_seen:
                entries.append(WalkEntry(path=root, is_dir=True, parent=None))
                root_seen = True

            for dir_name in dirs:
                dir_path = os.path.join(root, dir_name)
                if os.path.islink(dir_path):
                    continue
                entries.append(WalkEntry(path=dir_path, is_dir=True, parent=root))

            for file_name in files:
                entries.append(WalkEntry(path=os.path.join(root, file_name), is_dir=False, parent=root))

        # An unlistable start directory still gets its own (empty) record
        if not root_seen and os.path.isdir(start_path):
            entries.insert(0, WalkEntry(path=start_path, is_dir=True, parent=None))

        logger.debug(f"Enumerated {len(entries)} entries ({len(self.skipped)} skipped)")
        return entries

    def populate(self, entries: Sequence[WalkEntry]) -> Snapshot:
        """
        Run Phase A and Phase B over a pre-enumerated entry list.

        Args:
            entries: Output of enumerate() or an equivalent hand-built list.

        Returns:
            Snapshot: Directories with their immediate files and child keys.

        Raises:
            DirmapError: The first invariant violation or metadata failure.
        """
        self._dirs = {}
        self._error = None

        dir_entries = [e for e in entries if e.is_dir]

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="TreeBuilder") as executor:
            # Phase A: all directories exist before any parent lookup
            list(executor.map(self._register_directory, dir_entries))

            # Phase B: files and parent linkage
            futures = [executor.submit(self._link_entry, entry) for entry in entries]
            for future in as_completed(futures):
                future.result()

        if self._error is not None:
            logger.debug(f"Tree build aborted: {self._error}")
            raise self._error

        logger.debug(f"Registered {len(self._dirs)} directories")
        return self._dirs

    # -------------------------------------------------------------------------
    # WORK ITEMS
    # -------------------------------------------------------------------------

    def _register_directory(self, entry: WalkEntry) -> None:
        key = to_snapshot_key(entry.path)
        with self._lock:
            if key not in self._dirs:
                self._dirs[key] = DirectoryRecord()

    def _link_entry(self, entry: WalkEntry) -> None:
        if self._has_error():
            return

        # The root links to nothing above the scanned tree
        if entry.parent is None:
            return

        parent_key = to_snapshot_key(entry.parent)

        if entry.is_dir:
            child_key = to_snapshot_key(entry.path)
            with self._lock:
                parent_dir = self._dirs.get(parent_key)
                if parent_dir is not None:
                    parent_dir.add_child(child_key)
            if parent_dir is None:
                self._record_error(MissingParentError(parent_key))
            return

        try:
            record = make_file_record(entry.path)
        except MetadataError as e:
            self._record_error(e)
            return

        if record is None:
            return

        with self._lock:
            parent_dir = self._dirs.get(parent_key)
            if parent_dir is not None:
                parent_dir.add_file(record)
        if parent_dir is None:
            self._record_error(MissingParentError(parent_key))

    # -------------------------------------------------------------------------
    # ERROR SLOT
    # -------------------------------------------------------------------------

    def _has_error(self) -> bool:
        with self._error_lock:
            return self._error is not None

    def _record_error(self, error: DirmapError) -> None:
        with self._error_lock:
            if self._error is None:
                self._error = error
