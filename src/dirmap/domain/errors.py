from __future__ import annotations

"""
Snapshot Error Taxonomy.

Every failure raised by the mapping core derives from DirmapError so that
interface layers can trap the whole family with a single handler while
tests and integrators can still discriminate the exact failure kind.
"""

# -----------------------------------------------------------------------------
# BASE
# -----------------------------------------------------------------------------

class DirmapError(Exception):
    """Root of all errors raised by the snapshot core."""


# -----------------------------------------------------------------------------
# TREE CONSTRUCTION
# -----------------------------------------------------------------------------

class BuildError(DirmapError):
    """Failure while walking the filesystem and populating the snapshot."""


class MetadataError(BuildError):
    """
    A readable entry whose size or type could not be retrieved.

    Attributes:
        path: Filesystem path of the offending entry.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read metadata for '{path}': {reason}")
        self.path = path


class MissingParentError(BuildError):
    """
    A file or directory whose parent key is absent from the snapshot.

    Attributes:
        parent: Normalized key that was expected to exist.
    """

    def __init__(self, parent: str) -> None:
        super().__init__(f"Parent directory not registered: {parent}")
        self.parent = parent


# -----------------------------------------------------------------------------
# SIZE AGGREGATION
# -----------------------------------------------------------------------------

class AggregationError(DirmapError):
    """Failure while computing recursive directory sizes."""


class MissingDirectoryError(AggregationError):
    """
    A referenced directory (start path or child) is absent.

    Attributes:
        path: Normalized key that could not be resolved.
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"Directory not found in snapshot: {path}")
        self.path = path


class CycleError(AggregationError):
    """
    A child reference loops back to a directory still being aggregated.

    Attributes:
        path: Key that was re-entered before its size was computed.
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"Cycle detected in directory references at: {path}")
        self.path = path


# -----------------------------------------------------------------------------
# CODEC
# -----------------------------------------------------------------------------

class CodecError(DirmapError):
    """Failure in the binary layout or the compression layer."""


class EncodeError(CodecError):
    """The snapshot could not be serialized or compressed."""


class DecodeError(CodecError):
    """The input bytes are corrupt, truncated or malformed."""
