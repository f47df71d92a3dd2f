from __future__ import annotations

"""
Mapping Result Data Models.

Defines the result object and factory functions used to communicate the
outcome of a mapping run between the engine and the interface layer (CLI).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class MappingResult:
    """
    Unified result object of a complete mapping run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        start_path: Root directory that was scanned.
        output_path: Destination of the compressed snapshot.
        compression_level: zstandard level used for the payload.
        byte_count: Size of the written snapshot in bytes.
        directory_count: Number of directories recorded.
        file_count: Number of files recorded.
        total_size: Aggregated size of the start path.
        skipped: Paths that could not be enumerated during the walk.
        summary: Additional execution statistics.
    """
    ok: bool
    error: str

    start_path: str
    output_path: str
    compression_level: int

    byte_count: int = 0
    directory_count: int = 0
    file_count: int = 0
    total_size: int = 0

    skipped: List[str] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        cfg: Dict[str, Any],
        skipped: Optional[List[str]] = None,
) -> MappingResult:
    """
    Create a failed mapping result instance.

    Args:
        error: Detailed error description.
        cfg: The configuration used during the failed run.
        skipped: Entries skipped before the failure (if any).

    Returns:
        MappingResult: An immutable error result object.
    """
    return MappingResult(
        ok=False,
        error=error,
        start_path=cfg.get("start_path", ""),
        output_path=cfg.get("output_path", ""),
        compression_level=cfg.get("compression_level", 0),
        skipped=skipped or [],
    )


def create_success_result(
        cfg: Dict[str, Any],
        byte_count: int,
        stats: Dict[str, Any],
        skipped: Optional[List[str]] = None,
) -> MappingResult:
    """
    Create a successful mapping result instance.

    Args:
        cfg: Final configuration used during execution.
        byte_count: Size of the persisted snapshot.
        stats: Output of the snapshot summarizer.
        skipped: Entries skipped during enumeration.

    Returns:
        MappingResult: An immutable success result object.
    """
    return MappingResult(
        ok=True,
        error="",
        start_path=cfg.get("start_path", ""),
        output_path=cfg.get("output_path", ""),
        compression_level=cfg.get("compression_level", 0),
        byte_count=byte_count,
        directory_count=stats.get("directories", 0),
        file_count=stats.get("files", 0),
        total_size=stats.get("total_size", 0),
        skipped=skipped or [],
        summary={"by_type": dict(stats.get("by_type", {}))},
    )
