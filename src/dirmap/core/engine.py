from __future__ import annotations

"""
Core orchestration.

Coordinates the mapping workflow:
1. Walks the start path and builds the snapshot (own sizes).
2. Aggregates recursive sizes in place.
3. Encodes and compresses the snapshot.
4. Persists the artifact (run_mapping only), never leaving a partial file.

The two core entry points are map_tree (path -> bytes) and unmap_tree
(bytes -> snapshot); run_mapping wraps them for the CLI.
"""

import logging
import os
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from dirmap.core.services.aggregator import aggregate
from dirmap.core.services.codec import DEFAULT_LEVEL, decode_snapshot, encode_snapshot
from dirmap.core.services.tree_builder import TreeBuilder
from dirmap.core.validator import validate_config
from dirmap.domain.errors import DirmapError
from dirmap.domain.models import Snapshot
from dirmap.domain.results import MappingResult, create_error_result, create_success_result
from dirmap.infra.fs import to_snapshot_key, write_bytes_atomic

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# CORE ENTRY POINTS
# -----------------------------------------------------------------------------

def scan_tree(start_path: str, max_workers: Optional[int] = None) -> Tuple[Snapshot, List[str]]:
    """
    Build and aggregate the snapshot of start_path.

    Args:
        start_path: Root directory of the scan.
        max_workers: Thread count for the walk (None: executor default).

    Returns:
        Tuple[Snapshot, List[str]]: The aggregated snapshot and the keys of
                                    entries skipped during enumeration.

    Raises:
        DirmapError: On any build or aggregation failure.
    """
    builder = TreeBuilder(max_workers=max_workers)
    snapshot = builder.build(start_path)
    aggregate(snapshot, to_snapshot_key(start_path))
    return snapshot, builder.skipped


def map_tree(
        start_path: str,
        *,
        level: int = DEFAULT_LEVEL,
        max_workers: Optional[int] = None,
) -> bytes:
    """
    Scan start_path and return its compressed snapshot.

    Raises:
        DirmapError: The first failure of any stage.
    """
    snapshot, _ = scan_tree(start_path, max_workers=max_workers)
    return encode_snapshot(snapshot, level=level)


def unmap_tree(data: bytes) -> Snapshot:
    """
    Reconstruct the aggregated snapshot from compressed bytes.

    Raises:
        DecodeError: If the payload is corrupt or malformed.
    """
    return decode_snapshot(data)


def find_roots(snapshot: Snapshot) -> List[str]:
    """Return the keys no other directory lists as a child, sorted."""
    referenced = {child for directory in snapshot.values() for child in directory.children}
    return sorted(key for key in snapshot if key not in referenced)


def summarize_snapshot(snapshot: Snapshot, start_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Compute headline statistics of an aggregated snapshot.

    Args:
        snapshot: Aggregated snapshot.
        start_path: Root key for the total size. When omitted (e.g. for a
                    decoded file) the roots are discovered from the child
                    references and their sizes summed.

    Returns:
        Dict[str, Any]: roots, directories, files, total_size and a
                        per-type file count.
    """
    by_type: Counter[str] = Counter()
    file_count = 0
    for directory in snapshot.values():
        file_count += len(directory.files)
        for f in directory.files:
            by_type[f.type.name] += 1

    roots = [start_path] if start_path is not None else find_roots(snapshot)
    total_size = sum(snapshot[r].size for r in roots if r in snapshot)

    return {
        "roots": roots,
        "directories": len(snapshot),
        "files": file_count,
        "total_size": total_size,
        "by_type": dict(sorted(by_type.items())),
    }


# -----------------------------------------------------------------------------
# ORCHESTRATION
# -----------------------------------------------------------------------------

def run_mapping(config: Optional[Dict[str, Any]]) -> MappingResult:
    """
    Execute a complete mapping run and persist the artifact.

    Args:
        config: Raw or partial configuration dictionary.

    Returns:
        MappingResult: Status, artifact location and statistics.
    """
    logger.info("Mapping run started.")

    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    start_path = cfg["start_path"]
    if not start_path or not os.path.isdir(start_path):
        msg = f"Invalid start directory: {start_path or '(empty)'}"
        logger.error(msg)
        return create_error_result(msg, cfg)

    skipped: List[str] = []
    try:
        snapshot, skipped = scan_tree(start_path, max_workers=cfg["max_workers"] or None)
        data = encode_snapshot(snapshot, level=cfg["compression_level"])
        write_bytes_atomic(cfg["output_path"], data)
    except DirmapError as e:
        logger.error(f"Mapping failed: {e}")
        return create_error_result(str(e), cfg, skipped)
    except OSError as e:
        msg = f"Failed to write snapshot to '{cfg['output_path']}': {e}"
        logger.error(msg)
        return create_error_result(msg, cfg, skipped)

    stats = summarize_snapshot(snapshot, to_snapshot_key(start_path))
    logger.info(
        f"Snapshot written to {cfg['output_path']} "
        f"({stats['directories']} directories, {stats['files']} files, {len(data)} bytes)"
    )
    if skipped:
        logger.warning(f"{len(skipped)} unreadable entries were skipped.")

    return create_success_result(cfg, len(data), stats, skipped)
