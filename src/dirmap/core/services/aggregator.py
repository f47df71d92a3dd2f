from __future__ import annotations

"""
Recursive Size Aggregator.

Converts each directory's own size into its full subtree size without
function-call recursion. An explicit LIFO stack of (operation, key) items
drives the traversal so arbitrarily deep trees never hit the interpreter's
recursion limit.
"""

import logging
from enum import Enum
from typing import Dict, List, Set, Tuple

from dirmap.domain.errors import CycleError, MissingDirectoryError
from dirmap.domain.models import Snapshot

logger = logging.getLogger(__name__)


class StackOp(Enum):
    """Work stack item tags."""
    PROCESS = "process"
    CALCULATE = "calculate"


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def calc_sizes(snapshot: Snapshot, start_path: str) -> Dict[str, int]:
    """
    Compute the recursive size of every directory reachable from start_path.

    PROCESS(key) pushes CALCULATE(key) and then PROCESS(child) for each
    child, so every child is calculated before its parent is popped again.
    CALCULATE(key) adds the recorded totals of the children to the own size.

    Args:
        snapshot: Mapping with own sizes, as produced by the tree builder.
        start_path: Normalized key of the root directory.

    Returns:
        Dict[str, int]: Aggregated size per reachable directory key.

    Raises:
        MissingDirectoryError: If start_path or a child key is absent.
        CycleError: If a directory is re-entered before its size is known.
    """
    sizes: Dict[str, int] = {}
    pending: Set[str] = set()
    stack: List[Tuple[StackOp, str]] = [(StackOp.PROCESS, start_path)]

    while stack:
        op, path = stack.pop()

        if op is StackOp.PROCESS:
            if path in sizes:
                continue
            if path in pending:
                raise CycleError(path)

            directory = snapshot.get(path)
            if directory is None:
                raise MissingDirectoryError(path)

            pending.add(path)
            stack.append((StackOp.CALCULATE, path))
            for child in directory.children:
                stack.append((StackOp.PROCESS, child))

        else:
            directory = snapshot.get(path)
            if directory is None:
                raise MissingDirectoryError(path)

            total = directory.size
            for child in directory.children:
                child_size = sizes.get(child)
                if child_size is None:
                    raise MissingDirectoryError(child)
                total += child_size

            sizes[path] = total
            pending.discard(path)

    logger.debug(f"Aggregated sizes for {len(sizes)} directories")
    return sizes


def apply_sizes(snapshot: Snapshot, sizes: Dict[str, int]) -> None:
    """
    Overwrite the size field of each listed directory.

    Raises:
        MissingDirectoryError: If a key of 'sizes' is not in the snapshot.
    """
    for path, size in sizes.items():
        directory = snapshot.get(path)
        if directory is None:
            raise MissingDirectoryError(path)
        directory.size = size


def aggregate(snapshot: Snapshot, start_path: str) -> Dict[str, int]:
    """Compute recursive sizes and write them back into the snapshot."""
    sizes = calc_sizes(snapshot, start_path)
    apply_sizes(snapshot, sizes)
    return sizes
