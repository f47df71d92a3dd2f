from __future__ import annotations

"""
File Type Classifier.

Maps a file path to its coarse FileType using only the lower-cased final
extension.
"""

import os
from typing import Dict

from dirmap.domain.models import FileType

_EXTENSION_MAP: Dict[str, FileType] = {
    ".png": FileType.PNG,
    ".jpg": FileType.JPEG,
    ".jpeg": FileType.JPEG,
    ".webp": FileType.WEBP,
    ".svg": FileType.SVG,
    ".gif": FileType.GIF,
}


def classify_file(path: str) -> FileType:
    """
    Classify a file by its extension.

    Only the last extension counts ('archive.tar.gz' is 'gz'). Names
    without an extension, including dotfiles like '.png', are OTHER.

    Args:
        path: File name or full path.

    Returns:
        FileType: The matching classification, OTHER when unrecognized.
    """
    _, ext = os.path.splitext(path)
    return _EXTENSION_MAP.get(ext.lower(), FileType.OTHER)
