"""
File collector – every `*.md` below a content root, in lexicographic order.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from bookbinder_cli.errors import NotFoundError

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"


def _walk(directory: Path) -> List[Path]:
    try:
        items = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        logger.warning("Skipping unreadable directory %s (%s)", directory, exc)
        return []

    files: List[Path] = []
    for item in items:
        if item.is_symlink():
            continue
        if item.is_dir():
            files.extend(_walk(item))
        elif item.is_file() and item.name.endswith(MARKDOWN_SUFFIX):
            files.append(item)
    return files


def collect_markdown_files(root: Path | str) -> List[Path]:
    """
    Return every markdown file below *root*, sorted by its full path string.

    Symbolic links are neither followed nor returned.
    """
    root = Path(root)
    if not root.is_dir():
        raise NotFoundError(f"Content folder not found: {root}")
    return sorted(_walk(root), key=str)
