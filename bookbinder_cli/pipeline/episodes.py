"""
Episode keys and the episode / chapter-zero filters.

Paths are matched in their posix form relative to the chapters directory, so
`arc1/ep01-the-start/ep01-ch001-alice.md` yields the key `ep01-the-start`.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List, Sequence

from bookbinder_cli.errors import EmptyCorpusError, NoMatchError
from bookbinder_cli.models import ChapterFile, EpisodeKey

logger = logging.getLogger(__name__)

EPISODE_RE = re.compile(r"ep(\d+)-([^/]+)")
CHAPTER_ZERO_MARKER = "-ch00-"


def parse_episode_key(rel_path: str) -> EpisodeKey | None:
    m = EPISODE_RE.search(rel_path)
    if not m:
        return None
    return EpisodeKey(text=m.group(0), number=int(m.group(1)), slug=m.group(2))


def episode_label(slug: str) -> str:
    """`the-long-night` → `The Long Night` (only first letters are touched)."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), slug.replace("-", " "))


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def to_chapter_files(paths: Iterable[Path], root: Path | str) -> List[ChapterFile]:
    root = Path(root)
    out = []
    for p in paths:
        rel = _relative(p, root)
        out.append(ChapterFile(path=p, rel=rel, episode=parse_episode_key(rel)))
    return out


def requested_segments(episodes: str) -> List[str]:
    """`"1, 2,10"` → `["ep01", "ep02", "ep10"]`."""
    return [f"ep{e.strip().zfill(2)}" for e in episodes.split(",")]


def filter_episodes(files: Sequence[ChapterFile], episodes: str | None) -> List[ChapterFile]:
    if not episodes:
        return list(files)
    wanted = requested_segments(episodes)
    kept = [f for f in files if any(seg in f.rel for seg in wanted)]
    if not kept:
        raise NoMatchError(episodes)
    logger.info("Filtered %d files for episodes: %s", len(kept), episodes)
    return kept


def drop_chapter_zero(files: Sequence[ChapterFile]) -> List[ChapterFile]:
    return [f for f in files if CHAPTER_ZERO_MARKER not in f.rel]


def select_chapters(files: Sequence[ChapterFile], episodes: str | None = None) -> List[ChapterFile]:
    selected = drop_chapter_zero(filter_episodes(files, episodes))
    logger.info("Processing %d files", len(selected))
    if not selected:
        raise EmptyCorpusError()
    return selected
