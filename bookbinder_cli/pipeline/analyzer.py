"""
Corpus analyzer – derives the run-wide `CorpusFacts` in one read-only pass.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence, Set

from bookbinder_cli.models import ChapterFile, CorpusFacts

from .headings import extract_pov

logger = logging.getLogger(__name__)


def read_chapter(chapter: ChapterFile) -> str:
    return chapter.path.read_text("utf-8")


def analyze_corpus(
    chapters: Sequence[ChapterFile],
    read: Callable[[ChapterFile], str] = read_chapter,
) -> CorpusFacts:
    episodes: Set[str] = set()
    povs: Set[str] = set()

    for ch in chapters:
        if ch.episode:
            episodes.add(ch.episode.text)
        pov = extract_pov(read(ch))
        if pov:
            povs.add(pov)

    logger.info("%d episodes, %d POVs", len(episodes), len(povs))
    logger.debug("episodes=%s povs=%s", sorted(episodes), sorted(povs))
    return CorpusFacts(
        has_multiple_episodes=len(episodes) > 1,
        has_multiple_povs=len(povs) > 1,
        episode_count=len(episodes),
        pov_count=len(povs),
    )
