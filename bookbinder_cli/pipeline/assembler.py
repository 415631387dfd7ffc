#!/usr/bin/env python3
"""
assembler.py – stitch the selected chapters into one manuscript and hand it
to the typesetting compiler.

Two phases:
  1. `analyze_corpus` → immutable `CorpusFacts` for the whole run;
  2. a fold over the chapters threading `ChapterState`
     (episode key, chapter counter, first-of-episode) into the pure
     `transform_chapter`.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from contextlib import contextmanager
from itertools import accumulate
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Sequence

from bookbinder_cli.errors import CompilerFailure, NotFoundError
from bookbinder_cli.models import (
    BookConfig,
    BookOptions,
    ChapterFile,
    ChapterStat,
    ChapterState,
    CorpusFacts,
    EpisodeKey,
    Manuscript,
)
from bookbinder_cli.render.pandoc import Compiler, PandocCompiler

from .analyzer import analyze_corpus, read_chapter
from .collector import collect_markdown_files
from .episodes import select_chapters, to_chapter_files
from .formatter import parse_front_matter
from .transformer import transform_chapter

logger = logging.getLogger(__name__)

PAGE_BREAK = "\n\n\\newpage\n\n"
CHAPTERS_DIR = "chapters"
TRANSIENT_PREFIX = "temp-"
TRANSIENT_GLOB = f"{TRANSIENT_PREFIX}*.md"

WORD_RE = re.compile(r"\w+")


# ── chapter state fold ---------------------------------------------------
def advance(state: ChapterState, episode: EpisodeKey | None) -> ChapterState:
    """Counter restarts at 1 on every new episode key, otherwise +1."""
    if episode is not None and episode.text != state.episode_key:
        return ChapterState(episode_key=episode.text, chapter_counter=1, is_first_of_episode=True)
    return ChapterState(
        episode_key=state.episode_key,
        chapter_counter=state.chapter_counter + 1,
        is_first_of_episode=False,
    )


def chapter_states(chapters: Sequence[ChapterFile]) -> List[ChapterState]:
    states = accumulate(chapters, lambda s, ch: advance(s, ch.episode), initial=ChapterState())
    return list(states)[1:]


# ── manuscript -----------------------------------------------------------
def assemble_manuscript(
    chapters: Sequence[ChapterFile],
    facts: CorpusFacts,
    read: Callable[[ChapterFile], str] = read_chapter,
) -> Manuscript:
    parts: List[str] = []
    stats: List[ChapterStat] = []

    for ch, state in zip(chapters, chapter_states(chapters)):
        raw = read(ch)
        _, problems = parse_front_matter(raw)
        for problem in problems:
            logger.warning("%s: invalid metadata – %s", ch.rel, problem)

        body = transform_chapter(raw, ch.rel, facts, state)
        words = len(WORD_RE.findall(body))
        stats.append(ChapterStat(
            path=ch.path,
            episode=ch.episode.text if ch.episode else None,
            counter=state.chapter_counter,
            words=words,
        ))
        parts.append(body)
        logger.info("✓ %-40s %s words", ch.rel, f"{words:,}")

    manuscript = Manuscript(text=PAGE_BREAK.join(parts), chapters=stats)
    logger.info("Manuscript: %d chapters, %s words", len(stats), f"{manuscript.total_words:,}")
    return manuscript


def transient_name(timeline: str, now: dt.datetime | None = None) -> str:
    now = now or dt.datetime.now(dt.timezone.utc)
    safe = re.sub(r"[^\w.-]+", "_", timeline) or "book"
    return f"{TRANSIENT_PREFIX}{safe}-{now.strftime('%Y%m%d_%H%M%S_%f')}.md"


@contextmanager
def transient_manuscript(directory: Path, timeline: str, text: str) -> Iterator[Path]:
    """Write *text* to a fresh file in *directory*; the file is removed on exit."""
    path = (directory / transient_name(timeline)).resolve()
    fh = path.open("x", encoding="utf-8")      # never reuse another run's file
    try:
        with fh:
            fh.write(text)
        yield path
    finally:
        path.unlink(missing_ok=True)


# ── style variables ------------------------------------------------------
def style_variables(options: BookOptions, config: BookConfig) -> Dict[str, str]:
    colors = config.palette_for(options.timeline)
    return {
        "geometry": options.format.value,
        "timeline": options.timeline,
        "title": config.title,
        "subtitle": options.timeline[:1].upper() + options.timeline[1:],
        "author": config.author,
        "authorFull": config.author_full,
        "publisher": config.publisher,
        "email": config.email,
        "year": config.year,
        "timeline-primary": colors.primary,
        "timeline-secondary": colors.secondary,
        "timeline-accent": colors.accent,
        "templates-dir": str(config.templates_dir),
    }


# ── entry point ----------------------------------------------------------
def load_chapters(content_path: Path, episodes: str | None = None) -> List[ChapterFile]:
    if not content_path.exists():
        raise NotFoundError(f"Content folder not found: {content_path}")
    chapters_dir = content_path / CHAPTERS_DIR
    if not chapters_dir.is_dir():
        raise NotFoundError(f"Chapters folder not found: {chapters_dir}")

    files = to_chapter_files(collect_markdown_files(chapters_dir), chapters_dir)
    return select_chapters(files, episodes)


def generate_book(
    options: BookOptions,
    config: BookConfig | None = None,
    compiler: Compiler | None = None,
) -> Path:
    """
    Build the manuscript for *options* and render it to `options.output_path`.

    Raises
    ------
    NotFoundError, NoMatchError, EmptyCorpusError, NoEngineError, CompilerFailure
    """
    config = config or BookConfig()
    compiler = compiler or PandocCompiler()
    logger.info("Generating book for timeline: %s", options.timeline.upper())

    chapters = load_chapters(options.content_path, options.episodes)
    texts = {ch.path: read_chapter(ch) for ch in chapters}
    read = lambda ch: texts[ch.path]

    facts = analyze_corpus(chapters, read)
    manuscript = assemble_manuscript(chapters, facts, read)

    dest = options.output_path.resolve()
    dest.parent.mkdir(parents=True, exist_ok=True)

    with transient_manuscript(dest.parent, options.timeline, manuscript.text) as source:
        engine = compiler.detect_engine()
        logger.info("Using PDF engine: %s", engine)
        compiler.compile(source, dest, config.template_path, style_variables(options, config), engine)

    if not dest.is_file():
        raise CompilerFailure(f"compiler reported success but {dest} was not produced")
    logger.info("Book generated: %s", dest)
    logger.info("Size: %d KB", round(dest.stat().st_size / 1024))
    return dest
