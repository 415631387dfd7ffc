"""
Content transformer – pure per-chapter rewrite.

    transform_chapter(content, rel_path, facts, state) -> str

The output depends only on the arguments; identical inputs give identical
output and nothing touches the filesystem.
"""

from __future__ import annotations

from bookbinder_cli.models import ChapterState, CorpusFacts

from .episodes import episode_label, parse_episode_key
from .formatter import clean_chapter
from .headings import Heading, PovHeading, parse_numbered_heading


def render_heading(heading: Heading, facts: CorpusFacts, counter: int) -> str:
    """Output line for a parsed numbered heading."""
    level = "##" if facts.has_multiple_episodes else "#"
    prefix = level if facts.has_multiple_episodes else f"{level} {counter}."

    if isinstance(heading, PovHeading):
        if facts.has_multiple_povs:
            return f"{prefix} {heading.title} _({heading.pov})_"
        return f"{prefix} {heading.title}"
    return f"{prefix} {heading.text}"


def rewrite_heading(content: str, facts: CorpusFacts, counter: int) -> str:
    heading = parse_numbered_heading(content)
    if heading is None:
        return content
    line = render_heading(heading, facts, counter)
    return content[: heading.start] + line + content[heading.end:]


def transform_chapter(
    content: str,
    rel_path: str,
    facts: CorpusFacts,
    state: ChapterState,
) -> str:
    content = clean_chapter(content)
    episode = parse_episode_key(rel_path)
    if episode is None:
        return content

    if facts.has_multiple_episodes and state.is_first_of_episode:
        content = f"# {episode_label(episode.slug)}\n\n{content}"

    return rewrite_heading(content, facts, state.chapter_counter)
