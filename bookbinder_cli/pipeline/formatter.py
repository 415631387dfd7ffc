#!/usr/bin/env python3
"""
formatter.py — front-matter handling + render-hazard Unicode removal

Usable both as a library (`from .formatter import clean_chapter`)
and as a CLI:

    python -m bookbinder_cli.pipeline.formatter path/to/chapter.md
"""

from __future__ import annotations

import pathlib
import re
import sys
from typing import Any, Dict, Tuple

import yaml
from pydantic import ValidationError

from bookbinder_cli.models import ChapterMetadata

__all__ = [
    "split_front_matter",
    "strip_front_matter",
    "parse_front_matter",
    "strip_decorative",
    "clean_chapter",
]

FRONT_MATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.S)

# pictographs, emoji, dingbats, arrows, geometric shapes, math operators,
# regional indicators, VS-16 and ZWJ: none of these survive the LaTeX engines
DECORATIVE_RANGES: Tuple[Tuple[int, int], ...] = (
    (0x1F000, 0x1F9FF),
    (0x2600, 0x26FF),
    (0x2700, 0x27BF),
    (0x1F300, 0x1F5FF),
    (0x1F600, 0x1F64F),
    (0x1F680, 0x1F6FF),
    (0x1F900, 0x1F9FF),
    (0x2B1C, 0x2B1C),
    (0x2B1B, 0x2B1B),
    (0x25A0, 0x25FF),
    (0x2190, 0x21FF),
    (0x1F1E0, 0x1F1FF),
    (0x2200, 0x22FF),
    (0xFE0F, 0xFE0F),
    (0x200D, 0x200D),
)

DECORATIVE_RE = re.compile(
    "[" + "".join(f"{chr(lo)}-{chr(hi)}" for lo, hi in DECORATIVE_RANGES) + "]"
)


# ----------------------------------------------------------------------
def split_front_matter(text: str) -> Tuple[str | None, str]:
    """Return (raw front-matter block or None, body)."""
    m = FRONT_MATTER_RE.match(text)
    if not m:
        return None, text
    return m.group(1), text[m.end():]


def strip_front_matter(text: str) -> str:
    return split_front_matter(text)[1]


def parse_front_matter(text: str) -> Tuple[ChapterMetadata | None, list[str]]:
    """
    Parse and validate the front-matter block of *text*.

    Returns the metadata (None when absent or invalid) and a list of
    human-readable problems; an absent block is not a problem.
    """
    raw, _ = split_front_matter(text)
    if raw is None:
        return None, []
    try:
        data: Dict[str, Any] = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        return None, [f"unparsable front matter: {exc}"]
    if not isinstance(data, dict):
        return None, ["front matter is not a mapping"]
    try:
        return ChapterMetadata.model_validate(data), []
    except ValidationError as exc:
        problems = [
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        ]
        return None, problems


def strip_decorative(text: str) -> str:
    return DECORATIVE_RE.sub("", text)


def clean_chapter(text: str) -> str:
    """
    Return *text* without its leading front matter and decorative symbols.

    Rules applied (in order):

    1. Drop the first `---` delimited block if the file starts with one.
    2. Remove every character of `DECORATIVE_RANGES`.
    """
    return strip_decorative(strip_front_matter(text))


# ----------------------------------------------------------------------
def _cli() -> None:
    if len(sys.argv) < 2:
        sys.exit("usage: python -m bookbinder_cli.pipeline.formatter FILE.md")
    p = pathlib.Path(sys.argv[1])
    sys.stdout.write(clean_chapter(p.read_text("utf-8")))


if __name__ == "__main__":
    _cli()
