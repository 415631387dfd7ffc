"""
Tagged parser for chapter headings and POV sources.

    # 3. Alice: The Start    → PovHeading(number=3, pov="Alice", title="The Start")
    # 3. The Start           → PlainHeading(number=3, text="The Start")

Anything else is not a numbered heading and `parse_numbered_heading` returns
None; callers pass such content through untouched.
"""

from __future__ import annotations

import re
from typing import Union

from pydantic import BaseModel, ConfigDict

NUMBERED_RE = re.compile(r"^# (\d+)\.[ \t]*(.+)$", re.M)
POV_PREFIX_RE = re.compile(r"^([^:]+):\s*(.+)$")
POV_ANNOTATION_RE = re.compile(r"^# [^:\n]+\n\s*_\[([^\]\n]+)\]_", re.M)
POV_SHAPE_RE = re.compile(r"[A-Z][a-z]+")
POV_MAX_LEN = 10


class _Heading(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    start: int
    end: int


class PovHeading(_Heading):
    pov: str
    title: str


class PlainHeading(_Heading):
    text: str


Heading = Union[PovHeading, PlainHeading]


def parse_numbered_heading(content: str) -> Heading | None:
    """Return the first `# <n>. <rest>` heading of *content*, tagged."""
    m = NUMBERED_RE.search(content)
    if not m:
        return None
    number, rest = int(m.group(1)), m.group(2)
    pov = POV_PREFIX_RE.match(rest)
    if pov:
        return PovHeading(number=number, start=m.start(), end=m.end(),
                          pov=pov.group(1), title=pov.group(2))
    return PlainHeading(number=number, start=m.start(), end=m.end(), text=rest)


def is_valid_pov(name: str) -> bool:
    return len(name) <= POV_MAX_LEN and POV_SHAPE_RE.fullmatch(name) is not None


def extract_pov(content: str) -> str | None:
    """
    POV candidate for *content*, or None.

    The numbered `<POV>: <title>` heading wins over a `_[POV]_` annotation
    line; whichever source matches first is final even if its value fails
    the shape check.
    """
    heading = parse_numbered_heading(content)
    if isinstance(heading, PovHeading):
        candidate = heading.pov.strip()
    else:
        m = POV_ANNOTATION_RE.search(content)
        if not m:
            return None
        candidate = m.group(1).strip()
    return candidate if is_valid_pov(candidate) else None
