# bookbinder_cli/models.py
from __future__ import annotations

import datetime as dt
from enum import Enum
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PageFormat(str, Enum):
    a4 = "a4"
    a5 = "a5"


class EpisodeKey(BaseModel):
    """`ep01-the-start` → number=1, slug="the-start"; identity is `text`."""

    model_config = ConfigDict(frozen=True)

    text: str
    number: int
    slug: str


class ChapterFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: Path
    rel: str                       # posix path relative to the chapters dir
    episode: EpisodeKey | None = None


class CorpusFacts(BaseModel):
    model_config = ConfigDict(frozen=True)

    has_multiple_episodes: bool
    has_multiple_povs: bool
    episode_count: int = 0
    pov_count: int = 0


class ChapterState(BaseModel):
    model_config = ConfigDict(frozen=True)

    episode_key: str = ""
    chapter_counter: int = 0
    is_first_of_episode: bool = False


class ChapterStat(BaseModel):
    path: Path
    episode: str | None
    counter: int
    words: int


class Manuscript(BaseModel):
    text: str
    chapters: List[ChapterStat] = []

    @property
    def total_words(self) -> int:
        return sum(c.words for c in self.chapters)


class ChapterMetadata(BaseModel):
    """Front-matter block of a chapter file."""

    pov: str
    title: str
    date: str | dt.date
    timeline: str
    arc: str
    episode: int = Field(..., ge=0)
    part: int = Field(..., ge=0)
    chapter: int = Field(..., ge=0)
    summary: str
    location: str


class Palette(BaseModel):
    primary: str = Field(..., pattern=r"^[0-9A-Fa-f]{6}$")
    secondary: str = Field(..., pattern=r"^[0-9A-Fa-f]{6}$")
    accent: str = Field(..., pattern=r"^[0-9A-Fa-f]{6}$")


DEFAULT_PALETTES: Dict[str, Palette] = {
    "anima": Palette(primary="4ECDC4", secondary="95E1D3", accent="F3B6D3"),
    "eros": Palette(primary="D2001F", secondary="FF6B6B", accent="FFD93D"),
    "bloom": Palette(primary="FF69B4", secondary="FFA07A", accent="FFD700"),
}

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


class BookConfig(BaseModel):
    title: str = "Echoes"
    author: str = "Zweer"
    author_full: str = "Niccolò Olivieri Achille"
    publisher: str = "Echoes"
    email: str = ""
    year: str = Field(default_factory=lambda: str(dt.date.today().year))
    palettes: Dict[str, Palette] = Field(default_factory=lambda: dict(DEFAULT_PALETTES))
    default_palette: str = "bloom"
    template: str = "victoria-regia"
    templates_dir: Path = DEFAULT_TEMPLATES_DIR

    @field_validator("templates_dir")
    @classmethod
    def _absolute_templates_dir(cls, v: Path) -> Path:
        # pandoc runs inside this directory, relative paths would resolve twice
        return Path(v).expanduser().resolve()

    @model_validator(mode="after")
    def _known_default(self) -> "BookConfig":
        if self.default_palette not in self.palettes:
            raise ValueError(f"default_palette {self.default_palette!r} is not in palettes")
        return self

    def palette_for(self, timeline: str) -> Palette:
        return self.palettes.get(timeline) or self.palettes[self.default_palette]

    @property
    def template_path(self) -> Path:
        return self.templates_dir / self.template / "template.tex"


class BookOptions(BaseModel):
    content_path: Path
    output_path: Path
    timeline: str
    episodes: str | None = None
    format: PageFormat = PageFormat.a4
