# bookbinder_cli/errors.py
from __future__ import annotations

from typing import Sequence


class BookError(Exception):
    """Base class for every failure that terminates a book run."""


class NotFoundError(BookError):
    pass


class NoMatchError(BookError):
    def __init__(self, episodes: str):
        self.episodes = episodes
        super().__init__(f"No files found for episodes: {episodes}")


class EmptyCorpusError(BookError):
    def __init__(self) -> None:
        super().__init__("No files to process")


class NoEngineError(BookError):
    def __init__(self, candidates: Sequence[str]):
        self.candidates = tuple(candidates)
        super().__init__(f"No PDF engine found. Install one of: {', '.join(self.candidates)}")


class CompilerFailure(BookError):
    def __init__(self, message: str, returncode: int | None = None):
        self.returncode = returncode
        super().__init__(message)


class ConfigError(BookError):
    pass
