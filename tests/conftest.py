# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import pytest

from bookbinder_cli.errors import CompilerFailure
from bookbinder_cli.models import BookConfig


def write_tree(root: Path, files: Dict[str, str]) -> Path:
    for rel, text in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, "utf-8")
    return root


class FakeCompiler:
    """Stands in for pandoc: records the call and writes a small PDF-ish file."""

    def __init__(self, engine: str = "xelatex", fail: bool = False):
        self.engine = engine
        self.fail = fail
        self.calls: List[dict] = []

    def detect_engine(self) -> str:
        return self.engine

    def compile(self, source, dest, template, variables, engine):
        self.calls.append(dict(
            source=source,
            source_exists=Path(source).exists(),
            text=Path(source).read_text("utf-8"),
            dest=dest,
            template=template,
            variables=dict(variables),
            engine=engine,
        ))
        if self.fail:
            raise CompilerFailure("pandoc exited with status 43", 43)
        Path(dest).write_bytes(b"%PDF-1.5\n% fake\n")


@pytest.fixture
def fake_compiler() -> FakeCompiler:
    return FakeCompiler()


@pytest.fixture
def book_config(tmp_path) -> BookConfig:
    return BookConfig(templates_dir=tmp_path / "templates", year="2025")


@pytest.fixture
def content(tmp_path) -> Path:
    """Two episodes, Alice & Bob POVs, one chapter-zero prologue."""
    return write_tree(tmp_path / "content", {
        "chapters/arc1/ep01-the-start/ep01-ch00-prologue.md": "# Prologue\n\nSkipped.\n",
        "chapters/arc1/ep01-the-start/ep01-ch001-alice.md": (
            "---\npov: Alice\ntitle: \"Arrival\"\n---\n\n# 1. Alice: Arrival\n\nShe came. 🌸\n"
        ),
        "chapters/arc1/ep01-the-start/ep01-ch002-bob.md": "# 2. Bob: Departure\n\nHe left.\n",
        "chapters/arc1/ep02-the-long-night/ep02-ch001-alice.md": "# 1. Alice: Night\n\nDark.\n",
    })
