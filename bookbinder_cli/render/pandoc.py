"""
pandoc wrapper – the only place that shells out.

    compiler = PandocCompiler()
    engine = compiler.detect_engine()
    compiler.compile(source, dest, template, variables, engine)
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Protocol, Sequence

from bookbinder_cli.config import TEMPLATES_ENV
from bookbinder_cli.errors import CompilerFailure, NoEngineError

logger = logging.getLogger(__name__)

PDF_ENGINES = ("pdflatex", "xelatex", "lualatex")


class Compiler(Protocol):
    def detect_engine(self) -> str: ...

    def compile(
        self,
        source: Path,
        dest: Path,
        template: Path,
        variables: Dict[str, str],
        engine: str,
    ) -> None: ...


def detect_pdf_engine(candidates: Sequence[str] = PDF_ENGINES) -> str:
    for engine in candidates:
        if shutil.which(engine):
            return engine
    raise NoEngineError(candidates)


def build_command(
    source: Path,
    dest: Path,
    template: Path,
    variables: Dict[str, str],
    engine: str,
    binary: str = "pandoc",
) -> List[str]:
    return [
        binary,
        str(source),
        "-o",
        str(dest),
        f"--template={template}",
        f"--pdf-engine={engine}",
        "--toc",
        "--toc-depth=1",
        *[f"--variable={k}:{v}" for k, v in variables.items()],
    ]


class PandocCompiler:
    def __init__(
        self,
        binary: str = "pandoc",
        engines: Sequence[str] = PDF_ENGINES,
        timeout: float | None = None,
    ):
        self.binary = binary
        self.engines = tuple(engines)
        self.timeout = timeout

    def detect_engine(self) -> str:
        return detect_pdf_engine(self.engines)

    def compile(
        self,
        source: Path,
        dest: Path,
        template: Path,
        variables: Dict[str, str],
        engine: str,
    ) -> None:
        template = Path(template).expanduser().resolve()
        if not template.is_file():
            raise CompilerFailure(
                f"template not found: {template} "
                f"(set {TEMPLATES_ENV} or templates_dir in --config)"
            )
        cmd = build_command(
            Path(source).resolve(), Path(dest).resolve(), template, variables, engine, self.binary
        )
        cwd = variables.get("templates-dir") or None
        if cwd:
            cwd = str(Path(cwd).expanduser().resolve())
            if not Path(cwd).is_dir():
                cwd = None
        logger.info("Executing pandoc...")
        logger.debug("%s", " ".join(cmd))
        try:
            subprocess.run(cmd, check=True, cwd=cwd, timeout=self.timeout)
        except subprocess.CalledProcessError as exc:
            raise CompilerFailure(
                f"pandoc exited with status {exc.returncode}", exc.returncode
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise CompilerFailure(f"pandoc timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise CompilerFailure(f"could not run {self.binary}: {exc}") from exc
