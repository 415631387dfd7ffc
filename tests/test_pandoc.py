# tests/test_pandoc.py
import subprocess
from pathlib import Path

import pytest

from bookbinder_cli.errors import CompilerFailure, NoEngineError
from bookbinder_cli.models import BookConfig
from bookbinder_cli.render import pandoc
from bookbinder_cli.render.pandoc import PandocCompiler, build_command, detect_pdf_engine


def test_engine_priority(monkeypatch):
    found = {"xelatex", "lualatex"}
    monkeypatch.setattr(pandoc.shutil, "which", lambda name: f"/usr/bin/{name}" if name in found else None)
    assert detect_pdf_engine() == "xelatex"


def test_no_engine(monkeypatch):
    monkeypatch.setattr(pandoc.shutil, "which", lambda name: None)
    with pytest.raises(NoEngineError) as exc:
        detect_pdf_engine()
    assert exc.value.candidates == ("pdflatex", "xelatex", "lualatex")


def test_build_command():
    cmd = build_command(Path("in.md"), Path("out.pdf"), Path("t/template.tex"),
                        {"geometry": "a4", "title": "Echoes Two"}, "xelatex")
    assert cmd == [
        "pandoc", "in.md", "-o", "out.pdf",
        "--template=t/template.tex", "--pdf-engine=xelatex",
        "--toc", "--toc-depth=1",
        "--variable=geometry:a4", "--variable=title:Echoes Two",
    ]


@pytest.fixture
def template(tmp_path):
    tpl = tmp_path / "victoria-regia" / "template.tex"
    tpl.parent.mkdir()
    tpl.write_text("$body$", "utf-8")
    return tpl


def test_compile_runs_in_templates_dir(monkeypatch, tmp_path, template):
    seen = {}

    def fake_run(cmd, check, cwd, timeout):
        seen.update(cmd=cmd, check=check, cwd=cwd, timeout=timeout)
        return subprocess.CompletedProcess(cmd, 0)

    monkeypatch.setattr(pandoc.subprocess, "run", fake_run)
    PandocCompiler(timeout=30).compile(
        tmp_path / "in.md", tmp_path / "out.pdf", template,
        {"templates-dir": str(tmp_path)}, "pdflatex",
    )
    assert seen["check"] is True
    assert seen["cwd"] == str(tmp_path.resolve())
    assert seen["timeout"] == 30
    assert "--pdf-engine=pdflatex" in seen["cmd"]


def test_nonzero_exit_is_compiler_failure(monkeypatch, tmp_path, template):
    def fake_run(cmd, **kw):
        raise subprocess.CalledProcessError(43, cmd)

    monkeypatch.setattr(pandoc.subprocess, "run", fake_run)
    with pytest.raises(CompilerFailure) as exc:
        PandocCompiler().compile(tmp_path / "in.md", tmp_path / "o.pdf", template, {}, "xelatex")
    assert exc.value.returncode == 43


def test_missing_pandoc_is_compiler_failure(tmp_path, template):
    compiler = PandocCompiler(binary=str(tmp_path / "no-such-pandoc"))
    with pytest.raises(CompilerFailure, match="could not run"):
        compiler.compile(tmp_path / "in.md", tmp_path / "o.pdf", template, {}, "xelatex")


def test_missing_template(tmp_path):
    with pytest.raises(CompilerFailure, match="template not found"):
        PandocCompiler().compile(tmp_path / "in.md", tmp_path / "o.pdf", tmp_path / "nope.tex", {}, "xelatex")


def test_missing_template_names_the_setting(tmp_path):
    with pytest.raises(CompilerFailure, match="BOOKBINDER_TEMPLATES_DIR"):
        PandocCompiler().compile(tmp_path / "in.md", tmp_path / "o.pdf", tmp_path / "nope.tex", {}, "xelatex")


def _resolving_run(seen):
    # pandoc looks the template up relative to its working directory
    def fake_run(cmd, check, cwd, timeout):
        arg = next(a for a in cmd if a.startswith("--template="))
        seen["template"] = Path(cwd or ".", arg.split("=", 1)[1])
        seen["cwd"] = cwd
        return subprocess.CompletedProcess(cmd, 0)
    return fake_run


def test_relative_templates_dir_from_config(monkeypatch, tmp_path):
    tpl = tmp_path / "tpl" / "victoria-regia" / "template.tex"
    tpl.parent.mkdir(parents=True)
    tpl.write_text("$body$", "utf-8")
    monkeypatch.chdir(tmp_path)
    seen = {}
    monkeypatch.setattr(pandoc.subprocess, "run", _resolving_run(seen))

    cfg = BookConfig(templates_dir=Path("tpl"))
    assert cfg.templates_dir.is_absolute()
    PandocCompiler().compile(
        Path("in.md"), Path("o.pdf"), cfg.template_path,
        {"templates-dir": str(cfg.templates_dir)}, "xelatex",
    )
    assert seen["template"].is_file()
    assert seen["cwd"] == str((tmp_path / "tpl").resolve())


def test_relative_template_argument(monkeypatch, tmp_path):
    tpl = tmp_path / "tpl" / "victoria-regia" / "template.tex"
    tpl.parent.mkdir(parents=True)
    tpl.write_text("$body$", "utf-8")
    monkeypatch.chdir(tmp_path)
    seen = {}
    monkeypatch.setattr(pandoc.subprocess, "run", _resolving_run(seen))

    PandocCompiler().compile(
        Path("in.md"), Path("o.pdf"), Path("tpl/victoria-regia/template.tex"),
        {"templates-dir": "tpl"}, "xelatex",
    )
    assert seen["template"].is_file()
    assert Path(seen["cwd"]).is_absolute()
