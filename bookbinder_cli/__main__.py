"""
bookbinder – assemble chapter markdown into one typeset book

 • generate CONTENT OUTPUT TIMELINE [--episodes 1,2] [--format a4|a5]
 • --config PATH loads book metadata / palettes (JSON)
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich import print

from bookbinder_cli.config import load_config
from bookbinder_cli.errors import BookError
from bookbinder_cli.logconf import init
from bookbinder_cli.models import BookOptions, PageFormat
from bookbinder_cli.pipeline.assembler import generate_book

app = typer.Typer(pretty_exceptions_show_locals=False, no_args_is_help=True)


@app.callback()
def main() -> None:
    """Assemble per-chapter markdown into a single rendered book."""


@app.command()
def generate(
    content_path: Path = typer.Argument(..., help="timeline content folder (containing chapters/)"),
    output_path: Path = typer.Argument(..., help="output PDF file path"),
    timeline: str = typer.Argument(..., help="timeline name (anima, eros, bloom, …)"),
    episodes: str | None = typer.Option(None, "--episodes", "-e", help='comma-separated episode numbers, e.g. "1,2"'),
    page_format: PageFormat = typer.Option(PageFormat.a4, "--format", "-f", case_sensitive=False),
    config: Path | None = typer.Option(
        None, "--config",
        help="book config JSON; templates_dir here or BOOKBINDER_TEMPLATES_DIR must point at <dir>/victoria-regia/template.tex",
    ),
    log_level: str = typer.Option("INFO", "--log-level"),
):
    init(log_level)
    logger = logging.getLogger("bookbinder")

    print(f"[bold cyan]📚 Generating book for timeline: {timeline.upper()}[/]")
    try:
        cfg = load_config(config)
        if config:
            print(f"[yellow]Loaded config from {config}[/]")
        dest = generate_book(
            BookOptions(
                content_path=content_path,
                output_path=output_path,
                timeline=timeline,
                episodes=episodes,
                format=page_format,
            ),
            cfg,
        )
    except BookError as exc:
        logger.debug("run failed", exc_info=True)
        print(f"[red]❌ Error: {exc}[/]")
        raise typer.Exit(1)

    print(f"[green]✔ Book generated: {dest}[/]")


if __name__ == "__main__":
    app()
