"""CLI commands for manuscript import.

Commands:
- detect: Detect chapters, acts and title of a plain-text manuscript
- version: Show package version
"""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from manuscript_import import __version__
from manuscript_import.core.structure_detector import InputError, build_detector
from manuscript_import.llm.client import LLMError

app = typer.Typer(
    name="manuscript",
    help="Detect the chapter and act structure of long-form manuscripts.",
    no_args_is_help=True,
)

console = Console()


def _truncate(text: str, max_len: int = 60) -> str:
    """Truncate text with ellipsis if too long."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


@app.command()
def detect(
    path: Path = typer.Argument(..., help="Plain-text manuscript (UTF-8)"),
    no_ai: bool = typer.Option(False, "--no-ai", help="Rule-based detection only"),
    as_json: bool = typer.Option(False, "--json", help="Print the structure as JSON"),
    provider: str | None = typer.Option(None, help="LLM provider: openai, lmstudio, anthropic"),
    model: str | None = typer.Option(None, help="LLM model override"),
) -> None:
    """Detect the chapter/act structure of a manuscript."""
    if not path.exists():
        console.print(f"[red]✗ File not found: {path}[/red]")
        raise typer.Exit(code=1)

    content = path.read_text(encoding="utf-8-sig")

    try:
        if no_ai:
            detector = build_detector(use_ai=False)
        else:
            detector = build_detector(provider=provider, model=model)
    except LLMError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    try:
        structure = detector.detect(content)
    except InputError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(structure.to_dict(), indent=2, ensure_ascii=False))
        return

    console.print(f"[green]✓ {structure.title}[/green]")
    console.print(f"  [dim]chapters:[/dim] {len(structure.chapters)}")
    console.print(f"  [dim]acts:[/dim]     {len(structure.acts)}")
    console.print(f"  [dim]words:[/dim]    {structure.total_word_count}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Words", justify="right")
    table.add_column("Offsets")

    for chapter in structure.chapters:
        table.add_row(
            str(chapter.index + 1),
            chapter.type,
            _truncate(chapter.title),
            str(chapter.word_count),
            f"{chapter.start_offset}-{chapter.end_offset}",
        )

    console.print(table)

    for act in structure.acts:
        console.print(
            f"  [cyan]{act.title}[/cyan]: chapters "
            f"{act.start_chapter_index + 1}-{act.end_chapter_index + 1}"
        )


@app.command()
def version() -> None:
    """Show package version."""
    console.print(f"manuscript-import {__version__}")


if __name__ == "__main__":
    app()
