"""
jinjalens.cli - Command Line Interface
======================================

Command-line access to the editor features, built with Typer and Rich.
Useful in CI (``jinjalens lint``) and for checking what an editor
integration would show at a given offset.

Architecture
------------
    app (main entry point)
    ├── lint      - Lint a template file
    ├── context   - Show the cursor context at an offset
    ├── complete  - Show completions at an offset
    ├── hover     - Show hover documentation at an offset
    └── snippet   - Render a command palette snippet

Usage Examples
--------------
    $ jinjalens lint prompt.txt --variables vars.json
    $ jinjalens complete prompt.txt --offset 120 --json
    $ jinjalens snippet for --set item=row --set collection=rows
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from jinjalens import __version__
from jinjalens.completion import complete
from jinjalens.config import LensConfig, load_config
from jinjalens.context import resolve_context
from jinjalens.hover import hover
from jinjalens.linter import lint
from jinjalens.snippets import SnippetFields, SnippetKind, render_snippet
from jinjalens.variables import DEFAULT_VARIABLES, VariableTree, load_variables


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="jinjalens",
    help="Lint, complete and document Jinja templates embedded in text.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

console = Console()

TemplateFile = Annotated[
    Path,
    typer.Argument(
        help="Template file to analyse",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
]
OffsetOption = Annotated[
    int | None,
    typer.Option(
        "--offset",
        "-o",
        help="Cursor offset in characters (default: end of file)",
    ),
]
VariablesOption = Annotated[
    Path | None,
    typer.Option(
        "--variables",
        help="JSON file with the variable tree (default: built-in variables)",
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="pyproject.toml with a [tool.jinjalens] table (default: ./pyproject.toml)",
    ),
]
JsonOption = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Print machine-readable JSON",
    ),
]


# =============================================================================
# Helpers
# =============================================================================

def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]jinjalens[/] version [cyan]{__version__}[/]",
            border_style="green",
        ))
        raise typer.Exit()


def line_col(text: str, offset: int) -> tuple[int, int]:
    """1-based line and column for display."""
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


def _fail(error: Exception) -> typer.Exit:
    rprint(f"[red]Error:[/] {escape(str(error))}")
    return typer.Exit(1)


def _load_inputs(
    file: Path,
    variables: Path | None,
    config: Path | None,
) -> tuple[str, VariableTree, LensConfig]:
    try:
        text = file.read_text(encoding="utf-8")
        tree = load_variables(variables) if variables else DEFAULT_VARIABLES
        settings = load_config(config if config else Path.cwd())
    except (OSError, ValueError, ValidationError) as e:
        raise _fail(e) from e
    return text, tree, settings


def _resolve_offset(text: str, offset: int | None) -> int:
    return len(text) if offset is None else offset


# =============================================================================
# Main Application Callback
# =============================================================================

@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log analysis details to stderr.",
        ),
    ] = False,
) -> None:
    """
    [bold]jinjalens[/] - editing intelligence for Jinja templates.

    [bold]Quick Start:[/]

        jinjalens lint prompt.txt
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


# =============================================================================
# Lint Command
# =============================================================================

@app.command("lint")
def lint_command(
    file: TemplateFile,
    variables: VariablesOption = None,
    config: ConfigOption = None,
    as_json: JsonOption = False,
) -> None:
    """
    Lint a template file.

    Reports mixed or unclosed delimiters, unbalanced tags, keyword typos,
    unmatched quotes and brackets, and undefined variables. Exits with
    status 1 when anything is found.

    [bold]Example:[/]

        jinjalens lint prompt.txt --variables vars.json
    """
    text, tree, settings = _load_inputs(file, variables, config)
    diagnostics = lint(text, tree, settings)

    if as_json:
        typer.echo(json.dumps([asdict(d) for d in diagnostics], indent=2))
    elif diagnostics:
        table = Table(title=f"Diagnostics: {file.name}", show_header=True)
        table.add_column("Line", style="cyan", justify="right")
        table.add_column("Col", style="cyan", justify="right")
        table.add_column("Severity", style="bold")
        table.add_column("Message")
        for d in diagnostics:
            line, column = line_col(text, d.start)
            table.add_row(str(line), str(column), f"[red]{d.severity.value}[/]", d.message)
        console.print(table)
        console.print(f"[bold]Summary:[/] [red]{len(diagnostics)} problem(s)[/]")
    else:
        console.print(f"[bold green]No problems found[/] in {file.name}")

    if diagnostics:
        raise typer.Exit(1)


# =============================================================================
# Cursor Commands
# =============================================================================

@app.command("context")
def context_command(
    file: TemplateFile,
    offset: OffsetOption = None,
) -> None:
    """
    Show the template context at a cursor offset.

    [bold]Example:[/]

        jinjalens context prompt.txt --offset 42
    """
    text, _, settings = _load_inputs(file, None, None)
    ctx = resolve_context(text, _resolve_offset(text, offset), settings)
    typer.echo(json.dumps(asdict(ctx), indent=2))


@app.command("complete")
def complete_command(
    file: TemplateFile,
    offset: OffsetOption = None,
    variables: VariablesOption = None,
    config: ConfigOption = None,
    as_json: JsonOption = False,
) -> None:
    """
    Show completions at a cursor offset.

    [bold]Example:[/]

        jinjalens complete prompt.txt --offset 42 --variables vars.json
    """
    text, tree, settings = _load_inputs(file, variables, config)
    result = complete(text, _resolve_offset(text, offset), tree, settings)

    if as_json:
        typer.echo(json.dumps(asdict(result) if result else None, indent=2))
        return
    if result is None:
        console.print("[dim]No completions[/]")
        return

    table = Table(
        title=f"Completions (replace {result.replace_from}-{result.replace_to})",
        show_header=True,
    )
    table.add_column("Label", style="green")
    table.add_column("Kind", style="cyan")
    table.add_column("Insert")
    table.add_column("Detail", style="dim")
    for c in result.candidates:
        table.add_row(c.label, c.kind.value, repr(c.apply_text), c.detail)
    console.print(table)


@app.command("hover")
def hover_command(
    file: TemplateFile,
    offset: OffsetOption = None,
) -> None:
    """
    Show filter documentation at a cursor offset.

    [bold]Example:[/]

        jinjalens hover prompt.txt --offset 42
    """
    text, _, settings = _load_inputs(file, None, None)
    result = hover(text, _resolve_offset(text, offset), settings)
    if result is None:
        console.print("[dim]No documentation[/]")
    else:
        console.print(result.text)


# =============================================================================
# Snippet Command
# =============================================================================

@app.command("snippet")
def snippet_command(
    kind: Annotated[
        str | None,
        typer.Argument(
            help="Snippet kind: rollup, for, if, variable, filter, similar_headlines",
        ),
    ] = None,
    values: Annotated[
        list[str] | None,
        typer.Option(
            "--set",
            "-s",
            help="Snippet field as key=value (repeatable)",
        ),
    ] = None,
    list_kinds: Annotated[
        bool,
        typer.Option(
            "--list",
            "-l",
            help="List available snippets",
        ),
    ] = False,
) -> None:
    """
    Render a command palette snippet.

    [bold]Examples:[/]

        jinjalens snippet --list
        jinjalens snippet for --set item=row --set collection=rows
    """
    if list_kinds or kind is None:
        table = Table(title="Snippets", show_header=True)
        table.add_column("Kind", style="cyan")
        table.add_column("Name", style="green")
        table.add_column("Description")
        for k in SnippetKind:
            table.add_row(k.value, k.label, k.description)
        console.print(table)
        return

    fields: dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep:
            raise _fail(ValueError(f"Expected key=value, got '{item}'"))
        fields[key.strip()] = value

    try:
        output = render_snippet(kind, SnippetFields(**fields))
    except (ValueError, ValidationError) as e:
        raise _fail(e) from e
    typer.echo(output)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    app()
