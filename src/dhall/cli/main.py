"""CLI entry point for dhall-lang.

Invoked as::

    dhall-lang [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m dhall

Commands
--------
parse       Dump the parsed AST to JSON or YAML
check       Report whether a file is syntactically valid Dhall
grammar     Print the reference grammar
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from dhall.ast.nodes import Expression
    from dhall.parser.errors import DhallSyntaxError

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)


@dataclass
class _Options:
    """Parser settings shared by every command."""

    max_depth: int
    memoize: bool


def _read_source(path: str) -> str:
    """Read a Dhall source file (``-`` for stdin), exiting on error."""
    if path == "-":
        return click.get_text_stream("stdin").read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)


def _report_error(exc: "DhallSyntaxError", path: str) -> None:
    err_console.print(
        f"[red]{type(exc).__name__}[/red] in {escape(path)}:{exc.location}: {escape(exc.message)}"
    )
    excerpt = exc.excerpt()
    if excerpt:
        err_console.print(excerpt, markup=False, highlight=False)
    if exc.expected:
        err_console.print(f"[dim]expected: {escape(', '.join(exc.expected))}[/dim]")


def _parse_or_exit(source: str, path: str, options: _Options) -> "Expression":
    """Parse Dhall source, printing the error and exiting on failure."""
    from dhall.parser import DhallSyntaxError, parse

    try:
        return parse(source, max_depth=options.max_depth, memoize=options.memoize)
    except DhallSyntaxError as exc:
        logger.debug("Parse failed inside rules: %s", " > ".join(exc.rule_stack))
        _report_error(exc, path)
        sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="dhall-lang")
@click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum expression nesting depth (default: parser default)",
)
@click.option("--no-memoize", is_flag=True, default=False, help="Disable the packrat cache")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log parser statistics")
@click.pass_context
def cli(ctx: click.Context, max_depth: int | None, no_memoize: bool, verbose: bool) -> None:
    """Dhall configuration language toolkit: parser and AST inspector."""
    from dhall.parser import DEFAULT_MAX_DEPTH

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = _Options(max_depth=max_depth or DEFAULT_MAX_DEPTH, memoize=not no_memoize)


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from dhall import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]dhall-lang[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("file", type=click.Path(exists=False, allow_dash=True))
@click.pass_obj
def check_command(options: _Options, file: str) -> None:
    """Check that a Dhall file is syntactically valid.

    FILE is the path to the .dhall file to check, or - for stdin.
    """
    source = _read_source(file)
    _parse_or_exit(source, file, options)
    console.print(f"[green]OK[/green] {escape(file)}: no syntax errors")


# ---------------------------------------------------------------------------
# parse command
# ---------------------------------------------------------------------------


@cli.command(name="parse")
@click.argument("file", type=click.Path(exists=False, allow_dash=True))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="AST output format",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
@click.pass_obj
def parse_command(options: _Options, file: str, output_format: str, output: str | None) -> None:
    """Parse a Dhall file and dump the AST.

    FILE is the path to the .dhall file to parse, or - for stdin.
    """
    from dhall.ast import AstSerializer

    source = _read_source(file)
    expr = _parse_or_exit(source, file, options)

    serializer = AstSerializer()

    try:
        if output_format.lower() == "json":
            text = serializer.to_json(expr, indent=2)
            lang = "json"
        else:
            text = serializer.to_yaml(expr)
            lang = "yaml"
    except ValueError as exc:
        err_console.print(f"[red]Error:[/red] Cannot serialize {escape(file)}: {escape(str(exc))}")
        sys.exit(1)

    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]AST written to[/green] {output}")
    else:
        syntax = Syntax(text, lang, line_numbers=True)
        console.print(syntax)


# ---------------------------------------------------------------------------
# grammar command
# ---------------------------------------------------------------------------


@cli.command(name="grammar")
def grammar_command() -> None:
    """Print the PEG grammar the parser implements."""
    from dhall.grammar import FULL_GRAMMAR

    console.print(FULL_GRAMMAR, markup=False, highlight=False)


if __name__ == "__main__":
    cli()
