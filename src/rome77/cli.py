"""CLI entry point: tokens, parse, check, lower."""

import json
import logging
from pathlib import Path

import typer

from rome77 import __version__
from rome77.errors import Rome77Error
from rome77.lexer import tokenize
from rome77.parser import parse
from rome77.pipeline import compile_source
from rome77.syntax_tree import SyntaxTree

app = typer.Typer(
    name="rome77",
    help="Rome77 front end: tokenize, parse, check and lower Rome77 programs to IR.",
)


def _load_source(path: Path) -> str:
    if not path.exists():
        typer.echo(f"Error: file not found: {path}", err=True)
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def _report(e: Rome77Error) -> None:
    typer.echo(f"{e.kind.value.capitalize()} error: {e}", err=True)
    raise typer.Exit(1)


def _parse_and_catch(path: Path) -> SyntaxTree:
    source = _load_source(path)
    try:
        return parse(source, path=str(path))
    except Rome77Error as e:
        _report(e)


@app.command("tokens")
def tokens_cmd(file: Path = typer.Argument(..., help=".r77 file")):
    """Print the token stream."""
    source = _load_source(file)
    try:
        tokens = tokenize(source, path=str(file))
    except Rome77Error as e:
        _report(e)
    for t in tokens:
        typer.echo(f"{t.line}:{t.column}\t{t.kind}\t{t.text}")


@app.command("parse")
def parse_cmd(file: Path = typer.Argument(..., help=".r77 file")):
    """Parse file and print the syntax tree (debug)."""
    tree = _parse_and_catch(file)
    typer.echo(f"Parsed {len(tree.statements())} statements.")
    typer.echo(tree.root.pretty())


@app.command("check")
def check_cmd(file: Path = typer.Argument(..., help=".r77 file")):
    """Run the full front end and report the first error, if any."""
    result = compile_source(_load_source(file), path=str(file))
    if not result.ok:
        _report(result.error)
    typer.echo("OK")


@app.command("lower")
def lower_cmd(file: Path = typer.Argument(..., help=".r77 file")):
    """Emit IR JSON to stdout."""
    result = compile_source(_load_source(file), path=str(file))
    if not result.ok:
        _report(result.error)
    typer.echo(json.dumps(result.program.to_dict(), indent=2))


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"rome77 {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline stages to stderr"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Rome77: Roman numerals, Latin keywords, integer arithmetic."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


if __name__ == "__main__":
    app()
