"""Typer CLI entry point for J-Dep Fixtures."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from j_dep_fixtures.config import FixtureConfig
from j_dep_fixtures.exceptions import JDepFixtureError
from j_dep_fixtures.graph import find_cycles
from j_dep_fixtures.ini import ArtifactDescriptionReader
from j_dep_fixtures.models import DependencyGraph
from j_dep_fixtures.parser import DependencyGraphParser
from j_dep_fixtures.resources import open_url
from j_dep_fixtures.visualize import build_dependency_tree, build_description_tables

app = typer.Typer(add_completion=False, help="Inspect dependency graph and artifact description fixtures.")
console = Console(emoji=False)


@app.callback()
def _main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def _config() -> FixtureConfig:
    config = FixtureConfig.from_env()
    try:
        config.validate()
    except ValueError as exc:
        raise JDepFixtureError(str(exc)) from exc
    return config


def _print_error(exc: Exception) -> None:
    console.print(Text.assemble(("Error:", "bold red"), " ", str(exc)))


def _load_graphs(fixture: Path, subst: list[str] | None, all_graphs: bool) -> list[DependencyGraph]:
    config = _config()
    parser = DependencyGraphParser(substitutions=subst or (), config=config)
    with open_url(fixture, config) as stream:
        if not all_graphs:
            return [parser.parse_graph(stream)]
        graphs = parser.parse_graphs(stream)
    if not graphs:
        raise JDepFixtureError(f"no dependency graph definition found in {fixture}")
    return graphs


@app.command()
def tree(
    fixture: Annotated[Path, typer.Argument(help="Path to a dependency graph fixture.")],
    all_graphs: Annotated[bool, typer.Option("--all", help="Show every graph, not only the first.")] = False,
    subst: Annotated[
        Optional[list[str]],
        typer.Option("--subst", "-s", help="Value for the next %s placeholder (repeatable)."),
    ] = None,
) -> None:
    """Parse a tree fixture and print its dependency graph(s)."""
    try:
        graphs = _load_graphs(fixture, subst, all_graphs)
        for i, graph in enumerate(graphs, start=1):
            if len(graphs) > 1:
                console.print(f"[dim]graph {i}/{len(graphs)}[/dim]")
            console.print(build_dependency_tree(graph))
    except JDepFixtureError as exc:
        _print_error(exc)
        raise typer.Exit(code=1) from None


@app.command()
def cycles(
    fixture: Annotated[Path, typer.Argument(help="Path to a dependency graph fixture.")],
    all_graphs: Annotated[bool, typer.Option("--all", help="Check every graph, not only the first.")] = False,
    subst: Annotated[
        Optional[list[str]],
        typer.Option("--subst", "-s", help="Value for the next %s placeholder (repeatable)."),
    ] = None,
) -> None:
    """List the cycles introduced by back-references."""
    try:
        graphs = _load_graphs(fixture, subst, all_graphs)
        for i, graph in enumerate(graphs, start=1):
            found = find_cycles(graph)
            if not found:
                console.print(f"graph {i}: [green]acyclic[/green]")
                continue
            console.print(f"graph {i}: [yellow]{len(found)} cycle(s)[/yellow]")
            for cycle in found:
                path = " -> ".join(f"#{idx}" for idx in [*cycle, cycle[0]])
                console.print(f"  {path}")
    except JDepFixtureError as exc:
        _print_error(exc)
        raise typer.Exit(code=1) from None


@app.command()
def describe(
    fixture: Annotated[Path, typer.Argument(help="Path to an INI-style artifact description.")],
) -> None:
    """Parse an artifact description and print its sections."""
    try:
        description = ArtifactDescriptionReader(config=_config()).parse_url(fixture)
        tables = build_description_tables(description)
        if not tables:
            console.print("[dim]Empty artifact description[/dim]")
            return
        for table in tables:
            console.print(table)
    except JDepFixtureError as exc:
        _print_error(exc)
        raise typer.Exit(code=1) from None


def main() -> None:
    """Console-script entry point."""
    app()
