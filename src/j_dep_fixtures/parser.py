"""Parse dependency graph fixtures written in tree notation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from j_dep_fixtures.config import FixtureConfig
from j_dep_fixtures.exceptions import FormatError
from j_dep_fixtures.lines import numbered_lines
from j_dep_fixtures.models import DependencyGraph, DependencyNode
from j_dep_fixtures.resources import open_resource, open_url
from j_dep_fixtures.substitution import Substitutions
from j_dep_fixtures.tree import IndentTreeBuilder, split_stanzas


logger = logging.getLogger(__name__)


class DependencyGraphParser:
    """Creates dependency graphs from a tree-like text notation.

    Example:

        gid:aid:ver:ext                 # root
        +- gid:aid2:ver:ext:scope       # child with more siblings
        |  \\- gid:aid3:ver:ext          # grandchild
        \\- (x)gid:aid4:ver:ext;k=v      # last child, tagged "x", one property
           \\- ^x                        # reference back to the tagged node

    A resource may hold several graphs separated by blank lines. `parse*`
    returns the root of the first one, `parse_multiple*` all of them. Each
    graph has its own tags, and `%s` substitution restarts for each graph.

    Args:
        prefix: Prepended to every resource name passed to `parse` and
            `parse_multiple`.
        substitutions: Values for `%s` placeholders, in document order.
        config: Where named resources are looked up. Defaults to
            `FixtureConfig.from_env()`.
    """

    def __init__(
        self,
        prefix: str = "",
        substitutions: Iterable[str] = (),
        config: FixtureConfig | None = None,
    ):
        self._prefix = prefix
        self._substitutions = Substitutions(substitutions)
        self._config = config or FixtureConfig.from_env()

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def substitutions(self) -> tuple[str, ...]:
        return self._substitutions.values

    def with_substitutions(self, substitutions: Iterable[str]) -> "DependencyGraphParser":
        """Return a parser like this one using the given substitution values."""
        return DependencyGraphParser(self._prefix, substitutions, self._config)

    def parse(self, resource: str) -> DependencyNode:
        """Load a named resource and parse its first graph."""
        with open_resource(self._prefix + resource, self._config) as stream:
            return self.parse_graph(stream).root

    def parse_url(self, url: str | Path) -> DependencyNode:
        """Open the given URL or path and parse its first graph."""
        with open_url(url, self._config) as stream:
            return self.parse_graph(stream).root

    def parse_literal(self, definition: str) -> DependencyNode:
        """Parse the first graph of the given string."""
        return self.parse_graph_literal(definition).root

    def parse_graph_literal(self, definition: str) -> DependencyGraph:
        """Parse the first graph of the given string, returning every node."""
        return self.parse_graph(definition.splitlines())

    def parse_multiple(self, resource: str) -> list[DependencyNode]:
        """Load a named resource and parse every graph in it."""
        with open_resource(self._prefix + resource, self._config) as stream:
            return [g.root for g in self.parse_graphs(stream)]

    def parse_multiple_url(self, url: str | Path) -> list[DependencyNode]:
        with open_url(url, self._config) as stream:
            return [g.root for g in self.parse_graphs(stream)]

    def parse_multiple_literal(self, definition: str) -> list[DependencyNode]:
        return [g.root for g in self.parse_graphs(definition.splitlines())]

    def parse_graph(self, lines: Iterable[str] | TextIO) -> DependencyGraph:
        """Parse the first graph of an already opened text source.

        Raises:
            FormatError: If the source holds no graph definition.
        """
        first = next(split_stanzas(numbered_lines(lines)), None)
        if first is None:
            raise FormatError("no dependency graph definition found")
        return IndentTreeBuilder(self._substitutions).build(first)

    def parse_graphs(self, lines: Iterable[str] | TextIO) -> list[DependencyGraph]:
        """Parse every graph of an already opened text source."""
        builder = IndentTreeBuilder(self._substitutions)
        graphs = [builder.build(stanza) for stanza in split_stanzas(numbered_lines(lines))]
        logger.debug("Parsed %d dependency graph(s)", len(graphs))
        return graphs
