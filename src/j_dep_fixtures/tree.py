"""Build dependency graphs from ASCII tree notation.

Every level of indentation is three characters wide:

    gid:root:1:jar              # root, depth 0
    +- gid:a:1:jar              # has more siblings below
    |  \\- gid:a-child:1:jar     # ancestor with further siblings
    \\- (b)gid:b:1:jar           # last sibling, bound to tag "b"
       \\- ^b                    # ancestor that was a last sibling; back-reference

A graph definition (stanza) ends at a blank line.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from j_dep_fixtures.coordinates import parse_coordinate
from j_dep_fixtures.exceptions import FormatError
from j_dep_fixtures.lines import NumberedLine
from j_dep_fixtures.models import Dependency, DependencyGraph, DependencyNode
from j_dep_fixtures.registry import IdentityRegistry, check_tag
from j_dep_fixtures.substitution import Substitutions


logger = logging.getLogger(__name__)

_PREFIX_RE = re.compile(
    r"(?P<cont>(?:\|  |   )*)"
    r"(?:(?P<term>[+\\]-)(?: +|$))?"
    r"(?P<payload>.*)"
)
_PAYLOAD_RE = re.compile(r"(?:\((?P<tag>[^)]*)\))?\s*(?P<body>.*)")


def decode_prefix(line: str, *, line_number: int | None = None) -> tuple[int, str]:
    """Split a tree line into its depth and payload.

    Args:
        line: A comment-stripped, substituted line.
        line_number: Used for error messages only.

    Raises:
        FormatError: If the prefix is not a sequence of continuation tokens
            followed by exactly one connector.

    Returns:
        `(depth, payload)` where depth 0 means no prefix.
    """
    m = _PREFIX_RE.fullmatch(line)
    if m is None:
        raise FormatError("malformed tree prefix", line_number=line_number, line=line)
    cont, term, payload = m.group("cont"), m.group("term"), m.group("payload").strip()

    if term is None:
        if cont or payload[:1] in ("|", "+", "\\"):
            raise FormatError("malformed tree prefix", line_number=line_number, line=line)
        return 0, payload

    if not payload:
        raise FormatError("connector without a dependency", line_number=line_number, line=line)
    return len(cont) // 3 + 1, payload


def split_stanzas(lines: Iterable[NumberedLine]) -> Iterator[list[NumberedLine]]:
    """Group comment-stripped lines into blank-line separated stanzas.

    Stanzas consisting only of blank lines are skipped.
    """
    stanza: list[NumberedLine] = []
    for number, line in lines:
        if line.strip():
            stanza.append((number, line))
        elif stanza:
            yield stanza
            stanza = []
    if stanza:
        yield stanza


class IndentTreeBuilder:
    """Builds one `DependencyGraph` per stanza.

    The builder itself holds only the substitution values; tags and
    substitution progress are fresh for every `build` call.
    """

    def __init__(self, substitutions: Substitutions | None = None):
        self._substitutions = substitutions or Substitutions()

    def build(self, lines: Iterable[NumberedLine]) -> DependencyGraph:
        """Build the graph described by `lines`.

        Args:
            lines: `(line_number, comment-stripped line)` pairs of one stanza.
                Blank lines are ignored.

        Raises:
            FormatError: On malformed prefixes or coordinates, a missing or
                repeated root, a line that skips a level, or no lines at all.
            UnresolvedReferenceError: On a back-reference to an unknown tag.
            SubstitutionError: If placeholders outnumber substitution values.
        """
        graph = DependencyGraph()
        registry = IdentityRegistry()
        cursor = self._substitutions.cursor()
        # slots[d] is the most recently attached node at depth d.
        slots: list[DependencyNode] = []

        for number, raw in lines:
            if not raw.strip():
                continue
            line = cursor.apply(raw)
            depth, payload = decode_prefix(line, line_number=number)

            if depth == 0:
                if slots:
                    raise FormatError(
                        "a graph has exactly one root; separate graphs with a blank line",
                        line_number=number,
                        line=line,
                    )
            elif not slots:
                raise FormatError("the first line must be the root", line_number=number, line=line)
            elif depth > len(slots):
                raise FormatError(
                    f"depth {depth} skips a level (deepest open level is {len(slots) - 1})",
                    line_number=number,
                    line=line,
                )

            node = self._resolve_payload(payload, graph, registry, number, line)
            if depth > 0:
                slots[depth - 1].children.append(node)
            del slots[depth:]
            slots.append(node)

        if not graph.nodes:
            raise FormatError("no dependency graph definition found")
        logger.debug(
            "Built graph with %d node(s), %d tag(s), %d substitution(s)",
            len(graph),
            len(registry),
            cursor.consumed,
        )
        return graph

    @staticmethod
    def _resolve_payload(
        payload: str,
        graph: DependencyGraph,
        registry: IdentityRegistry,
        number: int,
        line: str,
    ) -> DependencyNode:
        m = _PAYLOAD_RE.fullmatch(payload)
        if m is None:
            raise FormatError("malformed dependency", line_number=number, line=line)
        tag, body = m.group("tag"), m.group("body").strip()

        if body.startswith("^"):
            if tag is not None:
                raise FormatError(
                    "a back-reference cannot be bound to a tag", line_number=number, line=line
                )
            ref = check_tag(body[1:].strip(), line_number=number)
            return registry.resolve(ref, line_number=number)

        if tag is not None:
            check_tag(tag, line_number=number)
        try:
            spec = parse_coordinate(body)
        except FormatError as exc:
            raise FormatError(exc.reason, line_number=number, line=line) from exc

        node = graph.new_node(
            Dependency(artifact=spec.to_artifact(), scope=spec.scope, optional=spec.optional)
        )
        if tag is not None:
            registry.bind(tag, node, line_number=number)
        return node
