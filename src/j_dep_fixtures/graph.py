from __future__ import annotations

import networkx as nx

from j_dep_fixtures.models import DependencyGraph


def to_networkx(graph: DependencyGraph) -> nx.MultiDiGraph:
    """Build a directed multigraph where A -> B means B is a child of A.

    Node ids are arena indices, so two nodes with equal coordinates stay
    distinct and back-references become edges to an existing node. Each edge
    carries `order`, the child's position among its parent's children.
    """
    g = nx.MultiDiGraph()
    for idx, node in enumerate(graph.nodes):
        artifact = node.artifact
        g.add_node(
            idx,
            label=node.dependency.label(),
            group_id=artifact.group_id,
            artifact_id=artifact.artifact_id,
            version=artifact.version,
            scope=node.dependency.scope,
            optional=node.dependency.optional,
        )
    for parent, child, order in graph.edges():
        g.add_edge(parent, child, order=order)
    return g


def find_cycles(graph: DependencyGraph) -> list[list[int]]:
    """Return every elementary cycle as a list of arena indices, smallest first."""
    cycles = [sorted_cycle(c) for c in nx.simple_cycles(nx.DiGraph(to_networkx(graph)))]
    return sorted(cycles, key=lambda c: (len(c), c))


def sorted_cycle(cycle: list[int]) -> list[int]:
    """Rotate a cycle so it starts at its smallest index."""
    if not cycle:
        return cycle
    start = cycle.index(min(cycle))
    return cycle[start:] + cycle[:start]
