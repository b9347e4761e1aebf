"""Rich rendering utilities for parsed fixtures."""

from __future__ import annotations

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from j_dep_fixtures.models import ArtifactDescription, Dependency, DependencyGraph, DependencyNode


def build_dependency_tree(graph: DependencyGraph) -> Tree:
    """Build a Rich Tree for a parsed dependency graph.

    A node reached a second time is shown once more as a `^#index` reference
    and not expanded again, so cyclic graphs render finitely.

    Args:
        graph: Parsed dependency graph.

    Returns:
        A Rich Tree object for rendering.
    """
    root = Tree(_node_label(graph, graph.root))
    seen: set[int] = {graph.index_of(graph.root)}
    stack: list[tuple[DependencyNode, Tree]] = [(graph.root, root)]

    while stack:
        node, branch = stack.pop()
        pending: list[tuple[DependencyNode, Tree]] = []
        for child in node.children:
            idx = graph.index_of(child)
            if idx in seen:
                branch.add(Text(f"^#{idx} {child.dependency.artifact.compact()}", style="dim"))
                continue
            seen.add(idx)
            pending.append((child, branch.add(_node_label(graph, child))))
        stack.extend(reversed(pending))
    return root


def _node_label(graph: DependencyGraph, node: DependencyNode) -> Text:
    return Text.assemble((f"#{graph.index_of(node)}", "bold"), " ", node.dependency.label())


def _dependency_table(title: str, deps: list[Dependency]) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim", width=4)
    table.add_column("Artifact")
    table.add_column("Scope")
    table.add_column("Optional")
    table.add_column("Exclusions")
    for i, dep in enumerate(deps, start=1):
        table.add_row(
            str(i),
            Text(dep.artifact.compact()),
            Text(dep.scope),
            "yes" if dep.optional else "",
            Text(", ".join(e.compact() for e in dep.exclusions)),
        )
    return table


def build_description_tables(description: ArtifactDescription) -> list[Table]:
    """Build one Rich Table per non-empty section of an artifact description."""
    tables: list[Table] = []
    if description.relocations:
        table = Table(title="Relocations")
        table.add_column("#", style="dim", width=4)
        table.add_column("Artifact")
        for i, artifact in enumerate(description.relocations, start=1):
            table.add_row(str(i), Text(artifact.compact()))
        tables.append(table)
    if description.dependencies:
        tables.append(_dependency_table("Dependencies", description.dependencies))
    if description.managed_dependencies:
        tables.append(_dependency_table("Managed dependencies", description.managed_dependencies))
    if description.repositories:
        table = Table(title="Repositories")
        table.add_column("Id")
        table.add_column("Type")
        table.add_column("URL")
        for repo in description.repositories:
            table.add_row(Text(repo.id), Text(repo.type), Text(repo.url))
        tables.append(table)
    return tables
