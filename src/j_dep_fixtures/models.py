"""Models for artifacts, dependencies and parsed dependency graphs."""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, Field


class Artifact(BaseModel):
    """Maven artifact coordinates plus free-form properties."""

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    version: str = ""
    extension: str = ""
    classifier: str = ""
    properties: dict[str, str] = Field(default_factory=dict)

    def compact(self) -> str:
        """Return a compact string representation.

        Returns:
            A string like `groupId:artifactId:extension:version`.
        """
        return f"{self.group_id}:{self.artifact_id}:{self.extension}:{self.version}"


class Exclusion(BaseModel):
    """A transitive dependency to leave out, identified by group and artifact."""

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    classifier: str = ""
    extension: str = ""

    def compact(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"


class Dependency(BaseModel):
    """A dependency entry: an artifact with scope, optional flag and exclusions."""

    artifact: Artifact
    scope: str = ""
    optional: bool = False
    exclusions: list[Exclusion] = Field(default_factory=list)

    def label(self) -> str:
        """Return a user-facing label for the dependency.

        Returns:
            A formatted string including the coordinate and scope when present.
        """
        parts: list[str] = [self.artifact.compact()]
        if self.scope:
            parts.append(f"(scope={self.scope})")
        if self.optional:
            parts.append("(optional)")
        if self.artifact.properties:
            props = ";".join(f"{k}={v}" for k, v in self.artifact.properties.items())
            parts.append(f"[{props}]")
        return " ".join(parts)


class RemoteRepository(BaseModel):
    """A repository definition; `url` may itself contain colons."""

    id: str
    type: str
    url: str


class ArtifactDescription(BaseModel):
    """The sections of an artifact description fixture."""

    relocations: list[Artifact] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(default_factory=list)
    managed_dependencies: list[Dependency] = Field(default_factory=list)
    repositories: list[RemoteRepository] = Field(default_factory=list)


class DependencyNode:
    """A node of a parsed dependency graph.

    Children are references to other nodes of the same graph, so a node may
    appear among its own descendants. Equality is identity and `repr` never
    follows child links.
    """

    __slots__ = ("dependency", "children")

    def __init__(self, dependency: Dependency):
        self.dependency = dependency
        self.children: list[DependencyNode] = []

    @property
    def artifact(self) -> Artifact:
        return self.dependency.artifact

    def __repr__(self) -> str:
        return f"DependencyNode({self.dependency.label()!r}, children={len(self.children)})"


class DependencyGraph:
    """All nodes allocated by one parse, in creation order.

    The first node is the root. Child links point into `nodes`; a
    back-reference never allocates, it only adds another link.
    """

    def __init__(self) -> None:
        self.nodes: list[DependencyNode] = []
        self._index: dict[int, int] = {}

    @property
    def root(self) -> DependencyNode:
        if not self.nodes:
            raise LookupError("empty dependency graph")
        return self.nodes[0]

    def new_node(self, dependency: Dependency) -> DependencyNode:
        node = DependencyNode(dependency)
        self._index[id(node)] = len(self.nodes)
        self.nodes.append(node)
        return node

    def index_of(self, node: DependencyNode) -> int:
        """Return the arena index of `node`.

        Raises:
            KeyError: If the node does not belong to this graph.
        """
        return self._index[id(node)]

    def edges(self) -> Iterator[tuple[int, int, int]]:
        """Yield `(parent_index, child_index, order)` for every child link."""
        for parent_idx, node in enumerate(self.nodes):
            for order, child in enumerate(node.children):
                yield parent_idx, self.index_of(child), order

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[DependencyNode]:
        return iter(self.nodes)
