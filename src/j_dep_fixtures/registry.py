"""Tag registry used to resolve `^tag` back-references within one graph."""

from __future__ import annotations

import re

from j_dep_fixtures.exceptions import DuplicateTagError, FormatError, UnresolvedReferenceError
from j_dep_fixtures.models import DependencyNode


TAG_RE = re.compile(r"[A-Za-z0-9_.\-]+")


def check_tag(tag: str, *, line_number: int | None = None) -> str:
    if not TAG_RE.fullmatch(tag):
        raise FormatError(f"invalid tag {tag!r}", line_number=line_number)
    return tag


class IdentityRegistry:
    """Maps tags to nodes already built in the current graph definition."""

    def __init__(self) -> None:
        self._nodes: dict[str, DependencyNode] = {}

    def bind(self, tag: str, node: DependencyNode, *, line_number: int | None = None) -> None:
        """Bind `tag` to `node`.

        Raises:
            DuplicateTagError: If the tag is already bound.
        """
        if tag in self._nodes:
            raise DuplicateTagError(f"tag ({tag}) is already defined", line_number=line_number)
        self._nodes[tag] = node

    def resolve(self, tag: str, *, line_number: int | None = None) -> DependencyNode:
        """Return the node bound to `tag`.

        Raises:
            UnresolvedReferenceError: If no earlier line bound the tag.
        """
        try:
            return self._nodes[tag]
        except KeyError:
            raise UnresolvedReferenceError(tag, line_number=line_number) from None

    def __contains__(self, tag: object) -> bool:
        return tag in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)
