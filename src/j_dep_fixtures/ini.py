"""Parse artifact descriptions written in an INI-like format.

Recognized sections (names are case-insensitive, `-` and `_` are ignored):

    [relocations]
    gid:aid:ver[:ext]

    [dependencies]
    -excluded.gid:excluded-aid       # applies to the next dependency
    gid:aid:ver:ext[:scope[:optional]]

    [managedDependencies]
    gid:aid2:ver2:ext:scope

    [repositories]
    id:type:file:///test-repo
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from pathlib import Path

from j_dep_fixtures.config import FixtureConfig
from j_dep_fixtures.coordinates import (
    MAX_FIELDS,
    CoordinateSpec,
    parse_coordinate,
    parse_exclusion,
    parse_repository,
)
from j_dep_fixtures.exceptions import FormatError
from j_dep_fixtures.lines import NumberedLine, numbered_lines
from j_dep_fixtures.models import (
    Artifact,
    ArtifactDescription,
    Dependency,
    Exclusion,
    RemoteRepository,
)
from j_dep_fixtures.resources import open_resource, open_url


logger = logging.getLogger(__name__)

DEFAULT_SCOPE = "compile"
EXCLUSION_MARKER = "-"


class Section(str, Enum):
    RELOCATIONS = "relocations"
    DEPENDENCIES = "dependencies"
    MANAGED_DEPENDENCIES = "manageddependencies"
    REPOSITORIES = "repositories"

    @classmethod
    def from_header(cls, line: str, *, line_number: int | None = None) -> "Section":
        """Map a `[name]` header line to its section.

        Raises:
            FormatError: If the header is malformed or names an unknown section.
        """
        if not line.endswith("]"):
            raise FormatError("malformed section header", line_number=line_number, line=line)
        name = line[1:-1].strip().lower().replace("-", "").replace("_", "")
        try:
            return cls(name)
        except ValueError:
            raise FormatError(
                f"unknown section {line[1:-1].strip()!r}", line_number=line_number, line=line
            ) from None


def _coordinate(
    line: str, number: int, *, min_fields: int = 4, max_fields: int = MAX_FIELDS
) -> CoordinateSpec:
    try:
        return parse_coordinate(line, min_fields=min_fields, max_fields=max_fields)
    except FormatError as exc:
        raise FormatError(exc.reason, line_number=number, line=line) from exc


def _relocations(lines: list[NumberedLine]) -> list[Artifact]:
    return [_coordinate(line, number, min_fields=3, max_fields=4).to_artifact() for number, line in lines]


def _repositories(lines: list[NumberedLine]) -> list[RemoteRepository]:
    repos: list[RemoteRepository] = []
    for number, line in lines:
        try:
            repos.append(parse_repository(line))
        except FormatError as exc:
            raise FormatError(exc.reason, line_number=number, line=line) from exc
    return repos


def _dependencies(lines: list[NumberedLine]) -> list[Dependency]:
    """Build dependencies, attaching each exclusion to the next coordinate line.

    Exclusions after the last coordinate line belong to the last dependency.
    """
    deps: list[Dependency] = []
    pending: Dependency | None = None
    exclusions: list[Exclusion] = []
    first_orphan: int | None = None

    for number, line in lines:
        if line.startswith(EXCLUSION_MARKER):
            if pending is None and first_orphan is None:
                first_orphan = number
            try:
                exclusions.append(parse_exclusion(line[len(EXCLUSION_MARKER):]))
            except FormatError as exc:
                raise FormatError(exc.reason, line_number=number, line=line) from exc
            continue

        if pending is not None:
            deps.append(pending)

        spec = _coordinate(line, number)
        pending = Dependency(
            artifact=spec.to_artifact(),
            scope=spec.scope or DEFAULT_SCOPE,
            optional=spec.optional,
            exclusions=exclusions,
        )
        exclusions = []

    if pending is not None:
        pending.exclusions.extend(exclusions)
        deps.append(pending)
    elif exclusions:
        raise FormatError("exclusions without a dependency to attach to", line_number=first_orphan)
    return deps


class ArtifactDescriptionReader:
    """Reads artifact descriptions from named resources, URLs or strings.

    Args:
        prefix: Prepended to every resource name passed to `parse`.
        config: Where named resources are looked up. Defaults to
            `FixtureConfig.from_env()`.
    """

    def __init__(self, prefix: str = "", config: FixtureConfig | None = None):
        self._prefix = prefix
        self._config = config or FixtureConfig.from_env()

    @property
    def prefix(self) -> str:
        return self._prefix

    def parse(self, resource: str) -> ArtifactDescription:
        """Load a named resource and parse it."""
        with open_resource(self._prefix + resource, self._config) as stream:
            return self.parse_lines(stream)

    def parse_url(self, url: str | Path) -> ArtifactDescription:
        """Open the given URL or path and parse it."""
        with open_url(url, self._config) as stream:
            return self.parse_lines(stream)

    def parse_literal(self, description: str) -> ArtifactDescription:
        """Parse the given string."""
        return self.parse_lines(description.splitlines())

    def parse_lines(self, lines: Iterable[str]) -> ArtifactDescription:
        """Parse raw lines into an `ArtifactDescription`.

        Raises:
            FormatError: On unknown or malformed section headers, content
                before the first header, or malformed section lines.
        """
        sections: dict[Section, list[NumberedLine]] = {}
        current: Section | None = None

        for number, raw in numbered_lines(lines):
            line = raw.strip()
            if not line:
                continue
            if line.startswith("["):
                current = Section.from_header(line, line_number=number)
                sections.setdefault(current, [])
            elif current is None:
                raise FormatError("content before the first section header", line_number=number, line=line)
            else:
                sections[current].append((number, line))

        description = ArtifactDescription(
            relocations=_relocations(sections.get(Section.RELOCATIONS, [])),
            dependencies=_dependencies(sections.get(Section.DEPENDENCIES, [])),
            managed_dependencies=_dependencies(sections.get(Section.MANAGED_DEPENDENCIES, [])),
            repositories=_repositories(sections.get(Section.REPOSITORIES, [])),
        )
        logger.debug(
            "Parsed artifact description: %d relocation(s), %d dependenc(ies), "
            "%d managed, %d repositor(ies)",
            len(description.relocations),
            len(description.dependencies),
            len(description.managed_dependencies),
            len(description.repositories),
        )
        return description
