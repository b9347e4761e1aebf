"""Coordinate grammar shared by the tree and section parsers.

    groupId:artifactId:version:extension[:scope[:optional]][;key=value[;key2=value2]]
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from j_dep_fixtures.exceptions import FormatError
from j_dep_fixtures.models import Artifact, Exclusion, RemoteRepository


MAX_FIELDS = 6
_OPTIONAL_TOKENS = {"optional": True, "true": True, "false": False, "": False}


class CoordinateSpec(BaseModel):
    """One parsed coordinate token."""

    group_id: str
    artifact_id: str
    version: str = ""
    extension: str = ""
    scope: str = ""
    optional: bool = False
    properties: dict[str, str] = Field(default_factory=dict)

    def to_artifact(self) -> Artifact:
        return Artifact(
            group_id=self.group_id,
            artifact_id=self.artifact_id,
            version=self.version,
            extension=self.extension,
            properties=dict(self.properties),
        )


def _parse_properties(text: str) -> dict[str, str]:
    props: dict[str, str] = {}
    for segment in text.split(";"):
        segment = segment.strip()
        if not segment:
            continue
        key, sep, value = segment.partition("=")
        key = key.strip()
        if not sep or not key:
            raise FormatError("property must be of the form key=value", line=segment)
        props[key] = value.strip()
    return props


def parse_coordinate(text: str, *, min_fields: int = 4, max_fields: int = MAX_FIELDS) -> CoordinateSpec:
    """Parse a coordinate with an optional property list.

    The 5th field is the scope and the 6th the optional flag; which one a
    value means depends only on its position.

    Args:
        text: A trimmed, comment-stripped coordinate.
        min_fields: Number of mandatory colon-delimited fields. The relocation
            section passes 3 to allow omitting the extension.
        max_fields: Number of colon-delimited fields allowed. The relocation
            section passes 4 since relocations carry no scope or flag.

    Raises:
        FormatError: If mandatory fields are missing or a field is malformed.

    Returns:
        The parsed `CoordinateSpec`.
    """
    coords, _, raw_props = text.strip().partition(";")
    fields = [f.strip() for f in coords.split(":")]

    if len(fields) < min_fields:
        raise FormatError(
            f"expected at least {min_fields} colon-delimited fields "
            "(groupId:artifactId:version:extension)",
            line=text,
        )
    if len(fields) > max_fields:
        raise FormatError(f"expected at most {max_fields} colon-delimited fields", line=text)
    if not fields[0] or not fields[1]:
        raise FormatError("groupId and artifactId must not be empty", line=text)

    fields += [""] * (MAX_FIELDS - len(fields))
    group_id, artifact_id, version, extension, scope, optional_token = fields

    optional = _OPTIONAL_TOKENS.get(optional_token.lower())
    if optional is None:
        raise FormatError(f"unrecognized optional flag {optional_token!r}", line=text)

    return CoordinateSpec(
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        extension=extension,
        scope=scope,
        optional=optional,
        properties=_parse_properties(raw_props),
    )


def parse_exclusion(text: str) -> Exclusion:
    """Parse `groupId:artifactId` into an `Exclusion`.

    Raises:
        FormatError: If the text does not have exactly two non-empty fields.
    """
    fields = [f.strip() for f in text.strip().split(":")]
    if len(fields) != 2 or not all(fields):
        raise FormatError("exclusion must be of the form groupId:artifactId", line=text)
    return Exclusion(group_id=fields[0], artifact_id=fields[1])


def parse_repository(text: str) -> RemoteRepository:
    """Parse `id:type:url`; the url keeps any colons after the second one.

    Raises:
        FormatError: If fewer than three parts are present.
    """
    parts = text.strip().split(":", 2)
    if len(parts) < 3 or not parts[0]:
        raise FormatError("repository must be of the form id:type:url", line=text)
    repo_id, repo_type, url = parts
    return RemoteRepository(id=repo_id, type=repo_type, url=url)
