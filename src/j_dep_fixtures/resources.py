"""Open fixture resources by name, URL or path."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO
from urllib.error import URLError
from urllib.request import urlopen

from j_dep_fixtures.config import FixtureConfig
from j_dep_fixtures.exceptions import ResourceNotFoundError, ResourceReadError


logger = logging.getLogger(__name__)


def find_resource(name: str, config: FixtureConfig) -> Path:
    """Look `name` up in each directory of the search path.

    Args:
        name: A `/`-separated resource name, relative to the search path.
        config: Fixture configuration.

    Raises:
        ResourceNotFoundError: If no directory contains the resource.

    Returns:
        Path of the first match.
    """
    relative = Path(*[part for part in name.split("/") if part])
    for root in config.search_path:
        candidate = root / relative
        if candidate.is_file():
            logger.debug("Resolved resource %s -> %s", name, candidate)
            return candidate
    searched = ", ".join(str(p) for p in config.search_path)
    raise ResourceNotFoundError(f"cannot find resource: {name} (searched: {searched})")


@contextmanager
def open_resource(name: str, config: FixtureConfig) -> Iterator[TextIO]:
    """Open a named resource for reading; the stream is closed on exit."""
    path = find_resource(name, config)
    with open_url(path, config) as stream:
        yield stream


@contextmanager
def open_url(url: str | Path, config: FixtureConfig) -> Iterator[TextIO]:
    """Read a URL (file:, http:, https:) or local path into memory.

    Raises:
        ResourceNotFoundError: If a local path does not exist.
        ResourceReadError: If the resource cannot be opened or decoded.
    """
    if isinstance(url, Path):
        if not url.is_file():
            raise ResourceNotFoundError(f"cannot find resource: {url}")
        try:
            raw = url.open("rb")
        except OSError as exc:
            raise ResourceReadError(f"Failed to open resource: {url}") from exc
    else:
        try:
            raw = urlopen(url)
        except (OSError, URLError, ValueError) as exc:
            raise ResourceReadError(f"Failed to open resource: {url}") from exc

    with raw:
        try:
            text = raw.read().decode(config.encoding)
        except LookupError as exc:
            raise ResourceReadError(f"Unsupported encoding {config.encoding!r} for resource: {url}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise ResourceReadError(f"Failed to read resource: {url}") from exc
    with io.StringIO(text) as stream:
        yield stream
