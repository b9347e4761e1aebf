"""Fixture resource configuration.

The search path plays the role of a classpath: named resources are looked up
in each directory in order. Configuration is read from environment variables.
"""
from __future__ import annotations

import codecs
import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class FixtureConfig:
    """Fixture loading configuration container.

    Attributes:
        search_path: Directories searched, in order, for named resources.
        encoding: Text encoding of fixture files.
    """

    search_path: tuple[Path, ...] = field(default_factory=lambda: (Path.cwd(),))
    encoding: str = "utf-8"

    @classmethod
    def from_env(cls) -> "FixtureConfig":
        """Create configuration from environment variables.

        Environment variables:
            JDEP_FIXTURES_PATH: os.pathsep-separated directories (default: current directory)
            JDEP_FIXTURES_ENCODING: Fixture file encoding (default: "utf-8")
        """
        raw_path = os.getenv("JDEP_FIXTURES_PATH", "")
        search_path = tuple(Path(p).resolve() for p in raw_path.split(os.pathsep) if p.strip())
        return cls(
            search_path=search_path or (Path.cwd(),),
            encoding=os.getenv("JDEP_FIXTURES_ENCODING", "utf-8"),
        )

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: If the search path is empty or the encoding is unknown.
        """
        if not self.search_path:
            raise ValueError("JDEP_FIXTURES_PATH must name at least one directory")
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(f"Unsupported encoding: {self.encoding}") from None
