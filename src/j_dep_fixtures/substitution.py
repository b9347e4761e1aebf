"""Positional `%s` substitution for fixture lines."""

from __future__ import annotations

import re
from collections.abc import Iterable

from j_dep_fixtures.exceptions import SubstitutionError


PLACEHOLDER = "%s"
_PLACEHOLDER_RE = re.compile(re.escape(PLACEHOLDER))


class SubstitutionCursor:
    """Consumes replacement values left to right, top to bottom.

    One cursor serves exactly one graph definition.
    """

    def __init__(self, values: tuple[str, ...]):
        self._values = values
        self._next = 0

    @property
    def consumed(self) -> int:
        return self._next

    def apply(self, line: str) -> str:
        """Replace every placeholder in `line` with the next unused value.

        Raises:
            SubstitutionError: If the values run out.
        """
        if PLACEHOLDER not in line:
            return line

        def _sub(m: re.Match[str]) -> str:
            if self._next >= len(self._values):
                raise SubstitutionError(
                    f"placeholder #{self._next + 1} has no value "
                    f"({len(self._values)} substitution(s) supplied)"
                )
            value = self._values[self._next]
            self._next += 1
            return value

        return _PLACEHOLDER_RE.sub(_sub, line)


class Substitutions:
    """An immutable, ordered list of replacement values."""

    def __init__(self, values: Iterable[str] = ()):
        self._values = tuple(str(v) for v in values)

    @property
    def values(self) -> tuple[str, ...]:
        return self._values

    def cursor(self) -> SubstitutionCursor:
        return SubstitutionCursor(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Substitutions({list(self._values)!r})"
