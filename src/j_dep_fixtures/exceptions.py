"""Custom exceptions for J-Dep Fixtures."""

from __future__ import annotations


class JDepFixtureError(Exception):
    """Base exception for J-Dep Fixtures."""


class ResourceNotFoundError(JDepFixtureError):
    """Raised when a named fixture resource cannot be found on the search path."""


class ResourceReadError(JDepFixtureError):
    """Raised when a fixture resource exists but cannot be read."""


class FormatError(JDepFixtureError):
    """Raised when a fixture line does not follow the grammar.

    Args:
        message: What is wrong with the input.
        line_number: 1-based line number in the resource, when known.
        line: The offending line, when known.
    """

    def __init__(self, message: str, *, line_number: int | None = None, line: str | None = None):
        self.reason = message
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
        if line is not None:
            message = f"{message}: {line!r}"
        super().__init__(message)


class DuplicateTagError(FormatError):
    """Raised when a tag is bound twice within one graph definition."""


class UnresolvedReferenceError(JDepFixtureError):
    """Raised when a back-reference names a tag that was never bound."""

    def __init__(self, tag: str, *, line_number: int | None = None):
        self.tag = tag
        self.line_number = line_number
        message = f"unresolved reference: ^{tag}"
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class SubstitutionError(JDepFixtureError):
    """Raised when a `%s` placeholder remains after the substitution list is used up."""
