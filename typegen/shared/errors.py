"""Custom exceptions for the generator."""

from __future__ import annotations


class GenerationError(Exception):
    """Base exception for everything that aborts a generation run.

    ``location`` names the offending schema or operation. It may be filled in
    after the fact by an outer stage that knows more context, which is why the
    message is formatted lazily.
    """

    def __init__(self, message: str, location: str | None = None) -> None:
        self.message = message
        self.location = location
        super().__init__(message)

    def __str__(self) -> str:
        if not self.location:
            return self.message
        return f"[{self.location}] {self.message}"


class UnresolvedReferenceError(GenerationError):
    """Raised when a named schema reference does not exist in the document."""

    def __init__(self, reference: str, location: str | None = None) -> None:
        self.reference = reference
        super().__init__(f"Unresolved reference '{reference}'", location)


class UnsupportedConstructError(GenerationError):
    """Raised for OpenAPI features the generator deliberately does not handle."""

    def __init__(self, construct: str, location: str | None = None) -> None:
        self.construct = construct
        super().__init__(f"Unsupported construct: {construct}", location)


class TypeMismatchError(GenerationError):
    """Raised when a resolved type does not fit the media type that carries it."""

    def __init__(
        self,
        expected: str,
        actual: str,
        location: str | None = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected}, got {actual}", location)


class DocumentError(GenerationError):
    """Raised when the OpenAPI document cannot be read or parsed."""


class ConfigError(GenerationError):
    """Raised when the generation config does not fit the document."""
