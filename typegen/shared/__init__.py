"""Shared utilities for the generator."""

from .document_loader import (
    fetch_document,
    load_document,
    parse_document,
    read_document_file,
)
from .naming import (
    pluralize,
    singularize,
    to_lower_camel_case,
    to_shouty_snake_case,
)
from .errors import (
    ConfigError,
    DocumentError,
    GenerationError,
    TypeMismatchError,
    UnresolvedReferenceError,
    UnsupportedConstructError,
)

__all__ = [
    # Document loading
    "fetch_document",
    "load_document",
    "parse_document",
    "read_document_file",
    # Naming utilities
    "pluralize",
    "singularize",
    "to_lower_camel_case",
    "to_shouty_snake_case",
    # Errors
    "ConfigError",
    "DocumentError",
    "GenerationError",
    "TypeMismatchError",
    "UnresolvedReferenceError",
    "UnsupportedConstructError",
]
