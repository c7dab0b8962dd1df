"""Generate strongly typed API clients from OpenAPI documents."""

__version__ = "0.1.0"
