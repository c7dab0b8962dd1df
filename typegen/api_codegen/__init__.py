"""API Code Generator - Generates a typed client module from an OpenAPI document."""

from .context import GenerationConfig, GenerationContext
from .operations import (
    EventStreamResponse,
    JsonRequest,
    JsonResponse,
    Operation,
    PlainResponse,
    extract_operations,
)
from .resolver import SchemaResolver
from .simplify import Simplifier
from .types import Property, Type, TypeStore
from .ts import generate_ts, render_type
from .main import TARGETS, generate

__all__ = [
    "GenerationConfig",
    "GenerationContext",
    "EventStreamResponse",
    "JsonRequest",
    "JsonResponse",
    "Operation",
    "PlainResponse",
    "extract_operations",
    "SchemaResolver",
    "Simplifier",
    "Property",
    "Type",
    "TypeStore",
    "generate_ts",
    "render_type",
    "TARGETS",
    "generate",
]
