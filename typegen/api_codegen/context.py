"""Per-run generation state: the document, its config and every cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .operations import Operation, extract_operations
from .resolver import SchemaResolver
from .simplify import Simplifier
from .types import Type, TypeStore


@dataclass(frozen=True, slots=True)
class GenerationConfig:
    """Options that shape the generated client."""

    # Common path prefix stripped before deriving operation names
    api_prefix: str | None = None

    @classmethod
    def from_prefix(cls, raw: str | None) -> GenerationConfig:
        if raw is None:
            return cls()
        prefix = raw.rstrip("/")
        return cls(api_prefix=prefix or None)


@dataclass
class GenerationContext:
    """Owns the type store and the resolution caches for one document.

    A schema referenced from many operations is resolved and simplified once
    per context.
    """

    document: dict[str, Any]
    config: GenerationConfig = field(default_factory=GenerationConfig)
    store: TypeStore = field(init=False)
    resolver: SchemaResolver = field(init=False)
    simplifier: Simplifier = field(init=False)

    def __post_init__(self) -> None:
        self.store = TypeStore()
        self.resolver = SchemaResolver(self.document, self.store)
        self.simplifier = Simplifier(self.store)

    def schema_names(self) -> list[str]:
        return self.resolver.schema_names()

    def schema_type(self, name: str) -> Type:
        """Canonical type of a component schema."""
        return self.simplifier.simplify(self.resolver.type_by_name(name))

    def operations(self) -> list[Operation]:
        return extract_operations(self)
