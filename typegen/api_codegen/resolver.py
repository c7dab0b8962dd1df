"""
Schema resolution: maps OpenAPI schema objects to interned types.

Named component schemas are resolved at most once per resolver. References to
component schemas are kept as ``Reference`` placeholders unless the schema
name contains an underscore; such names denote internal variants that are
inlined instead of being declared on their own.
"""

from __future__ import annotations

import logging
from typing import Any, Final

from typegen.shared.errors import UnresolvedReferenceError, UnsupportedConstructError

from .types import Property, Type, TypeStore

logger = logging.getLogger(__name__)

SCHEMA_REF_PREFIX: Final[str] = "#/components/schemas/"


def is_inlined_name(name: str) -> bool:
    """Underscore-bearing schema names are inlined, never declared."""
    return "_" in name


def strip_schema_prefix(name: str) -> str:
    return name[len(SCHEMA_REF_PREFIX):] if name.startswith(SCHEMA_REF_PREFIX) else name


class SchemaResolver:
    """Resolves schemas of one document into types of one store."""

    def __init__(self, document: dict[str, Any], store: TypeStore) -> None:
        self.document = document
        self.store = store
        components = document.get("components") or {}
        self._schemas: dict[str, Any] = components.get("schemas") or {}
        self._by_name: dict[str, Type] = {}
        # Keyed by id(); the schema dict is kept alongside so the id stays valid
        self._inline: dict[int, tuple[dict[str, Any], Type]] = {}
        self._resolving: list[str] = []

    def schema_names(self) -> list[str]:
        """Component schema names in document order."""
        return list(self._schemas)

    @property
    def _location(self) -> str | None:
        if not self._resolving:
            return None
        return f"components.schemas.{self._resolving[-1]}"

    def _unsupported(self, construct: str) -> UnsupportedConstructError:
        return UnsupportedConstructError(construct, self._location)

    def _local_name(self, ref: Any) -> str:
        if not isinstance(ref, str) or not ref.startswith(SCHEMA_REF_PREFIX):
            raise self._unsupported(f"non-local reference {ref!r}")
        return ref[len(SCHEMA_REF_PREFIX):]

    def schema_by_name(self, name: str) -> dict[str, Any]:
        """Look up a component schema, following local alias references."""
        name = strip_schema_prefix(name)
        seen: list[str] = []
        while True:
            logger.debug("schema_by_name %s", name)
            schema = self._schemas.get(name)
            if schema is None:
                raise UnresolvedReferenceError(name, self._location)
            if not isinstance(schema, dict):
                raise UnsupportedConstructError(
                    "schema must be a mapping", f"components.schemas.{name}"
                )
            if "$ref" not in schema:
                return schema
            seen.append(name)
            name = self._local_name(schema["$ref"])
            if name in seen:
                raise UnsupportedConstructError(
                    f"alias cycle {' -> '.join(seen + [name])}",
                    f"components.schemas.{seen[0]}",
                )

    def type_by_name(self, name: str) -> Type:
        """Fully resolve a component schema by name. Memoized per name."""
        name = strip_schema_prefix(name)
        cached = self._by_name.get(name)
        if cached is not None:
            return cached
        if name in self._resolving:
            cycle = self._resolving[self._resolving.index(name):] + [name]
            raise self._unsupported(f"cyclic inlined reference {' -> '.join(cycle)}")

        schema = self.schema_by_name(name)
        self._resolving.append(name)
        try:
            ty = self._resolve_kind(schema)
        finally:
            self._resolving.pop()
        self._by_name[name] = ty
        return ty

    def resolve_shallow(self, schema: Any) -> Type:
        """Resolve a schema, keeping references to declared types as placeholders."""
        if not isinstance(schema, dict):
            raise self._unsupported(f"schema must be a mapping, got {type(schema).__name__}")
        if "$ref" in schema:
            name = self._local_name(schema["$ref"])
            if is_inlined_name(name):
                return self.type_by_name(name)
            if name not in self._schemas:
                raise UnresolvedReferenceError(name, self._location)
            return self.store.reference(name)
        return self.resolve_deep(schema)

    def resolve_deep(self, schema: dict[str, Any]) -> Type:
        """Resolve an inline schema. Memoized per schema object."""
        cached = self._inline.get(id(schema))
        if cached is not None and cached[0] is schema:
            return cached[1]
        if "$ref" in schema:
            ty = self.type_by_name(self._local_name(schema["$ref"]))
        else:
            ty = self._resolve_kind(schema)
        self._inline[id(schema)] = (schema, ty)
        return ty

    def _resolve_kind(self, schema: dict[str, Any]) -> Type:
        if "type" in schema:
            kind = schema["type"]
            if kind == "string":
                return self._resolve_string(schema)
            if kind in ("number", "integer"):
                return self.store.number
            if kind == "boolean":
                return self.store.boolean
            if kind == "object":
                return self._resolve_object(schema)
            if kind == "array":
                return self._resolve_array(schema)
            if isinstance(kind, list):
                raise self._unsupported(f"type list {kind!r}")
            raise self._unsupported(f"schema type {kind!r}")
        if "oneOf" in schema:
            return self.store.or_(self.resolve_shallow(item) for item in schema["oneOf"])
        if "allOf" in schema:
            return self.store.and_(self.resolve_shallow(item) for item in schema["allOf"])
        if "anyOf" in schema:
            raise self._unsupported("anyOf")
        if "not" in schema:
            raise self._unsupported("not")
        raise self._unsupported("free-form schema without a type")

    def _resolve_string(self, schema: dict[str, Any]) -> Type:
        values = schema.get("enum")
        if not values:
            return self.store.string
        for value in values:
            if not isinstance(value, str):
                raise self._unsupported(f"non-string enumeration value {value!r}")
        return self.store.or_(self.store.ident(value) for value in values)

    def _resolve_object(self, schema: dict[str, Any]) -> Type:
        required = set(schema.get("required") or ())
        properties: dict[str, Property] = {}
        for name, prop in (schema.get("properties") or {}).items():
            properties[name] = Property(
                type=self.resolve_shallow(prop),
                optional=name not in required,
            )

        discriminator = schema.get("discriminator")
        if discriminator is None:
            return self.store.object(properties)
        return self._resolve_discriminator(discriminator)

    def _resolve_discriminator(self, discriminator: dict[str, Any]) -> Type:
        extensions = [key for key in discriminator if key.startswith("x-")]
        if extensions:
            raise self._unsupported(f"discriminator extensions {extensions!r}")
        property_name = discriminator.get("propertyName")
        if not property_name:
            raise self._unsupported("discriminator without propertyName")
        mapping = discriminator.get("mapping") or {}
        if len(mapping) < 2:
            raise self._unsupported(f"discriminator with {len(mapping)} mapping entries")

        variants: list[Type] = []
        for tag, target in mapping.items():
            marker = self.store.object(
                {property_name: Property(self.store.ident(str(tag)))}
            )
            variants.append(self.store.and_([marker, self.type_by_name(target)]))
        return self.store.or_(variants)

    def _resolve_array(self, schema: dict[str, Any]) -> Type:
        items = schema.get("items")
        if items is None:
            raise self._unsupported("array without items")
        element = self.resolve_shallow(items)
        min_items = schema.get("minItems")
        max_items = schema.get("maxItems")
        if min_items is None and max_items is None:
            return self.store.array(element)
        if min_items is not None and min_items == max_items:
            return self.store.tuple([element] * min_items)
        raise self._unsupported(f"array bounds minItems={min_items} maxItems={max_items}")
