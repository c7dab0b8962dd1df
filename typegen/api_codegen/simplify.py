"""Canonicalization of resolved types."""

from __future__ import annotations

from .types import And, Array, Ident, Object, Or, Property, Reference, String, Tuple, Type, TypeStore


class Simplifier:
    """Rewrites types into canonical form.

    ``simplify`` is memoized per handle and idempotent. Union and intersection
    members are sorted by the store's canonical order and deduplicated;
    intersections of object shapes are merged into one object.
    """

    __slots__ = ("store", "_cache")

    def __init__(self, store: TypeStore) -> None:
        self.store = store
        self._cache: dict[Type, Type] = {}

    def simplify(self, ty: Type) -> Type:
        cached = self._cache.get(ty)
        if cached is None:
            cached = self._cache[ty] = self._simplify(ty)
        return cached

    def _canonical_members(self, options: tuple[Type, ...]) -> list[Type]:
        return sorted({self.simplify(option) for option in options})

    def _simplify(self, ty: Type) -> Type:
        kind = ty.kind
        if isinstance(kind, Reference):
            return ty
        if isinstance(kind, Object):
            return self.store.object(
                {
                    name: Property(self.simplify(prop.type), prop.optional)
                    for name, prop in kind.fields
                }
            )
        if isinstance(kind, Array):
            return self.store.array(self.simplify(kind.element))
        if isinstance(kind, Tuple):
            return self.store.tuple(self.simplify(element) for element in kind.elements)
        if isinstance(kind, Or):
            return self.store.or_(self._canonical_members(kind.options))
        if isinstance(kind, And):
            options = self._canonical_members(kind.options)
            if all(isinstance(option.kind, Object) for option in options):
                return self.store.object(merge_fields(options))
            return self.store.and_(options)
        return ty


def merge_fields(objects: list[Type]) -> dict[str, Property]:
    """Merge object shapes in order; later fields win.

    A literal tag already present is kept when a later shape declares the same
    field as a plain string, so discriminator markers survive the merge with
    the variant schema.
    """
    fields: dict[str, Property] = {}
    for obj in objects:
        for name, prop in obj.kind.fields:
            old = fields.get(name)
            if (
                old is not None
                and isinstance(old.type.kind, Ident)
                and isinstance(prop.type.kind, String)
            ):
                continue
            fields[name] = prop
    return fields
