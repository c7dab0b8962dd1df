"""
Interned type representation.

Every type the generator reasons about is a ``Type`` handle obtained from a
``TypeStore``. The store hash-conses structural descriptions (``TypeKind``
values), so two structurally equal types are always the same handle and can
be compared with ``is``/``==`` in constant time. Kinds refer to their children
by handle, which keeps hashing and equality of a kind shallow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Union


@dataclass(frozen=True, slots=True)
class Property:
    """A field of an object type."""

    type: Type
    optional: bool = False


@dataclass(frozen=True, slots=True)
class Reference:
    """A named type declared at top level; never expanded in place."""

    name: str


@dataclass(frozen=True, slots=True)
class Object:
    """Object shape; ``fields`` is ordered by field name."""

    fields: tuple[tuple[str, Property], ...]

    def as_dict(self) -> dict[str, Property]:
        return dict(self.fields)


@dataclass(frozen=True, slots=True)
class Array:
    element: Type


@dataclass(frozen=True, slots=True)
class Tuple:
    elements: tuple[Type, ...]


@dataclass(frozen=True, slots=True)
class Or:
    options: tuple[Type, ...]


@dataclass(frozen=True, slots=True)
class And:
    options: tuple[Type, ...]


@dataclass(frozen=True, slots=True)
class Number:
    pass


@dataclass(frozen=True, slots=True)
class Ident:
    """A single string literal (enum members, discriminator tags)."""

    value: str


@dataclass(frozen=True, slots=True)
class String:
    pass


@dataclass(frozen=True, slots=True)
class Boolean:
    pass


TypeKind = Union[Reference, Object, Array, Tuple, Or, And, Number, Ident, String, Boolean]

# Rank of each kind in the canonical order
_KIND_RANKS: dict[type, int] = {
    kind: rank
    for rank, kind in enumerate(
        (Reference, Object, Array, Tuple, Or, And, Number, Ident, String, Boolean)
    )
}


def _sort_key(kind: TypeKind) -> tuple[Any, ...]:
    """Build the canonical ordering key of ``kind`` from its children's keys."""
    rank = _KIND_RANKS[type(kind)]
    if isinstance(kind, Reference):
        return (rank, kind.name)
    if isinstance(kind, Ident):
        return (rank, kind.value)
    if isinstance(kind, Object):
        return (
            rank,
            tuple((name, prop.optional, prop.type.sort_key) for name, prop in kind.fields),
        )
    if isinstance(kind, Array):
        return (rank, kind.element.sort_key)
    if isinstance(kind, Tuple):
        return (rank, tuple(el.sort_key for el in kind.elements))
    if isinstance(kind, (Or, And)):
        return (rank, tuple(opt.sort_key for opt in kind.options))
    return (rank,)


@dataclass(frozen=True, slots=True, eq=False)
class Type:
    """Canonical handle for an interned ``TypeKind``.

    Handles use identity equality and hashing. Ordering follows ``sort_key``,
    which depends only on structure, never on interning order.
    """

    index: int
    kind: TypeKind
    sort_key: tuple[Any, ...] = field(repr=False)

    def __lt__(self, other: Type) -> bool:
        return self.sort_key < other.sort_key

    def __repr__(self) -> str:
        return repr(self.kind)

    def constants(self) -> list[str] | None:
        """Literal values of an enum-shaped union, in member order."""
        if not isinstance(self.kind, Or):
            return None
        values: list[str] = []
        for option in self.kind.options:
            if not isinstance(option.kind, Ident):
                return None
            values.append(option.kind.value)
        return values


class TypeStore:
    """Hash-consing table of types.

    ``intern(a) is intern(b)`` holds exactly when ``a == b``. Interned types
    are never evicted; a store lives as long as one generation run.
    """

    __slots__ = ("_interned", "_types")

    def __init__(self) -> None:
        self._interned: dict[TypeKind, Type] = {}
        self._types: list[Type] = []

    def intern(self, kind: TypeKind) -> Type:
        existing = self._interned.get(kind)
        if existing is not None:
            return existing
        ty = Type(index=len(self._types), kind=kind, sort_key=_sort_key(kind))
        self._interned[kind] = ty
        self._types.append(ty)
        return ty

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, kind: object) -> bool:
        return kind in self._interned

    # Constructors

    def reference(self, name: str) -> Type:
        return self.intern(Reference(name))

    def object(self, fields: Mapping[str, Property]) -> Type:
        return self.intern(Object(tuple(sorted(fields.items(), key=lambda item: item[0]))))

    def array(self, element: Type) -> Type:
        return self.intern(Array(element))

    def tuple(self, elements: Iterable[Type]) -> Type:
        return self.intern(Tuple(tuple(elements)))

    def or_(self, options: Iterable[Type]) -> Type:
        return self.intern(Or(tuple(options)))

    def and_(self, options: Iterable[Type]) -> Type:
        return self.intern(And(tuple(options)))

    def ident(self, value: str) -> Type:
        return self.intern(Ident(value))

    @property
    def number(self) -> Type:
        return self.intern(Number())

    @property
    def string(self) -> Type:
        return self.intern(String())

    @property
    def boolean(self) -> Type:
        return self.intern(Boolean())
