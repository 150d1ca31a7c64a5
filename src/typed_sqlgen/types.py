"""Language-neutral type descriptors produced by the type mapper."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class TypeCategory(Enum):
    """Closed set of target type categories."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    BINARY = "binary"
    TIMESTAMP = "timestamp"
    OPAQUE = "opaque"
    ENUM_REF = "enum_ref"
    STRING = "string"
    VOID = "void"


@dataclass
class TypeRef:
    """Base class for all type descriptors."""

    @property
    def is_nullable(self) -> bool:
        """Return whether this descriptor admits the null marker."""
        return False

    def children(self) -> tuple[TypeRef, ...]:
        """Return the descriptors nested directly inside this one."""
        return ()


@dataclass
class PrimitiveTypeRef(TypeRef):
    """A built-in target type (boolean, number, string, ...)."""

    category: TypeCategory


@dataclass
class EnumTypeRef(TypeRef):
    """Reference to a generated enum union type.

    ``key`` is the enum lookup key, ``name`` the generated declaration name.
    """

    key: str
    name: str


@dataclass
class TypeReference(TypeRef):
    """Reference to a named type, optionally generic (``Promise<T>``)."""

    name: str
    args: tuple[TypeRef, ...] = ()

    def children(self) -> tuple[TypeRef, ...]:
        return self.args


@dataclass
class ArrayTypeRef(TypeRef):
    """One level of "sequence of"."""

    element: TypeRef

    @property
    def dims(self) -> int:
        """Return the nesting depth of this array type."""
        depth = 1
        element = self.element
        while isinstance(element, ArrayTypeRef):
            depth += 1
            element = element.element
        return depth

    def children(self) -> tuple[TypeRef, ...]:
        return (self.element,)


@dataclass
class NullTypeRef(TypeRef):
    """The null marker."""


@dataclass
class UnionTypeRef(TypeRef):
    """Union of alternatives, e.g. ``string | null``."""

    members: tuple[TypeRef, ...] = field(default_factory=tuple)

    @property
    def is_nullable(self) -> bool:
        return any(isinstance(m, NullTypeRef) for m in self.members)

    def children(self) -> tuple[TypeRef, ...]:
        return self.members


@dataclass
class StringLiteralTypeRef(TypeRef):
    """A single string literal type, used by enum unions."""

    value: str


@dataclass
class TupleTypeRef(TypeRef):
    """Fixed-length positional tuple type."""

    elements: tuple[TypeRef, ...] = field(default_factory=tuple)

    def children(self) -> tuple[TypeRef, ...]:
        return self.elements


NULL = NullTypeRef()
ANY = PrimitiveTypeRef(TypeCategory.OPAQUE)
VOID = PrimitiveTypeRef(TypeCategory.VOID)
NUMBER = PrimitiveTypeRef(TypeCategory.INTEGER)


def nullable(type_ref: TypeRef) -> UnionTypeRef:
    """Wrap a descriptor in ``T | null``."""
    return UnionTypeRef((type_ref, NULL))


def promise_of(type_ref: TypeRef) -> TypeReference:
    """Wrap a descriptor in ``Promise<T>``."""
    return TypeReference("Promise", (type_ref,))


def iter_enum_refs(type_ref: TypeRef) -> Iterator[EnumTypeRef]:
    """Yield every enum reference nested inside a descriptor."""
    if isinstance(type_ref, EnumTypeRef):
        yield type_ref
    for child in type_ref.children():
        yield from iter_enum_refs(child)
