"""Type descriptors and wire type tags used by the classifier."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import StrEnum, auto
from functools import cached_property
from typing import Any


class WireType(StrEnum):
    """Wire protocol type tags.

    The taxonomy is finer than the textual wire names: MAP and STRUCT share
    the "struct" name, SEQUENCE, ARRAY and MULTI_ARRAY share "array".
    """

    INT32 = auto()
    INT64 = auto()
    BOOLEAN = auto()
    STRING = auto()
    DOUBLE = auto()
    DATETIME = auto()
    BINARY = auto()
    STRUCT = auto()
    MAP = auto()
    SEQUENCE = auto()
    ARRAY = auto()
    MULTI_ARRAY = auto()
    VOID = auto()
    INVALID = auto()


class Primitive(StrEnum):
    """Primitive kind of a host type."""

    NONE = auto()  # Not a primitive
    INT32 = auto()
    INT64 = auto()
    BOOLEAN = auto()
    STRING = auto()
    DOUBLE = auto()
    DATETIME = auto()
    BYTES = auto()
    VOID = auto()
    OTHER = auto()  # Host primitive with no wire mapping (int16, float32, enums...)


class Marker(StrEnum):
    """Library-level marker types with fixed classifications."""

    NONE = auto()
    ANY = auto()  # Accepts any wire value at serialization time
    STRUCT = auto()  # Untyped struct literal
    ANY_ARRAY = auto()  # Untyped array


@dataclass(frozen=True)
class Member:
    """A data member (field or property) of a composite type."""

    name: str
    type: "TypeDescriptor"


@dataclass(frozen=True)
class TypeDescriptor:
    """Read-only view over a host type.

    Members of composite types can be given directly with ``static_members``
    or computed on first access by ``resolve_members``, which is how
    self-referential types are expressed. The resolver takes no part in
    equality, so descriptors built lazily should carry the host type in
    ``origin`` to stay distinguishable.

    For arrays:
    - element_type=None: not an array
    - rank=1: single-dimensional, rank>1: multi-dimensional
    """

    name: str
    primitive: Primitive = Primitive.NONE
    marker: Marker = Marker.NONE
    element_type: "TypeDescriptor | None" = None
    rank: int = 0
    nullable_of: "TypeDescriptor | None" = None
    is_map_like: bool = False
    is_sequence_like: bool = False
    is_composite: bool = False
    static_members: tuple[Member, ...] = ()
    origin: Any = field(default=None, repr=False)
    resolve_members: Callable[[], Iterable[Member]] | None = field(
        default=None, compare=False, repr=False
    )

    @property
    def is_array(self) -> bool:
        return self.element_type is not None

    @property
    def is_any(self) -> bool:
        return self.marker == Marker.ANY

    @cached_property
    def members(self) -> tuple[Member, ...]:
        if self.resolve_members is not None:
            return self.static_members + tuple(self.resolve_members())
        return self.static_members


def primitive_type(primitive: Primitive, name: str | None = None) -> TypeDescriptor:
    """Create a descriptor for a primitive type."""
    return TypeDescriptor(name=name or primitive.value, primitive=primitive)


def array_of(element: TypeDescriptor, rank: int = 1) -> TypeDescriptor:
    """Create a descriptor for an array of ``element`` with the given rank."""
    suffix = "[" + "," * (rank - 1) + "]"
    return TypeDescriptor(name=f"{element.name}{suffix}", element_type=element, rank=rank)


def nullable(underlying: TypeDescriptor) -> TypeDescriptor:
    """Create a descriptor for an optional wrapper of ``underlying``."""
    return TypeDescriptor(name=f"{underlying.name}?", nullable_of=underlying)


def composite(name: str, members: Iterable[tuple[str, TypeDescriptor]] = ()) -> TypeDescriptor:
    """Create a descriptor for a record type with the given members."""
    return TypeDescriptor(
        name=name,
        is_composite=True,
        static_members=tuple(Member(member_name, t) for member_name, t in members),
    )


ANY = TypeDescriptor(name="any", marker=Marker.ANY, is_composite=True)
STRUCT_LITERAL = TypeDescriptor(name="struct", marker=Marker.STRUCT)
ANY_ARRAY = TypeDescriptor(name="array", marker=Marker.ANY_ARRAY)
