"""Wire type classification for type descriptors."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from .names import name_of
from .types import Marker, Primitive, TypeDescriptor, WireType

logger = logging.getLogger(__name__)

# Primitives with a direct wire mapping
PRIMITIVE_WIRE_TYPES: dict[Primitive, WireType] = {
    Primitive.INT32: WireType.INT32,
    Primitive.INT64: WireType.INT64,
    Primitive.BOOLEAN: WireType.BOOLEAN,
    Primitive.STRING: WireType.STRING,
    Primitive.DOUBLE: WireType.DOUBLE,
    Primitive.DATETIME: WireType.DATETIME,
    Primitive.VOID: WireType.VOID,
}


class WireTypeClassifier:
    """Classify type descriptors into wire types.

    A classifier tracks the member types currently being validated so that
    self-referential composites terminate. Use one instance per top-level
    classification; ``classify()`` does this for you.
    """

    def __init__(self) -> None:
        self._visiting: list[TypeDescriptor] = []

    @property
    def visiting(self) -> tuple[TypeDescriptor, ...]:
        """Member types currently being validated, outermost first."""
        return tuple(self._visiting)

    @contextmanager
    def _visit(self, t: TypeDescriptor) -> Iterator[None]:
        self._visiting.append(t)
        try:
            yield
        finally:
            self._visiting.pop()

    def classify(self, t: TypeDescriptor) -> WireType:
        """Classify a type. Never raises; unmappable types are INVALID."""
        if t.nullable_of is not None:
            return self.classify(t.nullable_of)

        if t.primitive in PRIMITIVE_WIRE_TYPES:
            return PRIMITIVE_WIRE_TYPES[t.primitive]

        # Must precede the array check, byte sequences are arrays too
        if t.primitive == Primitive.BYTES:
            return WireType.BINARY

        if t.marker == Marker.STRUCT:
            return WireType.STRUCT

        if t.marker == Marker.ANY_ARRAY:
            return WireType.ARRAY

        if t.element_type is not None:
            return self.classify_array(t, t.element_type)

        if t.is_map_like:
            return WireType.MAP

        if t.is_sequence_like:
            return WireType.SEQUENCE

        if t.is_composite and t.primitive == Primitive.NONE:
            return self.classify_composite(t)

        return WireType.INVALID

    def classify_array(self, t: TypeDescriptor, element: TypeDescriptor) -> WireType:
        """Classify an array type by its element type and rank."""
        if not element.is_any and self.classify(element) == WireType.INVALID:
            logger.debug("%s rejected: element type %s has no wire mapping", t.name, element.name)
            return WireType.INVALID

        return WireType.ARRAY if t.rank == 1 else WireType.MULTI_ARRAY

    def classify_composite(self, t: TypeDescriptor) -> WireType:
        """Validate a composite type member by member.

        A composite maps to STRUCT only if every member maps to a wire type
        or is of the "any" type. Member types already being validated
        further up are skipped, not re-checked.
        """
        for member in t.members:
            if member.type in self._visiting:
                continue

            with self._visit(member.type):
                if member.type.is_any:
                    continue
                if self.classify(member.type) == WireType.INVALID:
                    logger.debug(
                        "%s rejected: member %s of type %s has no wire mapping",
                        t.name,
                        member.name,
                        member.type.name,
                    )
                    return WireType.INVALID

        return WireType.STRUCT


def classify(t: TypeDescriptor) -> WireType:
    """Classify a type descriptor into its wire type."""
    return WireTypeClassifier().classify(t)


def type_name(t: TypeDescriptor) -> str | None:
    """Return the wire type name for a type, or None if it has no mapping."""
    return name_of(classify(t))
