"""Wire protocol type names."""

from .types import WireType

# Names written into introspection responses
WIRE_TYPE_NAMES: dict[WireType, str] = {
    WireType.INT32: "integer",
    WireType.INT64: "i8",
    WireType.BOOLEAN: "boolean",
    WireType.STRING: "string",
    WireType.DOUBLE: "double",
    WireType.DATETIME: "dateTime",
    WireType.BINARY: "base64",
    WireType.STRUCT: "struct",
    WireType.MAP: "struct",
    WireType.SEQUENCE: "array",
    WireType.ARRAY: "array",
    WireType.MULTI_ARRAY: "array",
    WireType.VOID: "void",
}


def name_of(t: WireType) -> str | None:
    """Return the wire name for a wire type, or None for INVALID."""
    return WIRE_TYPE_NAMES.get(t)
