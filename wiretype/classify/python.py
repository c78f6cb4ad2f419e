"""Type descriptors for Python annotations.

Maps Python types and typing constructs onto ``TypeDescriptor`` so they
can be classified:

    int -> INT32, Int64 -> INT64, bool, str, float, datetime, bytes
    NewType("UserId", str) -> its supertype
    X | None -> nullable X
    list[T], tuple[T, ...] -> array of T, Matrix[T] -> two-dimensional array
    dict and other mappings -> map-like, other iterables -> sequence-like
    dataclasses and annotated classes -> composite
"""

import inspect
import logging
import sys
import types
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import (
    Annotated,
    Any,
    ClassVar,
    ForwardRef,
    Generic,
    NewType,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from .types import ANY, ANY_ARRAY, STRUCT_LITERAL, Member, Primitive, TypeDescriptor

logger = logging.getLogger(__name__)

# Raised by typing while evaluating a bad or unknown annotation
RESOLUTION_ERRORS = (NameError, SyntaxError, TypeError, AttributeError)

Int64 = NewType("Int64", int)
"""Annotation for integers sent as 64-bit ``i8`` values."""

T = TypeVar("T")


class StructLiteral(dict[str, Any]):
    """Untyped struct value, a string-keyed dict of arbitrary wire values."""


class Matrix(Generic[T]):
    """Annotation for a two-dimensional array of ``T``."""


PYTHON_PRIMITIVES: dict[Any, Primitive] = {
    bool: Primitive.BOOLEAN,
    int: Primitive.INT32,
    Int64: Primitive.INT64,
    str: Primitive.STRING,
    float: Primitive.DOUBLE,
    datetime: Primitive.DATETIME,
    bytes: Primitive.BYTES,
    bytearray: Primitive.BYTES,
    memoryview: Primitive.BYTES,
    types.NoneType: Primitive.VOID,
    complex: Primitive.OTHER,
    Decimal: Primitive.OTHER,
    date: Primitive.OTHER,
    time: Primitive.OTHER,
    timedelta: Primitive.OTHER,
}


def type_label(annotation: Any) -> str:
    """Return a short readable name for an annotation."""
    if annotation is None or annotation is types.NoneType:
        return "None"
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, type) and not get_args(annotation):
        return annotation.__name__
    if hasattr(annotation, "__supertype__"):
        return annotation.__name__
    return str(annotation).replace("typing.", "")


def _raw_annotations(source: Any) -> dict[str, Any]:
    try:
        return dict(inspect.get_annotations(source))
    except NameError:
        import annotationlib  # pylint: disable=import-outside-toplevel

        # Annotations are evaluated lazily on 3.14+
        return dict(annotationlib.get_annotations(source, format=annotationlib.Format.FORWARDREF))


def _resolve_annotation(annotation: Any, globalns: dict[str, Any], localns: dict[str, Any]) -> Any:
    """Resolve a single annotation, or return its text if it cannot be resolved."""
    try:
        if isinstance(annotation, str):
            annotation = ForwardRef(annotation, is_argument=False, is_class=True)
        holder = types.SimpleNamespace(__annotations__={"value": annotation})
        return get_type_hints(holder, globalns=globalns, localns=localns, include_extras=True)["value"]
    except RESOLUTION_ERRORS as exc:
        logger.debug("Could not resolve annotation %r: %s", annotation, exc)
        if isinstance(annotation, ForwardRef):
            return annotation.__forward_arg__
        return type_label(annotation)


def type_hints(obj: Any) -> dict[str, Any]:
    """Return resolved annotations of a class or function.

    Annotations that cannot be resolved are left as strings instead of
    failing the whole lookup.
    """
    try:
        return get_type_hints(obj, include_extras=True)
    except RESOLUTION_ERRORS:
        pass

    hints: dict[str, Any] = {}
    sources = reversed(obj.__mro__) if isinstance(obj, type) else [obj]
    for source in sources:
        module = sys.modules.get(getattr(source, "__module__", None) or "", None)
        globalns = dict(vars(module)) if module else {}
        localns: dict[str, Any] = {}
        if isinstance(source, type):
            localns.update(vars(source))
            localns.setdefault(source.__name__, source)
        for name, annotation in _raw_annotations(source).items():
            hints[name] = _resolve_annotation(annotation, globalns, localns)
    return hints


def _property_members(cls: type) -> list[Member]:
    members: list[Member] = []
    seen: set[str] = set()
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if name.startswith("_") or name in seen or not isinstance(attr, property):
                continue
            seen.add(name)
            returns = type_hints(attr.fget).get("return", Any) if attr.fget else Any
            members.append(Member(name, descriptor_for(returns)))
    return members


def class_members(cls: type) -> list[Member]:
    """Return the public fields and properties of a class, fields first."""
    members: list[Member] = []
    for name, annotation in type_hints(cls).items():
        if name.startswith("_") or get_origin(annotation) is ClassVar or annotation is ClassVar:
            continue
        members.append(Member(name, descriptor_for(annotation)))

    field_names = {m.name for m in members}
    members.extend(m for m in _property_members(cls) if m.name not in field_names)
    return members


def _primitive_of(annotation: Any) -> Primitive | None:
    try:
        return PYTHON_PRIMITIVES.get(annotation)
    except TypeError:
        # Unhashable typing construct
        return None


def _describe_union(annotation: Any, args: tuple[Any, ...]) -> TypeDescriptor:
    non_none = [arg for arg in args if arg is not types.NoneType]
    if len(non_none) == 1 and len(args) == 2:
        return TypeDescriptor(
            name=type_label(annotation),
            nullable_of=descriptor_for(non_none[0]),
            origin=annotation,
        )
    return TypeDescriptor(name=type_label(annotation), origin=annotation)


def _describe_array(annotation: Any, element: Any, rank: int = 1) -> TypeDescriptor:
    return TypeDescriptor(
        name=type_label(annotation),
        element_type=descriptor_for(element),
        rank=rank,
        origin=annotation,
    )


def descriptor_for(annotation: Any) -> TypeDescriptor:
    """Create a type descriptor for a Python annotation."""
    if annotation is None:
        annotation = types.NoneType

    # Unresolved forward reference
    if isinstance(annotation, str):
        return TypeDescriptor(name=annotation, origin=annotation)

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Annotated:
        return descriptor_for(args[0])

    primitive = _primitive_of(annotation)
    if primitive is not None:
        return TypeDescriptor(name=type_label(annotation), primitive=primitive, origin=annotation)

    # User NewTypes carry the values of their supertype
    supertype = getattr(annotation, "__supertype__", None)
    if supertype is not None:
        return descriptor_for(supertype)

    if annotation is Any or annotation is object:
        return ANY
    if annotation is StructLiteral:
        return STRUCT_LITERAL
    if annotation is list or annotation is tuple:
        return ANY_ARRAY

    if origin is Union or origin is types.UnionType:
        return _describe_union(annotation, args)

    if origin is Matrix or annotation is Matrix:
        return _describe_array(annotation, args[0] if args else Any, rank=2)
    if origin is list:
        return _describe_array(annotation, args[0])
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return _describe_array(annotation, args[0])
        # Heterogeneous tuples hold values of mixed types
        return _describe_array(annotation, Any)

    base = origin if origin is not None else annotation
    if not isinstance(base, type) or base is Callable or base is type:
        # TypeVar, Literal, Callable, type[X] and other typing constructs
        return TypeDescriptor(name=type_label(annotation), origin=annotation)

    if issubclass(base, Enum):
        return TypeDescriptor(name=type_label(annotation), primitive=Primitive.OTHER, origin=annotation)

    if issubclass(base, Mapping):
        return TypeDescriptor(name=type_label(annotation), is_map_like=True, origin=annotation)

    if issubclass(base, Iterable):
        return TypeDescriptor(name=type_label(annotation), is_sequence_like=True, origin=annotation)

    return TypeDescriptor(
        name=type_label(annotation),
        is_composite=True,
        origin=annotation,
        resolve_members=lambda: class_members(base),
    )
