"""Tests for wire type classification"""

# pylint: disable=redefined-outer-name,unused-variable,expression-not-assigned,singleton-comparison

import pytest

from wiretype.classify import WireTypeClassifier, classify, type_name
from wiretype.classify.types import (
    ANY,
    ANY_ARRAY,
    STRUCT_LITERAL,
    Member,
    Primitive,
    TypeDescriptor,
    WireType,
    array_of,
    composite,
    nullable,
    primitive_type,
)

INT32 = primitive_type(Primitive.INT32)
STRING = primitive_type(Primitive.STRING)
BYTES = primitive_type(Primitive.BYTES)
INT16 = primitive_type(Primitive.OTHER, "int16")


def describe_primitives():
    @pytest.mark.parametrize(
        "primitive,expected",
        [
            (Primitive.INT32, WireType.INT32),
            (Primitive.INT64, WireType.INT64),
            (Primitive.BOOLEAN, WireType.BOOLEAN),
            (Primitive.STRING, WireType.STRING),
            (Primitive.DOUBLE, WireType.DOUBLE),
            (Primitive.DATETIME, WireType.DATETIME),
            (Primitive.VOID, WireType.VOID),
        ],
    )
    def maps_primitive(expect, primitive, expected):
        expect(classify(primitive_type(primitive))) == expected

    def maps_nullable_like_underlying(expect):
        expect(classify(nullable(primitive_type(Primitive.INT64)))) == WireType.INT64
        expect(classify(nullable(primitive_type(Primitive.DATETIME)))) == WireType.DATETIME

    def rejects_unmapped_primitive(expect):
        expect(classify(INT16)) == WireType.INVALID
        expect(classify(nullable(INT16))) == WireType.INVALID

    def rejects_plain_descriptor(expect):
        expect(classify(TypeDescriptor(name="Callable"))) == WireType.INVALID

    def is_repeatable(expect):
        t = composite("Point", [("x", INT32), ("y", INT32)])
        expect(classify(t)) == classify(t)
        expect(classify(t)) == WireType.STRUCT


def describe_binary():
    def maps_bytes_to_binary(expect):
        expect(classify(BYTES)) == WireType.BINARY

    def prefers_binary_over_array(expect):
        # A byte sequence that also looks like an array
        t = TypeDescriptor(
            name="byte[]",
            primitive=Primitive.BYTES,
            element_type=primitive_type(Primitive.OTHER, "byte"),
            rank=1,
        )
        expect(classify(t)) == WireType.BINARY


def describe_markers():
    def maps_struct_literal(expect):
        expect(classify(STRUCT_LITERAL)) == WireType.STRUCT

    def maps_any_array(expect):
        expect(classify(ANY_ARRAY)) == WireType.ARRAY

    def maps_any_to_struct(expect):
        # "any" is a composite with no members
        expect(classify(ANY)) == WireType.STRUCT


def describe_arrays():
    def maps_single_dimension(expect):
        expect(classify(array_of(INT32))) == WireType.ARRAY

    def maps_multi_dimension(expect):
        expect(classify(array_of(STRING, rank=2))) == WireType.MULTI_ARRAY
        expect(classify(array_of(STRING, rank=3))) == WireType.MULTI_ARRAY

    def maps_array_of_any(expect):
        expect(classify(array_of(ANY))) == WireType.ARRAY

    def maps_jagged_array(expect):
        expect(classify(array_of(array_of(INT32)))) == WireType.ARRAY

    def rejects_invalid_element(expect):
        expect(classify(array_of(INT16))) == WireType.INVALID
        expect(classify(array_of(INT16, rank=2))) == WireType.INVALID

    def rejects_array_of_invalid_struct(expect):
        bad = composite("Bad", [("value", INT16)])
        expect(classify(array_of(bad))) == WireType.INVALID


def describe_collections():
    def maps_map_like(expect):
        t = TypeDescriptor(name="Dictionary", is_map_like=True, is_sequence_like=True)
        expect(classify(t)) == WireType.MAP

    def maps_sequence_like(expect):
        t = TypeDescriptor(name="List", is_sequence_like=True)
        expect(classify(t)) == WireType.SEQUENCE

    def prefers_collection_over_composite(expect):
        t = TypeDescriptor(name="Bag", is_sequence_like=True, is_composite=True)
        expect(classify(t)) == WireType.SEQUENCE


def describe_composites():
    def maps_valid_members(expect):
        t = composite("Person", [("name", STRING), ("age", INT32), ("tags", array_of(STRING))])
        expect(classify(t)) == WireType.STRUCT

    def maps_empty_composite(expect):
        expect(classify(composite("Empty"))) == WireType.STRUCT

    def rejects_invalid_member(expect):
        t = composite("Sample", [("name", STRING), ("value", INT16)])
        expect(classify(t)) == WireType.INVALID

    def accepts_any_member(expect):
        t = composite("Sample", [("name", STRING), ("value", ANY)])
        expect(classify(t)) == WireType.STRUCT

    def rejects_nested_invalid_member(expect):
        inner = composite("Inner", [("value", INT16)])
        outer = composite("Outer", [("inner", inner), ("name", STRING)])
        expect(classify(outer)) == WireType.INVALID

    def maps_nested_composite(expect):
        inner = composite("Inner", [("value", INT32)])
        outer = composite("Outer", [("inner", inner), ("items", array_of(inner))])
        expect(classify(outer)) == WireType.STRUCT

    def stops_at_first_invalid_member(expect):
        calls = []

        def later_members():
            calls.append(True)
            return [Member("value", INT32)]

        later = TypeDescriptor(
            name="Later", is_composite=True, origin="Later", resolve_members=later_members
        )
        t = composite("Sample", [("bad", INT16), ("later", later)])

        expect(classify(t)) == WireType.INVALID
        expect(calls) == []


def describe_cycles():
    def accepts_direct_self_reference(expect):
        # Known leniency: the cyclic member is skipped, never proven valid
        node = TypeDescriptor(
            name="Node",
            is_composite=True,
            origin="Node",
            resolve_members=lambda: [Member("next", node)],
        )
        expect(classify(node)) == WireType.STRUCT

    def accepts_mutual_reference(expect):
        parent = TypeDescriptor(
            name="Parent",
            is_composite=True,
            origin="Parent",
            resolve_members=lambda: [Member("child", child), Member("name", STRING)],
        )
        child = TypeDescriptor(
            name="Child",
            is_composite=True,
            origin="Child",
            resolve_members=lambda: [Member("parent", parent), Member("children", array_of(child))],
        )
        expect(classify(parent)) == WireType.STRUCT
        expect(classify(child)) == WireType.STRUCT

    def rejects_cycle_with_invalid_member(expect):
        node = TypeDescriptor(
            name="Node",
            is_composite=True,
            origin="Node",
            resolve_members=lambda: [Member("next", node), Member("weight", INT16)],
        )
        expect(classify(node)) == WireType.INVALID

    def restores_visiting_after_rejection(expect):
        inner = composite("Inner", [("value", INT16)])
        outer = composite("Outer", [("inner", inner)])
        classifier = WireTypeClassifier()

        expect(classifier.classify(outer)) == WireType.INVALID
        expect(classifier.visiting) == ()

    def does_not_leak_visiting_into_later_calls(expect):
        inner = composite("Inner", [("value", INT16)])
        classifier = WireTypeClassifier()

        expect(classifier.classify(composite("Outer", [("inner", inner)]))) == WireType.INVALID
        # A leaked entry for Inner would be skipped and pass as valid
        expect(classifier.classify(composite("Holder", [("inner", inner)]))) == WireType.INVALID

    def visits_member_types_only_while_validating(expect):
        seen = []
        classifier = WireTypeClassifier()

        def record_members():
            seen.append(classifier.visiting)
            return []

        recorder = TypeDescriptor(
            name="Recorder", is_composite=True, origin="Recorder", resolve_members=record_members
        )
        outer = composite("Outer", [("recorder", recorder)])

        expect(classifier.classify(outer)) == WireType.STRUCT
        expect(seen) == [(recorder,)]
        expect(classifier.visiting) == ()


def describe_type_name():
    def names_classified_type(expect):
        expect(type_name(INT32)) == "integer"
        expect(type_name(array_of(STRING, rank=2))) == "array"

    def returns_none_for_invalid(expect):
        expect(type_name(INT16)) == None
