# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the JSON Schema emitter."""

import json
from dataclasses import dataclass
from typing import Annotated

import pytest

from schemagraph.annotations import Description, sealed
from schemagraph.emitter import JSON_SCHEMA_DIALECT, JsonSchemaConfig, JsonSchemaEmitter, SchemaEmissionError, dumps
from schemagraph.introspection import introspect_class
from schemagraph.model import (
    DefaultPresence,
    Discriminator,
    EnumNode,
    InlineTypeRef,
    ListNode,
    MapNode,
    NamedTypeRef,
    ObjectNode,
    PolymorphicNode,
    PrimitiveKind,
    PrimitiveNode,
    Property,
    SubtypeRef,
    TypeGraph,
    TypeId,
)

# ###############
# Helpers
# ###############


def _primitive(kind: PrimitiveKind, nullable: bool = False) -> InlineTypeRef:
    return InlineTypeRef(node=PrimitiveNode(primitive=kind), nullable=nullable)


def _ref(type_id: str, nullable: bool = False) -> NamedTypeRef:
    return NamedTypeRef(id=TypeId(type_id), nullable=nullable)


def _graph(root: InlineTypeRef | NamedTypeRef, **nodes: object) -> TypeGraph:
    return TypeGraph(root=root, nodes={TypeId(k): v for k, v in nodes.items()})


def _emit(graph: TypeGraph, **config: bool) -> dict:
    return JsonSchemaEmitter(JsonSchemaConfig(**config)).emit(graph, root_name="Root")


def _object(*properties: Property, required: list[str] | None = None, name: str = "Obj") -> ObjectNode:
    return ObjectNode(name=name, properties=list(properties), required=required or [])


@Description("A circle.")
@dataclass
class Circle:
    name: str
    radius: Annotated[float, Description("Radius in units")]
    color: str = "#FF5733"


@sealed
@dataclass
class Shape:
    label: str


@dataclass
class Square(Shape):
    side: float


@dataclass
class Disc(Shape):
    radius: float


@sealed
@dataclass
class Vehicle:
    wheels: int


@dataclass
class Car(Vehicle):
    doors: int


@sealed
@dataclass
class Boat(Vehicle):
    pass


@dataclass
class Sailboat(Boat):
    masts: int


# ###############
# Document layout
# ###############


class TestLayout:
    def test_inline_root(self) -> None:
        graph = _graph(_ref("Obj"), Obj=_object(Property(name="a", type=_primitive(PrimitiveKind.STRING))))
        document = _emit(graph)
        assert document["$schema"] == JSON_SCHEMA_DIALECT
        assert document["$id"] == "Root"
        assert document["type"] == "object"
        assert "$ref" not in document
        assert list(document["$defs"]) == ["Obj"]

    def test_ref_root(self) -> None:
        graph = _graph(_ref("Obj"), Obj=_object())
        document = _emit(graph, inline_root=False)
        assert document["$ref"] == "#/$defs/Obj"
        assert "type" not in document

    def test_inline_root_node_is_always_inlined(self) -> None:
        graph = _graph(InlineTypeRef(node=ListNode(element=_ref("Obj"))), Obj=_object())
        document = _emit(graph, inline_root=False)
        assert document["type"] == "array"
        assert document["items"] == {"$ref": "#/$defs/Obj"}

    def test_defs_keep_graph_order(self) -> None:
        graph = _graph(_ref("Z"), Z=_object(name="Z"), A=_object(name="A"), M=EnumNode(name="M", entries=["x"]))
        assert list(_emit(graph)["$defs"]) == ["Z", "A", "M"]

    def test_emission_does_not_mutate_graph(self) -> None:
        graph = _graph(_ref("Obj"), Obj=_object(Property(name="a", type=_ref("Obj", nullable=True))))
        before = graph.model_dump()
        _emit(graph)
        assert graph.model_dump() == before


# ###############
# Node rules
# ###############


class TestNodeRules:
    def test_nullable_ref_is_wrapped_in_one_of(self) -> None:
        """A nullable ref becomes oneOf with null."""
        graph = _graph(
            _ref("Obj"),
            Obj=_object(Property(name="foo", type=_ref("Foo", nullable=True)), required=["foo"]),
            Foo=_object(name="Foo"),
        )
        schema = _emit(graph)["properties"]["foo"]
        assert schema == {"oneOf": [{"$ref": "#/$defs/Foo"}, {"type": "null"}]}

    def test_nullable_primitive_uses_type_list(self) -> None:
        """A nullable primitive lists null next to its type."""
        graph = _graph(_ref("Obj"), Obj=_object(Property(name="s", type=_primitive(PrimitiveKind.STRING, True))))
        assert _emit(graph)["properties"]["s"] == {"type": ["string", "null"]}

    @pytest.mark.parametrize(
        ("kind", "expected"),
        [
            (PrimitiveKind.STRING, "string"),
            (PrimitiveKind.BOOLEAN, "boolean"),
            (PrimitiveKind.INT, "integer"),
            (PrimitiveKind.LONG, "integer"),
            (PrimitiveKind.FLOAT, "number"),
            (PrimitiveKind.DOUBLE, "number"),
        ],
    )
    def test_primitive_types(self, kind: PrimitiveKind, expected: str) -> None:
        assert _emit(_graph(_primitive(kind)))["type"] == expected

    def test_required_is_taken_verbatim(self) -> None:
        graph = _graph(
            _ref("Obj"),
            Obj=_object(
                Property(name="a", type=_primitive(PrimitiveKind.INT), default_presence=DefaultPresence.REQUIRED),
                Property(name="b", type=_primitive(PrimitiveKind.INT), default_presence=DefaultPresence.HAS_DEFAULT),
                Property(name="c", type=_primitive(PrimitiveKind.INT, True), default_presence=DefaultPresence.REQUIRED),
                required=["a", "c"],
            ),
        )
        document = _emit(graph)
        assert document["required"] == ["a", "c"]
        assert document["properties"]["b"] == {"type": "integer"}
        assert document["additionalProperties"] is False

    def test_property_description_and_deprecation(self) -> None:
        graph = _graph(
            _ref("Obj"),
            Obj=_object(Property(name="old", type=_ref("Foo"), description="Legacy.", deprecated=True)),
            Foo=_object(name="Foo"),
        )
        assert _emit(graph)["properties"]["old"] == {
            "$ref": "#/$defs/Foo",
            "description": "Legacy.",
            "deprecated": True,
        }

    def test_enum(self) -> None:
        graph = _graph(_ref("Color"), Color=EnumNode(name="Color", entries=["red", "green"], description="Paint."))
        assert _emit(graph)["$defs"]["Color"] == {"type": "string", "enum": ["red", "green"], "description": "Paint."}

    def test_list(self) -> None:
        graph = _graph(InlineTypeRef(node=ListNode(element=_primitive(PrimitiveKind.DOUBLE)), nullable=True))
        document = _emit(graph)
        assert document["type"] == ["array", "null"]
        assert document["items"] == {"type": "number"}

    def test_string_keyed_map(self) -> None:
        graph = _graph(
            InlineTypeRef(node=MapNode(key=_primitive(PrimitiveKind.STRING), value=_primitive(PrimitiveKind.INT)))
        )
        document = _emit(graph)
        assert document["type"] == "object"
        assert document["additionalProperties"] == {"type": "integer"}
        assert "propertyNames" not in document

    def test_enum_keyed_map(self) -> None:
        graph = _graph(
            InlineTypeRef(node=MapNode(key=_ref("Color"), value=_primitive(PrimitiveKind.STRING))),
            Color=EnumNode(name="Color", entries=["red"]),
        )
        assert _emit(graph)["propertyNames"] == {"$ref": "#/$defs/Color"}

    def test_int_keyed_map(self) -> None:
        """Integer keys are constrained by a pattern."""
        graph = _graph(
            InlineTypeRef(node=MapNode(key=_primitive(PrimitiveKind.INT), value=_primitive(PrimitiveKind.STRING)))
        )
        assert _emit(graph)["propertyNames"] == {"pattern": "^-?[0-9]+$"}


# ###############
# Polymorphism
# ###############


class TestPolymorphic:
    def _graph(self, discriminator: Discriminator | None) -> TypeGraph:
        return _graph(
            _ref("Shape"),
            **{
                "Shape.Circle": _object(name="Circle"),
                "Shape.Square": _object(name="Square"),
                "Shape": PolymorphicNode(
                    base_name="Shape",
                    subtypes=[SubtypeRef(id=TypeId("Shape.Circle")), SubtypeRef(id=TypeId("Shape.Square"))],
                    discriminator=discriminator,
                ),
            },
        )

    def test_without_discriminator(self) -> None:
        document = _emit(self._graph(None))
        assert document["oneOf"] == [{"$ref": "#/$defs/Shape.Circle"}, {"$ref": "#/$defs/Shape.Square"}]

    def test_optional_discriminator_is_not_constrained(self) -> None:
        """An optional discriminator adds no const."""
        document = _emit(self._graph(Discriminator(name="type", required=False)))
        assert document["oneOf"][0] == {"$ref": "#/$defs/Shape.Circle"}

    def test_required_discriminator_with_mapping(self) -> None:
        discriminator = Discriminator(
            name="kind",
            required=True,
            mapping={"circle": TypeId("Shape.Circle"), "square": TypeId("Shape.Square")},
        )
        document = _emit(self._graph(discriminator))
        assert document["oneOf"][0] == {
            "$ref": "#/$defs/Shape.Circle",
            "properties": {"kind": {"const": "circle"}},
            "required": ["kind"],
        }

    def test_implicit_mapping_uses_subtype_id(self) -> None:
        document = _emit(self._graph(Discriminator(name="type", required=True)))
        assert document["oneOf"][1]["properties"] == {"type": {"const": "Shape.Square"}}


# ###############
# Structural errors
# ###############


class TestErrors:
    def test_dangling_ref(self) -> None:
        graph = _graph(_ref("Obj"), Obj=_object(Property(name="x", type=_ref("Missing"))))
        with pytest.raises(SchemaEmissionError, match="Missing"):
            _emit(graph)

    def test_inline_object_is_rejected(self) -> None:
        graph = _graph(InlineTypeRef(node=_object()))
        with pytest.raises(SchemaEmissionError, match="cannot be inlined"):
            _emit(graph)


# ###############
# End to end
# ###############


class TestEndToEnd:
    def test_circle(self) -> None:
        graph = introspect_class(Circle, qualified_names=False)
        document = JsonSchemaEmitter().emit(graph, root_name="Circle")
        assert document["description"] == "A circle."
        assert document["additionalProperties"] is False
        assert document["required"] == ["name", "radius"]
        assert document["properties"]["radius"] == {"type": "number", "description": "Radius in units"}
        assert document["properties"]["color"] == {"type": "string"}
        assert document["$defs"]["Circle"]["description"] == "A circle."

    def test_sealed_hierarchy(self) -> None:
        graph = introspect_class(Shape, qualified_names=False)
        document = JsonSchemaEmitter().emit(graph, root_name="Shape")
        assert [variant["$ref"] for variant in document["oneOf"]] == ["#/$defs/Shape.Square", "#/$defs/Shape.Disc"]
        assert document["oneOf"][1]["properties"] == {"type": {"const": "Disc"}}
        disc = document["$defs"]["Shape.Disc"]
        assert disc["required"] == ["type", "label", "radius"]
        assert disc["properties"]["type"] == {"type": "string"}

    def test_nested_sealed_hierarchy(self) -> None:
        """A nested union is referenced bare so its leaves pin the discriminator."""
        graph = introspect_class(Vehicle, qualified_names=False)
        document = JsonSchemaEmitter().emit(graph, root_name="Vehicle")
        assert document["oneOf"] == [
            {"$ref": "#/$defs/Vehicle.Car", "properties": {"type": {"const": "Car"}}, "required": ["type"]},
            {"$ref": "#/$defs/Vehicle.Boat"},
        ]
        assert document["$defs"]["Vehicle.Boat"]["oneOf"] == [
            {"$ref": "#/$defs/Boat.Sailboat", "properties": {"type": {"const": "Sailboat"}}, "required": ["type"]},
        ]
        assert document["$defs"]["Boat.Sailboat"]["required"] == ["type", "wheels", "masts"]

    def test_serialization_is_deterministic(self) -> None:
        first = dumps(JsonSchemaEmitter().emit(introspect_class(Shape), root_name="Shape"))
        second = dumps(JsonSchemaEmitter().emit(introspect_class(Shape), root_name="Shape"))
        assert first == second


# ###############
# Serialization
# ###############


def test_dumps_compact_and_indented() -> None:
    document = {"b": 1, "a": ["é"]}
    assert dumps(document) == '{"b":1,"a":["é"]}'
    assert json.loads(dumps(document, indent=2)) == document
    assert dumps(document, indent=2).startswith('{\n  "b": 1')
