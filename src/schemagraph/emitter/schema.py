# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-node JSON Schema rules shared by all document emitters."""

from __future__ import annotations

from typing import Any

from schemagraph.model.graph import (
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
    TypeGraph,
    TypeId,
    TypeNode,
)

# ###############
# Public Interface
# ###############

DEFS_POINTER = "#/$defs/"

# Property names of integer-keyed maps.
INTEGER_KEY_PATTERN = "^-?[0-9]+$"


class SchemaEmissionError(Exception):
    """Raised when a type graph is structurally invalid for emission."""


class NodeSchemaBuilder:
    """Builds JSON Schema fragments for the nodes and references of one graph.

    Args:
        graph: The graph whose ``nodes`` table resolves ``$ref`` targets.
        all_required: List every property of every object as required,
            ignoring the inferred required list.
    """

    def __init__(self, graph: TypeGraph, *, all_required: bool = False) -> None:
        self._graph = graph
        self._all_required = all_required

    def definitions(self, *, exclude: TypeId | None = None) -> dict[str, Any]:
        """Schemas of every node in graph order, keyed by type id."""
        return {type_id: self.node(node) for type_id, node in self._graph.nodes.items() if type_id != exclude}

    def ref(self, ref: InlineTypeRef | NamedTypeRef) -> dict[str, Any]:
        """Schema for a use-site reference, including its nullability."""
        if isinstance(ref, NamedTypeRef):
            if ref.id not in self._graph.nodes:
                raise SchemaEmissionError(f"Reference to unknown type '{ref.id}'")
            schema: dict[str, Any] = {"$ref": DEFS_POINTER + ref.id}
            if ref.nullable:
                return {"oneOf": [schema, {"type": "null"}]}
            return schema

        node = ref.node
        if not isinstance(node, (PrimitiveNode, ListNode, MapNode)):
            raise SchemaEmissionError(f"A {node.kind} node cannot be inlined; it must be referenced by id")
        schema = self.node(node)
        if ref.nullable:
            schema["type"] = [schema["type"], "null"]
        return schema

    def node(self, node: TypeNode) -> dict[str, Any]:
        """Schema for a node, without any use-site nullability."""
        if isinstance(node, PrimitiveNode):
            schema: dict[str, Any] = {"type": _PRIMITIVE_TYPES[node.primitive]}
        elif isinstance(node, EnumNode):
            schema = {"type": "string", "enum": list(node.entries)}
        elif isinstance(node, ObjectNode):
            schema = self._object(node)
        elif isinstance(node, ListNode):
            schema = {"type": "array", "items": self.ref(node.element)}
        elif isinstance(node, MapNode):
            schema = self._map(node)
        else:
            assert isinstance(node, PolymorphicNode)
            schema = self._polymorphic(node)
        if node.description is not None:
            schema["description"] = node.description
        return schema

    # ################
    # Implementation
    # ################

    def _object(self, node: ObjectNode) -> dict[str, Any]:
        required = [p.name for p in node.properties] if self._all_required else list(node.required)
        return {
            "type": "object",
            "properties": {p.name: self._property(p) for p in node.properties},
            "required": required,
            "additionalProperties": False,
        }

    def _property(self, prop: Property) -> dict[str, Any]:
        schema = self.ref(prop.type)
        if prop.description is not None:
            schema["description"] = prop.description
        if prop.deprecated:
            schema["deprecated"] = True
        return schema

    def _map(self, node: MapNode) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "object", "additionalProperties": self.ref(node.value)}
        key = node.key
        if isinstance(key, NamedTypeRef) and isinstance(self._graph.nodes.get(key.id), EnumNode):
            schema["propertyNames"] = {"$ref": DEFS_POINTER + key.id}
        elif (
            isinstance(key, InlineTypeRef)
            and isinstance(key.node, PrimitiveNode)
            and key.node.primitive in (PrimitiveKind.INT, PrimitiveKind.LONG)
        ):
            schema["propertyNames"] = {"pattern": INTEGER_KEY_PATTERN}
        return schema

    def _polymorphic(self, node: PolymorphicNode) -> dict[str, Any]:
        discriminator = node.discriminator
        if discriminator is None or not discriminator.required:
            return {"oneOf": [self.ref(subtype.ref) for subtype in node.subtypes]}

        values: dict[TypeId, str] = {}
        for value, type_id in (discriminator.mapping or {}).items():
            values.setdefault(type_id, value)
        variants = []
        for subtype in node.subtypes:
            variant = self.ref(subtype.ref)
            if isinstance(self._graph.nodes.get(subtype.id), PolymorphicNode):
                # The nested union pins the discriminator to its own leaves.
                variants.append(variant)
                continue
            variant["properties"] = {discriminator.name: {"const": values.get(subtype.id, subtype.id)}}
            variant["required"] = [discriminator.name]
            variants.append(variant)
        return {"oneOf": variants}


def check_complete(graph: TypeGraph) -> None:
    """Raise :class:`SchemaEmissionError` if *graph* references missing nodes."""
    missing = graph.dangling_refs()
    if missing:
        raise SchemaEmissionError(f"Type graph references unknown types: {', '.join(missing)}")


_PRIMITIVE_TYPES: dict[PrimitiveKind, str] = {
    PrimitiveKind.STRING: "string",
    PrimitiveKind.BOOLEAN: "boolean",
    PrimitiveKind.INT: "integer",
    PrimitiveKind.LONG: "integer",
    PrimitiveKind.FLOAT: "number",
    PrimitiveKind.DOUBLE: "number",
}
