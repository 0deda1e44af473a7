# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type graph representation shared by all introspectors and emitters."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Literal, NewType

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator, model_validator
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

# Stable identifier of an addressable type definition, used for
# deduplication and for `$ref` linking. Equality is by value.
TypeId = NewType("TypeId", str)


class PrimitiveKind(Enum):
    """Primitive kinds supported by the type graph."""

    STRING = "string"
    BOOLEAN = "boolean"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"


class DefaultPresence(Enum):
    """How a property's default value relates to its required-ness."""

    ABSENT = "absent"
    HAS_DEFAULT = "has_default"
    REQUIRED = "required"


class InlineTypeRef(BaseModel):
    """Use-site reference carrying an anonymous node (primitive, list or map)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["inline"] = "inline"
    node: TypeNode
    nullable: bool = False


class NamedTypeRef(BaseModel):
    """Use-site reference to an addressable node by its type id."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ref"] = "ref"
    id: TypeId
    nullable: bool = False


# A use-site reference: inline node or reference by id. Both variants carry
# their own nullability, independent of the referenced node.
TypeRef = Annotated[InlineTypeRef | NamedTypeRef, _Field(discriminator="kind")]


class Property(BaseModel):
    """A named, typed member of an object node."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeRef
    description: str | None = None
    deprecated: bool = False
    default_presence: DefaultPresence = DefaultPresence.ABSENT


class SubtypeRef(BaseModel):
    """One member of a polymorphic union."""

    model_config = ConfigDict(frozen=True)

    id: TypeId

    @property
    def ref(self) -> NamedTypeRef:
        """Non-nullable reference to the subtype node."""
        return NamedTypeRef(id=self.id)


class Discriminator(BaseModel):
    """The field that tells the subtypes of a polymorphic union apart.

    Attributes:
        name: Name of the discriminator field.
        required: Whether serialized values always carry the field.
        mapping: Discriminator value to subtype id. ``None`` means the
            implicit mapping, where the value equals the subtype's id.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    required: bool
    mapping: dict[str, TypeId] | None = None


class PrimitiveNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["primitive"] = "primitive"
    primitive: PrimitiveKind
    description: str | None = None


class EnumNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["enum"] = "enum"
    name: str
    entries: list[str] = _Field(default_factory=list)
    description: str | None = None


class ObjectNode(BaseModel):
    """A structured type with ordered properties.

    ``required`` keeps the order in which the properties are declared so that
    emitted schemas are byte-for-byte stable.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["object"] = "object"
    name: str
    properties: list[Property] = _Field(default_factory=list)
    required: list[str] = _Field(default_factory=list)
    description: str | None = None

    @model_validator(mode="after")
    def _check_required_subset(self) -> ObjectNode:
        names = {p.name for p in self.properties}
        unknown = [name for name in self.required if name not in names]
        if unknown:
            raise ValueError(f"Object '{self.name}' requires unknown properties: {unknown}")
        if len(set(self.required)) != len(self.required):
            raise ValueError(f"Object '{self.name}' lists a required property more than once")
        return self


class ListNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    element: TypeRef
    description: str | None = None


class MapNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["map"] = "map"
    key: TypeRef
    value: TypeRef
    description: str | None = None


class PolymorphicNode(BaseModel):
    """A closed sum type whose members are addressable subtype nodes."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["polymorphic"] = "polymorphic"
    base_name: str
    subtypes: list[SubtypeRef] = _Field(default_factory=list)
    discriminator: Discriminator | None = None
    description: str | None = None


# A type graph node. The `kind` discriminator keeps dispatch unambiguous.
TypeNode = Annotated[
    PrimitiveNode | EnumNode | ObjectNode | ListNode | MapNode | PolymorphicNode,
    _Field(discriminator="kind"),
]


class TypeGraph(BaseModel):
    """The complete result of one introspection run.

    Attributes:
        root: Reference to the introspected root type.
        nodes: Addressable nodes keyed by id, in discovery order. This order
            is the emission order and is never re-sorted. The mapping is
            read-only.
    """

    model_config = ConfigDict(frozen=True)

    root: TypeRef
    nodes: Mapping[TypeId, TypeNode] = _Field(default_factory=dict, validate_default=True)

    @field_validator("nodes", mode="after")
    @classmethod
    def _freeze_nodes(cls, nodes: Mapping[TypeId, TypeNode]) -> Mapping[TypeId, TypeNode]:
        return MappingProxyType(dict(nodes))

    @field_serializer("nodes")
    def _serialize_nodes(self, nodes: Mapping[TypeId, TypeNode]) -> dict[TypeId, Any]:
        return dict(nodes)

    def dangling_refs(self) -> list[TypeId]:
        """Return ids referenced somewhere in the graph but missing from ``nodes``.

        An empty list means the graph is complete.
        """
        missing: list[TypeId] = []
        refs = [self.root]
        for node in self.nodes.values():
            refs.extend(_child_refs(node))
        for ref in refs:
            for named in _named_refs(ref):
                if named.id not in self.nodes and named.id not in missing:
                    missing.append(named.id)
        return missing


def with_nullable(ref: InlineTypeRef | NamedTypeRef, nullable: bool) -> InlineTypeRef | NamedTypeRef:
    """Return *ref* with its nullable flag replaced."""
    if ref.nullable == nullable:
        return ref
    return ref.model_copy(update={"nullable": nullable})


# ################
# Implementation
# ################


def _child_refs(node: BaseModel) -> list[InlineTypeRef | NamedTypeRef]:
    """Direct use-site references held by *node*."""
    if isinstance(node, ObjectNode):
        return [p.type for p in node.properties]
    if isinstance(node, ListNode):
        return [node.element]
    if isinstance(node, MapNode):
        return [node.key, node.value]
    if isinstance(node, PolymorphicNode):
        refs: list[InlineTypeRef | NamedTypeRef] = [s.ref for s in node.subtypes]
        if node.discriminator is not None and node.discriminator.mapping:
            refs.extend(NamedTypeRef(id=type_id) for type_id in node.discriminator.mapping.values())
        return refs
    return []


def _named_refs(ref: InlineTypeRef | NamedTypeRef) -> list[NamedTypeRef]:
    """Flatten *ref* into the named references it contains, following inline nodes."""
    if isinstance(ref, NamedTypeRef):
        return [ref]
    found: list[NamedTypeRef] = []
    for child in _child_refs(ref.node):
        found.extend(_named_refs(child))
    return found


# Resolve forward references for models that use TypeRef / TypeNode.
InlineTypeRef.model_rebuild()
Property.model_rebuild()
ObjectNode.model_rebuild()
ListNode.model_rebuild()
MapNode.model_rebuild()
PolymorphicNode.model_rebuild()
TypeGraph.model_rebuild()
