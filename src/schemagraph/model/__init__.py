# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type graph model: ids, use-site references, nodes and the graph itself."""

from schemagraph.model.graph import (
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
    TypeNode,
    TypeRef,
    with_nullable,
)

__all__ = [
    # References
    "TypeId",
    "TypeRef",
    "InlineTypeRef",
    "NamedTypeRef",
    "with_nullable",
    # Nodes
    "PrimitiveKind",
    "PrimitiveNode",
    "EnumNode",
    "ObjectNode",
    "ListNode",
    "MapNode",
    "PolymorphicNode",
    "TypeNode",
    # Members
    "DefaultPresence",
    "Property",
    "SubtypeRef",
    "Discriminator",
    # Graph
    "TypeGraph",
]
