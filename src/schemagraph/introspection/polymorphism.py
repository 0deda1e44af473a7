# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Polymorphic node construction for closed (sealed) hierarchies."""

from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from schemagraph.introspection.context import IntrospectionContext, IntrospectionError
from schemagraph.model.graph import Discriminator, NamedTypeRef, PolymorphicNode, SubtypeRef, TypeId

# ###############
# Public Interface
# ###############


class DiscriminatorMode(Enum):
    """When serialized values carry the discriminator field."""

    ALL_OBJECTS = "all_objects"
    POLYMORPHIC = "polymorphic"
    NONE = "none"


class PolymorphismConfig(BaseModel):
    """Serialization settings that shape polymorphic nodes.

    Attributes:
        discriminator: Name of the discriminator field.
        mode: When the discriminator is written. It is required for
            ``ALL_OBJECTS`` and ``POLYMORPHIC``. ``ALL_OBJECTS`` also adds it
            to every object, not only to members of a sealed hierarchy.
    """

    model_config = ConfigDict(frozen=True)

    discriminator: str = "type"
    mode: DiscriminatorMode = DiscriminatorMode.POLYMORPHIC

    @property
    def discriminator_required(self) -> bool:
        return self.mode in (DiscriminatorMode.ALL_OBJECTS, DiscriminatorMode.POLYMORPHIC)

    def tags_object(self, in_hierarchy: bool) -> bool:
        """Whether an object node gets the discriminator as a property."""
        if self.mode is DiscriminatorMode.ALL_OBJECTS:
            return True
        return in_hierarchy and self.mode is DiscriminatorMode.POLYMORPHIC


def resolve_polymorphic(
    context: IntrospectionContext[Any, Any],
    decl: Hashable,
    subtypes: Sequence[Hashable],
    *,
    config: PolymorphismConfig,
    description: str | None = None,
    discriminator_values: Mapping[Hashable, str] | None = None,
) -> PolymorphicNode:
    """Build the polymorphic node for *decl* and discover its subtype nodes.

    Every subtype is resolved through *context* with the parent's simple name
    as prefix, so two hierarchies that both contain a ``Circle`` produce
    ``Shape.Circle`` and ``Logo.Circle``.

    Args:
        context: The running introspection context.
        decl: The sealed parent declaration.
        subtypes: Direct subtypes of *decl*, in declaration order.
        config: Discriminator settings.
        description: Resolved description of the parent.
        discriminator_values: Explicit discriminator values per subtype. A
            subtype without one uses its simple name.

    Returns:
        The node for *decl*. The subtype nodes are in the context's node table.

    Raises:
        IntrospectionError: If two subtypes share a discriminator value.
    """
    parent_name = context.simple_name(decl)
    explicit = discriminator_values or {}

    subtype_refs: list[SubtypeRef] = []
    mapping: dict[str, TypeId] = {}
    for subtype in subtypes:
        ref = context.resolve_declaration(subtype, parent_prefix=parent_name)
        assert isinstance(ref, NamedTypeRef)
        type_id = ref.id
        value = explicit.get(subtype, context.simple_name(subtype))
        if value in mapping:
            raise IntrospectionError(
                f"Subtypes '{mapping[value]}' and '{type_id}' of '{parent_name}' "
                f"share the discriminator value '{value}'"
            )
        mapping[value] = type_id
        subtype_refs.append(SubtypeRef(id=type_id))

    return PolymorphicNode(
        base_name=parent_name,
        subtypes=subtype_refs,
        discriminator=Discriminator(
            name=config.discriminator,
            required=config.discriminator_required,
            mapping=mapping,
        ),
        description=description,
    )
