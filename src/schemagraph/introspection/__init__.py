# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Introspection of host declarations into type graphs."""

from schemagraph.introspection.context import (
    ClassifierUnsupportedError,
    IntrospectionContext,
    IntrospectionError,
    ListShape,
    MapShape,
    NamedShape,
    PrimitiveShape,
    Shape,
    UnsupportedDeclarationShapeError,
)
from schemagraph.introspection.description import (
    DescriptionSource,
    DocCommentBody,
    DocCommentTag,
    StructuredAttribute,
    description_from_attributes,
    extract_doc_description,
    extract_doc_tag,
    resolve_description,
)
from schemagraph.introspection.polymorphism import DiscriminatorMode, PolymorphismConfig, resolve_polymorphic
from schemagraph.introspection.reflection import introspect_class, introspect_function

__all__ = [
    # Engine
    "IntrospectionContext",
    "Shape",
    "PrimitiveShape",
    "ListShape",
    "MapShape",
    "NamedShape",
    # Errors
    "IntrospectionError",
    "ClassifierUnsupportedError",
    "UnsupportedDeclarationShapeError",
    # Descriptions
    "DescriptionSource",
    "StructuredAttribute",
    "DocCommentTag",
    "DocCommentBody",
    "resolve_description",
    "description_from_attributes",
    "extract_doc_description",
    "extract_doc_tag",
    # Polymorphism
    "DiscriminatorMode",
    "PolymorphismConfig",
    "resolve_polymorphic",
    # Reflection front-end
    "introspect_class",
    "introspect_function",
]
