# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generic introspection engine that turns type usages into a type graph.

Front-end adapters subclass :class:`IntrospectionContext` and supply four
things: nullability of a use-site, a one-shot classification of the
underlying type, the names of a declaration, and construction of the node
for an addressable declaration. The context owns everything else: id
assignment, the reference cache, cycle detection and the node table.

A context is single-use state. Build a fresh one for every introspection
run; nothing in it is shared between runs.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from schemagraph.model.graph import (
    InlineTypeRef,
    ListNode,
    MapNode,
    NamedTypeRef,
    PrimitiveKind,
    PrimitiveNode,
    TypeGraph,
    TypeId,
    TypeNode,
    with_nullable,
)

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=Hashable)
U = TypeVar("U")

# ###############
# Public Interface
# ###############


class IntrospectionError(Exception):
    """Base class for failures that abort an introspection run."""


class ClassifierUnsupportedError(IntrospectionError):
    """Raised when a type usage cannot be mapped to any supported category.

    Attributes:
        use_site: Human-readable description of the offending type usage.
        reason: Why the usage is rejected, when known.
        declaration: The property or parameter holding the usage, when known.
    """

    def __init__(self, use_site: str, reason: str | None = None, *, declaration: str | None = None) -> None:
        self.use_site = use_site
        self.reason = reason
        self.declaration = declaration
        message = f"Unsupported type: {use_site}"
        if declaration:
            message = f"{message} at '{declaration}'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnsupportedDeclarationShapeError(IntrospectionError):
    """Raised before graph construction when a root declaration has no schema representation."""


@dataclass(frozen=True)
class PrimitiveShape:
    """The type is a primitive of *kind*; *decl* is the cache key for it."""

    decl: Hashable
    kind: PrimitiveKind


@dataclass(frozen=True)
class ListShape:
    """The type is list-like; *element* is ``None`` when no element type is known."""

    element: Any = None


@dataclass(frozen=True)
class MapShape:
    """The type is map-like; *key* / *value* are ``None`` when unknown."""

    key: Any = None
    value: Any = None


@dataclass(frozen=True)
class NamedShape:
    """The type is an addressable declaration (object, enum or polymorphic union)."""

    decl: Hashable


Shape = PrimitiveShape | ListShape | MapShape | NamedShape


class IntrospectionContext(ABC, Generic[D, U]):
    """State of one introspection run: node table, visiting set and reference cache.

    Args:
        strict_type_arguments: When ``True``, a list-like or map-like usage
            without type arguments raises :class:`ClassifierUnsupportedError`
            instead of falling back to string elements.
    """

    def __init__(self, *, strict_type_arguments: bool = False) -> None:
        self._strict_type_arguments = strict_type_arguments
        self._nodes: dict[TypeId, TypeNode] = {}
        self._visiting: set[D] = set()
        self._ref_cache: dict[D, InlineTypeRef | NamedTypeRef] = {}

    # -------- adapter extension points --------

    @abstractmethod
    def unwrap_nullable(self, use: U) -> tuple[U, bool]:
        """Split a use-site into the underlying type usage and its nullability."""

    @abstractmethod
    def classify(self, use: U) -> Shape:
        """Classify a non-nullable type usage.

        Raises:
            ClassifierUnsupportedError: If the usage fits no category.
        """

    @abstractmethod
    def qualified_name(self, decl: D) -> str:
        """Globally unique name of *decl*."""

    @abstractmethod
    def simple_name(self, decl: D) -> str:
        """Short name of *decl*, unique only within its enclosing scope."""

    @abstractmethod
    def build_node(self, decl: D, parent_prefix: str | None) -> TypeNode:
        """Construct the node for a declaration visited for the first time.

        Implementations resolve nested types through :meth:`resolve` and
        :meth:`resolve_declaration`.
        """

    # -------- engine --------

    @property
    def nodes(self) -> Mapping[TypeId, TypeNode]:
        """Read-only view of the nodes discovered so far, in discovery order."""
        return MappingProxyType(self._nodes)

    def is_visiting(self, decl: D) -> bool:
        """Return whether *decl* is currently under construction."""
        return decl in self._visiting

    def resolve(self, use: U) -> InlineTypeRef | NamedTypeRef:
        """Resolve a type usage into a reference, discovering nodes as needed.

        Raises:
            ClassifierUnsupportedError: If the usage, or a type nested in it,
                fits no supported category.
        """
        inner, nullable = self.unwrap_nullable(use)
        shape = self.classify(inner)

        if isinstance(shape, PrimitiveShape):
            cached = self._cached(shape.decl, nullable)
            if cached is not None:
                return cached
            ref = InlineTypeRef(node=PrimitiveNode(primitive=shape.kind), nullable=nullable)
            if not nullable:
                self._ref_cache[shape.decl] = ref
            return ref
        if isinstance(shape, ListShape):
            element = self._resolve_argument(shape.element, inner, "element")
            return InlineTypeRef(node=ListNode(element=element), nullable=nullable)
        if isinstance(shape, MapShape):
            key = self._resolve_argument(shape.key, inner, "key")
            value = self._resolve_argument(shape.value, inner, "value")
            return InlineTypeRef(node=MapNode(key=key, value=value), nullable=nullable)
        # NamedShape is the only remaining variant.
        assert isinstance(shape, NamedShape)
        return self.resolve_declaration(shape.decl, nullable=nullable)

    def resolve_declaration(
        self,
        decl: D,
        *,
        nullable: bool = False,
        parent_prefix: str | None = None,
    ) -> NamedTypeRef | InlineTypeRef:
        """Resolve an addressable declaration into a ``NamedTypeRef``.

        The first visit builds the node; later visits, and visits while the
        declaration is still being built (cycles), only return a reference.
        """
        cached = self._cached(decl, nullable)
        if cached is not None:
            return cached

        type_id = self.type_id_for(decl, parent_prefix)
        if type_id not in self._nodes and decl not in self._visiting:
            self._visiting.add(decl)
            try:
                node = self.build_node(decl, parent_prefix)
            finally:
                self._visiting.discard(decl)
            # A nested resolution under another prefix may have produced the
            # node already; the first discovery wins.
            self._nodes.setdefault(type_id, node)
            logger.debug("Discovered type node '%s'", type_id)
        elif type_id not in self._nodes:
            logger.debug("Cycle detected at '%s'; emitting a reference", type_id)

        ref = NamedTypeRef(id=type_id, nullable=nullable)
        if not nullable:
            self._ref_cache[decl] = ref
        return ref

    def type_id_for(self, decl: D, parent_prefix: str | None = None) -> TypeId:
        """Compute the id of *decl*, qualified by *parent_prefix* when given."""
        if parent_prefix is not None:
            return TypeId(f"{parent_prefix}.{self.simple_name(decl)}")
        return TypeId(self.qualified_name(decl))

    def graph(self, root: InlineTypeRef | NamedTypeRef) -> TypeGraph:
        """Freeze the discovered nodes into a :class:`TypeGraph` rooted at *root*."""
        return TypeGraph(root=root, nodes=dict(self._nodes))

    # ################
    # Implementation
    # ################

    def _cached(self, decl: D, nullable: bool) -> InlineTypeRef | NamedTypeRef | None:
        """Return the cached reference for *decl*, upgraded to nullable when required."""
        cached = self._ref_cache.get(decl)
        if cached is None:
            return None
        return with_nullable(cached, True) if nullable else cached

    def _resolve_argument(self, argument: U | None, container: U, role: str) -> InlineTypeRef | NamedTypeRef:
        """Resolve a container type argument, falling back to a string when it is unknown."""
        if argument is not None:
            return self.resolve(argument)
        if self._strict_type_arguments:
            raise ClassifierUnsupportedError(repr(container), f"missing {role} type argument")
        logger.debug("No %s type argument on %r; assuming string", role, container)
        return InlineTypeRef(node=PrimitiveNode(primitive=PrimitiveKind.STRING))
