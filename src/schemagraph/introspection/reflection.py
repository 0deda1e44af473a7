# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reflection front-end: builds type graphs from live Python classes and functions.

Supported declarations:

* dataclasses, pydantic models, and plain classes with an annotated
  ``__init__`` (or annotated class attributes) become object nodes;
* ``enum.Enum`` subclasses become enum nodes;
* classes marked with :func:`schemagraph.annotations.sealed` become
  polymorphic nodes over their direct subclasses;
* functions and methods become an object node of their parameters.

Type usages are type hints as returned by ``typing.get_type_hints`` with
``include_extras=True``. ``Annotated`` metadata feeds descriptions and
deprecation; ``X | None`` marks a nullable use-site.
"""

from __future__ import annotations

import collections
import collections.abc
import dataclasses
import datetime
import decimal
import enum
import inspect
import logging
import sys
import types
import typing
import uuid
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, Literal, Union, get_args, get_origin

from pydantic import BaseModel

from schemagraph.annotations import declared_markers, is_sealed
from schemagraph.config.description import DEFAULT_DESCRIPTION_CONFIG, DescriptionConfig
from schemagraph.introspection.context import (
    ClassifierUnsupportedError,
    IntrospectionContext,
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
    resolve_description,
)
from schemagraph.introspection.polymorphism import PolymorphismConfig, resolve_polymorphic
from schemagraph.model.graph import (
    DefaultPresence,
    EnumNode,
    InlineTypeRef,
    NamedTypeRef,
    ObjectNode,
    PrimitiveKind,
    PrimitiveNode,
    Property,
    TypeGraph,
    TypeId,
    TypeNode,
)

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def introspect_class(
    root: Any,
    *,
    description_config: DescriptionConfig = DEFAULT_DESCRIPTION_CONFIG,
    polymorphism: PolymorphismConfig | None = None,
    qualified_names: bool = True,
    strict_type_arguments: bool = False,
) -> TypeGraph:
    """Introspect a class (or any supported type hint) into a type graph.

    Args:
        root: The class to introspect, e.g. a dataclass or pydantic model.
            Container hints such as ``list[Item]`` are accepted as well.
        description_config: Recognized description markers.
        polymorphism: Discriminator settings for sealed hierarchies.
        qualified_names: Use ``module.QualName`` as the id of top-level
            classes. With ``False`` the simple class name is used.
        strict_type_arguments: Reject bare containers such as ``list``
            instead of assuming string elements.

    Returns:
        The type graph rooted at *root*.

    Raises:
        UnsupportedDeclarationShapeError: If *root* is a function.
        ClassifierUnsupportedError: If *root* or a type reachable from it
            cannot be represented.
    """
    if inspect.isroutine(root):
        raise UnsupportedDeclarationShapeError(
            f"'{getattr(root, '__qualname__', root)}' is a function; use introspect_function() instead"
        )
    context = _ReflectionContext(
        description_config=description_config,
        polymorphism=polymorphism or PolymorphismConfig(),
        qualified_names=qualified_names,
        strict_type_arguments=strict_type_arguments,
    )
    return context.graph(context.resolve(root))


def introspect_function(
    func: Callable[..., Any],
    *,
    description_config: DescriptionConfig = DEFAULT_DESCRIPTION_CONFIG,
    polymorphism: PolymorphismConfig | None = None,
    qualified_names: bool = True,
    strict_type_arguments: bool = False,
) -> TypeGraph:
    """Introspect the parameters of a function into a type graph.

    The root is an object node named after the function, with one property
    per parameter. A parameter is required unless it has a default.

    Raises:
        UnsupportedDeclarationShapeError: If *func* is a coroutine function,
            an async generator, a lambda, a class, or takes ``*args`` /
            ``**kwargs``. Raised before any graph construction.
        ClassifierUnsupportedError: If a parameter type cannot be represented.
    """
    _check_function_shape(func)
    context = _ReflectionContext(
        description_config=description_config,
        polymorphism=polymorphism or PolymorphismConfig(),
        qualified_names=qualified_names,
        strict_type_arguments=strict_type_arguments,
    )
    return context.graph(context.resolve_declaration(_FunctionDecl(func)))


# ################
# Implementation
# ################

_PRIMITIVE_KINDS: dict[type, PrimitiveKind] = {
    str: PrimitiveKind.STRING,
    bool: PrimitiveKind.BOOLEAN,
    int: PrimitiveKind.INT,
    float: PrimitiveKind.DOUBLE,
    decimal.Decimal: PrimitiveKind.DOUBLE,
    uuid.UUID: PrimitiveKind.STRING,
    datetime.date: PrimitiveKind.STRING,
    datetime.datetime: PrimitiveKind.STRING,
    datetime.time: PrimitiveKind.STRING,
}

_CONCRETE_LISTS: tuple[type, ...] = (list, tuple, set, frozenset, collections.deque)

_ABSTRACT_LISTS: tuple[type, ...] = (
    collections.abc.Iterable,
    collections.abc.Iterator,
    collections.abc.Collection,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
)

_UNION_ORIGINS = (Union, types.UnionType)


@dataclass(frozen=True, eq=False)
class _FunctionDecl:
    """Identity-hashed declaration wrapper for a function root."""

    func: Callable[..., Any]


@dataclass(frozen=True)
class _Member:
    """One property candidate of a class or function.

    ``attribute`` is the Python name used to look up docstring entries;
    ``name`` is the serialized property name (a pydantic alias, if set).
    """

    name: str
    attribute: str
    hint: Any
    has_default: bool
    description: str | None = None
    deprecated: bool = False


class _ReflectionContext(IntrospectionContext[Hashable, Any]):
    """Introspection context over Python classes and type hints."""

    def __init__(
        self,
        *,
        description_config: DescriptionConfig,
        polymorphism: PolymorphismConfig,
        qualified_names: bool,
        strict_type_arguments: bool,
    ) -> None:
        super().__init__(strict_type_arguments=strict_type_arguments)
        self._description_config = description_config
        self._polymorphism = polymorphism
        self._qualified_names = qualified_names

    # -------- classification --------

    def unwrap_nullable(self, use: Any) -> tuple[Any, bool]:
        nullable = False
        while True:
            origin = get_origin(use)
            if origin is Annotated:
                use = get_args(use)[0]
            elif origin in _UNION_ORIGINS:
                args = get_args(use)
                non_none = tuple(arg for arg in args if arg is not type(None))
                if len(non_none) < len(args):
                    nullable = True
                if len(non_none) != 1:
                    return use, nullable
                use = non_none[0]
            elif isinstance(use, typing.NewType):
                use = use.__supertype__
            elif type(use).__name__ == "TypeAliasType":
                use = use.__value__
            else:
                return use, nullable

    def classify(self, use: Any) -> Shape:
        origin = get_origin(use)
        args = get_args(use)

        if origin is Literal:
            return _literal_shape(use, args)
        if origin in _UNION_ORIGINS:
            raise ClassifierUnsupportedError(_describe(use), "unions of several types are not supported")

        target = origin if origin is not None else use
        if use is Any or not isinstance(target, type):
            raise ClassifierUnsupportedError(_describe(use))

        if origin is None and target in _PRIMITIVE_KINDS:
            return PrimitiveShape(decl=target, kind=_PRIMITIVE_KINDS[target])
        if issubclass(target, enum.Enum):
            return NamedShape(decl=target)
        if issubclass(target, collections.abc.Mapping):
            if len(args) == 2:
                return MapShape(key=args[0], value=args[1])
            return MapShape()
        if issubclass(target, _CONCRETE_LISTS) or target in _ABSTRACT_LISTS:
            return ListShape(element=_element_argument(use, target, args))
        if target.__module__ in ("builtins", "typing"):
            raise ClassifierUnsupportedError(_describe(use))
        if args:
            logger.debug("Ignoring type arguments of generic %r", use)
        return NamedShape(decl=target)

    # -------- naming --------

    def qualified_name(self, decl: Hashable) -> str:
        if isinstance(decl, _FunctionDecl):
            return decl.func.__name__
        assert isinstance(decl, type)
        if not self._qualified_names:
            return decl.__name__
        return f"{decl.__module__}.{decl.__qualname__}"

    def simple_name(self, decl: Hashable) -> str:
        if isinstance(decl, _FunctionDecl):
            return decl.func.__name__
        assert isinstance(decl, type)
        return decl.__name__

    def type_id_for(self, decl: Hashable, parent_prefix: str | None = None) -> TypeId:
        # Members of a sealed hierarchy are always named after their parent,
        # whichever use-site discovers them first.
        if parent_prefix is None and isinstance(decl, type):
            parent = _sealed_parent(decl)
            if parent is not None:
                parent_prefix = parent.__name__
        return super().type_id_for(decl, parent_prefix)

    # -------- node construction --------

    def build_node(self, decl: Hashable, parent_prefix: str | None) -> TypeNode:
        if isinstance(decl, _FunctionDecl):
            return self._build_function(decl.func)
        assert isinstance(decl, type)
        if issubclass(decl, enum.Enum):
            return self._build_enum(decl)
        if is_sealed(decl):
            return self._build_polymorphic(decl)
        return self._build_object(decl)

    def _build_enum(self, cls: type[enum.Enum]) -> EnumNode:
        members = list(cls)
        if members and all(isinstance(member.value, str) for member in members):
            entries = [member.value for member in members]
        else:
            entries = [member.name for member in members]
        return EnumNode(name=cls.__name__, entries=entries, description=self._class_description(cls))

    def _build_polymorphic(self, cls: type) -> TypeNode:
        subclasses = cls.__subclasses__()
        if not subclasses:
            raise ClassifierUnsupportedError(_describe(cls), "sealed class has no subclasses")
        values: dict[Hashable, str] = {}
        for subclass in subclasses:
            value = self._declared_discriminator(subclass)
            if value is not None:
                values[subclass] = value
        return resolve_polymorphic(
            self,
            cls,
            subclasses,
            config=self._polymorphism,
            description=self._class_description(cls),
            discriminator_values=values,
        )

    def _build_object(self, cls: type) -> ObjectNode:
        members = _class_members(cls)
        parent = _sealed_parent(cls)
        own_doc = _own_doc(cls)
        parent_doc = _own_doc(parent) if parent is not None else None

        properties: list[Property] = []
        required: list[str] = []
        discriminator = self._polymorphism.discriminator
        if self._polymorphism.tags_object(parent is not None) and all(
            member.name != discriminator for member in members
        ):
            properties.append(
                Property(
                    name=discriminator,
                    type=InlineTypeRef(node=PrimitiveNode(primitive=PrimitiveKind.STRING)),
                    default_presence=DefaultPresence.REQUIRED,
                )
            )
            required.append(discriminator)

        for member in members:
            sources = self._member_sources(member, own_doc)
            if parent_doc is not None:
                sources.append(DocCommentTag(parent_doc, member.attribute))
            properties.append(self._property(cls.__qualname__, member, sources))
            if not member.has_default:
                required.append(member.name)

        return ObjectNode(
            name=cls.__name__,
            properties=properties,
            required=required,
            description=self._class_description(cls),
        )

    def _build_function(self, func: Callable[..., Any]) -> ObjectNode:
        doc = _own_doc(func)
        properties: list[Property] = []
        required: list[str] = []
        for member in _signature_members(func, func.__qualname__):
            properties.append(self._property(func.__qualname__, member, self._member_sources(member, doc)))
            if not member.has_default:
                required.append(member.name)

        owner = _owner_class(func)
        sources: list[DescriptionSource] = [StructuredAttribute.from_marker(m) for m in declared_markers(func)]
        sources.append(DocCommentBody(doc))
        return ObjectNode(
            name=func.__name__,
            properties=properties,
            required=required,
            description=resolve_description(
                sources,
                self._description_config,
                enclosing_doc=_own_doc(owner) if owner is not None else None,
            ),
        )

    # -------- helpers --------

    def _property(self, owner: str, member: _Member, sources: list[DescriptionSource]) -> Property:
        try:
            type_ref = self.resolve(member.hint)
        except ClassifierUnsupportedError as exc:
            if exc.declaration is not None:
                raise
            location = f"{owner}.{member.attribute}"
            raise ClassifierUnsupportedError(exc.use_site, exc.reason, declaration=location) from exc
        markers = _annotated_metadata(member.hint)
        return Property(
            name=member.name,
            type=type_ref,
            description=resolve_description(sources, self._description_config),
            deprecated=member.deprecated or any(type(m).__name__ == "Deprecated" for m in markers),
            default_presence=DefaultPresence.HAS_DEFAULT if member.has_default else DefaultPresence.REQUIRED,
        )

    def _member_sources(self, member: _Member, doc: str | None) -> list[DescriptionSource]:
        markers = _annotated_metadata(member.hint)
        sources: list[DescriptionSource] = [StructuredAttribute.from_marker(m) for m in markers]
        if member.description is not None:
            # pydantic's Field(description=...) is an explicit description.
            sources.append(StructuredAttribute("Description", (("value", member.description),)))
        sources.append(DocCommentTag(doc, member.attribute))
        return sources

    def _class_description(self, cls: type) -> str | None:
        sources: list[DescriptionSource] = [StructuredAttribute.from_marker(m) for m in declared_markers(cls)]
        sources.append(DocCommentBody(_own_doc(cls)))
        return resolve_description(sources, self._description_config)

    def _declared_discriminator(self, subclass: type) -> str | None:
        """The single ``Literal`` string a subclass declares for the discriminator field."""
        hint = _field_hint(subclass, self._polymorphism.discriminator)
        if hint is None:
            return None
        hint, _ = self.unwrap_nullable(hint)
        if get_origin(hint) is Literal:
            values = get_args(hint)
            if len(values) == 1 and isinstance(values[0], str):
                return values[0]
        return None


def _check_function_shape(func: Any) -> None:
    """Reject roots that cannot be represented as an object of parameters."""
    if isinstance(func, type):
        raise UnsupportedDeclarationShapeError(f"'{func.__qualname__}' is a class; use introspect_class() instead")
    if not (inspect.isfunction(func) or inspect.ismethod(func)):
        raise UnsupportedDeclarationShapeError(f"{func!r} is not a Python function or method")
    name = getattr(func, "__name__", None)
    if not name or name == "<lambda>":
        raise UnsupportedDeclarationShapeError("Lambdas and anonymous callables have no usable name")
    if inspect.iscoroutinefunction(func) or inspect.isasyncgenfunction(func):
        raise UnsupportedDeclarationShapeError(
            f"Coroutine function '{func.__qualname__}' is not supported; expose a synchronous wrapper instead"
        )
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError) as exc:
        raise UnsupportedDeclarationShapeError(f"Cannot read the signature of '{name}': {exc}") from exc
    for param in signature.parameters.values():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            raise UnsupportedDeclarationShapeError(
                f"Function '{func.__qualname__}' takes variadic parameter '{param.name}', "
                "which has no schema representation; declare explicit parameters instead"
            )


def _literal_shape(use: Any, values: tuple[Any, ...]) -> PrimitiveShape:
    """Map a ``Literal`` to the primitive shared by all of its values."""
    value_types = {type(value) for value in values}
    if len(value_types) == 1:
        value_type = value_types.pop()
        if value_type in (str, bool, int, float):
            return PrimitiveShape(decl=value_type, kind=_PRIMITIVE_KINDS[value_type])
    raise ClassifierUnsupportedError(_describe(use), "Literal values must share one primitive type")


def _element_argument(use: Any, target: type, args: tuple[Any, ...]) -> Any:
    """The element type of a list-like usage, or ``None`` when it carries none."""
    if not args:
        return None
    if issubclass(target, tuple):
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        if len(set(args)) == 1:
            return args[0]
        raise ClassifierUnsupportedError(_describe(use), "heterogeneous tuples are not supported")
    return args[0]


def _describe(use: Any) -> str:
    if isinstance(use, type):
        return f"{use.__module__}.{use.__qualname__}"
    return repr(use)


def _type_hints(target: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(target, include_extras=True)
    except (NameError, TypeError) as exc:
        raise ClassifierUnsupportedError(_describe(target), f"cannot resolve annotations: {exc}") from exc


def _annotated_metadata(hint: Any) -> tuple[Any, ...]:
    """Collect ``Annotated`` metadata from *hint*, looking through ``Optional``."""
    origin = get_origin(hint)
    if origin is Annotated:
        args = get_args(hint)
        return (*_annotated_metadata(args[0]), *hint.__metadata__)
    if origin in _UNION_ORIGINS:
        metadata: tuple[Any, ...] = ()
        for arg in get_args(hint):
            metadata += _annotated_metadata(arg)
        return metadata
    return ()


def _sealed_parent(cls: type) -> type | None:
    for base in cls.__bases__:
        if is_sealed(base):
            return base
    return None


def _own_doc(target: Any) -> str | None:
    """Docstring written on *target* itself, excluding generated and inherited ones."""
    if isinstance(target, type):
        doc = target.__dict__.get("__doc__")
        if doc and dataclasses.is_dataclass(target) and doc.startswith(f"{target.__name__}("):
            return None
        if doc and issubclass(target, enum.Enum) and doc in (enum.Enum.__doc__, "An enumeration."):
            return None
    else:
        doc = getattr(target, "__doc__", None)
    return inspect.cleandoc(doc) if doc else None


def _owner_class(func: Callable[..., Any]) -> type | None:
    """The class a method belongs to, if any."""
    if inspect.ismethod(func):
        bound = func.__self__
        return bound if isinstance(bound, type) else type(bound)
    path = getattr(func, "__qualname__", "").split(".")[:-1]
    if not path or "<locals>" in path:
        return None
    owner: Any = sys.modules.get(func.__module__)
    for part in path:
        owner = getattr(owner, part, None)
    return owner if isinstance(owner, type) else None


def _class_members(cls: type) -> list[_Member]:
    """Property candidates of a class, in declaration order."""
    if issubclass(cls, BaseModel):
        members = []
        for name, info in cls.model_fields.items():
            members.append(
                _Member(
                    name=info.serialization_alias or info.alias or name,
                    attribute=name,
                    hint=_pydantic_hint(info),
                    has_default=not info.is_required(),
                    description=info.description,
                    deprecated=bool(getattr(info, "deprecated", None)),
                )
            )
        return members
    hints = _type_hints(cls)
    if dataclasses.is_dataclass(cls):
        return [
            _Member(
                name=f.name,
                attribute=f.name,
                hint=hints.get(f.name, f.type),
                has_default=f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING,
            )
            for f in dataclasses.fields(cls)
            if f.init
        ]
    if cls.__init__ is object.__init__:
        return [
            _Member(
                name=name,
                attribute=name,
                hint=hint,
                has_default=any(name in klass.__dict__ for klass in cls.__mro__),
            )
            for name, hint in hints.items()
            if get_origin(hint) is not ClassVar and not name.startswith("_")
        ]
    return _signature_members(cls.__init__, cls.__qualname__)


def _signature_members(func: Callable[..., Any], owner: str) -> list[_Member]:
    """Property candidates from the parameters of *func*."""
    hints = _type_hints(func)
    params = list(inspect.signature(func).parameters.values())
    # An unannotated leading self/cls is the receiver of an unbound method.
    if params and params[0].name in ("self", "cls") and params[0].name not in hints:
        params = params[1:]
    members = []
    for param in params:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        if param.name not in hints:
            raise ClassifierUnsupportedError(f"{owner}.{param.name}", "missing type annotation")
        members.append(
            _Member(
                name=param.name,
                attribute=param.name,
                hint=hints[param.name],
                has_default=param.default is not inspect.Parameter.empty,
            )
        )
    return members


def _pydantic_hint(info: Any) -> Any:
    """The field's type with its ``Annotated`` metadata restored.

    pydantic moves ``Annotated`` metadata from the annotation into
    ``FieldInfo.metadata``.
    """
    if info.metadata:
        return Annotated[(info.annotation, *info.metadata)]
    return info.annotation


def _field_hint(cls: type, name: str) -> Any:
    """The type hint of field *name* declared on *cls*, or ``None``."""
    if issubclass(cls, BaseModel):
        info = cls.model_fields.get(name)
        return _pydantic_hint(info) if info is not None else None
    return _type_hints(cls).get(name)
