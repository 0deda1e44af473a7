# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Markers that enrich introspected schemas.

``Description`` and ``Deprecated`` are placed in ``typing.Annotated``
metadata::

    @Description("A circle.")
    @dataclass
    class Circle:
        radius: Annotated[float, Description("Radius in units")]

Markers are recognized by the simple name of their class, so any object
named ``Description`` (or another configured name) works the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

_T = TypeVar("_T")

# ###############
# Public Interface
# ###############

# Attribute holding the markers applied to a class or function by decoration.
MARKERS_ATTRIBUTE = "__schemagraph_markers__"


@dataclass(frozen=True)
class Description:
    """Explicit description of a type, property, function or parameter.

    Applied as a decorator, the marker is recorded on the decorated class or
    function itself; subclasses do not inherit it.
    """

    value: str

    def __call__(self, target: _T) -> _T:
        markers = list(target.__dict__.get(MARKERS_ATTRIBUTE, ()))
        markers.append(self)
        setattr(target, MARKERS_ATTRIBUTE, tuple(markers))
        return target


@dataclass(frozen=True)
class Deprecated:
    """Marks a property or parameter as deprecated."""

    reason: str | None = None


def sealed(cls: type[_T]) -> type[_T]:
    """Mark *cls* as a closed hierarchy whose direct subclasses are its only variants."""
    cls.__schemagraph_sealed__ = True  # type: ignore[attr-defined]
    return cls


def is_sealed(cls: type) -> bool:
    """Return whether *cls* itself (not a base class) was marked with :func:`sealed`."""
    return bool(cls.__dict__.get("__schemagraph_sealed__", False))


def declared_markers(target: Any) -> tuple[Any, ...]:
    """Return the markers applied by decoration directly to *target*."""
    target = getattr(target, "__func__", target)
    namespace = getattr(target, "__dict__", {})
    return tuple(namespace.get(MARKERS_ATTRIBUTE, ()))
