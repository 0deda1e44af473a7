# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Description resolution from explicit markers and docstrings.

A description for a class, property or parameter can come from several
places. Candidates are collected by the front-end as a list of
description sources and resolved with a fixed precedence:

1. an explicit marker recognized by :class:`DescriptionConfig`;
2. a docstring entry scoped to the element (``:param name:``, an entry in
   a Google-style ``Args:`` / ``Attributes:`` section, ``@param name``);
3. the body of the element's own docstring;
4. the enclosing declaration's docstring body, only when the caller
   passes one (root nodes).

Everything here is a pure function of its arguments.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterable
from dataclasses import dataclass

from schemagraph.config.description import DEFAULT_DESCRIPTION_CONFIG, DescriptionConfig

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class StructuredAttribute:
    """A marker object flattened to its simple class name and attribute values."""

    annotation_name: str
    attributes: tuple[tuple[str, object], ...] = ()

    @classmethod
    def from_marker(cls, marker: object) -> StructuredAttribute:
        """Capture the public attributes of an arbitrary marker object."""
        return cls(annotation_name=type(marker).__name__, attributes=tuple(_marker_attributes(marker)))


@dataclass(frozen=True)
class DocCommentTag:
    """The docstring entry documenting the element called *name*."""

    doc: str | None
    name: str


@dataclass(frozen=True)
class DocCommentBody:
    """The element's own docstring."""

    doc: str | None


DescriptionSource = StructuredAttribute | DocCommentTag | DocCommentBody


def resolve_description(
    sources: Iterable[DescriptionSource],
    config: DescriptionConfig = DEFAULT_DESCRIPTION_CONFIG,
    *,
    enclosing_doc: str | None = None,
) -> str | None:
    """Pick the description of an element from its candidate sources.

    Sources of a higher-precedence kind always win over lower ones,
    whatever their position in *sources*. Within one kind, the first
    source that yields a description wins.

    Args:
        sources: Candidate description sources for the element.
        config: Recognized marker names and value attributes.
        enclosing_doc: Docstring of the enclosing declaration, used only when
            no other source yields a description.

    Returns:
        The description, or ``None`` when no source yields one.
    """
    candidates = list(sources)
    for source in candidates:
        if isinstance(source, StructuredAttribute):
            text = description_from_attributes(source.annotation_name, source.attributes, config)
            if text is not None:
                return text
    for source in candidates:
        if isinstance(source, DocCommentTag):
            text = extract_doc_tag(source.doc, source.name)
            if text is not None:
                return text
    for source in candidates:
        if isinstance(source, DocCommentBody):
            text = extract_doc_description(source.doc)
            if text is not None:
                return text
    return extract_doc_description(enclosing_doc)


def description_from_attributes(
    annotation_name: str,
    attributes: Iterable[tuple[str, object]],
    config: DescriptionConfig = DEFAULT_DESCRIPTION_CONFIG,
) -> str | None:
    """Return the description held by a recognized marker.

    The marker is matched by simple name, case-insensitively. Its attributes
    are tried in the configured priority order and the first string value is
    returned.
    """
    if not config.matches_annotation(annotation_name):
        return None
    values: dict[str, object] = {}
    for name, value in attributes:
        values.setdefault(name.lower(), value)
    for attribute in config.value_attributes:
        value = values.get(attribute)
        if isinstance(value, str):
            return value
    return None


def extract_doc_description(doc: str | None) -> str | None:
    """Return the descriptive text of a docstring.

    Lines are stripped of indentation, accumulation stops at the first tag
    line, blank lines are dropped, and the remaining lines are joined with a
    newline. A docstring without descriptive text yields ``None``.
    """
    if not doc:
        return None
    lines: list[str] = []
    for raw in doc.splitlines():
        line = raw.strip()
        if _is_tag_line(line):
            break
        if line:
            lines.append(line)
    return "\n".join(lines) or None


def extract_doc_tag(doc: str | None, name: str) -> str | None:
    """Return the docstring entry that documents *name*, or ``None``.

    Recognized entry forms::

        :param name: text          (also :ivar, :var, :cvar, optional type)
        @param name text           (also @property)
        Args:                      (also Attributes:, Parameters:, ...)
            name (type): text
    """
    if not doc:
        return None
    lines = doc.expandtabs().splitlines()
    section_indent: int | None = None
    entry_indent: int | None = None

    for index, raw in enumerate(lines):
        line = raw.strip()
        if not line:
            continue
        indent = len(raw) - len(raw.lstrip())

        match = _REST_FIELD.match(line) or _AT_TAG.match(line)
        if match is not None:
            section_indent = None
            if match.group("name") == name:
                return _join(match.group("text"), _continuation_lines(lines, index, indent, any_indent=True))
            continue

        if section_indent is not None and indent <= section_indent:
            section_indent = None
        if section_indent is None:
            if _ENTRY_SECTION.match(line):
                section_indent = indent
                entry_indent = None
            continue

        entry = _SECTION_ENTRY.match(line)
        if entry is None:
            continue
        if entry_indent is None:
            entry_indent = indent
        if indent == entry_indent and entry.group("name").lstrip("*") == name:
            return _join(entry.group("text"), _continuation_lines(lines, index, indent, any_indent=False))
    return None


# ################
# Implementation
# ################

_SECTION_NAMES = (
    "Args|Arguments|Parameters|Params|Attributes|Keyword Args|Keyword Arguments|Other Parameters|"
    "Returns?|Yields?|Raises|Examples?|Notes?|Warnings?|See Also|References|Todo"
)

_ANY_SECTION = re.compile(rf"^(?:{_SECTION_NAMES}):\s*$")
_ENTRY_SECTION = re.compile(
    r"^(?:Args|Arguments|Parameters|Params|Attributes|Keyword Args|Keyword Arguments|Other Parameters):\s*$"
)
_SECTION_ENTRY = re.compile(r"^(?P<name>\*{0,2}\w+)\s*(?:\([^)]*\))?\s*:\s*(?P<text>.*)$")
_REST_FIELD = re.compile(
    r"^:(?:param|parameter|arg|argument|key|keyword|ivar|var|cvar)\s+(?:[^:]*\s)?(?P<name>\w+)\s*:\s*(?P<text>.*)$"
)
_AT_TAG = re.compile(r"^@(?:param|property)\s+(?P<name>\w+)\s*(?P<text>.*)$")
_REST_ANY = re.compile(r"^:\w+[^:]*:")


def _is_tag_line(line: str) -> bool:
    """Whether a stripped docstring line starts the tagged part of a docstring."""
    if line.startswith("@") and len(line) > 1 and line[1].isalpha():
        return True
    return bool(_REST_ANY.match(line) or _ANY_SECTION.match(line))


def _continuation_lines(lines: list[str], index: int, indent: int, *, any_indent: bool) -> list[str]:
    """Collect the lines continuing the entry that starts at *index*.

    Continuations end at a blank line or a new tag. Google-style entries
    additionally require continuation lines to be indented deeper than the
    entry itself.
    """
    continued: list[str] = []
    for raw in lines[index + 1 :]:
        line = raw.strip()
        if not line or _is_tag_line(line):
            break
        if not any_indent and len(raw) - len(raw.lstrip()) <= indent:
            break
        continued.append(line)
    return continued


def _join(first: str, rest: list[str]) -> str | None:
    parts = [part for part in [first.strip(), *rest] if part]
    return "\n".join(parts) or None


def _marker_attributes(marker: object) -> list[tuple[str, object]]:
    """Public attribute name/value pairs of a marker, in declaration order."""
    if dataclasses.is_dataclass(marker) and not isinstance(marker, type):
        return [(f.name, getattr(marker, f.name)) for f in dataclasses.fields(marker)]
    names: list[str] = []
    for klass in type(marker).__mro__:
        for slot in klass.__dict__.get("__slots__", ()):
            if slot not in names:
                names.append(slot)
    names.extend(name for name in getattr(marker, "__dict__", {}) if name not in names)
    return [(name, getattr(marker, name, None)) for name in names if not name.startswith("_")]
