# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""JSON Schema (draft 2020-12) documents from type graphs.

The emitter is a pure transformation: it performs no I/O and never mutates
the graph. ``$defs`` lists every node in the graph's discovery order, so two
emissions of equal graphs are byte-for-byte identical once serialized with
:func:`dumps`.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict

from schemagraph.emitter.schema import NodeSchemaBuilder, check_complete
from schemagraph.model.graph import NamedTypeRef, TypeGraph

# ###############
# Public Interface
# ###############

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


class JsonSchemaConfig(BaseModel):
    """Layout options for :class:`JsonSchemaEmitter`.

    Attributes:
        inline_root: Copy the root node's schema to the top level of the
            document. When ``False`` the top level holds a ``$ref`` to the
            root's entry in ``$defs`` instead.
    """

    model_config = ConfigDict(frozen=True)

    inline_root: bool = True


class JsonSchemaEmitter:
    """Emits a JSON Schema document for a type graph."""

    def __init__(self, config: JsonSchemaConfig | None = None) -> None:
        self._config = config or JsonSchemaConfig()

    def emit(self, graph: TypeGraph, root_name: str) -> dict[str, Any]:
        """Build the schema document.

        Args:
            graph: The type graph to emit.
            root_name: Identifier of the document (``$id``).

        Returns:
            The document as a JSON-compatible ``dict``.

        Raises:
            SchemaEmissionError: If the graph references missing nodes or
                carries an addressable node inline.
        """
        check_complete(graph)
        builder = NodeSchemaBuilder(graph)
        document: dict[str, Any] = {"$schema": JSON_SCHEMA_DIALECT, "$id": root_name}

        root = graph.root
        if isinstance(root, NamedTypeRef) and not root.nullable and self._config.inline_root:
            document.update(builder.node(graph.nodes[root.id]))
        else:
            document.update(builder.ref(root))
        document["$defs"] = builder.definitions()
        return document


def dumps(document: dict[str, Any], indent: int | None = None) -> str:
    """Serialize a schema document, keeping key order.

    Without *indent* the output is compact.
    """
    if indent is None:
        return json.dumps(document, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(document, indent=indent, ensure_ascii=False)
