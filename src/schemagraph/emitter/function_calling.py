# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Function-calling tool definitions from function type graphs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from schemagraph.emitter.schema import NodeSchemaBuilder, SchemaEmissionError, check_complete
from schemagraph.model.graph import NamedTypeRef, ObjectNode, TypeGraph

# ###############
# Public Interface
# ###############


class FunctionCallingConfig(BaseModel):
    """Options for :class:`FunctionCallingSchemaEmitter`.

    Attributes:
        strict: Mark every property of every object as required and flag
            the definition with ``"strict": true``, as strict tool-calling
            modes demand.
    """

    model_config = ConfigDict(frozen=True)

    strict: bool = False


class FunctionCallingSchemaEmitter:
    """Emits ``{"type": "function", "name", "description", "parameters"}`` documents."""

    def __init__(self, config: FunctionCallingConfig | None = None) -> None:
        self._config = config or FunctionCallingConfig()

    def emit(self, graph: TypeGraph) -> dict[str, Any]:
        """Build the tool definition for a graph produced from a function.

        Raises:
            SchemaEmissionError: If the root is not a reference to an object
                node, or the graph references missing nodes.
        """
        check_complete(graph)
        root = graph.root
        if not isinstance(root, NamedTypeRef):
            raise SchemaEmissionError("Function-calling root must reference an object node")
        node = graph.nodes[root.id]
        if not isinstance(node, ObjectNode):
            raise SchemaEmissionError(f"Function-calling root '{root.id}' is a {node.kind} node, not an object")

        builder = NodeSchemaBuilder(graph, all_required=self._config.strict)
        parameters = builder.node(node)
        # The root description belongs to the function, not its parameters.
        parameters.pop("description", None)
        definitions = builder.definitions(exclude=root.id)
        if definitions:
            parameters["$defs"] = definitions

        document: dict[str, Any] = {"type": "function", "name": node.name}
        if node.description is not None:
            document["description"] = node.description
        document["parameters"] = parameters
        if self._config.strict:
            document["strict"] = True
        return document
