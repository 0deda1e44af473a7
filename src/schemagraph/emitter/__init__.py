# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema document emitters."""

from schemagraph.emitter.function_calling import FunctionCallingConfig, FunctionCallingSchemaEmitter
from schemagraph.emitter.json_schema import JSON_SCHEMA_DIALECT, JsonSchemaConfig, JsonSchemaEmitter, dumps
from schemagraph.emitter.schema import NodeSchemaBuilder, SchemaEmissionError

__all__ = [
    "JSON_SCHEMA_DIALECT",
    "FunctionCallingConfig",
    "FunctionCallingSchemaEmitter",
    "JsonSchemaConfig",
    "JsonSchemaEmitter",
    "NodeSchemaBuilder",
    "SchemaEmissionError",
    "dumps",
]
