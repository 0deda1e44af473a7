# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""SchemaGraph: type graphs and JSON Schema documents from Python declarations.

Typical use::

    from schemagraph import JsonSchemaEmitter, introspect_class

    graph = introspect_class(Circle)
    document = JsonSchemaEmitter().emit(graph, root_name="Circle")
"""

import logging

from schemagraph.annotations import Deprecated, Description, sealed
from schemagraph.config import DEFAULT_DESCRIPTION_CONFIG, DescriptionConfig, load_description_config
from schemagraph.emitter import (
    FunctionCallingConfig,
    FunctionCallingSchemaEmitter,
    JsonSchemaConfig,
    JsonSchemaEmitter,
    SchemaEmissionError,
    dumps,
)
from schemagraph.introspection import (
    ClassifierUnsupportedError,
    DiscriminatorMode,
    IntrospectionError,
    PolymorphismConfig,
    UnsupportedDeclarationShapeError,
    introspect_class,
    introspect_function,
)
from schemagraph.model import TypeGraph

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_DESCRIPTION_CONFIG",
    "ClassifierUnsupportedError",
    "Deprecated",
    "Description",
    "DescriptionConfig",
    "DiscriminatorMode",
    "FunctionCallingConfig",
    "FunctionCallingSchemaEmitter",
    "IntrospectionError",
    "JsonSchemaConfig",
    "JsonSchemaEmitter",
    "PolymorphismConfig",
    "SchemaEmissionError",
    "TypeGraph",
    "UnsupportedDeclarationShapeError",
    "dumps",
    "introspect_class",
    "introspect_function",
    "load_description_config",
    "sealed",
]
