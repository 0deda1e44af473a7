# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the SchemaGraph command-line interface."""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import Any

from schemagraph.config.description import CONFIG_FILE_NAME, DescriptionConfig, load_description_config
from schemagraph.emitter import (
    FunctionCallingConfig,
    FunctionCallingSchemaEmitter,
    JsonSchemaConfig,
    JsonSchemaEmitter,
    SchemaEmissionError,
    dumps,
)
from schemagraph.introspection import IntrospectionError, introspect_class, introspect_function

# ###############
# Public Interface
# ###############


def main(argv: list[str] | None = None) -> None:
    """Run the SchemaGraph CLI."""
    parser = argparse.ArgumentParser(
        prog="schemagraph",
        description="SchemaGraph: JSON Schema and function-calling definitions from Python types",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log introspection details to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # json-schema subcommand
    json_parser = subparsers.add_parser(
        "json-schema",
        help="Emit the JSON Schema of a class",
        description="Introspect a class and print its JSON Schema (draft 2020-12).",
    )
    json_parser.add_argument("target", help="Class to introspect, as 'package.module:QualifiedName'")
    _add_config_argument(json_parser)
    json_parser.add_argument(
        "--ref-root",
        action="store_true",
        help="Reference the root from $defs instead of inlining it at the top level",
    )
    json_parser.add_argument(
        "--simple-names",
        action="store_true",
        help="Use simple class names instead of 'module.QualName' as definition keys",
    )
    _add_indent_argument(json_parser)

    # function-calling subcommand
    function_parser = subparsers.add_parser(
        "function-calling",
        help="Emit the function-calling definition of a function",
        description="Introspect a function and print its function-calling tool definition.",
    )
    function_parser.add_argument("target", help="Function to introspect, as 'package.module:QualifiedName'")
    _add_config_argument(function_parser)
    function_parser.add_argument(
        "--strict",
        action="store_true",
        help="Require every property and mark the definition as strict",
    )
    _add_indent_argument(function_parser)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_config_argument(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Description configuration file (default: ./{CONFIG_FILE_NAME} if present)",
    )


def _add_indent_argument(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Pretty-print with this indentation (default: compact output)",
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "json-schema":
        return _cmd_json_schema(args)
    if args.command == "function-calling":
        return _cmd_function_calling(args)
    return 0


def _cmd_json_schema(args: argparse.Namespace) -> int:
    """Handle the json-schema subcommand."""
    try:
        target = _import_target(args.target)
        graph = introspect_class(
            target,
            description_config=_description_config(args.config),
            qualified_names=not args.simple_names,
        )
        emitter = JsonSchemaEmitter(JsonSchemaConfig(inline_root=not args.ref_root))
        document = emitter.emit(graph, root_name=getattr(target, "__name__", args.target))
    except (ImportError, AttributeError, ValueError, IntrospectionError, SchemaEmissionError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(dumps(document, indent=args.indent))
    return 0


def _cmd_function_calling(args: argparse.Namespace) -> int:
    """Handle the function-calling subcommand."""
    try:
        target = _import_target(args.target)
        graph = introspect_function(target, description_config=_description_config(args.config))
        emitter = FunctionCallingSchemaEmitter(FunctionCallingConfig(strict=args.strict))
        document = emitter.emit(graph)
    except (ImportError, AttributeError, ValueError, IntrospectionError, SchemaEmissionError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(dumps(document, indent=args.indent))
    return 0


def _description_config(path: Path | None) -> DescriptionConfig:
    """Load the description configuration, preferring an explicit path."""
    if path is None:
        default = Path.cwd() / CONFIG_FILE_NAME
        path = default if default.exists() else None
    return load_description_config(path)


def _import_target(target: str) -> Any:
    """Import the object named by a ``package.module:QualifiedName`` target.

    Raises:
        ValueError: If *target* is not of that form.
        ImportError: If the module cannot be imported.
        AttributeError: If the qualified name does not exist in the module.
    """
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise ValueError(f"target '{target}' must have the form 'package.module:QualifiedName'")
    obj: Any = importlib.import_module(module_name)
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise AttributeError(f"'{module_name}' has no attribute '{qualname}'") from None
    return obj
