# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the TypeBAML command-line interface."""

import argparse
import importlib
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from typebaml import generate
from typebaml.compiler.emitter import EmitOptions, SchemaEmitter, SchemaError
from typebaml.introspection.json_schema import load_json_schema
from typebaml.introspection.reflect import ReflectionError
from typebaml.workspace.config import (
    CONFIG_FILE_NAME,
    GeneratorConfig,
    GeneratorConfigError,
    load_generator_config,
)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the TypeBAML CLI."""
    parser = argparse.ArgumentParser(
        prog="typebaml",
        description="TypeBAML: generate BAML schemas from Python type declarations",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Create a starter generator configuration",
        description=f"Write a starter {CONFIG_FILE_NAME} file.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to create the configuration in (default: current directory)",
    )

    # generate subcommand
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a BAML schema from Python classes",
        description="Reflect Python classes and print (or write) their BAML schema.",
    )
    generate_parser.add_argument(
        "targets",
        nargs="*",
        metavar="TARGET",
        help="Class to generate, as 'package.module:ClassName' (default: targets from the config file)",
    )
    generate_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Generator configuration file (default: ./{CONFIG_FILE_NAME} if present)",
    )
    generate_parser.add_argument(
        "--tool",
        action="store_true",
        help="Emit the single target as a tool definition",
    )
    _add_emit_arguments(generate_parser)

    # json-schema subcommand
    json_parser = subparsers.add_parser(
        "json-schema",
        help="Convert a JSON Schema file into a BAML tool definition",
        description="Read a JSON Schema object (e.g. tool parameters) and emit it as a BAML class.",
    )
    json_parser.add_argument("file", type=Path, help="JSON Schema file")
    json_parser.add_argument(
        "--name",
        default=None,
        help="Class name for the root schema (default: the schema's 'title')",
    )
    _add_emit_arguments(json_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_STARTER_CONFIG = (
    "# TypeBAML generator configuration\n"
    "targets: []\n"
    "#  - myapp.models:Order\n"
    "# output: schema.baml\n"
    "indent-size: 2\n"
    "include-descriptions: true\n"
    "include-dependencies: true\n"
)


def _add_emit_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the output and emitter option flags shared by the generating subcommands."""
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the schema to this file instead of stdout",
    )
    parser.add_argument(
        "--indent-size",
        type=int,
        default=None,
        help="Spaces per indentation level (default: 2)",
    )
    parser.add_argument(
        "--no-descriptions",
        action="store_true",
        help="Omit @description annotations",
    )
    parser.add_argument(
        "--no-dependencies",
        action="store_true",
        help="Emit only the targets, not the types they reference",
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "generate":
        return _cmd_generate(args)
    if args.command == "json-schema":
        return _cmd_json_schema(args)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME

    if config_file.exists():
        print(f"Error: configuration already exists at '{config_file}'.", file=sys.stderr)
        return 1

    config_file.write_text(_STARTER_CONFIG, encoding="utf-8")
    print(f"Created TypeBAML configuration at '{config_file}'.")
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    config_path: Path | None = args.config
    if config_path is None and Path(CONFIG_FILE_NAME).exists():
        config_path = Path(CONFIG_FILE_NAME)

    config = GeneratorConfig()
    if config_path is not None:
        try:
            config = load_generator_config(config_path)
        except GeneratorConfigError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    targets: list[str] = args.targets or config.targets
    if not targets:
        print("Error: no targets given and none configured.", file=sys.stderr)
        return 1

    output = args.output
    if output is None and config.output is not None:
        base = config_path.parent if config_path is not None else Path(".")
        output = base / config.output

    # Targets are importable from the working directory, as with `python -m`.
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        options = _emit_options(args, config)
        classes = [_load_target(target) for target in targets]
        document = generate(classes, options, tool=args.tool)
    except (ReflectionError, SchemaError, ValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return _write_document(document, output)


def _cmd_json_schema(args: argparse.Namespace) -> int:
    """Handle the json-schema subcommand."""
    try:
        text = args.file.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot read '{args.file}': {exc}", file=sys.stderr)
        return 1

    try:
        root, registry = load_json_schema(text, args.name)
        document = SchemaEmitter(registry, _emit_options(args, GeneratorConfig())).emit_tool(root)
    except (ReflectionError, SchemaError, ValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return _write_document(document, args.output)


def _emit_options(args: argparse.Namespace, config: GeneratorConfig) -> EmitOptions:
    """Combine the configuration with command-line overrides."""
    return EmitOptions(
        indent_size=config.indent_size if args.indent_size is None else args.indent_size,
        include_descriptions=config.include_descriptions and not args.no_descriptions,
        include_dependencies=config.include_dependencies and not args.no_dependencies,
    )


def _load_target(target: str) -> type:
    """Import the class named by a ``module:QualName`` target.

    Raises:
        ReflectionError: If the target is malformed or cannot be imported.
    """
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise ReflectionError(f"Invalid target '{target}': expected 'package.module:ClassName'")
    try:
        obj: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise ReflectionError(f"Cannot import module '{module_name}': {exc}") from exc
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ReflectionError(f"Module '{module_name}' has no attribute '{qualname}'") from None
    if not isinstance(obj, type):
        raise ReflectionError(f"Target '{target}' is not a class")
    return obj


def _write_document(document: str, output: Path | None) -> int:
    """Print *document*, or write it to *output* with a trailing newline."""
    if output is None:
        print(document)
        return 0
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(document + "\n", encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot write '{output}': {exc}", file=sys.stderr)
        return 1
    print(f"Wrote schema to '{output}'.")
    return 0
