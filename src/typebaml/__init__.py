# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generate BAML schema definitions from Python type declarations.

Example::

    from dataclasses import dataclass
    import typebaml

    @dataclass
    class SimpleUser:
        name: str
        age: int

    print(typebaml.from_model(SimpleUser))
    # class SimpleUser {
    #   name string
    #   age int
    # }

Keyword options accepted by every entry point: ``indent_size`` (default 2),
``include_descriptions`` (default True) and ``include_dependencies``
(default True).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from typebaml.compiler.emitter import EmitOptions, SchemaEmitter
from typebaml.introspection.comments import SourceCommentLookup
from typebaml.introspection.json_schema import read_json_schema
from typebaml.introspection.reflect import ReflectionError, TypeReflector
from typebaml.model.entities import RecordDef

# ###############
# Public Interface
# ###############


def from_model(cls: type, **options: Any) -> str:
    """Render one record class (and, by default, its dependencies)."""
    return generate([cls], EmitOptions(**options))


def from_models(classes: Sequence[type], **options: Any) -> str:
    """Render several classes into one document; shared dependencies appear once."""
    return generate(classes, EmitOptions(**options))


def from_enum(cls: type, **options: Any) -> str:
    """Render one ``enum.Enum`` subclass."""
    return generate([cls], EmitOptions(**options))


def from_tool(cls: type, **options: Any) -> str:
    """Render a record class as a tool definition headed by its docstring."""
    return generate([cls], EmitOptions(**options), tool=True)


def from_json_schema(schema: Mapping[str, Any], name: str | None = None, **options: Any) -> str:
    """Render a JSON Schema object (e.g. tool parameters) as a tool definition."""
    root, registry = read_json_schema(schema, name)
    return SchemaEmitter(registry, EmitOptions(**options)).emit_tool(root)


def generate(classes: Sequence[type], options: EmitOptions | None = None, *, tool: bool = False) -> str:
    """Reflect *classes* and emit them as one BAML document.

    Args:
        classes: Record and enum classes to emit, in order.
        options: Emission options.
        tool: Emit the single class in *classes* as a tool definition.

    Raises:
        ReflectionError: If a class cannot be reflected, or *tool* is set
            and *classes* is not exactly one record class.
        NameCollisionError: If two emitted definitions share a short name.
    """
    reflector = TypeReflector()
    roots = [reflector.reflect(cls) for cls in classes]
    emitter = SchemaEmitter(
        reflector.registry,
        options,
        lookup_comment=SourceCommentLookup(reflector.classes),
    )
    if not tool:
        return emitter.emit(roots)
    if len(roots) != 1 or not isinstance(roots[0], RecordDef):
        raise ReflectionError("A tool definition needs exactly one record class")
    return emitter.emit_tool(roots[0])


__all__ = [
    "EmitOptions",
    "ReflectionError",
    "from_enum",
    "from_json_schema",
    "from_model",
    "from_models",
    "from_tool",
    "generate",
]
