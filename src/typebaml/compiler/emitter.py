# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Assembly of BAML schema documents from record and enum definitions.

Each record becomes a ``class`` block and each enum an ``enum`` block::

    enum Status {
      "active" @description("Account is in good standing")
    }

    class Account {
      id string
      status Status
    }

Blocks are separated by exactly one blank line. When dependencies are
included, every enum comes first (in first-seen order), followed by the
records in dependency order.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

from typebaml.compiler.dependencies import record_refs_from, resolve_dependencies, resolve_enums
from typebaml.compiler.renderer import render
from typebaml.model.entities import EnumDef, FieldDef, RecordDef
from typebaml.model.registry import TypeRegistry

# ###############
# Public Interface
# ###############

# lookup_comment(owner_identity, member_name) -> comment text or None.
CommentLookup = Callable[[str, str], str | None]


class SchemaError(Exception):
    """Raised when a set of definitions cannot be emitted as one document."""


class NameCollisionError(SchemaError):
    """Raised when two distinct definitions share the same short name."""

    def __init__(self, name: str, identities: Sequence[str]) -> None:
        self.name = name
        self.identities = list(identities)
        joined = ", ".join(f"'{i}'" for i in self.identities)
        super().__init__(f"Name '{name}' is used by more than one definition: {joined}")


class EmitOptions(BaseModel):
    """Options controlling the emitted document.

    Attributes:
        indent_size: Number of spaces before each field or enum value line.
        include_descriptions: Append ``@description(...)`` annotations.
        include_dependencies: Emit every referenced record and enum ahead of
            the roots instead of only the roots themselves.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    indent_size: int = _Field(default=2, ge=0)
    include_descriptions: bool = True
    include_dependencies: bool = True


class SchemaEmitter:
    """Emits BAML blocks for definitions held in a :class:`TypeRegistry`."""

    def __init__(
        self,
        registry: TypeRegistry,
        options: EmitOptions | None = None,
        *,
        lookup_comment: CommentLookup | None = None,
    ) -> None:
        self._registry = registry
        self._options = options or EmitOptions()
        self._lookup_comment = lookup_comment
        self._indent = " " * self._options.indent_size

    def emit(self, roots: Sequence[RecordDef | EnumDef]) -> str:
        """Emit a document for *roots* (and their dependencies, if enabled)."""
        return self._join(self._definitions(roots))

    def emit_tool(self, root: RecordDef) -> str:
        """Emit *root* as a tool definition, headed by its description as ``//`` comment lines."""
        definitions = self._definitions([root])
        blocks = [self._block(d) for d in definitions]
        if self._options.include_descriptions and root.description:
            header = "\n".join(f"// {line}".rstrip() for line in root.description.splitlines())
            blocks[-1] = f"{header}\n{blocks[-1]}"
        return "\n\n".join(blocks)

    def record_block(self, record: RecordDef) -> str:
        """Render a single ``class`` block."""
        lines = [f"class {record.name} {{"]
        for field_def in record.fields:
            line = f"{self._indent}{field_def.name} {render(field_def.type)}"
            lines.append(line + self._annotation(self._field_description(record, field_def)))
        lines.append("}")
        return "\n".join(lines)

    def enum_block(self, enum_def: EnumDef) -> str:
        """Render a single ``enum`` block."""
        lines = [f"enum {enum_def.name} {{"]
        for value in enum_def.values:
            comment = self._comment(enum_def.identity, value.member_name)
            lines.append(f'{self._indent}"{value.value}"' + self._annotation(comment))
        lines.append("}")
        return "\n".join(lines)

    def _definitions(self, roots: Sequence[RecordDef | EnumDef]) -> list[RecordDef | EnumDef]:
        """Return the definitions to emit, in document order."""
        if not self._options.include_dependencies:
            definitions = _dedupe(roots)
        else:
            refs_of = record_refs_from(self._registry)
            enums: list[EnumDef] = []
            records: list[RecordDef] = []
            for root in roots:
                if isinstance(root, EnumDef):
                    enums.append(root)
                    continue
                resolved = resolve_dependencies(root, refs_of)
                enums.extend(resolve_enums(resolved, self._registry))
                records.extend(resolved)
            definitions = _dedupe([*enums, *records])
        _check_name_collisions(definitions)
        return definitions

    def _join(self, definitions: Sequence[RecordDef | EnumDef]) -> str:
        return "\n\n".join(self._block(d) for d in definitions)

    def _block(self, definition: RecordDef | EnumDef) -> str:
        if isinstance(definition, EnumDef):
            return self.enum_block(definition)
        return self.record_block(definition)

    def _field_description(self, record: RecordDef, field_def: FieldDef) -> str | None:
        # A declared description always wins over a source comment.
        if field_def.description:
            return field_def.description
        return self._comment(record.identity, field_def.member_name or field_def.name)

    def _comment(self, owner: str, member: str) -> str | None:
        if not self._options.include_descriptions or self._lookup_comment is None:
            return None
        return self._lookup_comment(owner, member)

    def _annotation(self, description: str | None) -> str:
        if not self._options.include_descriptions or not description:
            return ""
        return f' @description("{escape_description(description)}")'


def emit(
    roots: Sequence[RecordDef | EnumDef],
    registry: TypeRegistry | None = None,
    options: EmitOptions | None = None,
    *,
    lookup_comment: CommentLookup | None = None,
) -> str:
    """Emit a BAML document for *roots*.

    Args:
        roots: Records and enums to emit, in caller order.
        registry: Definitions referenced by the roots. Defaults to a registry
            holding only the roots.
        options: Emission options; defaults to :class:`EmitOptions()`.
        lookup_comment: Optional source-comment collaborator, keyed by owner
            identity and member name.

    Returns:
        The document text, without a trailing newline.

    Raises:
        NameCollisionError: If two different definitions share a short name.
    """
    if registry is None:
        registry = TypeRegistry.of(*roots)
    return SchemaEmitter(registry, options, lookup_comment=lookup_comment).emit(roots)


def escape_description(text: str) -> str:
    """Escape *text* for a double-quoted ``@description`` argument."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


# ################
# Implementation
# ################


def _dedupe(definitions: Sequence[RecordDef | EnumDef]) -> list[RecordDef | EnumDef]:
    """Drop repeated identities, keeping the first occurrence."""
    seen: set[str] = set()
    result: list[RecordDef | EnumDef] = []
    for definition in definitions:
        if definition.identity not in seen:
            seen.add(definition.identity)
            result.append(definition)
    return result


def _check_name_collisions(definitions: Sequence[RecordDef | EnumDef]) -> None:
    by_name: dict[str, list[str]] = {}
    for definition in definitions:
        by_name.setdefault(definition.name, []).append(definition.identity)
    for name, identities in by_name.items():
        if len(identities) > 1:
            raise NameCollisionError(name, identities)
