# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rendering of type descriptors into BAML type syntax.

Rendering is total: every descriptor produces a string. Descriptors the
renderer cannot classify degrade to ``unknown`` so that one odd field never
aborts schema generation.

Two equivalent input shapes for "optional T" exist: an explicit
:class:`~typebaml.model.types.OptionalTypeRef`, and a two-member union of
``T`` and ``null`` (which is how ``typing.Optional`` reflects). Both render
as ``T?``.

Marking a type optional is not plain suffixing of ``?``. An optional
``null`` stays ``null``, an already optional type keeps a single ``?``, and
a rendered union is parenthesized first, so ``(A | B)?`` rather than
``A | B?``.
"""

from __future__ import annotations

from typebaml.model.types import (
    EnumTypeRef,
    ListTypeRef,
    MapTypeRef,
    OptionalTypeRef,
    PrimitiveKind,
    PrimitiveTypeRef,
    RecordTypeRef,
    TypeRef,
    UnionTypeRef,
)

# ###############
# Public Interface
# ###############

UNKNOWN = "unknown"


def render(type_ref: TypeRef) -> str:
    """Render *type_ref* as a BAML type string.

    Examples:
        ``Union([String, Null])`` renders as ``string?``;
        ``Array(Union([String, Integer]))`` as ``(string | int)[]``;
        ``Map(Symbol, Integer)`` as ``map<string, int>``.
    """
    if isinstance(type_ref, PrimitiveTypeRef):
        return _PRIMITIVE_NAMES.get(type_ref.primitive, UNKNOWN)
    if isinstance(type_ref, (RecordTypeRef, EnumTypeRef)):
        return type_ref.name
    if isinstance(type_ref, ListTypeRef):
        return _group(render(type_ref.element_type)) + "[]"
    if isinstance(type_ref, MapTypeRef):
        # Keys always serialize as strings, whatever the declared key type.
        return f"map<string, {render(type_ref.value_type)}>"
    if isinstance(type_ref, OptionalTypeRef):
        return _optional(render(type_ref.inner_type))
    if isinstance(type_ref, UnionTypeRef):
        return _render_union(type_ref)
    return UNKNOWN


def is_null(type_ref: TypeRef) -> bool:
    """Return True if *type_ref* is the ``null`` primitive."""
    return isinstance(type_ref, PrimitiveTypeRef) and type_ref.primitive is PrimitiveKind.NULL


# ################
# Implementation
# ################

_PRIMITIVE_NAMES: dict[PrimitiveKind, str] = {
    PrimitiveKind.DYNAMIC: "json",
    PrimitiveKind.STRING: "string",
    PrimitiveKind.INTEGER: "int",
    PrimitiveKind.FLOAT: "float",
    PrimitiveKind.BOOLEAN: "bool",
    PrimitiveKind.NULL: "null",
}


def _render_union(union: UnionTypeRef) -> str:
    """Render a union, folding a lone ``null`` member into the ``?`` suffix."""
    has_null = any(is_null(m) for m in union.members)
    rest = [m for m in union.members if not is_null(m)]

    if not rest:
        return "null"
    if len(rest) == 1:
        inner = render(rest[0])
        return _optional(inner) if has_null else inner

    distinct: list[str] = []
    for member in rest:
        rendered = render(member)
        if rendered not in distinct:
            distinct.append(rendered)

    # e.g. two boolean-like sources that both render as "bool".
    if len(distinct) == 1:
        return _optional(distinct[0]) if has_null else distinct[0]

    joined = " | ".join(distinct)
    return f"({joined})?" if has_null else joined


def _optional(rendered: str) -> str:
    """Append the nilable suffix, grouping unions and never doubling ``?``."""
    if rendered == "null" or rendered.endswith("?"):
        return rendered
    return _group(rendered) + "?"


def _group(rendered: str) -> str:
    """Parenthesize *rendered* if it has a union pipe at the top level."""
    return f"({rendered})" if _has_top_level_pipe(rendered) else rendered


def _has_top_level_pipe(rendered: str) -> bool:
    """Return True if *rendered* contains ``|`` outside any ``()`` or ``<>``."""
    depth = 0
    for char in rendered:
        if char in "(<":
            depth += 1
        elif char in ")>":
            depth -= 1
        elif char == "|" and depth == 0:
            return True
    return False
