# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema compiler: type rendering, dependency ordering, and document emission."""

from typebaml.compiler.dependencies import (
    collect_enum_identities,
    collect_record_identities,
    record_refs_from,
    resolve_dependencies,
    resolve_enums,
)
from typebaml.compiler.emitter import (
    CommentLookup,
    EmitOptions,
    NameCollisionError,
    SchemaEmitter,
    SchemaError,
    emit,
    escape_description,
)
from typebaml.compiler.renderer import render

__all__ = [
    "render",
    "resolve_dependencies",
    "resolve_enums",
    "record_refs_from",
    "collect_record_identities",
    "collect_enum_identities",
    "emit",
    "escape_description",
    "EmitOptions",
    "SchemaEmitter",
    "SchemaError",
    "NameCollisionError",
    "CommentLookup",
]
