# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema model for TypeBAML (type descriptors, records, enums)."""

from typebaml.model.entities import EnumDef, EnumValue, FieldDef, RecordDef
from typebaml.model.registry import TypeRegistry
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
    UnknownTypeRef,
    primitive,
    short_name,
)

__all__ = [
    # Type descriptors
    "PrimitiveKind",
    "PrimitiveTypeRef",
    "OptionalTypeRef",
    "ListTypeRef",
    "MapTypeRef",
    "UnionTypeRef",
    "RecordTypeRef",
    "EnumTypeRef",
    "UnknownTypeRef",
    "TypeRef",
    "primitive",
    "short_name",
    # Definitions
    "FieldDef",
    "RecordDef",
    "EnumValue",
    "EnumDef",
    "TypeRegistry",
]
