# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type descriptor representations for the TypeBAML schema model."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class PrimitiveKind(Enum):
    """Primitive kinds a type descriptor can carry."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    NULL = "null"
    DYNAMIC = "dynamic"


class PrimitiveTypeRef(BaseModel):
    """Reference to a primitive type."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["primitive"] = "primitive"
    primitive: PrimitiveKind


class OptionalTypeRef(BaseModel):
    """Reference to a nilable T."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["optional"] = "optional"
    inner_type: TypeRef


class ListTypeRef(BaseModel):
    """Reference to a homogeneous array of T."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    element_type: TypeRef


class MapTypeRef(BaseModel):
    """Reference to a key-value map.

    The key type is kept as declared but always renders as ``string``.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["map"] = "map"
    key_type: TypeRef
    value_type: TypeRef


class UnionTypeRef(BaseModel):
    """Reference to a union of member types, in declaration order."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["union"] = "union"
    members: tuple[TypeRef, ...]


class RecordTypeRef(BaseModel):
    """Reference to a record defined elsewhere, by identity."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["record"] = "record"
    identity: str

    @property
    def name(self) -> str:
        return short_name(self.identity)


class EnumTypeRef(BaseModel):
    """Reference to an enumeration defined elsewhere, by identity."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["enum"] = "enum"
    identity: str

    @property
    def name(self) -> str:
        return short_name(self.identity)


class UnknownTypeRef(BaseModel):
    """A type the reflection layer could not classify."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unknown"] = "unknown"
    source: str | None = None


# A type descriptor: a primitive, a wrapper around other descriptors, or a named reference.
TypeRef = Annotated[
    PrimitiveTypeRef
    | OptionalTypeRef
    | ListTypeRef
    | MapTypeRef
    | UnionTypeRef
    | RecordTypeRef
    | EnumTypeRef
    | UnknownTypeRef,
    _Field(discriminator="kind"),
]


def short_name(identity: str) -> str:
    """Return the last dotted segment of a fully-qualified identity."""
    return identity.rsplit(".", 1)[-1]


def primitive(kind: PrimitiveKind) -> PrimitiveTypeRef:
    """Shorthand for ``PrimitiveTypeRef(primitive=kind)``."""
    return PrimitiveTypeRef(primitive=kind)


# Resolve forward references for models that use TypeRef.
OptionalTypeRef.model_rebuild()
ListTypeRef.model_rebuild()
MapTypeRef.model_rebuild()
UnionTypeRef.model_rebuild()
