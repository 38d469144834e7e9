# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Named definitions (records and enumerations) of the TypeBAML schema model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from typebaml.model.types import TypeRef, short_name

# ###############
# Public Interface
# ###############


class FieldDef(BaseModel):
    """A named, typed field of a record.

    Attributes:
        name: Field name as it appears in the emitted schema.
        type: The field's type descriptor.
        description: Declared description, if the source attached one.
        member_name: Attribute declared in the source class when it differs
            from ``name`` (an aliased pydantic field). Source comments are
            looked up by this name.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeRef
    description: str | None = None
    member_name: str | None = None


class RecordDef(BaseModel):
    """A record definition: an identity plus ordered fields."""

    model_config = ConfigDict(frozen=True)

    identity: str
    fields: tuple[FieldDef, ...] = ()
    description: str | None = None

    @property
    def name(self) -> str:
        """Short (last-segment) name used in the emitted schema."""
        return short_name(self.identity)


class EnumValue(BaseModel):
    """One member of an enumeration."""

    model_config = ConfigDict(frozen=True)

    value: str
    member_name: str


class EnumDef(BaseModel):
    """An enumeration definition; values keep declaration order."""

    model_config = ConfigDict(frozen=True)

    identity: str
    values: tuple[EnumValue, ...] = ()
    description: str | None = None

    @property
    def name(self) -> str:
        """Short (last-segment) name used in the emitted schema."""
        return short_name(self.identity)
