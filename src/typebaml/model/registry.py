# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lookup table from identities to record and enum definitions."""

from __future__ import annotations

from dataclasses import dataclass, field

from typebaml.model.entities import EnumDef, RecordDef

# ###############
# Public Interface
# ###############


@dataclass
class TypeRegistry:
    """Record and enum definitions keyed by identity.

    Attributes:
        records: Record definitions in registration order.
        enums: Enum definitions in registration order.
    """

    records: dict[str, RecordDef] = field(default_factory=dict)
    enums: dict[str, EnumDef] = field(default_factory=dict)

    def add(self, definition: RecordDef | EnumDef) -> None:
        """Register *definition*, replacing any entry with the same identity."""
        if isinstance(definition, RecordDef):
            self.records[definition.identity] = definition
        else:
            self.enums[definition.identity] = definition

    def record(self, identity: str) -> RecordDef | None:
        return self.records.get(identity)

    def enum(self, identity: str) -> EnumDef | None:
        return self.enums.get(identity)

    def merge(self, other: TypeRegistry) -> None:
        """Copy every definition of *other* into this registry."""
        self.records.update(other.records)
        self.enums.update(other.enums)

    @classmethod
    def of(cls, *definitions: RecordDef | EnumDef) -> TypeRegistry:
        """Build a registry holding *definitions*."""
        registry = cls()
        for definition in definitions:
            registry.add(definition)
        return registry
