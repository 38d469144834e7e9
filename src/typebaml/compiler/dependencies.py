# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Dependency ordering for record and enum definitions.

A record depends on every record it references through a field type, at any
nesting depth (through optional, list, map and union wrappers). Records are
ordered by a depth-first post-order walk, so each dependency precedes its
dependents and the root comes last. A record reached along several paths
(a diamond) is emitted once, at its first position.

A record is marked visited before its fields are walked, so a reference
cycle terminates: the record closing the cycle is emitted ahead of the
record it points back to, which the consumer sees as a forward reference.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from typebaml.model.entities import EnumDef, RecordDef
from typebaml.model.registry import TypeRegistry
from typebaml.model.types import (
    EnumTypeRef,
    ListTypeRef,
    MapTypeRef,
    OptionalTypeRef,
    RecordTypeRef,
    TypeRef,
    UnionTypeRef,
)

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

RecordRefsOf = Callable[[TypeRef], list[RecordDef]]


def resolve_dependencies(root: RecordDef, record_refs_of: RecordRefsOf) -> list[RecordDef]:
    """Return *root* and every record it transitively references, dependencies first.

    Args:
        root: The record to start from.
        record_refs_of: Returns the records referenced by a type descriptor,
            in first-occurrence order.

    Returns:
        Each reachable record exactly once, with every record placed after
        the records it references (except along a cycle) and *root* last.
    """
    return _DependencyWalk(record_refs_of).run(root)


def collect_record_identities(type_ref: TypeRef) -> list[str]:
    """Recursively collect record identities referenced by *type_ref*, first occurrence first."""
    return _unique(_collect(type_ref, RecordTypeRef))


def collect_enum_identities(type_ref: TypeRef) -> list[str]:
    """Recursively collect enum identities referenced by *type_ref*, first occurrence first."""
    return _unique(_collect(type_ref, EnumTypeRef))


def record_refs_from(registry: TypeRegistry) -> RecordRefsOf:
    """Build a ``record_refs_of`` function that looks records up in *registry*.

    Identities missing from the registry are skipped with a warning; the
    field still renders the short name as a forward reference.
    """

    def _record_refs_of(type_ref: TypeRef) -> list[RecordDef]:
        records: list[RecordDef] = []
        for identity in collect_record_identities(type_ref):
            record = registry.record(identity)
            if record is None:
                logger.warning("Record '%s' is referenced but not registered; skipping it", identity)
                continue
            records.append(record)
        return records

    return _record_refs_of


def resolve_enums(records: Iterable[RecordDef], registry: TypeRegistry) -> list[EnumDef]:
    """Return the enums referenced by the fields of *records*, in first-seen order.

    Enums reference nothing, so no ordering among them is required.
    """
    seen: set[str] = set()
    enums: list[EnumDef] = []
    for record in records:
        for field_def in record.fields:
            for identity in collect_enum_identities(field_def.type):
                if identity in seen:
                    continue
                seen.add(identity)
                enum_def = registry.enum(identity)
                if enum_def is None:
                    logger.warning("Enum '%s' is referenced but not registered; skipping it", identity)
                    continue
                enums.append(enum_def)
    return enums


# ################
# Implementation
# ################


class _DependencyWalk:
    """Depth-first post-order walk over the record reference graph."""

    def __init__(self, record_refs_of: RecordRefsOf) -> None:
        self._record_refs_of = record_refs_of
        self._visited: set[str] = set()
        # Records whose fields are still being walked; re-entering one is a cycle.
        self._in_progress: set[str] = set()
        self._order: list[RecordDef] = []

    def run(self, root: RecordDef) -> list[RecordDef]:
        self._visit(root)
        return self._order

    def _visit(self, record: RecordDef) -> None:
        if record.identity in self._visited:
            if record.identity in self._in_progress:
                logger.debug("Reference cycle through '%s'; emitting a forward reference", record.identity)
            return
        self._visited.add(record.identity)
        self._in_progress.add(record.identity)
        for dep in self._direct_dependencies(record):
            self._visit(dep)
        self._in_progress.discard(record.identity)
        self._order.append(record)

    def _direct_dependencies(self, record: RecordDef) -> list[RecordDef]:
        """Records referenced by any field of *record*, deduplicated by identity."""
        seen: set[str] = set()
        deps: list[RecordDef] = []
        for field_def in record.fields:
            for dep in self._record_refs_of(field_def.type):
                if dep.identity not in seen:
                    seen.add(dep.identity)
                    deps.append(dep)
        return deps


def _collect(type_ref: TypeRef, target: type[RecordTypeRef] | type[EnumTypeRef]) -> list[str]:
    if isinstance(type_ref, target):
        return [type_ref.identity]
    if isinstance(type_ref, ListTypeRef):
        return _collect(type_ref.element_type, target)
    if isinstance(type_ref, MapTypeRef):
        return _collect(type_ref.key_type, target) + _collect(type_ref.value_type, target)
    if isinstance(type_ref, OptionalTypeRef):
        return _collect(type_ref.inner_type, target)
    if isinstance(type_ref, UnionTypeRef):
        return [identity for member in type_ref.members for identity in _collect(member, target)]
    return []


def _unique(identities: list[str]) -> list[str]:
    return list(dict.fromkeys(identities))
