# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reading JSON Schema documents into the TypeBAML schema model.

Accepts the object schemas used for LLM tool parameters and the output of
pydantic's ``model_json_schema()``:

* ``$ref`` pointers into ``$defs`` (or ``definitions``) become record or
  enum references, each definition being read once;
* ``anyOf`` / ``oneOf`` become unions;
* properties missing from ``required`` become optional;
* ``description`` keys become declared field descriptions.

An object schema without ``properties`` becomes a map. Its value type comes
from ``additionalProperties`` and falls back to ``string`` when that key is
absent or false.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from typebaml.introspection.reflect import ReflectionError
from typebaml.model.entities import EnumDef, EnumValue, FieldDef, RecordDef
from typebaml.model.registry import TypeRegistry
from typebaml.model.types import (
    EnumTypeRef,
    ListTypeRef,
    MapTypeRef,
    OptionalTypeRef,
    PrimitiveKind,
    RecordTypeRef,
    TypeRef,
    UnionTypeRef,
    UnknownTypeRef,
    primitive,
)

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def read_json_schema(schema: Mapping[str, Any], name: str | None = None) -> tuple[RecordDef, TypeRegistry]:
    """Read an object JSON Schema into a record and the registry of its definitions.

    A document whose root is only a ``$ref`` into its definitions, as pydantic
    produces for recursive models, is read as that definition. The definition
    key names the root record unless *name* or a top-level ``title`` is given,
    and references back to the definition point at the root record.

    Args:
        schema: The parsed JSON Schema document.
        name: Name for the root record. Defaults to the schema's ``title``.

    Returns:
        The root record and a registry holding it plus every record and enum
        reached through ``$ref`` pointers or titled nested objects.

    Raises:
        ReflectionError: If *schema* is not an object, its root ``$ref`` does
            not point at an object definition, or neither *name* nor a
            ``title`` is available.
    """
    if not isinstance(schema, Mapping):
        raise ReflectionError("JSON schema document must be an object")
    root_key = _root_ref_key(schema)
    root_name = name or schema.get("title") or root_key
    if not isinstance(root_name, str) or not root_name:
        raise ReflectionError("JSON schema has no 'title'; a name for the root record is required")
    reader = _JsonSchemaReader(schema, root_name, root_key)
    return reader.read(), reader.registry


def load_json_schema(text: str, name: str | None = None) -> tuple[RecordDef, TypeRegistry]:
    """Parse JSON text and read it with :func:`read_json_schema`."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ReflectionError(f"Invalid JSON schema: {exc}") from exc
    return read_json_schema(document, name)


# ################
# Implementation
# ################

_TYPE_NAMES: dict[str, PrimitiveKind] = {
    "string": PrimitiveKind.STRING,
    "integer": PrimitiveKind.INTEGER,
    "number": PrimitiveKind.FLOAT,
    "boolean": PrimitiveKind.BOOLEAN,
    "null": PrimitiveKind.NULL,
}

_DEFS_PREFIXES = ("#/$defs/", "#/definitions/")


class _JsonSchemaReader:
    """Reads one JSON Schema document into a :class:`TypeRegistry`."""

    def __init__(self, document: Mapping[str, Any], root_name: str, root_key: str | None = None) -> None:
        self._document = document
        self._root_name = root_name
        # Definition key the root ``$ref`` points at, if any.
        self._root_key = root_key
        self._defs: Mapping[str, Any] = _definitions(document)
        self._pending: set[str] = set()
        self.registry = TypeRegistry()

    def read(self) -> RecordDef:
        if self._root_key is not None:
            return self._record(self._root_name, self._defs[self._root_key])
        return self._record(self._root_name, self._document)

    def _record(self, identity: str, schema: Mapping[str, Any]) -> RecordDef:
        existing = self.registry.record(identity)
        if existing is not None:
            return existing
        self._pending.add(identity)
        required = set(schema.get("required", []))
        fields: list[FieldDef] = []
        for prop_name, prop_schema in (schema.get("properties") or {}).items():
            type_ref = self._type_ref(prop_schema)
            if prop_name not in required:
                type_ref = OptionalTypeRef(inner_type=type_ref)
            fields.append(FieldDef(name=prop_name, type=type_ref, description=_description(prop_schema)))
        self._pending.discard(identity)
        record = RecordDef(identity=identity, fields=tuple(fields), description=_description(schema))
        self.registry.add(record)
        return record

    def _type_ref(self, schema: Any) -> TypeRef:
        if not isinstance(schema, Mapping):
            # ``true`` / ``{}`` accept any value.
            return primitive(PrimitiveKind.DYNAMIC)
        if "$ref" in schema:
            return self._ref(schema["$ref"])
        for combinator in ("anyOf", "oneOf"):
            if combinator in schema:
                return UnionTypeRef(members=tuple(self._type_ref(s) for s in schema[combinator]))
        if "allOf" in schema:
            parts = schema["allOf"]
            if len(parts) == 1:
                return self._type_ref(parts[0])
            return UnknownTypeRef(source="allOf")
        if "const" in schema:
            return _value_ref([schema["const"]])
        if "enum" in schema:
            return _value_ref(schema["enum"])

        declared = schema.get("type")
        if isinstance(declared, list):
            return UnionTypeRef(members=tuple(self._typed(t, schema) for t in declared))
        if isinstance(declared, str):
            return self._typed(declared, schema)
        if "properties" in schema:
            return self._typed("object", schema)
        return primitive(PrimitiveKind.DYNAMIC)

    def _typed(self, type_name: str, schema: Mapping[str, Any]) -> TypeRef:
        if type_name in _TYPE_NAMES:
            return primitive(_TYPE_NAMES[type_name])
        if type_name == "array":
            items = schema.get("items")
            if items is None:
                return ListTypeRef(element_type=primitive(PrimitiveKind.DYNAMIC))
            return ListTypeRef(element_type=self._type_ref(items))
        if type_name == "object":
            title = schema.get("title")
            if schema.get("properties") and isinstance(title, str):
                if title not in self._pending:
                    self._record(title, schema)
                return RecordTypeRef(identity=title)
            return MapTypeRef(key_type=primitive(PrimitiveKind.STRING), value_type=self._map_value(schema))
        logger.debug("Unsupported JSON schema type %r; rendering it as unknown", type_name)
        return UnknownTypeRef(source=type_name)

    def _map_value(self, schema: Mapping[str, Any]) -> TypeRef:
        extra = schema.get("additionalProperties", False)
        if extra is True:
            return primitive(PrimitiveKind.DYNAMIC)
        if isinstance(extra, Mapping):
            return self._type_ref(extra)
        return primitive(PrimitiveKind.STRING)

    def _ref(self, pointer: str) -> TypeRef:
        name = _def_key(pointer)
        if pointer == "#" or (name is not None and name == self._root_key):
            return RecordTypeRef(identity=self._root_name)
        definition = self._defs.get(name) if name else None
        if name is None or not isinstance(definition, Mapping):
            logger.warning("Unresolvable JSON schema reference %r; rendering it as unknown", pointer)
            return UnknownTypeRef(source=pointer)

        if "enum" in definition:
            if self.registry.enum(name) is None:
                self.registry.add(
                    EnumDef(
                        identity=name,
                        values=tuple(
                            EnumValue(value=_enum_text(v), member_name=_enum_text(v)) for v in definition["enum"]
                        ),
                        description=_description(definition),
                    )
                )
            return EnumTypeRef(identity=name)
        if definition.get("type") == "object" or "properties" in definition:
            if name not in self._pending:
                self._record(name, definition)
            return RecordTypeRef(identity=name)
        return self._type_ref(definition)


def _definitions(document: Mapping[str, Any]) -> Mapping[str, Any]:
    return document.get("$defs") or document.get("definitions") or {}


def _def_key(pointer: str) -> str | None:
    return next((pointer[len(p) :] for p in _DEFS_PREFIXES if pointer.startswith(p)), None)


def _root_ref_key(document: Mapping[str, Any]) -> str | None:
    """Return the definition key of a root that is only a ``$ref``, else None."""
    pointer = document.get("$ref")
    if not isinstance(pointer, str) or "properties" in document:
        return None
    key = _def_key(pointer)
    definition = _definitions(document).get(key) if key else None
    if not isinstance(definition, Mapping) or not (definition.get("type") == "object" or "properties" in definition):
        raise ReflectionError(f"JSON schema root reference {pointer!r} does not point at an object definition")
    return key


def _description(schema: Any) -> str | None:
    if isinstance(schema, Mapping) and isinstance(schema.get("description"), str):
        return schema["description"]
    return None


def _enum_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def _value_ref(values: list[Any]) -> TypeRef:
    """Type of a set of literal JSON values (``enum`` / ``const``)."""
    members = [primitive(_value_kind(v)) for v in values]
    if len(members) == 1:
        return members[0]
    return UnionTypeRef(members=tuple(members))


def _value_kind(value: Any) -> PrimitiveKind:
    if value is None:
        return PrimitiveKind.NULL
    if isinstance(value, bool):
        return PrimitiveKind.BOOLEAN
    if isinstance(value, int):
        return PrimitiveKind.INTEGER
    if isinstance(value, float):
        return PrimitiveKind.FLOAT
    if isinstance(value, str):
        return PrimitiveKind.STRING
    return PrimitiveKind.DYNAMIC
