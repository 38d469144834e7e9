# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for reading JSON Schema documents into the schema model."""

import json
import logging
from typing import Any

import pytest

from typebaml.introspection.json_schema import load_json_schema, read_json_schema
from typebaml.introspection.reflect import ReflectionError
from typebaml.model import (
    EnumTypeRef,
    ListTypeRef,
    MapTypeRef,
    OptionalTypeRef,
    PrimitiveKind,
    RecordDef,
    RecordTypeRef,
    TypeRef,
    UnionTypeRef,
    UnknownTypeRef,
    primitive,
)

# ###############
# Helpers
# ###############

STRING = primitive(PrimitiveKind.STRING)
INTEGER = primitive(PrimitiveKind.INTEGER)
FLOAT = primitive(PrimitiveKind.FLOAT)
BOOLEAN = primitive(PrimitiveKind.BOOLEAN)
NULL = primitive(PrimitiveKind.NULL)
DYNAMIC = primitive(PrimitiveKind.DYNAMIC)


def _property_type(prop: dict[str, Any]) -> TypeRef:
    """Read a single required property and return its type."""
    record, _ = read_json_schema({"title": "Probe", "properties": {"p": prop}, "required": ["p"]})
    return record.fields[0].type


def _field_types(record: RecordDef) -> dict[str, TypeRef]:
    return {f.name: f.type for f in record.fields}


# ###############
# Root handling
# ###############


def test_root_name_from_title() -> None:
    """The root record is named after the schema title."""
    record, registry = read_json_schema({"title": "GetWeather", "type": "object", "properties": {}})
    assert record.identity == "GetWeather"
    assert registry.record("GetWeather") is record


def test_explicit_name_overrides_title() -> None:
    """An explicit name takes priority over the title."""
    record, _ = read_json_schema({"title": "Ignored", "properties": {}}, name="search_flights")
    assert record.name == "search_flights"


def test_missing_name_raises() -> None:
    """A schema without a title needs an explicit name."""
    with pytest.raises(ReflectionError, match="title"):
        read_json_schema({"type": "object", "properties": {}})


def test_non_object_document_raises() -> None:
    """A document that is not a JSON object is rejected."""
    with pytest.raises(ReflectionError):
        read_json_schema(["not", "a", "schema"], name="X")  # type: ignore[arg-type]


def test_root_description() -> None:
    """The root description becomes the record description."""
    record, _ = read_json_schema({"title": "Ping", "description": "Ping a host", "properties": {}})
    assert record.description == "Ping a host"


def test_required_and_optional_properties() -> None:
    """Properties missing from 'required' are optional; order follows the document."""
    record, _ = read_json_schema(
        {
            "title": "Search",
            "properties": {
                "query": {"type": "string", "description": "Search terms"},
                "limit": {"type": "integer"},
            },
            "required": ["query"],
        }
    )
    assert [f.name for f in record.fields] == ["query", "limit"]
    assert _field_types(record) == {"query": STRING, "limit": OptionalTypeRef(inner_type=INTEGER)}
    assert record.fields[0].description == "Search terms"
    assert record.fields[1].description is None


# ###############
# Property types
# ###############


@pytest.mark.parametrize(
    "prop, expected",
    [
        ({"type": "string"}, STRING),
        ({"type": "integer"}, INTEGER),
        ({"type": "number"}, FLOAT),
        ({"type": "boolean"}, BOOLEAN),
        ({"type": "null"}, NULL),
        ({}, DYNAMIC),
        ({"type": "array", "items": {"type": "string"}}, ListTypeRef(element_type=STRING)),
        ({"type": "array"}, ListTypeRef(element_type=DYNAMIC)),
        ({"type": ["string", "null"]}, UnionTypeRef(members=(STRING, NULL))),
        ({"anyOf": [{"type": "integer"}, {"type": "string"}]}, UnionTypeRef(members=(INTEGER, STRING))),
        ({"oneOf": [{"type": "number"}, {"type": "null"}]}, UnionTypeRef(members=(FLOAT, NULL))),
        ({"allOf": [{"type": "boolean"}]}, BOOLEAN),
        ({"enum": ["celsius", "fahrenheit"]}, UnionTypeRef(members=(STRING, STRING))),
        ({"const": 3}, INTEGER),
        ({"type": "object"}, MapTypeRef(key_type=STRING, value_type=STRING)),
        (
            {"type": "object", "additionalProperties": True},
            MapTypeRef(key_type=STRING, value_type=DYNAMIC),
        ),
        (
            {"type": "object", "additionalProperties": {"type": "integer"}},
            MapTypeRef(key_type=STRING, value_type=INTEGER),
        ),
    ],
)
def test_property_types(prop: dict[str, Any], expected: TypeRef) -> None:
    """JSON Schema property shapes map onto type descriptors."""
    assert _property_type(prop) == expected


def test_unsupported_type_is_unknown() -> None:
    """An unrecognized type name degrades to unknown."""
    assert isinstance(_property_type({"type": "tuple"}), UnknownTypeRef)


def test_multi_part_all_of_is_unknown() -> None:
    """allOf with several parts cannot be represented."""
    assert isinstance(_property_type({"allOf": [{"type": "string"}, {"minLength": 1}]}), UnknownTypeRef)


def test_titled_nested_object_becomes_record() -> None:
    """An inline object with a title and properties becomes its own record."""
    record, registry = read_json_schema(
        {
            "title": "Booking",
            "properties": {
                "guest": {
                    "title": "Guest",
                    "type": "object",
                    "properties": {"name": {"type": "string"}},
                    "required": ["name"],
                }
            },
            "required": ["guest"],
        }
    )
    assert _field_types(record)["guest"] == RecordTypeRef(identity="Guest")
    assert _field_types(registry.record("Guest")) == {"name": STRING}


# ###############
# References
# ###############

PYDANTIC_STYLE = {
    "title": "Order",
    "type": "object",
    "$defs": {
        "Status": {"title": "Status", "enum": ["open", "closed"], "type": "string"},
        "Line": {
            "title": "Line",
            "type": "object",
            "properties": {"sku": {"type": "string"}, "qty": {"type": "integer"}},
            "required": ["sku", "qty"],
        },
        "Sku": {"type": "string", "description": "Stock keeping unit"},
    },
    "properties": {
        "status": {"$ref": "#/$defs/Status"},
        "lines": {"type": "array", "items": {"$ref": "#/$defs/Line"}},
        "primary": {"anyOf": [{"$ref": "#/$defs/Line"}, {"type": "null"}]},
        "sku": {"$ref": "#/$defs/Sku"},
    },
    "required": ["status", "lines", "primary", "sku"],
}


def test_refs_resolve_to_records_and_enums() -> None:
    """$defs entries become named records and enums, each read once."""
    record, registry = read_json_schema(PYDANTIC_STYLE)

    types = _field_types(record)
    assert types["status"] == EnumTypeRef(identity="Status")
    assert types["lines"] == ListTypeRef(element_type=RecordTypeRef(identity="Line"))
    assert types["primary"] == UnionTypeRef(members=(RecordTypeRef(identity="Line"), NULL))
    assert types["sku"] == STRING
    assert list(registry.records) == ["Line", "Order"]
    assert [v.value for v in registry.enum("Status").values] == ["open", "closed"]


def test_definitions_prefix() -> None:
    """The older 'definitions' key is also understood."""
    record, registry = read_json_schema(
        {
            "title": "Wrapper",
            "definitions": {"Inner": {"type": "object", "properties": {"x": {"type": "number"}}}},
            "properties": {"inner": {"$ref": "#/definitions/Inner"}},
            "required": ["inner"],
        }
    )
    assert _field_types(record)["inner"] == RecordTypeRef(identity="Inner")
    assert registry.record("Inner") is not None


def test_root_self_reference() -> None:
    """A '#' pointer refers back to the root record."""
    record, _ = read_json_schema(
        {
            "title": "Category",
            "properties": {"children": {"type": "array", "items": {"$ref": "#"}}},
            "required": ["children"],
        }
    )
    assert _field_types(record)["children"] == ListTypeRef(element_type=RecordTypeRef(identity="Category"))


def test_recursive_definition_terminates() -> None:
    """A definition referencing itself is read once."""
    record, registry = read_json_schema(
        {
            "title": "Tree",
            "$defs": {
                "Node": {
                    "type": "object",
                    "properties": {"next": {"$ref": "#/$defs/Node"}},
                }
            },
            "properties": {"head": {"$ref": "#/$defs/Node"}},
            "required": ["head"],
        }
    )
    node = registry.record("Node")
    assert node is not None
    assert _field_types(node)["next"] == OptionalTypeRef(inner_type=RecordTypeRef(identity="Node"))
    assert list(registry.records) == ["Node", "Tree"]


def _linked_schema() -> dict[str, Any]:
    """Shape of pydantic's model_json_schema() for a self-referencing model."""
    return {
        "$defs": {
            "Link": {
                "title": "Link",
                "type": "object",
                "properties": {
                    "value": {"type": "integer"},
                    "next": {"anyOf": [{"$ref": "#/$defs/Link"}, {"type": "null"}], "default": None},
                },
                "required": ["value"],
            }
        },
        "$ref": "#/$defs/Link",
    }


def test_root_ref_reads_definition() -> None:
    """A root that is only a $ref is read as the definition, named by its key."""
    record, registry = read_json_schema(_linked_schema())

    assert record.identity == "Link"
    next_type = _field_types(record)["next"]
    assert next_type == OptionalTypeRef(inner_type=UnionTypeRef(members=(RecordTypeRef(identity="Link"), NULL)))
    assert list(registry.records) == ["Link"]


def test_root_ref_with_explicit_name() -> None:
    """An explicit name applies to the root and to references back to it."""
    record, registry = read_json_schema(_linked_schema(), name="Chain")

    assert record.identity == "Chain"
    assert _field_types(record)["next"] == OptionalTypeRef(
        inner_type=UnionTypeRef(members=(RecordTypeRef(identity="Chain"), NULL))
    )
    assert list(registry.records) == ["Chain"]


def test_root_ref_to_non_object_raises() -> None:
    """A root $ref must point at an object definition."""
    document = {"$defs": {"Color": {"enum": ["red", "green"]}}, "$ref": "#/$defs/Color"}
    with pytest.raises(ReflectionError, match="object definition"):
        read_json_schema(document)


def test_unresolvable_ref_is_unknown(caplog: pytest.LogCaptureFixture) -> None:
    """A pointer outside $defs renders as unknown and is logged."""
    with caplog.at_level(logging.WARNING, logger="typebaml.introspection.json_schema"):
        result = _property_type({"$ref": "https://example.com/schema.json"})

    assert isinstance(result, UnknownTypeRef)
    assert "example.com" in caplog.text


def test_non_string_enum_values_serialized_as_json() -> None:
    """Enum values in $defs that are not strings are serialized as JSON."""
    _, registry = read_json_schema(
        {
            "title": "Level",
            "$defs": {"Code": {"enum": [1, True, None]}},
            "properties": {"code": {"$ref": "#/$defs/Code"}},
        }
    )
    assert [v.value for v in registry.enum("Code").values] == ["1", "true", "null"]


# ###############
# Loading text
# ###############


def test_load_json_schema_text() -> None:
    """JSON text is parsed and read."""
    text = json.dumps({"title": "Ping", "properties": {"host": {"type": "string"}}, "required": ["host"]})
    record, _ = load_json_schema(text)
    assert _field_types(record) == {"host": STRING}


def test_load_invalid_json_raises() -> None:
    """Malformed JSON is a reflection error."""
    with pytest.raises(ReflectionError, match="Invalid JSON"):
        load_json_schema("{not json", name="X")
