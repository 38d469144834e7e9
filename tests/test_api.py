# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""End-to-end tests of the public convenience API."""

import dataclasses
import enum
from typing import Annotated, Literal, Optional

import pytest
from pydantic import BaseModel, Field, ValidationError

import typebaml
from typebaml.compiler.emitter import NameCollisionError
from typebaml.introspection.descriptions import Description

# ###############
# Helpers
# ###############


class OrderStatus(enum.Enum):
    # Waiting for payment
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclasses.dataclass
class SimpleUser:
    name: str
    age: int


@dataclasses.dataclass
class ContactInfo:
    email: Optional[str]
    phone: str  # E.164 formatted


@dataclasses.dataclass
class Vendor:
    name: str
    contact: ContactInfo


@dataclasses.dataclass
class Product:
    sku: str
    vendor: Vendor
    price: float


@dataclasses.dataclass
class OrderItem:
    product: Product
    quantity: Annotated[int, Description("Units ordered")]
    status: OrderStatus


class SearchFlights(BaseModel):
    """Search for flights between two airports.

    Results are sorted by price.
    """

    origin: str = Field(description="IATA code of the departure airport")
    destination: str = Field(description="IATA code of the arrival airport")
    # Maximum number of stops
    max_stops: Optional[int] = None


class Passenger(BaseModel):
    # Name as printed on the passport
    full_name: str = Field(alias="fullName")


@dataclasses.dataclass
class StatusFilter:
    status: Literal[OrderStatus.ACTIVE]


class LinkedNode(BaseModel):
    value: int
    next: Optional["LinkedNode"] = None


class Namespace:
    @dataclasses.dataclass
    class SimpleUser:
        nickname: str


# ###############
# Documents
# ###############


def test_from_model_simple_user() -> None:
    """A record without references renders as a single block."""
    expected = "class SimpleUser {\n  name string\n  age int\n}"
    assert typebaml.from_model(SimpleUser, include_descriptions=False) == expected
    assert typebaml.from_model(SimpleUser) == expected


def test_from_model_dependency_chain() -> None:
    """Dependencies are emitted innermost first, enums before records."""
    result = typebaml.from_model(OrderItem)
    headers = [block.splitlines()[0] for block in result.split("\n\n")]
    assert headers == [
        "enum OrderStatus {",
        "class ContactInfo {",
        "class Vendor {",
        "class Product {",
        "class OrderItem {",
    ]


def test_from_model_descriptions_and_comments() -> None:
    """Declared descriptions and source comments become annotations."""
    result = typebaml.from_model(OrderItem)
    assert '  quantity int @description("Units ordered")' in result
    assert '  phone string @description("E.164 formatted")' in result
    assert '  "pending" @description("Waiting for payment")' in result
    assert "  email string?\n" in result


def test_from_model_without_dependencies() -> None:
    """Only the root is emitted when dependencies are disabled."""
    result = typebaml.from_model(OrderItem, include_dependencies=False)
    assert result.startswith("class OrderItem {")
    assert "class Product" not in result
    assert "  product Product\n" in result


def test_from_models_shared_dependency() -> None:
    """Shared dependencies of several roots appear once."""
    result = typebaml.from_models([Product, Vendor])
    assert result.count("class Vendor {") == 1
    assert result.count("class ContactInfo {") == 1


def test_from_enum() -> None:
    """An enum renders its values in declaration order."""
    result = typebaml.from_enum(OrderStatus, include_descriptions=False)
    assert result == 'enum OrderStatus {\n  "pending"\n  "active"\n  "inactive"\n}'


def test_from_pydantic_tool() -> None:
    """A pydantic model renders as a tool headed by its docstring summary."""
    result = typebaml.from_tool(SearchFlights)
    assert result == (
        "// Search for flights between two airports.\n"
        "class SearchFlights {\n"
        '  origin string @description("IATA code of the departure airport")\n'
        '  destination string @description("IATA code of the arrival airport")\n'
        '  max_stops int? @description("Maximum number of stops")\n'
        "}"
    )


def test_from_tool_rejects_enum() -> None:
    """A tool definition must be a record class."""
    with pytest.raises(typebaml.ReflectionError):
        typebaml.from_tool(OrderStatus)


def test_from_json_schema_matches_pydantic_tool() -> None:
    """A model's JSON schema renders like the model itself (comments aside)."""
    from_schema = typebaml.from_json_schema(SearchFlights.model_json_schema())
    assert from_schema.startswith("// Search for flights between two airports.\n//\n// Results are sorted by price.\n")
    assert '  origin string @description("IATA code of the departure airport")' in from_schema
    assert "  max_stops int?" in from_schema


def test_from_json_schema_recursive_model() -> None:
    """A recursive model's JSON schema, rooted at a $ref, renders the model once."""
    expected = "class LinkedNode {\n  value int\n  next LinkedNode?\n}"
    assert typebaml.from_json_schema(LinkedNode.model_json_schema()) == expected


def test_from_json_schema_recursive_model_named() -> None:
    """An explicit name renames the root and its self references."""
    result = typebaml.from_json_schema(LinkedNode.model_json_schema(), name="Chain")
    assert result == "class Chain {\n  value int\n  next Chain?\n}"


def test_from_model_aliased_field_comment() -> None:
    """A comment above an aliased pydantic field annotates the aliased name."""
    result = typebaml.from_model(Passenger)
    assert result == 'class Passenger {\n  fullName string @description("Name as printed on the passport")\n}'


def test_from_model_literal_enum_member() -> None:
    """A Literal over an enum member pulls the enum block into the document."""
    result = typebaml.from_model(StatusFilter, include_descriptions=False)
    assert result == (
        'enum OrderStatus {\n  "pending"\n  "active"\n  "inactive"\n}\n\n'
        "class StatusFilter {\n  status OrderStatus\n}"
    )


def test_invalid_option_rejected() -> None:
    """Unknown or invalid keyword options are validation errors."""
    with pytest.raises(ValidationError):
        typebaml.from_model(SimpleUser, indent_width=2)
    with pytest.raises(ValidationError):
        typebaml.from_model(SimpleUser, indent_size=-2)


def test_same_short_name_collides() -> None:
    """Two different classes with the same short name cannot share a document."""
    with pytest.raises(NameCollisionError):
        typebaml.from_models([SimpleUser, Namespace.SimpleUser])
