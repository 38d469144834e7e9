# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reflection of Python type declarations into the TypeBAML schema model.

Supported record classes are dataclasses, pydantic models, ``TypedDict``
classes and ``NamedTuple`` classes. Any ``enum.Enum`` subclass is reflected
as an enumeration. Every class is reflected once; references between
classes are kept by identity (``module.QualName``), so self-referential and
mutually-referential records are safe to reflect.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime
import decimal
import enum
import logging
import pathlib
import types
import typing
import uuid
from typing import Any

from pydantic import BaseModel

from typebaml.introspection.descriptions import declared_description, strip_annotated
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


class ReflectionError(Exception):
    """Raised when a class cannot be described as a record or enumeration."""


def identity_of(cls: type) -> str:
    """Return the identity (``module.QualName``) of *cls*."""
    return f"{cls.__module__}.{cls.__qualname__}"


def is_record_class(obj: object) -> bool:
    """Return True if *obj* is a class the reflector treats as a record."""
    if not isinstance(obj, type):
        return False
    if dataclasses.is_dataclass(obj) or typing.is_typeddict(obj):
        return True
    if issubclass(obj, BaseModel):
        return obj is not BaseModel
    return issubclass(obj, tuple) and hasattr(obj, "_fields")


def is_enum_class(obj: object) -> bool:
    """Return True if *obj* is an ``enum.Enum`` subclass."""
    return isinstance(obj, type) and issubclass(obj, enum.Enum)


class TypeReflector:
    """Reflects classes into a :class:`TypeRegistry`.

    A single reflector accumulates every definition reached from the classes
    passed to :meth:`reflect`, so several roots can share one registry.
    """

    def __init__(self) -> None:
        self.registry = TypeRegistry()
        self.classes: dict[str, type] = {}
        self._pending: set[str] = set()

    def reflect(self, cls: type) -> RecordDef | EnumDef:
        """Reflect *cls* and everything reachable from its fields.

        Raises:
            ReflectionError: If *cls* is neither a record nor an enum class,
                or its type hints cannot be resolved.
        """
        if is_enum_class(cls):
            return self._reflect_enum(cls)
        if is_record_class(cls):
            return self._reflect_record(cls)
        raise ReflectionError(f"{cls!r} is not a dataclass, pydantic model, TypedDict, NamedTuple or Enum")

    def type_ref(self, annotation: Any) -> TypeRef:
        """Translate a type annotation into a type descriptor.

        Record and enum classes found along the way are reflected into the
        registry. Annotations that match no known shape become
        :class:`UnknownTypeRef`.
        """
        annotation = strip_annotated(annotation)
        while hasattr(annotation, "__supertype__"):  # typing.NewType
            annotation = strip_annotated(annotation.__supertype__)

        if annotation is Any or annotation is object:
            return primitive(PrimitiveKind.DYNAMIC)
        if annotation is None or annotation is type(None):
            return primitive(PrimitiveKind.NULL)

        origin = typing.get_origin(annotation)
        if origin is not None:
            return self._generic_ref(origin, typing.get_args(annotation))

        if is_enum_class(annotation):
            self._reflect_enum(annotation)
            return EnumTypeRef(identity=identity_of(annotation))
        if is_record_class(annotation):
            identity = identity_of(annotation)
            if identity not in self.registry.records and identity not in self._pending:
                self._reflect_record(annotation)
            return RecordTypeRef(identity=identity)
        if isinstance(annotation, type):
            kind = _primitive_kind(annotation)
            if kind is not None:
                return primitive(kind)
            # Mappings are iterable too, so they are matched before arrays.
            if issubclass(annotation, _MAP_ORIGINS):
                return MapTypeRef(
                    key_type=primitive(PrimitiveKind.STRING),
                    value_type=primitive(PrimitiveKind.DYNAMIC),
                )
            if issubclass(annotation, _ARRAY_ORIGINS):
                return ListTypeRef(element_type=primitive(PrimitiveKind.DYNAMIC))

        logger.debug("No schema type for annotation %r; rendering it as unknown", annotation)
        return UnknownTypeRef(source=repr(annotation))

    # ################
    # Implementation
    # ################

    def _generic_ref(self, origin: Any, args: tuple[Any, ...]) -> TypeRef:
        if origin is typing.Union or origin is types.UnionType:
            return UnionTypeRef(members=tuple(self.type_ref(a) for a in args))
        if origin is typing.Literal:
            return self._literal_ref(args)
        if origin in _FIELD_QUALIFIERS:
            return self.type_ref(args[0])
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return ListTypeRef(element_type=self.type_ref(args[0]))
            if not args:
                return ListTypeRef(element_type=primitive(PrimitiveKind.DYNAMIC))
            if len(args) == 1:
                return ListTypeRef(element_type=self.type_ref(args[0]))
            return ListTypeRef(element_type=UnionTypeRef(members=tuple(self.type_ref(a) for a in args)))
        if isinstance(origin, type) and issubclass(origin, _MAP_ORIGINS):
            key, value = (args + (Any, Any))[:2]
            return MapTypeRef(key_type=self.type_ref(key), value_type=self.type_ref(value))
        if isinstance(origin, type) and issubclass(origin, _ARRAY_ORIGINS):
            element = args[0] if args else Any
            return ListTypeRef(element_type=self.type_ref(element))
        logger.debug("No schema type for generic %r%r; rendering it as unknown", origin, args)
        return UnknownTypeRef(source=repr(origin))

    def _reflect_enum(self, cls: type[enum.Enum]) -> EnumDef:
        identity = identity_of(cls)
        existing = self.registry.enum(identity)
        if existing is not None:
            return existing
        enum_def = EnumDef(
            identity=identity,
            values=tuple(EnumValue(value=str(member.value), member_name=member.name) for member in cls),
            description=class_description(cls),
        )
        self.classes[identity] = cls
        self.registry.add(enum_def)
        return enum_def

    def _reflect_record(self, cls: type) -> RecordDef:
        identity = identity_of(cls)
        existing = self.registry.record(identity)
        if existing is not None:
            return existing

        self._pending.add(identity)
        self.classes[identity] = cls
        try:
            fields = [self._field(*member) for member in _record_members(cls)]
        finally:
            self._pending.discard(identity)

        record = RecordDef(identity=identity, fields=tuple(fields), description=class_description(cls))
        self.registry.add(record)
        return record

    def _field(self, name: str, member_name: str, annotation: Any, default: Any) -> FieldDef:
        type_ref = self.type_ref(annotation)
        if default is _OPTIONAL_KEY:
            type_ref = OptionalTypeRef(inner_type=type_ref)
            default = None
        return FieldDef(
            name=name,
            type=type_ref,
            description=declared_description(annotation, default),
            member_name=member_name if member_name != name else None,
        )

    def _literal_ref(self, values: tuple[Any, ...]) -> TypeRef:
        members = []
        for value in values:
            if value is None:
                members.append(primitive(PrimitiveKind.NULL))
            elif isinstance(value, enum.Enum):
                members.append(EnumTypeRef(identity=self._reflect_enum(type(value)).identity))
            else:
                members.append(primitive(_primitive_kind(type(value)) or PrimitiveKind.DYNAMIC))
        if len(members) == 1:
            return members[0]
        return UnionTypeRef(members=tuple(members))


def class_description(cls: type) -> str | None:
    """Return the first paragraph of *cls*'s own docstring on one line, if any.

    Docstrings generated by ``dataclasses`` and ``NamedTuple`` (the class
    signature) and inherited docstrings are ignored.
    """
    doc = cls.__dict__.get("__doc__")
    if not isinstance(doc, str) or not doc.strip():
        return None
    if doc.startswith(f"{cls.__name__}("):
        return None
    first_paragraph = doc.strip().split("\n\n", 1)[0]
    return " ".join(first_paragraph.split())


# ################
# Implementation
# ################

# Marker passed as the "default" of TypedDict keys that are not required.
_OPTIONAL_KEY = object()

_STRING_TYPES: tuple[type, ...] = (
    str,
    bytes,
    datetime.date,
    datetime.datetime,
    datetime.time,
    uuid.UUID,
    pathlib.PurePath,
)

_ARRAY_ORIGINS: tuple[type, ...] = (
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.Set,
    collections.abc.Iterable,
)

_MAP_ORIGINS: tuple[type, ...] = (dict, collections.abc.Mapping)

_FIELD_QUALIFIERS = (typing.ClassVar, typing.Final, typing.Required, typing.NotRequired)


def _primitive_kind(cls: type) -> PrimitiveKind | None:
    # bool is an int subclass, so it is checked first.
    if issubclass(cls, bool):
        return PrimitiveKind.BOOLEAN
    if issubclass(cls, int):
        return PrimitiveKind.INTEGER
    if issubclass(cls, (float, decimal.Decimal)):
        return PrimitiveKind.FLOAT
    if issubclass(cls, _STRING_TYPES):
        return PrimitiveKind.STRING
    return None


def _record_members(cls: type) -> list[tuple[str, str, Any, Any]]:
    """Return ``(name, member_name, annotation, default)`` for each field of *cls*, in declaration order.

    ``name`` is the serialized field name and ``member_name`` the attribute
    declared in the class body; they differ only for aliased pydantic fields.
    The ``default`` slot carries whatever object may hold a declared
    description (a pydantic ``FieldInfo`` or a dataclass ``Field``).
    """
    if issubclass(cls, BaseModel):
        return [
            (info.alias or name, name, _pydantic_annotation(info), info)
            for name, info in cls.model_fields.items()
        ]

    hints = _type_hints(cls)
    if dataclasses.is_dataclass(cls):
        return [(f.name, f.name, hints.get(f.name, f.type), f) for f in dataclasses.fields(cls)]
    if typing.is_typeddict(cls):
        optional_keys = getattr(cls, "__optional_keys__", frozenset())
        return [
            (name, name, annotation, _OPTIONAL_KEY if name in optional_keys else None)
            for name, annotation in hints.items()
        ]
    # NamedTuple
    return [(name, name, hints.get(name, Any), None) for name in cls._fields]  # type: ignore[attr-defined]


def _pydantic_annotation(info: Any) -> Any:
    """Re-attach the metadata pydantic strips from ``Annotated`` field types."""
    if info.metadata:
        return typing.Annotated[(info.annotation, *info.metadata)]
    return info.annotation


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as exc:
        raise ReflectionError(f"Cannot resolve type hints of {identity_of(cls)}: {exc}") from exc
