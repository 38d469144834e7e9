# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Adapters from Python classes and JSON Schema documents to the schema model."""

from typebaml.introspection.comments import SourceCommentLookup, comments_from_source, extract_member_comments
from typebaml.introspection.descriptions import Description, declared_description
from typebaml.introspection.json_schema import load_json_schema, read_json_schema
from typebaml.introspection.reflect import (
    ReflectionError,
    TypeReflector,
    identity_of,
    is_enum_class,
    is_record_class,
)

__all__ = [
    "Description",
    "ReflectionError",
    "SourceCommentLookup",
    "TypeReflector",
    "comments_from_source",
    "declared_description",
    "extract_member_comments",
    "identity_of",
    "is_enum_class",
    "is_record_class",
    "load_json_schema",
    "read_json_schema",
]
