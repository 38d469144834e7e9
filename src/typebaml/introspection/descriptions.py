# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declared field descriptions.

A description is declared on a field in one of three ways, checked in
this order:

* an ``Annotated[T, Description("...")]`` marker,
* pydantic ``Field(description="...")``,
* dataclass ``field(metadata={"description": "..."})``.
"""

from __future__ import annotations

import dataclasses
import typing
from dataclasses import dataclass
from typing import Any

from pydantic.fields import FieldInfo

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Description:
    """Marker attaching a description to an ``Annotated`` field type.

    Example::

        name: Annotated[str, Description("Full legal name")]
    """

    text: str


def declared_description(annotation: Any, default: Any = None) -> str | None:
    """Return the description declared for a field, or None.

    Args:
        annotation: The field's type annotation, possibly ``Annotated``.
        default: The field's declaration object: a pydantic ``FieldInfo``,
            a dataclass ``Field``, or anything else (ignored).
    """
    for item in _annotated_metadata(annotation):
        if isinstance(item, Description):
            return item.text
        if isinstance(item, FieldInfo) and item.description:
            return item.description
    if isinstance(default, FieldInfo) and default.description:
        return default.description
    if isinstance(default, dataclasses.Field):
        text = default.metadata.get("description")
        if isinstance(text, str):
            return text
    return None


def strip_annotated(annotation: Any) -> Any:
    """Return *annotation* without any ``Annotated`` wrapper."""
    while typing.get_origin(annotation) is typing.Annotated:
        annotation = annotation.__origin__
    return annotation


# ################
# Implementation
# ################


def _annotated_metadata(annotation: Any) -> list[Any]:
    metadata: list[Any] = []
    while True:
        origin = typing.get_origin(annotation)
        if origin is typing.Annotated:
            metadata.extend(annotation.__metadata__)
            annotation = annotation.__origin__
        elif origin in (typing.Required, typing.NotRequired):
            annotation = typing.get_args(annotation)[0]
        else:
            return metadata
