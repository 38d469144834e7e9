# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Best-effort extraction of member documentation from class source code.

For each direct field or enum member of a class body, documentation is
taken from, in order of preference:

1. the block of ``#`` comment lines above it (``#:`` also accepted); blank
   lines between the comments and the member are allowed,
2. an attribute docstring, i.e. a string literal right after the member,
3. a trailing ``# comment`` on the member's own line.

Lookups never raise: classes without retrievable source simply have no
comments.
"""

from __future__ import annotations

import ast
import inspect
import io
import logging
import textwrap
import tokenize
from collections.abc import Mapping

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class SourceCommentLookup:
    """Comment collaborator for the schema emitter.

    Called as ``lookup(owner_identity, member_name)``. Source is read and
    parsed at most once per owner.
    """

    def __init__(self, classes: Mapping[str, type]) -> None:
        self._classes = dict(classes)
        self._cache: dict[str, dict[str, str]] = {}

    def __call__(self, owner: str, member: str) -> str | None:
        if owner not in self._cache:
            self._cache[owner] = self._extract(owner)
        return self._cache[owner].get(member)

    def _extract(self, owner: str) -> dict[str, str]:
        cls = self._classes.get(owner)
        if cls is None:
            return {}
        try:
            return extract_member_comments(cls)
        except (OSError, TypeError, SyntaxError, tokenize.TokenError) as exc:
            logger.debug("No source comments for '%s': %s", owner, exc)
            return {}


def extract_member_comments(cls: type) -> dict[str, str]:
    """Return ``{member_name: comment}`` for the members of *cls*.

    Raises:
        OSError: If the source of *cls* cannot be retrieved.
        TypeError: If *cls* is a built-in class.
    """
    source = textwrap.dedent(inspect.getsource(cls))
    return comments_from_source(source, cls.__name__)


def comments_from_source(source: str, class_name: str) -> dict[str, str]:
    """Return ``{member_name: comment}`` for class *class_name* defined in *source*."""
    tree = ast.parse(source)
    class_def = next(
        (node for node in ast.walk(tree) if isinstance(node, ast.ClassDef) and node.name == class_name),
        None,
    )
    if class_def is None:
        return {}

    own_line, inline = _scan_comments(source)
    lines = source.splitlines()

    comments: dict[str, str] = {}
    for index, stmt in enumerate(class_def.body):
        name = _member_name(stmt)
        if name is None:
            continue
        text = (
            _leading_comment(stmt.lineno, own_line, lines)
            or _attribute_docstring(class_def.body, index)
            or inline.get(stmt.lineno)
        )
        if text:
            comments[name] = text
    return comments


# ################
# Implementation
# ################


def _scan_comments(source: str) -> tuple[dict[int, str], dict[int, str]]:
    """Split the comments of *source* into own-line and trailing comments, keyed by line."""
    own_line: dict[int, str] = {}
    inline: dict[int, str] = {}
    for token in tokenize.generate_tokens(io.StringIO(source).readline):
        if token.type != tokenize.COMMENT:
            continue
        row, col = token.start
        text = _comment_text(token.string)
        if token.line[:col].strip():
            inline[row] = text
        else:
            own_line[row] = text
    return own_line, inline


def _comment_text(raw: str) -> str:
    text = raw.lstrip("#")
    if text.startswith(":"):
        text = text[1:]
    return text.strip()


def _member_name(stmt: ast.stmt) -> str | None:
    """Return the name bound by a field-like statement, or None."""
    if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
        return stmt.target.id
    if isinstance(stmt, ast.Assign) and len(stmt.targets) == 1 and isinstance(stmt.targets[0], ast.Name):
        return stmt.targets[0].id
    return None


def _leading_comment(lineno: int, own_line: dict[int, str], lines: list[str]) -> str | None:
    collected: list[str] = []
    row = lineno - 1
    while row >= 1:
        if row in own_line:
            collected.append(own_line[row])
        elif lines[row - 1].strip():
            break
        row -= 1
    text = " ".join(part for part in reversed(collected) if part)
    return text or None


def _attribute_docstring(body: list[ast.stmt], index: int) -> str | None:
    if index + 1 >= len(body):
        return None
    follower = body[index + 1]
    if (
        isinstance(follower, ast.Expr)
        and isinstance(follower.value, ast.Constant)
        and isinstance(follower.value.value, str)
    ):
        return " ".join(follower.value.value.split()) or None
    return None
