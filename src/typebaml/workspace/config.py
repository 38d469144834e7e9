# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the TypeBAML generator configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from typebaml.compiler.emitter import EmitOptions

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".typebaml.yaml"


class GeneratorConfigError(Exception):
    """Raised when a generator configuration file is invalid or cannot be loaded."""


@dataclass
class GeneratorConfig:
    """The parsed generator configuration.

    Attributes:
        targets: Classes to generate, as ``module:QualName`` strings.
        output: Output file (relative to the config file), or None for stdout.
        indent_size: Spaces per indentation level.
        include_descriptions: Emit ``@description`` annotations.
        include_dependencies: Emit referenced records and enums ahead of the targets.
    """

    targets: list[str] = field(default_factory=list)
    output: str | None = None
    indent_size: int = 2
    include_descriptions: bool = True
    include_dependencies: bool = True

    def emit_options(self) -> EmitOptions:
        """Return the emitter options this configuration describes."""
        return EmitOptions(
            indent_size=self.indent_size,
            include_descriptions=self.include_descriptions,
            include_dependencies=self.include_dependencies,
        )


def load_generator_config(path: Path) -> GeneratorConfig:
    """Load and parse a TypeBAML generator configuration file.

    Args:
        path: Path to the `.typebaml.yaml` file.

    Returns:
        A GeneratorConfig instance populated from the file.

    Raises:
        GeneratorConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise GeneratorConfigError(f"Generator config file not found: {path}") from None
    except OSError as exc:
        raise GeneratorConfigError(f"Cannot read generator config file: {exc}") from exc

    return _parse_generator_config(text, source_label=str(path))


# ################
# Implementation
# ################


def _parse_generator_config(text: str, source_label: str = "<string>") -> GeneratorConfig:
    """Parse generator config YAML text into a GeneratorConfig.

    An empty document yields the defaults.

    Raises:
        GeneratorConfigError: If the YAML is invalid or a key has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise GeneratorConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return GeneratorConfig()
    if not isinstance(data, dict):
        raise GeneratorConfigError(f"{source_label}: generator config must be a YAML mapping")

    defaults = GeneratorConfig()
    indent_size = _optional(data, "indent-size", int, defaults.indent_size, source_label)
    if indent_size < 0:
        raise GeneratorConfigError(f"{source_label}: 'indent-size' must not be negative")

    return GeneratorConfig(
        targets=_string_list(data, "targets", source_label),
        output=_optional(data, "output", str, None, source_label),
        indent_size=indent_size,
        include_descriptions=_optional(
            data, "include-descriptions", bool, defaults.include_descriptions, source_label
        ),
        include_dependencies=_optional(
            data, "include-dependencies", bool, defaults.include_dependencies, source_label
        ),
    )


def _optional(mapping: dict[str, object], key: str, kind: type, default: object, source_label: str) -> object:
    """Extract an optional typed field from a mapping, raising GeneratorConfigError on a type mismatch."""
    if key not in mapping:
        return default
    value = mapping[key]
    # YAML booleans are ints in Python; an integer field must not accept them.
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise GeneratorConfigError(f"{source_label}: '{key}' must be of type {kind.__name__}")
    return value


def _string_list(mapping: dict[str, object], key: str, source_label: str) -> list[str]:
    """Extract an optional list of strings from a mapping."""
    if key not in mapping:
        return []
    value = mapping[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise GeneratorConfigError(f"{source_label}: '{key}' must be a list of strings")
    return list(value)
