# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generator configuration for TypeBAML."""

from typebaml.workspace.config import (
    CONFIG_FILE_NAME,
    GeneratorConfig,
    GeneratorConfigError,
    load_generator_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "GeneratorConfig",
    "GeneratorConfigError",
    "load_generator_config",
]
