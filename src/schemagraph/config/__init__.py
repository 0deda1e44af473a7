# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Process-wide configuration for SchemaGraph."""

from schemagraph.config.description import (
    CONFIG_FILE_NAME,
    DEFAULT_DESCRIPTION_CONFIG,
    DescriptionConfig,
    DescriptionConfigError,
    load_description_config,
    parse_description_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_DESCRIPTION_CONFIG",
    "DescriptionConfig",
    "DescriptionConfigError",
    "load_description_config",
    "parse_description_config",
]
