# Copyright 2026 SchemaGraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Configuration of the description annotations recognized during introspection.

The configuration names the marker classes (by simple name) that carry an
explicit description, and the attributes of those markers that hold the
text. It is an immutable value: construct it once and share it freely
between introspection runs.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".schemagraph.yaml"


class DescriptionConfigError(Exception):
    """Raised when a description configuration file cannot be read or is invalid."""


class DescriptionConfig(BaseModel):
    """Recognized description annotations.

    Attributes:
        annotation_names: Lower-cased simple names of description markers.
            Matching is case-insensitive and ignores the defining module, so
            third-party markers are recognized without importing them.
        value_attributes: Lower-cased attribute names holding the description,
            in the order they are tried.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    annotation_names: frozenset[str] = Field(
        alias="description-annotation-names",
        default=frozenset({"description", "llmdescription", "jsonpropertydescription", "jsonclassdescription", "p"}),
    )
    value_attributes: tuple[str, ...] = Field(
        alias="description-attributes",
        default=("value", "description"),
    )

    @field_validator("annotation_names", "value_attributes", mode="before")
    @classmethod
    def _normalize_names(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple, set, frozenset)):
            names: list[str] = []
            for item in value:
                if not isinstance(item, str):
                    raise ValueError("names must be strings")
                name = item.strip().lower()
                if name and name not in names:
                    names.append(name)
            if not names:
                raise ValueError("at least one name is required")
            return names
        return value

    def matches_annotation(self, simple_name: str) -> bool:
        """Return whether *simple_name* names a recognized description marker."""
        return simple_name.lower() in self.annotation_names


DEFAULT_DESCRIPTION_CONFIG = DescriptionConfig()


def parse_description_config(path: Path) -> DescriptionConfig:
    """Read and validate a description configuration file.

    Keys that are absent keep their built-in defaults. An empty file yields
    the defaults.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A validated DescriptionConfig.

    Raises:
        DescriptionConfigError: If the file cannot be read, contains invalid
            YAML, or does not match the expected shape.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise DescriptionConfigError(f"Description config file not found: {path}") from None
    except OSError as exc:
        raise DescriptionConfigError(f"Cannot read description config '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise DescriptionConfigError(f"Invalid YAML in description config '{path}': {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DescriptionConfigError(f"{path}: description config must be a YAML mapping")

    try:
        return DescriptionConfig.model_validate(data)
    except ValidationError as exc:
        raise DescriptionConfigError(f"Invalid description config '{path}': {exc}") from exc


def load_description_config(path: Path | None) -> DescriptionConfig:
    """Load the description configuration, falling back to the built-in defaults.

    A missing path yields the defaults silently. A file that cannot be read or
    parsed is reported as a warning and the defaults are used instead, so
    introspection always proceeds.
    """
    if path is None:
        return DEFAULT_DESCRIPTION_CONFIG
    try:
        return parse_description_config(path)
    except DescriptionConfigError as exc:
        logger.warning("%s; using default description configuration", exc)
        return DEFAULT_DESCRIPTION_CONFIG
