"""
Dumper configuration.

Configuration lives under a ``hierarchy_dump`` key of a YAML file::

    hierarchy_dump:
      file: structure.json      # required
      format: d3json            # dbgjson | elkjson | d3json | elkt | mermaid
      title: my_platform        # label of the document root
      internal_prefix: "$$$"    # objects with this basename prefix are skipped
      ignored_kinds:            # extra kinds to skip without a warning
        - my_bookkeeping_channel
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .models import INTERNAL_PREFIX, DumpFormat

logger = logging.getLogger(__name__)

SECTION = "hierarchy_dump"


@dataclass
class DumperConfig:
    file: str
    format: DumpFormat = DumpFormat.ELKJSON
    title: Optional[str] = None
    internal_prefix: str = INTERNAL_PREFIX
    ignored_kinds: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, section: Dict[str, Any], source: str = "<dict>") -> "DumperConfig":
        validate_config_structure(section, source)
        try:
            fmt = DumpFormat.parse(section.get("format", DumpFormat.ELKJSON))
        except ValueError as e:
            raise ConfigError(f"Invalid configuration in {source}: {e}") from e
        return cls(
            file=str(section["file"]),
            format=fmt,
            title=section.get("title"),
            internal_prefix=section.get("internal_prefix", INTERNAL_PREFIX),
            ignored_kinds=list(section.get("ignored_kinds", [])),
        )


def validate_config_structure(section: Any, source: str) -> None:
    """
    Validate the ``hierarchy_dump`` section.

    Raises:
        ConfigError: If required keys are missing or have the wrong type
    """
    if not isinstance(section, dict):
        raise ConfigError(
            f"Invalid configuration structure in {source}.\n"
            f"Expected a mapping under '{SECTION}'."
        )
    if not section.get("file"):
        raise ConfigError(
            f"Invalid configuration structure in {source}.\n"
            f"Missing required '{SECTION}.file' key."
        )
    ignored = section.get("ignored_kinds", [])
    if not isinstance(ignored, list) or not all(isinstance(k, str) for k in ignored):
        raise ConfigError(
            f"Invalid configuration in {source}: "
            f"'{SECTION}.ignored_kinds' must be a list of strings."
        )
    prefix = section.get("internal_prefix", INTERNAL_PREFIX)
    if not isinstance(prefix, str) or not prefix:
        raise ConfigError(
            f"Invalid configuration in {source}: "
            f"'{SECTION}.internal_prefix' must be a non-empty string."
        )


def load_config(config_file: str | Path) -> DumperConfig:
    """
    Load and validate a dumper configuration from a YAML file.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ConfigError: If the configuration is invalid
    """
    config_file = str(config_file)
    if not os.path.exists(config_file):
        raise FileNotFoundError(f"Configuration file not found: {config_file}")
    with open(config_file, "r") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {config_file}: {e}") from e
    if not isinstance(data, dict) or SECTION not in data:
        raise ConfigError(
            f"Invalid configuration structure in {config_file}.\n"
            f"Missing required '{SECTION}' key."
        )
    config = DumperConfig.from_dict(data[SECTION], config_file)
    logger.info("Loaded dumper configuration from %s (format=%s)", config_file, config.format.value)
    return config
