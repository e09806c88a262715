# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader: reads distpack.yaml and produces a validated, frozen DistPackConfig.

The pipeline is linear:
  1. Read the file
  2. Parse it as YAML into a plain dict
  3. Validate the dict with pydantic
  4. Return the frozen config

Any failure stops the run before a single packaging tool is started.
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from distpack.config.exceptions import ConfigLoadError, ConfigValidationError
from distpack.config.schema import DistPackConfig

DEFAULT_CONFIG_NAME = "distpack.yaml"


def _read_yaml_file(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML file and return the parsed mapping.

    Raises:
        ConfigLoadError: If the file doesn't exist, isn't readable, or isn't a YAML mapping.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err

    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def find_config(explicit: Optional[str], search_dir: Optional[Path] = None) -> Path:
    """
    Pick the config file for this run.

    An explicit --config wins. Otherwise distpack.yaml in search_dir (the
    working directory by default) is used.
    """
    if explicit is not None:
        return Path(explicit)
    return (search_dir or Path.cwd()) / DEFAULT_CONFIG_NAME


def load_config(config_path: Path) -> DistPackConfig:
    """
    Load, validate, and freeze a config file.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations (missing fields, wrong types, unknown keys).
    """
    raw_data = _read_yaml_file(config_path)

    try:
        config = DistPackConfig.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n{err}"
        ) from err

    return config
