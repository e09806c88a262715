# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exceptions for loading distpack.yaml.

These live apart from the loader so the CLI can catch config failures without
importing pydantic or yaml.
"""


class ConfigError(Exception):
    """Base for all configuration file errors."""


class ConfigLoadError(ConfigError):
    """The config file is missing, unreadable, or not valid YAML."""


class ConfigValidationError(ConfigError):
    """
    The YAML parsed but does not match the schema: a missing required field,
    a wrong type, an unknown key, or an unsupported channel.
    """
