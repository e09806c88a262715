# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the config loader.

  1. Valid YAML loads into a frozen config with defaults filled in
  2. Missing required fields and unknown keys raise ConfigValidationError
  3. Broken YAML and non-mapping documents raise ConfigLoadError
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from distpack.config.exceptions import ConfigLoadError, ConfigValidationError
from distpack.config.loader import DEFAULT_CONFIG_NAME, find_config, load_config


class TestLoadValidConfig:
    def test_loads_minimal_config(self, tmp_config_file: Path) -> None:
        config = load_config(tmp_config_file)
        assert config.distribution.product_name == "App"
        assert config.distribution.version == "1.0.0"
        assert config.global_config.log_level == "DEBUG"

    def test_platform_sections_default(self, tmp_config_file: Path) -> None:
        config = load_config(tmp_config_file)
        assert config.windows.identifier_name is None
        assert config.windows.timestamp_url == "http://timestamp.digicert.com"
        assert config.macos.archiver == "ditto"
        assert config.linux.sandbox_helper == "chrome-sandbox"

    def test_platform_overrides_are_read(self, config_factory) -> None:  # type: ignore[no-untyped-def]
        config_file = config_factory(
            extra="""\
            windows:
              identifier_name: "AppDesktop"
            linux:
              installers_directory: "pkgs"
            """
        )
        config = load_config(config_file)
        assert config.windows.identifier_name == "AppDesktop"
        assert config.linux.installers_directory == "pkgs"

    def test_config_is_frozen(self, tmp_config_file: Path) -> None:
        config = load_config(tmp_config_file)
        with pytest.raises(ValidationError):
            config.distribution.version = "2.0.0"  # type: ignore[misc]


class TestLoadInvalidConfig:
    def test_missing_required_field(self, invalid_config_file: Path) -> None:
        with pytest.raises(ConfigValidationError, match="version"):
            load_config(invalid_config_file)

    def test_unknown_key_is_rejected(self, config_factory) -> None:  # type: ignore[no-untyped-def]
        config_file = config_factory(extra="surprise: true\n")
        with pytest.raises(ConfigValidationError):
            load_config(config_file)

    def test_unknown_channel_is_rejected(self, config_factory) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(ConfigValidationError):
            load_config(config_factory(channel="nightly"))

    def test_broken_yaml(self, broken_yaml_file: Path) -> None:
        with pytest.raises(ConfigLoadError, match="Invalid YAML"):
            load_config(broken_yaml_file)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="not found"):
            load_config(tmp_path / "absent.yaml")

    def test_non_mapping_document(self, tmp_path: Path) -> None:
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError, match="mapping"):
            load_config(config_file)


class TestFindConfig:
    def test_explicit_path_wins(self, tmp_path: Path) -> None:
        assert find_config("custom.yaml", tmp_path) == Path("custom.yaml")

    def test_defaults_to_search_dir(self, tmp_path: Path) -> None:
        assert find_config(None, tmp_path) == tmp_path / DEFAULT_CONFIG_NAME
