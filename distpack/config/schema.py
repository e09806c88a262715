# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe schema for distpack.yaml.

Every section is a frozen pydantic model:
  - frozen=True: nothing mutates the config once a run has started
  - extra="forbid": a typo in a key fails loudly instead of being ignored
  - validate_default=True: defaults get type-checked too

String fields documented as templates are formatted later by
distpack.release.dist_info with these placeholders:
  {product_name} {executable_name} {identifier_name} {version}
  {channel} {platform} {arch}

Relative paths are resolved against the directory holding the config file.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ReleaseChannel = Literal["production", "beta", "test", "development"]


class GlobalConfig(BaseModel):
    """Cross-cutting settings: schema version and logging."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return upper


class DistributionConfig(BaseModel):
    """
    Product identity and the layout of the build output.

    This is the metadata the packagers read but never compute: who ships
    the app, what version it is, which release channel it belongs to, and
    where the pre-built bundle lives.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    product_name: str = Field(description="User-facing product name, e.g. 'GitHub Desktop'")
    company_name: str = Field(description="Publisher, used as the installer author")
    version: str = Field(description="Semantic version of the build being packaged")
    executable_name: str = Field(
        description="File name of the main executable, without extension"
    )
    channel: ReleaseChannel = Field(
        default="development",
        description="Release channel; decides delta packages, publishing and icon",
    )
    dist_root: str = Field(
        default="dist",
        description="Output root holding the bundle and receiving installers",
    )
    bundle_directory: str = Field(
        default="{product_name}-{platform}-{arch}",
        description="Template: bundle directory name under dist_root",
    )
    updates_url: str = Field(
        default=(
            "https://central.github.com/api/deployments/desktop/desktop/latest"
            "?version={version}&env={channel}&arch={arch}"
        ),
        description="Template: update feed queried by installed clients",
    )
    icon_file_name: Optional[str] = Field(
        default=None,
        description="Base name of the icon files; derived from the channel when unset",
    )
    bundle_size_files: dict[str, str] = Field(
        default_factory=lambda: {
            "rendererBundleSize": "out/renderer.js",
            "mainBundleSize": "out/main.js",
        },
        description="Report label -> file whose size goes into bundle-size.json",
    )

    @field_validator("version")
    @classmethod
    def _non_empty_version(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("version must not be empty")
        return value.strip()


class WindowsConfig(BaseModel):
    """Squirrel installer settings."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    identifier_name: Optional[str] = Field(
        default=None,
        description="NuGet package id; product_name without spaces when unset",
    )
    standalone_name: str = Field(
        default="{identifier_name}Setup-{arch}.exe",
        description="Template: setup executable file name",
    )
    installer_name: str = Field(
        default="{identifier_name}Setup-{arch}.msi",
        description="Template: MSI file name",
    )
    logos_directory: str = Field(
        default="app/static/logos",
        description="Directory holding <icon_file_name>.ico",
    )
    splash_screen: str = Field(
        default="app/static/logos/win32-installer-splash.gif",
        description="Animated gif shown while Setup.exe runs",
    )
    icon_url: str = Field(
        default="https://desktop.githubusercontent.com/github-desktop/app-icon.ico",
        description="Icon shown in Programs and Features",
    )
    certificate_path: str = Field(
        default="script/windows-certificate.pfx",
        description="Code-signing certificate, used only for publishable CI builds",
    )
    timestamp_url: str = Field(
        default="http://timestamp.digicert.com",
        description="RFC 3161 timestamp authority for signtool",
    )
    node_executable: str = Field(
        default="node",
        description="Node.js binary used to drive electron-winstaller",
    )


class MacOSConfig(BaseModel):
    """macOS zip settings."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    zip_name: str = Field(
        default="{product_name}-{arch}.zip",
        description="Template: archive file name under dist_root",
    )
    archiver: str = Field(default="ditto", description="Archiving tool on PATH")


class LinuxConfig(BaseModel):
    """Settings for the AppImage, Debian and Redhat sub-packagers."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    electron_builder: str = Field(
        default="node_modules/.bin/electron-builder",
        description="electron-builder binary used for the AppImage",
    )
    builder_config: str = Field(
        default="script/electron-builder-linux.yml",
        description="electron-builder config passed via --config",
    )
    appimage_pattern: str = Field(
        default="{identifier_name}-linux-*.AppImage",
        description="Template: glob (under dist_root) matching the AppImage",
    )
    debian_installer: str = Field(
        default="node_modules/.bin/electron-installer-debian",
        description="electron-installer-debian binary",
    )
    redhat_installer: str = Field(
        default="node_modules/.bin/electron-installer-redhat",
        description="electron-installer-redhat binary",
    )
    installers_directory: str = Field(
        default="installers",
        description="Directory under dist_root receiving the .deb and .rpm",
    )
    sandbox_helper: str = Field(
        default="chrome-sandbox",
        description="Helper binary in the bundle that must be setuid root",
    )


class DistPackConfig(BaseModel):
    """
    Top-level config container.

    `global` and `distribution` are required; platform sections fall back to
    their defaults so a minimal file only has to name the product.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    distribution: DistributionConfig
    windows: WindowsConfig = Field(default_factory=WindowsConfig)
    macos: MacOSConfig = Field(default_factory=MacOSConfig)
    linux: LinuxConfig = Field(default_factory=LinuxConfig)
