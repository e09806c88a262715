# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Distribution metadata resolved once per run.

Combines distpack.yaml with the PackagingRequest: templates are filled in,
relative paths are anchored at the project root (the config file's
directory), and channel rules decide delta packages, publishing and the icon.
The result is frozen and shared by every packager.

Channel rules:
    production   deltas, publishable, icon-logo
    beta         deltas, publishable, icon-logo-beta
    test         publishable,         icon-logo-test
    development                       icon-logo-development

Test releases aren't necessarily sequential, so deltas against them would
not make sense.
"""

from dataclasses import dataclass, field
from pathlib import Path

from distpack.config.schema import DistPackConfig
from distpack.release.errors import ConfigurationError
from distpack.release.request import HostPlatform, PackagingRequest, TargetArch

_DELTA_CHANNELS: frozenset[str] = frozenset({"production", "beta"})
_PUBLISHABLE_CHANNELS: frozenset[str] = frozenset({"production", "beta", "test"})
_BASE_ICON_NAME = "icon-logo"


@dataclass(frozen=True)
class WindowsResources:
    standalone_name: str
    installer_name: str
    setup_icon: Path
    splash_screen: Path
    icon_url: str
    certificate_path: Path
    timestamp_url: str
    node_executable: str


@dataclass(frozen=True)
class LinuxTools:
    electron_builder: Path
    builder_config: Path
    appimage_pattern: str
    debian_installer: Path
    redhat_installer: Path
    installers_dir: Path
    sandbox_helper: Path


@dataclass(frozen=True)
class MacOSTools:
    zip_path: Path
    archiver: str


@dataclass(frozen=True)
class DistributionInfo:
    product_name: str
    company_name: str
    version: str
    channel: str
    executable_name: str
    identifier_name: str
    arch: TargetArch
    platform: HostPlatform
    project_root: Path
    dist_root: Path
    dist_path: Path
    icon_file_name: str
    updates_url: str
    should_make_delta: bool
    is_publishable: bool
    windows: WindowsResources
    linux: LinuxTools
    macos: MacOSTools
    bundle_size_files: dict[str, Path] = field(default_factory=dict)

    @property
    def app_bundle_path(self) -> Path:
        """The macOS .app inside the bundle directory."""
        return self.dist_path / f"{self.product_name}.app"

    @property
    def nuget_prefix(self) -> str:
        return f"{self.identifier_name}-{self.version}"


def _anchor(project_root: Path, value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else project_root / path


def _render(template: str, values: dict[str, str], setting: str) -> str:
    try:
        return template.format(**values)
    except (KeyError, IndexError, ValueError) as err:
        raise ConfigurationError(
            f"Cannot render '{setting}' from template {template!r}: {err}"
        ) from err


def default_icon_name(channel: str) -> str:
    if channel == "production":
        return _BASE_ICON_NAME
    return f"{_BASE_ICON_NAME}-{channel}"


def resolve_distribution_info(
    config: DistPackConfig,
    request: PackagingRequest,
    project_root: Path,
) -> DistributionInfo:
    """
    Resolve every name and path the packagers need.

    Args:
        config: Validated distpack.yaml.
        request: Environment-derived request (architecture, platform, ...).
        project_root: Directory relative paths in the config refer to.

    Raises:
        ConfigurationError: If a template references an unknown placeholder.
    """
    dist = config.distribution
    identifier = config.windows.identifier_name or dist.product_name.replace(" ", "")

    values = {
        "product_name": dist.product_name,
        "executable_name": dist.executable_name,
        "identifier_name": identifier,
        "version": dist.version,
        "channel": dist.channel,
        "platform": request.host_platform.value,
        "arch": request.target_arch.value,
    }

    dist_root = _anchor(project_root, dist.dist_root)
    dist_path = dist_root / _render(dist.bundle_directory, values, "bundle_directory")
    icon_file_name = dist.icon_file_name or default_icon_name(dist.channel)

    updates_url = request.updates_url or _render(dist.updates_url, values, "updates_url")

    windows = WindowsResources(
        standalone_name=_render(config.windows.standalone_name, values, "standalone_name"),
        installer_name=_render(config.windows.installer_name, values, "installer_name"),
        setup_icon=_anchor(project_root, config.windows.logos_directory) / f"{icon_file_name}.ico",
        splash_screen=_anchor(project_root, config.windows.splash_screen),
        icon_url=config.windows.icon_url,
        certificate_path=_anchor(project_root, config.windows.certificate_path),
        timestamp_url=config.windows.timestamp_url,
        node_executable=config.windows.node_executable,
    )

    linux = LinuxTools(
        electron_builder=_anchor(project_root, config.linux.electron_builder),
        builder_config=_anchor(project_root, config.linux.builder_config),
        appimage_pattern=str(
            dist_root / _render(config.linux.appimage_pattern, values, "appimage_pattern")
        ),
        debian_installer=_anchor(project_root, config.linux.debian_installer),
        redhat_installer=_anchor(project_root, config.linux.redhat_installer),
        installers_dir=dist_root / config.linux.installers_directory,
        sandbox_helper=dist_path / config.linux.sandbox_helper,
    )

    macos = MacOSTools(
        zip_path=dist_root / _render(config.macos.zip_name, values, "zip_name"),
        archiver=config.macos.archiver,
    )

    return DistributionInfo(
        product_name=dist.product_name,
        company_name=dist.company_name,
        version=dist.version,
        channel=dist.channel,
        executable_name=dist.executable_name,
        identifier_name=identifier,
        arch=request.target_arch,
        platform=request.host_platform,
        project_root=project_root,
        dist_root=dist_root,
        dist_path=dist_path,
        icon_file_name=icon_file_name,
        updates_url=updates_url,
        should_make_delta=dist.channel in _DELTA_CHANNELS,
        is_publishable=dist.channel in _PUBLISHABLE_CHANNELS,
        windows=windows,
        linux=linux,
        macos=macos,
        bundle_size_files={
            label: _anchor(project_root, rel) for label, rel in dist.bundle_size_files.items()
        },
    )
