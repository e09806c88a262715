# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for distpack tests.

Besides config files, this provides stand-ins for the external tools:
a CommandRunner that records calls instead of spawning processes, and an
InstallerBuilder that writes a fake installer (or fails) on demand.
"""

import textwrap
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Optional

import pytest

from distpack.config.loader import load_config
from distpack.release.dist_info import DistributionInfo, resolve_distribution_info
from distpack.release.errors import ToolInvocationError
from distpack.release.interfaces import CommandRunner, InstallerBuilder
from distpack.release.models import ArtifactKind
from distpack.release.request import build_request

_BASE_CONFIG = """\
global:
  config_version: "1.0.0"
  log_level: "DEBUG"
distribution:
  product_name: "App"
  company_name: "Example, Inc."
  version: "1.0.0"
  executable_name: "app"
  channel: "{channel}"
"""


class RecordingRunner(CommandRunner):
    """Records every command; optionally fails one tool or runs a side effect."""

    def __init__(
        self,
        fail_tool: Optional[str] = None,
        on_run: Optional[Callable[[str, list[str]], None]] = None,
    ) -> None:
        self.calls: list[dict] = []
        self._fail_tool = fail_tool
        self._on_run = on_run

    def run(self, tool, command, cwd=None, input_text=None) -> None:
        args = [str(c) for c in command]
        self.calls.append({"tool": tool, "command": args, "cwd": cwd, "input_text": input_text})
        if tool == self._fail_tool:
            raise ToolInvocationError(tool, args, returncode=1)
        if self._on_run is not None:
            self._on_run(tool, args)

    @property
    def tools(self) -> list[str]:
        return [call["tool"] for call in self.calls]


class StubBuilder(InstallerBuilder):
    """Writes `filename` under dist_root (or raises) and records that it ran."""

    def __init__(
        self,
        name: str,
        kind: ArtifactKind,
        filename: str,
        log: list[str],
        fail: bool = False,
        content: bytes = b"installer bytes ",
    ) -> None:
        self.name = name
        self.kind = kind
        self._filename = filename
        self._log = log
        self._fail = fail
        self._content = content

    def build(self, info: DistributionInfo) -> Path:
        self._log.append(self.name)
        if self._fail:
            raise ToolInvocationError(f"{self.name}-builder", returncode=2)
        path = info.dist_root / self._filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self._content + self.name.encode())
        return path


def make_linux_builders(log: list[str], fail: Sequence[str] = ()) -> list[StubBuilder]:
    """AppImage, Debian, Redhat stand-ins with the names a real run would produce."""
    return [
        StubBuilder("appimage", ArtifactKind.APPIMAGE, "App-linux-x64.AppImage", log, "appimage" in fail),
        StubBuilder("debian", ArtifactKind.DEB, "installers/app_1.0_amd64.deb", log, "debian" in fail),
        StubBuilder("redhat", ArtifactKind.RPM, "installers/app-1.0.x86_64.rpm", log, "redhat" in fail),
    ]


@pytest.fixture()
def config_factory(tmp_path: Path) -> Callable[..., Path]:
    """Write distpack.yaml into tmp_path with the given channel and extra YAML."""

    def _write(channel: str = "production", extra: str = "") -> Path:
        content = _BASE_CONFIG.format(channel=channel) + textwrap.dedent(extra)
        config_file = tmp_path / "distpack.yaml"
        config_file.write_text(content, encoding="utf-8")
        return config_file

    return _write


@pytest.fixture()
def tmp_config_file(config_factory: Callable[..., Path]) -> Path:
    """The smallest config that passes validation."""
    return config_factory()


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML missing distribution.version."""
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text(
        textwrap.dedent("""\
            global:
              config_version: "1.0.0"
            distribution:
              product_name: "App"
              company_name: "Example, Inc."
              executable_name: "app"
        """),
        encoding="utf-8",
    )
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file


@pytest.fixture()
def info_factory(config_factory: Callable[..., Path]) -> Callable[..., DistributionInfo]:
    """Resolve a DistributionInfo for a platform, channel and environment."""

    def _make(
        platform_name: str = "linux",
        channel: str = "production",
        environ: Optional[dict[str, str]] = None,
        extra: str = "",
    ) -> DistributionInfo:
        config_file = config_factory(channel=channel, extra=extra)
        config = load_config(config_file)
        request = build_request(environ or {}, platform_name)
        return resolve_distribution_info(config, request, config_file.parent)

    return _make


@pytest.fixture()
def runner_factory() -> Callable[..., RecordingRunner]:
    return RecordingRunner


@pytest.fixture()
def builder_factory() -> Callable[..., StubBuilder]:
    return StubBuilder


@pytest.fixture()
def linux_builders_factory() -> Callable[..., list[StubBuilder]]:
    return make_linux_builders
