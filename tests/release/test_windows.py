# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the Windows packager.

The Squirrel builder is replaced with a stand-in that writes the NuGet
packages Squirrel would, so the option building and rename step can be
checked without Node or Windows.
"""

import json
from pathlib import Path
from typing import Optional
from urllib.parse import parse_qs, urlsplit

import pytest

from distpack.release.errors import MissingResourceError
from distpack.release.interfaces import WindowsInstallerBuilder
from distpack.release.models import ArtifactKind
from distpack.release.packaging.windows import (
    WindowsPackager,
    remote_releases_url,
    rename_nuget_packages,
    signing_params,
)
from distpack.release.request import build_request
from distpack.release.tools.squirrel import NodeWinstallerBuilder, SquirrelInstallerOptions


class FakeSquirrel(WindowsInstallerBuilder):
    def __init__(self, prefix: str, kinds: tuple[str, ...] = ("full", "delta")) -> None:
        self.options: Optional[SquirrelInstallerOptions] = None
        self._prefix = prefix
        self._kinds = kinds

    def create_installer(self, options: SquirrelInstallerOptions) -> None:
        self.options = options
        out = options.output_directory
        out.mkdir(parents=True, exist_ok=True)
        (out / options.setup_exe).write_bytes(b"exe")
        (out / options.setup_msi).write_bytes(b"msi")
        for kind in self._kinds:
            (out / f"{self._prefix}-{kind}.nupkg").write_bytes(kind.encode())


def _add_resources(info) -> None:  # type: ignore[no-untyped-def]
    for path in (info.windows.setup_icon, info.windows.splash_screen):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"resource")


def _packager(info, environ=None, builder=None):  # type: ignore[no-untyped-def]
    request = build_request(environ or {}, "win32")
    builder = builder or FakeSquirrel(info.nuget_prefix)
    return WindowsPackager(info, request, builder), builder


class TestPreflight:
    def test_missing_icon(self, info_factory) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="win32")
        packager, builder = _packager(info)
        with pytest.raises(MissingResourceError, match="setup icon"):
            packager.package()
        assert builder.options is None

    def test_missing_splash_screen(self, info_factory) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="win32")
        info.windows.setup_icon.parent.mkdir(parents=True)
        info.windows.setup_icon.write_bytes(b"ico")
        packager, builder = _packager(info)
        with pytest.raises(MissingResourceError, match="splash screen"):
            packager.preflight()
        assert builder.options is None

    def test_channel_icon_is_required(self, info_factory) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="win32", channel="beta")
        assert info.windows.setup_icon.name == "icon-logo-beta.ico"


class TestBuildOptions:
    def test_core_options(self, info_factory) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="win32", environ={"TARGET_ARCH": "arm64"})
        options = _packager(info)[0].build_options()
        assert options.name == "App"
        assert options.exe == "App.exe"
        assert options.title == "App"
        assert options.authors == "Example, Inc."
        assert options.setup_exe == "AppSetup-arm64.exe"
        assert options.setup_msi == "AppSetup-arm64.msi"
        assert options.app_directory == info.dist_path
        assert options.output_directory == info.dist_root

    def test_remote_releases_only_with_deltas(self, info_factory) -> None:  # type: ignore[no-untyped-def]
        production = _packager(info_factory(platform_name="win32"))[0].build_options()
        test = _packager(info_factory(platform_name="win32", channel="test"))[0].build_options()
        assert production.remote_releases is not None
        assert parse_qs(urlsplit(production.remote_releases).query)["bypassStaggeredRelease"] == ["1"]
        assert test.remote_releases is None

    @pytest.mark.parametrize(
        ("channel", "automated", "signed"),
        [
            ("production", True, True),
            ("test", True, True),
            ("production", False, False),
            ("development", True, False),
        ],
    )
    def test_signing(self, info_factory, channel, automated, signed) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="win32", channel=channel)
        environ = {"WINDOWS_CERT_PASSWORD": "pw"}
        if automated:
            environ["GITHUB_ACTIONS"] = "true"
        options = _packager(info, environ)[0].build_options()
        assert (options.sign_with_params is not None) is signed
        if signed:
            assert options.sign_with_params.startswith(f"/f {info.windows.certificate_path} /p pw ")


class TestHelpers:
    def test_bypass_is_appended(self) -> None:
        url = remote_releases_url("https://example.com/latest?version=1.0&env=beta")
        assert parse_qs(urlsplit(url).query) == {
            "version": ["1.0"],
            "env": ["beta"],
            "bypassStaggeredRelease": ["1"],
        }

    def test_bypass_is_not_duplicated(self) -> None:
        url = remote_releases_url("https://example.com/latest?bypassStaggeredRelease=0")
        assert parse_qs(urlsplit(url).query) == {"bypassStaggeredRelease": ["1"]}

    def test_signing_params(self) -> None:
        assert signing_params(Path("c.pfx"), "pw", "http://ts.example") == (
            "/f c.pfx /p pw /tr http://ts.example /td sha256 /fd sha256"
        )


class TestPackage:
    def test_renames_full_and_delta(self, info_factory) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="win32")
        _add_resources(info)
        artifacts = _packager(info)[0].package()

        assert [a.path.name for a in artifacts] == [
            "App-1.0.0-x64-full.nupkg",
            "App-1.0.0-x64-delta.nupkg",
        ]
        assert [a.kind for a in artifacts] == [ArtifactKind.NUPKG_FULL, ArtifactKind.NUPKG_DELTA]
        assert not (info.dist_root / "App-1.0.0-full.nupkg").exists()
        assert not (info.dist_root / "App-1.0.0-delta.nupkg").exists()

    def test_delta_untouched_when_disabled(self, info_factory) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="win32", channel="test")
        _add_resources(info)
        # A leftover delta from some other run must stay where it is.
        builder = FakeSquirrel(info.nuget_prefix, kinds=("full", "delta"))
        artifacts = _packager(info, builder=builder)[0].package()

        assert [a.path.name for a in artifacts] == ["App-1.0.0-x64-full.nupkg"]
        assert (info.dist_root / "App-1.0.0-delta.nupkg").exists()
        assert not (info.dist_root / "App-1.0.0-x64-delta.nupkg").exists()

    def test_missing_package_is_fatal(self, info_factory) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="win32")
        _add_resources(info)
        builder = FakeSquirrel(info.nuget_prefix, kinds=("full",))
        with pytest.raises(FileNotFoundError, match="delta"):
            _packager(info, builder=builder)[0].package()

    def test_rename_without_squirrel_output(self, info_factory) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="win32", channel="development")
        with pytest.raises(FileNotFoundError):
            rename_nuget_packages(info)


class TestNodeWinstallerBuilder:
    def test_options_go_over_stdin(self, info_factory, runner_factory) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="win32", environ={"GITHUB_ACTIONS": "1", "WINDOWS_CERT_PASSWORD": "secret"})
        options = _packager(info, {"GITHUB_ACTIONS": "1", "WINDOWS_CERT_PASSWORD": "secret"})[0].build_options()
        runner = runner_factory()

        NodeWinstallerBuilder(runner, info.project_root).create_installer(options)

        call = runner.calls[0]
        assert call["tool"] == "electron-winstaller"
        assert call["command"][:2] == ["node", "-e"]
        assert call["cwd"] == info.project_root
        assert not any("secret" in part for part in call["command"])

        payload = json.loads(call["input_text"])
        assert payload["setupExe"] == "AppSetup-x64.exe"
        assert payload["loadingGif"] == str(info.windows.splash_screen)
        assert "secret" in payload["signWithParams"]
        assert payload["remoteReleases"].endswith("bypassStaggeredRelease=1")

    def test_optional_keys_are_omitted(self, tmp_path: Path) -> None:
        options = SquirrelInstallerOptions(
            name="App",
            app_directory=tmp_path,
            output_directory=tmp_path,
            authors="Example",
            icon_url="https://example.com/icon.ico",
            setup_icon=tmp_path / "i.ico",
            loading_gif=tmp_path / "s.gif",
            exe="App.exe",
            title="App",
            setup_exe="AppSetup.exe",
            setup_msi="AppSetup.msi",
        )
        payload = options.to_winstaller()
        assert "remoteReleases" not in payload
        assert "signWithParams" not in payload
