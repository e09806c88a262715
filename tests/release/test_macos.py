# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the macOS packager with a recorded ditto.
"""

from pathlib import Path

import pytest

from distpack.release.errors import ToolInvocationError
from distpack.release.models import ArtifactKind
from distpack.release.packaging.macos import MacOSPackager
from distpack.release.tools.archive import DittoArchiver


def _fake_ditto(tool: str, command: list[str]) -> None:
    Path(command[-1]).write_bytes(b"zip of " + command[-2].encode())


class TestMacOSPackager:
    def test_archives_app_bundle(self, info_factory, runner_factory) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="darwin")
        runner = runner_factory(on_run=_fake_ditto)

        artifacts = MacOSPackager(info, DittoArchiver(runner)).package()

        assert runner.calls[0]["command"] == [
            "ditto",
            "-ck",
            "--keepParent",
            str(info.app_bundle_path),
            str(info.macos.zip_path),
        ]
        assert [a.kind for a in artifacts] == [ArtifactKind.ZIP]
        assert artifacts[0].path == info.macos.zip_path

    def test_rerun_replaces_previous_archive(self, info_factory, runner_factory) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="darwin")
        info.macos.zip_path.parent.mkdir(parents=True)
        info.macos.zip_path.write_bytes(b"stale archive")
        seen_before_run: list[bool] = []

        def _ditto(tool: str, command: list[str]) -> None:
            seen_before_run.append(Path(command[-1]).exists())
            _fake_ditto(tool, command)

        packager = MacOSPackager(info, DittoArchiver(runner_factory(on_run=_ditto)))
        packager.package()
        packager.package()

        assert seen_before_run == [False, False]
        zips = list(info.dist_root.glob("*.zip"))
        assert zips == [info.macos.zip_path]
        assert info.macos.zip_path.read_bytes().startswith(b"zip of ")

    def test_ditto_failure_propagates(self, info_factory, runner_factory) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="darwin")
        packager = MacOSPackager(info, DittoArchiver(runner_factory(fail_tool="ditto")))
        with pytest.raises(ToolInvocationError, match="ditto"):
            packager.package()

    def test_missing_output_is_reported(self, info_factory, runner_factory) -> None:  # type: ignore[no-untyped-def]
        info = info_factory(platform_name="darwin")
        packager = MacOSPackager(info, DittoArchiver(runner_factory()))
        with pytest.raises(FileNotFoundError):
            packager.package()

    def test_no_checksums_on_macos(self) -> None:
        assert MacOSPackager.checksums_artifacts is False
