# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Squirrel.Windows installers through electron-winstaller.

electron-winstaller is a Node library, so the builder starts a tiny Node
script that reads the options as JSON from stdin and calls
createWindowsInstaller with them. Options go over stdin rather than argv
because sign_with_params carries the certificate passphrase.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from distpack.release.interfaces import CommandRunner, WindowsInstallerBuilder

_WINSTALLER_SCRIPT = """\
const { createWindowsInstaller } = require('electron-winstaller')
let raw = ''
process.stdin.setEncoding('utf8')
process.stdin.on('data', chunk => { raw += chunk })
process.stdin.on('end', () => {
  createWindowsInstaller(JSON.parse(raw)).then(
    () => process.exit(0),
    err => { console.error(`Error packaging: ${err}`); process.exit(1) }
  )
})
"""


@dataclass(frozen=True)
class SquirrelInstallerOptions:
    name: str
    app_directory: Path
    output_directory: Path
    authors: str
    icon_url: str
    setup_icon: Path
    loading_gif: Path
    exe: str
    title: str
    setup_exe: str
    setup_msi: str
    remote_releases: Optional[str] = None
    sign_with_params: Optional[str] = None

    def to_winstaller(self) -> dict[str, str]:
        """The options object electron-winstaller expects (camelCase keys)."""
        options = {
            "name": self.name,
            "appDirectory": str(self.app_directory),
            "outputDirectory": str(self.output_directory),
            "authors": self.authors,
            "iconUrl": self.icon_url,
            "setupIcon": str(self.setup_icon),
            "loadingGif": str(self.loading_gif),
            "exe": self.exe,
            "title": self.title,
            "setupExe": self.setup_exe,
            "setupMsi": self.setup_msi,
        }
        if self.remote_releases is not None:
            options["remoteReleases"] = self.remote_releases
        if self.sign_with_params is not None:
            options["signWithParams"] = self.sign_with_params
        return options


class NodeWinstallerBuilder(WindowsInstallerBuilder):
    def __init__(
        self,
        runner: CommandRunner,
        project_root: Path,
        node_executable: str = "node",
    ) -> None:
        self._runner = runner
        self._project_root = project_root
        self._node = node_executable

    def create_installer(self, options: SquirrelInstallerOptions) -> None:
        # cwd is the project root so require() finds its node_modules.
        self._runner.run(
            "electron-winstaller",
            [self._node, "-e", _WINSTALLER_SCRIPT],
            cwd=self._project_root,
            input_text=json.dumps(options.to_winstaller()),
        )
