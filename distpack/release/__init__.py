# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release packaging subsystem.

Turns the pre-built bundle in dist_root into installers for the host platform:
a zip on macOS, Squirrel setup/MSI/NuGet packages on Windows, and an
AppImage plus .deb and .rpm on Linux. Linux installers are also checksummed.

Nothing here builds the app or implements an installer format. Every
external tool is reached through the capabilities in
distpack.release.interfaces, so the whole flow can run against stand-ins.
"""
