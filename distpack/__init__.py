# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
distpack: release packaging orchestrator.

Turns a pre-built application bundle into the installer artifacts for the
host platform and writes integrity checksums for them.
"""

__version__ = "0.1.0"
