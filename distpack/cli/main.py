# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for distpack.

Usage:
    distpack package [--config distpack.yaml] [--log-level DEBUG] [--dry-run]
    distpack verify --dist-root dist
    distpack info

Environment read by `package`: TARGET_ARCH, GITHUB_ACTIONS,
WINDOWS_CERT_PASSWORD, DISTPACK_UPDATES_URL.
"""

import argparse
import sys

from distpack.cli.commands import handle_info, handle_package, handle_verify
from distpack.cli.exit_codes import USER_ERROR


def _build_global_parser() -> argparse.ArgumentParser:
    """Options shared by every subcommand (add_help=False so -h isn't registered twice)."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to distpack.yaml (default: ./distpack.yaml).",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the log level from the config file.",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Resolve and log what would be packaged without running any tool.",
    )
    return parent


def build_parser() -> argparse.ArgumentParser:
    parent = _build_global_parser()

    root_parser = argparse.ArgumentParser(
        prog="distpack",
        description="distpack: package a pre-built app bundle into installers.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")

    commands = [
        ("package", "Build installers for the host platform.", handle_package),
        ("verify", "Check installers against checksums.txt.", handle_verify),
        ("info", "Display environment and config info.", handle_info),
    ]
    for name, help_text, handler in commands:
        parser = subparsers.add_parser(name, parents=[parent], help=help_text)
        parser.set_defaults(func=handler, dist_root=None)

    subparsers.choices["verify"].add_argument(
        "--dist-root",
        type=str,
        default=None,
        dest="dist_root",
        help="Directory holding checksums.txt and the installers.",
    )
    return root_parser


def main() -> None:
    """Parse the command line, run the handler, exit with its code."""
    root_parser = build_parser()
    args = root_parser.parse_args()

    if getattr(args, "func", None) is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
