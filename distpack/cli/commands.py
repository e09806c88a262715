# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the distpack CLI.

Each handler takes the parsed argparse namespace and returns an exit code.
Every failure ends up here as a structured log line and a non-zero code;
nothing below the CLI calls sys.exit.
"""

import argparse
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from distpack.cli.exit_codes import (
    CONFIG_ERROR,
    PACKAGING_ERROR,
    SUCCESS,
    USER_ERROR,
    VALIDATION_ERROR,
)
from distpack.config.exceptions import ConfigError
from distpack.config.loader import find_config, load_config
from distpack.config.schema import DistPackConfig
from distpack.logging.logger import configure_logging, get_logger
from distpack.release.errors import ConfigurationError, PackagingError
from distpack.runtime.bootstrap import bootstrap


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
    require_config: bool = True,
) -> tuple[int, Optional[DistPackConfig], Path, logging.Logger]:
    """
    Shared setup: find and load distpack.yaml, then bootstrap.

    Returns (exit_code, config, project_root, logger). If exit_code is not
    SUCCESS the caller returns it immediately.
    """
    configure_logging(args.log_level or "INFO")
    logger = get_logger(f"distpack.cli.{command_name}")

    config_path = find_config(args.config)
    project_root = config_path.resolve().parent

    if args.config is None and not config_path.exists() and not require_config:
        logger.debug("No config file, running with defaults", extra={"command": command_name})
        return SUCCESS, None, project_root, logger

    try:
        config = load_config(config_path)
    except ConfigError as err:
        logger.error(
            "Configuration error",
            extra={"command": command_name, "error": str(err)},
        )
        return CONFIG_ERROR, None, project_root, logger

    try:
        bootstrap(config.global_config, project_root, log_level_override=args.log_level)
    except RuntimeError as err:
        logger.error("Bootstrap failed", extra={"command": command_name, "error": str(err)})
        return CONFIG_ERROR, None, project_root, logger

    return SUCCESS, config, project_root, logger


def execute_packaging(
    config: DistPackConfig,
    project_root: Path,
    logger: logging.Logger,
    dry_run: bool = False,
    environ: Optional[Mapping[str, str]] = None,
    platform_name: Optional[str] = None,
    factories: Optional[Mapping] = None,
) -> int:
    """
    Resolve the request and run the orchestrator, mapping failures to exit codes.

    environ, platform_name and factories default to the real process
    environment, sys.platform and the real tools.
    """
    from distpack.release.dist_info import resolve_distribution_info
    from distpack.release.orchestrator import run_packaging
    from distpack.release.request import build_request

    try:
        request = build_request(environ, platform_name)
        info = resolve_distribution_info(config, request, project_root)
    except ConfigurationError as err:
        logger.error("Configuration error", extra={"error": str(err)})
        return CONFIG_ERROR

    logger.info(
        "Packaging request",
        extra={
            "platform": request.host_platform.value,
            "target_arch": request.target_arch.value,
            "automated": request.is_automated,
            "dist_path": str(info.dist_path),
            "dry_run": dry_run,
        },
    )

    if dry_run:
        logger.info("Dry run, nothing packaged", extra={"dist_root": str(info.dist_root)})
        return SUCCESS

    try:
        result = run_packaging(info, request, factories)
    except ConfigurationError as err:
        logger.error("Configuration error", extra={"error": str(err)})
        return CONFIG_ERROR
    except (PackagingError, OSError) as err:
        logger.error(
            "A problem occurred with the packaging step",
            extra={"error": str(err)},
            exc_info=True,
        )
        return PACKAGING_ERROR

    logger.info(
        "Packaging complete",
        extra={
            "platform": result.platform,
            "installers": [str(a.path) for a in result.artifacts],
            "manifest": str(result.manifest_path) if result.manifest_path else None,
        },
    )
    return SUCCESS


def handle_package(args: argparse.Namespace) -> int:
    """Build the installers for the host platform."""
    exit_code, config, project_root, logger = _load_and_bootstrap(args, "package")
    if exit_code != SUCCESS or config is None:
        return exit_code

    return execute_packaging(config, project_root, logger, dry_run=args.dry_run)


def handle_verify(args: argparse.Namespace) -> int:
    """Re-hash the installers listed in checksums.txt."""
    exit_code, config, project_root, logger = _load_and_bootstrap(
        args, "verify", require_config=args.dist_root is None
    )
    if exit_code != SUCCESS:
        return exit_code

    if args.dist_root is not None:
        dist_root = Path(args.dist_root)
    elif config is not None:
        dist_root = project_root / config.distribution.dist_root
    else:
        logger.error("Nothing to verify: pass --dist-root or a config file")
        return USER_ERROR

    from distpack.release.checksums.integrity import verify_manifest

    if not dist_root.is_dir():
        logger.error("Output directory not found", extra={"path": str(dist_root)})
        return VALIDATION_ERROR

    result = verify_manifest(dist_root)
    if not result.is_valid:
        logger.error(
            "Verification failed",
            extra={
                "mismatches": result.mismatches,
                "missing_files": result.missing_files,
                "errors": result.errors,
            },
        )
        return VALIDATION_ERROR

    logger.info("Verification passed", extra={"checked_count": result.checked_count})
    return SUCCESS


def handle_info(args: argparse.Namespace) -> int:
    """Display environment and configuration information."""
    exit_code, config, project_root, logger = _load_and_bootstrap(
        args, "info", require_config=False
    )
    if exit_code != SUCCESS:
        return exit_code

    from distpack import __version__
    from distpack.runtime.environment import get_system_info

    system_info = get_system_info()
    logger.info(
        "System information",
        extra={
            "distpack_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.sys_platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "product": config.distribution.product_name if config else None,
            "version": config.distribution.version if config else None,
            "channel": config.distribution.channel if config else None,
            "project_root": str(project_root),
        },
    )
    return SUCCESS
