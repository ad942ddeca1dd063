#!/usr/bin/env python3
"""Command-line interface for use-order-fixer using Click."""

from importlib import metadata
import logging
from pathlib import Path
import sys
from typing import Optional

import click
from use_order_fixer import config
from use_order_fixer import core


try:
    VERSION = f"use-order-fixer {metadata.version('use_order_fixer')}"
except metadata.PackageNotFoundError:
    VERSION = "use-order-fixer"


def _handle_files(path: Path, level: Optional[str], apply_changes: bool) -> int:
    """Process syntax-tree dumps and report or fix use ordering issues.

    Args:
        path: Dump file or directory to search for dumps.
        level: Lint level overriding the project configuration, or None.
        apply_changes: If True, apply fixes in place.
    Returns:
        0 if no changes, 1 if changes required, 2 if error occurred.
    """
    exit_code = 0
    total_warnings = 0

    # Handle single file or directory
    if path.is_file():
        dump_paths = [path]
    else:
        dump_paths = list(core.iter_dump_files(str(path)))
        if not dump_paths:
            logging.info("No %s files found under %s", core.DUMP_SUFFIX, path)

    for dump_path in dump_paths:
        try:
            result = core.process_file(str(dump_path), apply=apply_changes, level=level)
        except (OSError, ValueError) as exc:
            logging.error("[%s] ERROR: %s", dump_path, exc)
            exit_code = max(exit_code, 2)
            continue

        report = logging.error if result.level == "deny" else logging.warning
        for location, msg in result.warnings:
            report("[%s] %s\n%s", dump_path, location, msg)
            total_warnings += 1
            exit_code = max(exit_code, 1)

        for module_path, msg in result.failures:
            logging.error("[%s] internal error in module %s: %s", dump_path, module_path, msg)
            exit_code = max(exit_code, 2)

        if result.modified:
            msg = "sources updated." if apply_changes else "imports would be modified."
            logging.info("[%s] %s", dump_path, msg)
            exit_code = max(exit_code, 1)

    if total_warnings:
        logging.info("Total warnings: %d", total_warnings)

    return exit_code


level_option = click.option(
    "--level",
    type=click.Choice(config.LEVELS),
    default=None,
    help="Lint level, overriding Cargo.toml [package.metadata.use-order].",
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Increase verbosity.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.version_option(version=VERSION, prog_name="use-order-fixer CLI")
def cli(verbose: bool, quiet: bool) -> None:
    """Check and fix the grouping of Rust `use` declarations."""
    # Configure logging only once
    if not logging.getLogger().handlers:
        if quiet:
            logging.basicConfig(level=logging.ERROR, format="%(message)s")
        else:
            logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")


@cli.command(help="Report use ordering issues without modifying files.")
@click.argument("path", type=click.Path(exists=True, file_okay=True, dir_okay=True))
@level_option
def check(path: str, level: Optional[str]) -> None:
    exit_code = _handle_files(Path(path), level, apply_changes=False)
    sys.exit(exit_code)


@cli.command(help="Rewrite use blocks in place.")
@click.argument("path", type=click.Path(exists=True, file_okay=True, dir_okay=True))
@level_option
def fix(path: str, level: Optional[str]) -> None:
    exit_code = _handle_files(Path(path), level, apply_changes=True)
    sys.exit(exit_code)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
