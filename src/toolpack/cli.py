"""
Command-line interface for toolpack.

This module provides the `toolpack` CLI for packaging TypeScript tools into
versioned zip archives.
"""

import argparse
import logging
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import NoReturn, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from toolpack import __version__
from toolpack.config import BUILD_TOOL, PACKAGE_TOOL, PackagingConfig
from toolpack.errors import CompileFailure, PackagingError, PreconditionError
from toolpack.output import init_timer, log_header, set_verbose
from toolpack.pipeline import PackagePipeline, PackageResult

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


@dataclass
class PackageArgs:
    """Arguments for the package-tool command."""

    project_dir: Path
    revision: Optional[str] = None
    no_increment_version: bool = False
    recursive_assets: bool = False
    verbose: bool = False


@dataclass
class BuildArgs:
    """Arguments for the build-tool command."""

    project_dir: Path
    verbose: bool = False


def _configure_logging(verbose: bool) -> None:
    set_verbose(verbose)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _report_success(result: PackageResult) -> None:
    console.print(f"[cyan]{escape(result.name)}[/]@[cyan]{escape(result.version)}[/] packaged as [cyan]{escape(str(result.archive_path))}[/].")
    if result.next_version:
        console.print(f"Next version: [cyan]{escape(result.next_version)}[/]")
    console.print(f"Package time: {result.elapsed:.2f}s")


def _run(config: PackagingConfig, project_dir: Path, revision: Optional[str], verbose: bool) -> NoReturn:
    """Run the pipeline and exit the process with the matching status."""
    init_timer()
    log_header("toolpack", __version__)

    try:
        pipeline = PackagePipeline(config, cwd=Path.cwd())
        result = pipeline.run(project_dir, revision=revision)
        _report_success(result)
        sys.exit(0)

    except PreconditionError as e:
        err_console.print(f"[bold red]✗ {escape(str(e))}[/]")
        sys.exit(e.exit_code)

    except CompileFailure as e:
        err_console.print(f"[bold red]✗ Build failed:[/] {escape(str(e))}")
        sys.exit(e.exit_code)

    except PackagingError as e:
        err_console.print(f"[bold red]✗ Packaging failed:[/] {escape(str(e))}")
        sys.exit(e.exit_code)

    except KeyboardInterrupt:
        err_console.print("[bold yellow]✗ Packaging interrupted[/]")
        sys.exit(130)  # Standard exit code for SIGINT

    except Exception as e:
        err_console.print("[bold red]✗ Unexpected error[/]")
        err_console.print(f"{type(e).__name__}: {escape(str(e))}")
        if verbose:
            err_console.print_exception()
        sys.exit(1)


def package_command(args: PackageArgs) -> NoReturn:
    """Package a tool under a development revision, then bump its patch version.

    Examples:
        toolpack package-tool .                  # Stamp a generated revision
        toolpack package-tool tools/demo -r 42   # Stamp revision 42
        toolpack package-tool . -i               # Leave package.json unchanged afterwards
    """
    _configure_logging(args.verbose)

    config = replace(PACKAGE_TOOL, bump_version=not args.no_increment_version)
    if args.recursive_assets:
        config = config.with_recursive_assets()

    _run(config, args.project_dir, args.revision, args.verbose)


def build_command(args: BuildArgs) -> NoReturn:
    """Package a tool under its manifest version, without a revision stamp.

    Examples:
        toolpack build-tool .            # Build current folder
        toolpack build-tool tools/demo   # Build a specific tool
    """
    _configure_logging(args.verbose)
    _run(BUILD_TOOL, args.project_dir, None, args.verbose)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolpack",
        description="toolpack - Package TypeScript tools into versioned zip archives",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"toolpack {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Package command
    package_parser = subparsers.add_parser(
        "package-tool",
        help="Package a tool in a given folder, stamping a development revision",
    )
    package_parser.add_argument(
        "project_dir",
        type=Path,
        help="Project folder containing src/, package.json and README.md",
    )
    package_parser.add_argument(
        "-r",
        "--revision",
        default=None,
        help="Revision to stamp into the version (default: generated from the clock)",
    )
    package_parser.add_argument(
        "-i",
        "--no-increment-version",
        action="store_true",
        help="Do not increment the version in package.json after packaging",
    )
    package_parser.add_argument(
        "--recursive-assets",
        action="store_true",
        help="Copy assets from every folder under src/, not just its top level",
    )
    package_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    # Build command
    build_parser = subparsers.add_parser(
        "build-tool",
        help="Package a tool in a given folder under its manifest version",
    )
    build_parser.add_argument(
        "project_dir",
        type=Path,
        help="Project folder containing src/ and package.json",
    )
    build_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """toolpack - package TypeScript tools into versioned zip archives."""
    parser = create_parser()
    parsed_args = parser.parse_args(argv)

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    if parsed_args.command == "package-tool":
        package_command(
            PackageArgs(
                project_dir=parsed_args.project_dir,
                revision=parsed_args.revision,
                no_increment_version=parsed_args.no_increment_version,
                recursive_assets=parsed_args.recursive_assets,
                verbose=parsed_args.verbose,
            )
        )
    elif parsed_args.command == "build-tool":
        build_command(
            BuildArgs(
                project_dir=parsed_args.project_dir,
                verbose=parsed_args.verbose,
            )
        )


if __name__ == "__main__":
    main()
