"""Command-line interface for host-records."""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from host_records import __version__
from host_records.config import Config, load_config, save_example_config
from host_records.models import ErrorKind
from host_records.output.render import (
    render_apps,
    render_credentials,
    render_credentials_json,
    render_json,
)
from host_records.scanners.apps import load_app_metadata, scan_applications
from host_records.scanners.tomcat import extract_credentials_from_path, scan_tomcat_users
from host_records.util.fs import write_new_file

app = typer.Typer(
    help="Extract fixed-schema records from application bundles and Tomcat users files.",
    no_args_is_help=True,
    add_completion=False,
)

def version_callback(value: bool):
    """Print version and exit."""
    if value:
        print(f"host-records version {__version__}")
        raise typer.Exit()


def _setup(config_file: Optional[Path], verbose: bool) -> Config:
    """Load configuration and configure logging to stderr."""
    config_error = None
    try:
        config = load_config(config_file)
    except Exception as e:
        config_error = e
        config = Config()

    handler = RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )

    if config_error:
        print(f"Error loading configuration: {config_error}", file=sys.stderr)
        sys.exit(2)

    return config


def _emit(output: str, out: Optional[Path], config: Config) -> None:
    """Write output to a new file or to stdout."""
    if not out:
        print(output)
        return

    if not out.parent.exists():
        print(f"Error: Directory does not exist: {out.parent}", file=sys.stderr)
        sys.exit(2)

    result = write_new_file(str(out), output, config.output_mode)
    if not result:
        print(f"Output failed: {result}", file=sys.stderr)
        sys.exit(2 if result.error == ErrorKind.ALREADY_EXISTS else 3)
    print(f"✓ Report written to {out}", file=sys.stderr)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    generate_config: Optional[Path] = typer.Option(
        None,
        "--generate-config",
        help="Generate example configuration file at specified path and exit"
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    ),
) -> None:
    """
    Extract fixed-schema records from application bundles and Tomcat users files.
    """
    if generate_config:
        result = save_example_config(generate_config)
        if not result:
            print(f"Error generating config: {result}", file=sys.stderr)
            sys.exit(2)
        print(f"✓ Example configuration saved to {generate_config}", file=sys.stderr)
        sys.exit(0)

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()


@app.command()
def apps(
    json: bool = typer.Option(False, "--json", help="Output records in JSON format"),
    out: Optional[Path] = typer.Option(None, "--out", help="Write output to a new file instead of stdout"),
    app_dir: Optional[list[str]] = typer.Option(
        None,
        "--dir",
        help="Directory to search for .app bundles (overrides config). Can be specified multiple times."
    ),
    config_file: Optional[Path] = typer.Option(None, "--config", help="Path to configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    List application bundle metadata from Info.plist files.

    Examples:
        host-records apps                          # /Applications and ~/Applications
        host-records apps --dir /opt/Apps --json   # JSON records for another directory
    """
    config = _setup(config_file, verbose)
    if app_dir:
        config.app_dirs = list(app_dir)

    rows = scan_applications(config)
    _emit(render_json(rows) if json else render_apps(rows), out, config)


@app.command()
def plist(
    plist_path: str = typer.Argument(..., help="Path to <Name>.app/Contents/Info.plist"),
    json: bool = typer.Option(False, "--json", help="Output the record in JSON format"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Read a single Info.plist file into an application record."""
    config = _setup(None, verbose)

    result = load_app_metadata(plist_path)
    if not result:
        print(f"Error: {result}", file=sys.stderr)
        sys.exit(3)

    rows = [result.value]
    _emit(render_json(rows) if json else render_apps(rows), None, config)


@app.command()
def tomcat(
    paths: Optional[list[str]] = typer.Argument(
        None,
        help="tomcat-users.xml files to read (default: from config)"
    ),
    json: bool = typer.Option(False, "--json", help="Output records in JSON format"),
    out: Optional[Path] = typer.Option(None, "--out", help="Write output to a new file instead of stdout"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="Path to configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    List username/password pairs from Tomcat users files.

    Files given explicitly must parse; a failure exits with status 3.
    Default locations that are missing are skipped.
    """
    config = _setup(config_file, verbose)

    if paths:
        found = []
        for path in paths:
            result = extract_credentials_from_path(path)
            if not result:
                print(f"Error reading {path}: {result}", file=sys.stderr)
                sys.exit(3)
            found.append((path, result.value))
    else:
        found = scan_tomcat_users(config=config)

    _emit(render_credentials_json(found) if json else render_credentials(found), out, config)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
