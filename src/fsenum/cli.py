"""Command line interface for fsenum.

Commands:
- `fsenum list PATH`: Enumerate entries beneath a directory
- `fsenum info PATH`: Show metadata for a single entry

Example:
    $ fsenum list ~/projects --pattern "*.py" --recursive --skip-reparse-points
    $ fsenum list C:\\Data --dirs-only --format json
    $ fsenum info ~/projects/setup.cfg
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from fsenum.config import EnumerationOptions, OutputShape, load_options
from fsenum.core.engine import TraversalEngine
from fsenum.core.metadata import FileSystemEntryInfo
from fsenum.exceptions import ConfigError, EnumerationError

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_NOT_FOUND = 3

app = typer.Typer(
    name="fsenum",
    help="Enumerate file-system entries",
    no_args_is_help=True,
)

# Shared consoles for output
console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


class OutputFormat(str, Enum):
    """Output formats for the list command."""

    PATH = "path"
    JSON = "json"


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=False)],
        force=True,
    )


def _error(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {escape(message)}")


def _build_options(config: Path | None, overrides: dict[str, Any]) -> EnumerationOptions:
    if config is not None:
        return load_options(config, **overrides)
    return EnumerationOptions(**overrides)


@app.command(name="list")
def list_command(
    path: Path = typer.Argument(..., help="Directory to enumerate"),
    pattern: str | None = typer.Option(None, "--pattern", "-p", help="DOS wildcard pattern (default: *)"),
    recursive: bool | None = typer.Option(None, "--recursive/--no-recursive", "-r", help="Descend into subdirectories"),
    skip_reparse_points: bool | None = typer.Option(
        None, "--skip-reparse-points/--follow-reparse-points", help="Skip symlinks and junctions"
    ),
    continue_on_error: bool | None = typer.Option(
        None, "--continue-on-error/--stop-on-error", help="Skip directories that cannot be enumerated"
    ),
    files_only: bool = typer.Option(False, "--files-only", help="Only list files"),
    dirs_only: bool = typer.Option(False, "--dirs-only", help="Only list directories"),
    long_path: bool | None = typer.Option(None, "--long-path/--regular-path", help="Print long-path form"),
    output_format: OutputFormat = typer.Option(OutputFormat.PATH, "--format", "-f", help="Output format"),
    config: Path | None = typer.Option(None, "--config", "-c", help="YAML options file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Enumerate entries beneath PATH, one per line.

    Exits with 0 on success, 1 when the traversal aborts on an error and
    2 on invalid options.
    """
    _setup_logging(verbose)

    if files_only and dirs_only:
        _error("--files-only and --dirs-only are mutually exclusive")
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    overrides: dict[str, Any] = {
        "search_pattern": pattern,
        "recursive": recursive,
        "skip_reparse_points": skip_reparse_points,
        "continue_on_exception": continue_on_error,
        "as_long_path": long_path,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if files_only:
        overrides.update(include_files=True, include_directories=False)
    if dirs_only:
        overrides.update(include_files=False, include_directories=True)
    overrides["output_shape"] = OutputShape.METADATA if output_format is OutputFormat.JSON else OutputShape.PATH

    try:
        options = _build_options(config, overrides)
        engine = TraversalEngine(path, options)
    except ConfigError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from e

    count = 0
    try:
        for item in engine:
            if isinstance(item, FileSystemEntryInfo):
                console.print(json.dumps(item.to_dict()), markup=False, soft_wrap=True)
            else:
                console.print(item, markup=False, soft_wrap=True)
            count += 1
    except EnumerationError as e:
        _error(f"{e} [{e.kind.value}]")
        raise typer.Exit(code=EXIT_ERROR) from e

    logger.debug("Listed %d entries under %s", count, engine.input_path)


@app.command(name="info")
def info_command(
    path: Path = typer.Argument(..., help="File or directory to inspect"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Show metadata for a single file or directory.

    Exits with 0 on success, 1 on an enumeration error, 2 on an invalid path
    and 3 when the entry is not found.
    """
    _setup_logging(verbose)

    try:
        engine = TraversalEngine(
            path,
            EnumerationOptions(output_shape=OutputShape.METADATA),
            is_directory=False,
        )
        info = engine.get()
    except ConfigError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from e
    except FileNotFoundError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_NOT_FOUND) from e
    except EnumerationError as e:
        _error(f"{e} [{e.kind.value}]")
        raise typer.Exit(code=EXIT_ERROR) from e

    if info is None:
        _error(f"No entry for {path}")
        raise typer.Exit(code=EXIT_NOT_FOUND)

    if as_json:
        console.print(json.dumps(info.to_dict(), indent=2), markup=False, soft_wrap=True)
        return

    table = Table(title=info.full_path, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in info.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
