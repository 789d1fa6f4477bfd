"""Prebundle CLI: inspect component files and set up configuration."""

import asyncio
from collections import Counter
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from prebundle import __version__

from .config import ConfigError, load_config, write_config_template
from .constants import CONFIG_FILENAME, UNKNOWN_PACKAGE
from .core.stats import PackageResolver
from .logging import configure_logging, enable_debug_logging
from .output import OutputContext
from .plugin import component_filter


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"prebundle {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="prebundle",
    help="Component compilation for dependency prebundling",
    no_args_is_help=True,
)

# Global output context
_ctx: OutputContext | None = None


def get_output_context() -> OutputContext:
    """Get the current output context."""
    if _ctx is None:
        return OutputContext(Console())
    return _ctx


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """Prebundle CLI."""
    global _ctx
    console = configure_logging(
        verbosity=verbose,
        quiet=quiet,
        no_color=no_color,
    )
    _ctx = OutputContext(console=console, json_mode=json_output)


@app.command()
def init(
    root: Path = typer.Argument(Path("."), help="Directory to write prebundle.toml into"),
) -> None:
    """Write a prebundle.toml template."""
    ctx = get_output_context()
    config_path = root / CONFIG_FILENAME
    if config_path.exists():
        ctx.result(
            {"path": str(config_path), "created": False},
            f"[yellow]Config already exists:[/yellow] {config_path}",
        )
        return
    write_config_template(root)
    ctx.result(
        {"path": str(config_path), "created": True},
        f"[green]Created config template: {config_path}[/green]",
    )


async def _count_packages(files: list[Path]) -> Counter[str]:
    resolver = PackageResolver()
    names = await asyncio.gather(*(resolver.resolve(str(f)) for f in files))
    return Counter(name or UNKNOWN_PACKAGE for name in names)


@app.command()
def packages(
    root: Path = typer.Argument(Path("."), help="Directory to search for component files"),
) -> None:
    """Count component files per owning package."""
    ctx = get_output_context()
    try:
        config = load_config(root)
    except (ConfigError, ValidationError) as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None
    if config.is_debug:
        enable_debug_logging()

    pattern = component_filter(config.extensions)
    files = sorted(p.absolute() for p in root.rglob("*") if p.is_file() and pattern.search(p.name))
    if not files:
        ctx.error(f"No component files found under {root}")
        raise typer.Exit(1)

    counts = asyncio.run(_count_packages(files))
    table = Table(title=f"{len(files)} component files")
    table.add_column("library")
    table.add_column("files", justify="right")
    for name, count in counts.most_common():
        table.add_row(name, str(count))
    ctx.result({"files": len(files), "packages": dict(counts.most_common())}, table)
