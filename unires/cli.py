"""unires CLI tools."""

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from unires import __version__
from unires.config import LoaderConfig
from unires.exceptions import UniresError
from unires.resources import DefaultResourceLoader, Resource
from unires.utilities.logging import LogLevel, configure_logging, get_logger

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="unires",
    help="Inspect and read resources by location",
    add_completion=False,
    no_args_is_help=True,
)

BaseOption = Annotated[
    Path | None,
    typer.Option(
        "--base",
        "-b",
        help="Base path for plain relative locations",
        file_okay=False,
        resolve_path=True,
    ),
]
AnchorOption = Annotated[
    str | None,
    typer.Option("--anchor", help="Package that classpath: names resolve inside"),
]
EnvFileOption = Annotated[
    Path | None,
    typer.Option(
        "--env-file",
        "-f",
        help="Load UNIRES_* settings from a .env file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]
LogLevelOption = Annotated[
    str,
    typer.Option("--log-level", help="Logging level"),
]


def _build_loader(
    base: Path | None,
    anchor: str | None,
    env_file: Path | None,
    log_level: str,
) -> DefaultResourceLoader:
    """Build a loader from the environment with command-line overrides."""
    level: LogLevel = log_level.upper()  # type: ignore[assignment]
    configure_logging(level)

    config = LoaderConfig.from_env(env_file)
    overrides: dict[str, Any] = {}
    if base is not None:
        overrides["base_path"] = base
    if anchor is not None:
        overrides["classpath_anchor"] = anchor
    if overrides:
        config = config.model_copy(update=overrides)
    logger.debug("Using loader config %s", config)
    return DefaultResourceLoader.from_config(config)


def _try(capability: Callable[[], Any]) -> str:
    """Render a capability result, or ``-`` if the backend lacks it."""
    try:
        return escape(str(capability()))
    except UniresError:
        return "-"


async def _try_async(capability: Callable[[], Any]) -> str:
    try:
        return escape(str(await capability()))
    except UniresError:
        return "-"


async def _describe(resource: Resource) -> Table:
    table = Table(title=escape(resource.get_description()), show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Kind", resource.resource_type.value)
    table.add_row("Filename", escape(resource.get_filename() or "-"))
    table.add_row("Exists", str(await resource.exists()))
    table.add_row("Readable", str(await resource.is_readable()))
    table.add_row("Open stream", str(resource.is_open()))
    table.add_row("File-backed", str(resource.is_file()))
    table.add_row("URL", _try(resource.get_url))
    table.add_row("File", _try(resource.get_file))
    table.add_row("Length", await _try_async(resource.content_length))
    table.add_row("Last modified", await _try_async(resource.last_modified))
    return table


@app.command()
def version():
    """Show the unires version."""
    typer.echo(f"unires version {__version__}")


@app.command()
def describe(
    location: Annotated[str, typer.Argument(help="Location to resolve")],
    base: BaseOption = None,
    anchor: AnchorOption = None,
    env_file: EnvFileOption = None,
    log_level: LogLevelOption = "WARNING",
):
    """Resolve a location and show what its resource can do."""
    loader = _build_loader(base, anchor, env_file, log_level)
    resource = loader.get_resource(location)
    console.print(asyncio.run(_describe(resource)))


@app.command()
def cat(
    location: Annotated[str, typer.Argument(help="Location to read")],
    base: BaseOption = None,
    anchor: AnchorOption = None,
    env_file: EnvFileOption = None,
    log_level: LogLevelOption = "WARNING",
):
    """Write the content of a resource to stdout."""
    loader = _build_loader(base, anchor, env_file, log_level)
    resource = loader.get_resource(location)

    async def _copy() -> None:
        async for chunk in resource.read_stream(loader.config.chunk_size):
            typer.echo(chunk, nl=False)

    try:
        asyncio.run(_copy())
    except UniresError as e:
        console.print(f"[red bold]Error[/red bold]: {escape(e.message)}")
        raise typer.Exit(1) from e


@app.command()
def resolve(
    location: Annotated[str, typer.Argument(help="Location of the base resource")],
    relative_path: Annotated[str, typer.Argument(help="Path relative to it")],
    base: BaseOption = None,
    anchor: AnchorOption = None,
    env_file: EnvFileOption = None,
    log_level: LogLevelOption = "WARNING",
):
    """Show the resource a relative path resolves to."""
    loader = _build_loader(base, anchor, env_file, log_level)
    try:
        relative = loader.get_resource(location).create_relative(relative_path)
    except UniresError as e:
        console.print(f"[red bold]Error[/red bold]: {escape(e.message)}")
        raise typer.Exit(1) from e
    typer.echo(relative.get_description())


def main():
    """Main entry point for CLI."""
    app()
