"""masking-resolver CLI - inspect archive attribution and masking decisions."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.table import Table

from .console import console
from .console import err_console
from .identifier import LibraryIdentifier
from .logging_setup import init_json_logging
from .resolver import MaskingResolver
from .settings import MaskingSettings
from .settings import SettingsError
from .settings import build_resolver
from .settings import load_settings

logger = logging.getLogger(__name__)


def _build_from_options(
    settings: MaskingSettings,
    paths: tuple[str, ...],
    masks: tuple[str, ...],
    libraries: tuple[str, ...],
) -> MaskingResolver:
    """Merge command-line options over loaded settings and build the resolver."""
    merged = settings.model_copy(
        update={
            "search_path": [*settings.search_path, *paths],
            "name_masks": [*settings.name_masks, *masks],
            "library_mask_files": [*settings.library_mask_files, *libraries],
        }
    )
    return build_resolver(merged)


_resolver_options = [
    click.option("--path", "-p", "paths", multiple=True, help="Search path entry (directory or archive)"),
    click.option("--mask", "-m", "masks", multiple=True, help="Name prefix to hide"),
    click.option("--libraries", "-l", "libraries", multiple=True, help="Mask-list file of libraries to hide"),
]


def resolver_options(func):
    for option in reversed(_resolver_options):
        func = option(func)
    return func


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Settings file (masking.yaml)")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write JSONL logs to this file")
@click.option("--log-level", default="INFO", show_default=True, help="Log level for the JSONL sink")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_file: str | None, log_level: str):
    """Inspect which modules and resources a masking resolver hides."""
    if log_file:
        init_json_logging(log_file, log_level)

    try:
        ctx.obj = load_settings(config_path)
    except SettingsError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        ctx.exit(1)


@cli.command()
@click.argument("archives", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
def identify(archives: tuple[str, ...]):
    """Show the library each archive packages."""
    identifier = LibraryIdentifier()

    table = Table(title="Archive Attribution")
    table.add_column("Archive", style="cyan")
    table.add_column("Group", style="green")
    table.add_column("Artifact", style="green")

    for archive in archives:
        lib = identifier.identify(Path(archive))
        if lib.is_void():
            table.add_row(archive, "[dim]-[/dim]", "[dim]unattributed[/dim]")
        else:
            table.add_row(archive, lib.group_id or "[dim]-[/dim]", lib.artifact_id)

    console.print(table)


@cli.command()
@click.argument("name")
@click.option("--resource", "as_resource", is_flag=True, help="Treat NAME as a '/'-separated resource path")
@resolver_options
@click.pass_obj
def check(
    settings: MaskingSettings,
    name: str,
    as_resource: bool,
    paths: tuple[str, ...],
    masks: tuple[str, ...],
    libraries: tuple[str, ...],
):
    """Check whether NAME is visible through the masking resolver.

    Exits 0 when visible, 1 when masked or absent.
    """
    resolver = _build_from_options(settings, paths, masks, libraries)

    if as_resource:
        origin = resolver.resource_origin(name)
        location = resolver.locate_resource(name)
    else:
        origin = resolver.module_origin(name)
        resolved = resolver.resolve_module(name)
        location = resolved.location if resolved else None

    if location is None:
        console.print(f"[red]hidden[/red] {name} [dim](masked or not found, origin: {origin.value})[/dim]")
        sys.exit(1)

    console.print(f"[green]visible[/green] {name} -> {location} [dim](origin: {origin.value})[/dim]")


@cli.command()
@click.argument("name")
@resolver_options
@click.pass_obj
def resources(
    settings: MaskingSettings,
    name: str,
    paths: tuple[str, ...],
    masks: tuple[str, ...],
    libraries: tuple[str, ...],
):
    """List every location of resource NAME and whether it is masked."""
    resolver = _build_from_options(settings, paths, masks, libraries)

    all_locations = resolver.parent.enumerate_resources(name)
    visible = set(resolver.enumerate_resources(name))

    if not all_locations:
        console.print(f"[dim]No locations found for {name}[/dim]")
        return

    table = Table(title=f"Locations of {name}")
    table.add_column("Location", style="cyan")
    table.add_column("Status")
    for location in all_locations:
        status = "[green]visible[/green]" if location in visible else "[red]masked[/red]"
        table.add_row(location, status)

    console.print(table)


def main():
    cli()


if __name__ == "__main__":
    main()
