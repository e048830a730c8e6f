"""
azc CLI Main Entry Point.

Send and receive files from an Azure Blob Storage container.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
import humanize
from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TransferSpeedColumn,
)
from rich.table import Table

from azc import __version__
from azc.core.config import DEFAULT_PROPERTIES_FILE, AzcConfig, load_config, load_settings
from azc.core.exceptions import SetupError
from azc.core.logging import setup_logging
from azc.core.models import Catalog, SyncAction, SyncStatus
from azc.storage import create_backend
from azc.sync.manager import VERB_LIST, VERBS, SyncManager

console = Console()
err_console = Console(stderr=True)

ACTION_STYLES = {
    SyncAction.TRANSFER: "green",
    SyncAction.SKIP: "yellow",
    SyncAction.ERROR: "red",
}


class TransferProgress:
    """Rich progress bar fed by the sync manager's per-item callback."""

    def __init__(self, progress: Progress) -> None:
        self.progress = progress
        self._tasks: dict[str, TaskID] = {}

    def __call__(self, name: str, transferred: int, total: int | None) -> None:
        task = self._tasks.get(name)
        if task is None:
            task = self.progress.add_task(name, total=total)
            self._tasks[name] = task
        self.progress.update(task, completed=transferred)


def render_catalog(catalog: Catalog) -> None:
    table = Table(title="Container Listing")
    table.add_column("Name", style="cyan")
    table.add_column("Size", style="green", justify="right")

    for obj in catalog:
        table.add_row(obj.name, humanize.naturalsize(obj.size, binary=True))

    console.print(table)
    console.print(
        f"{len(catalog)} object(s), {humanize.naturalsize(catalog.total_size, binary=True)}"
    )


def render_status(status: SyncStatus) -> None:
    if status.items:
        table = Table(title=f"{status.verb} results")
        table.add_column("Name", style="cyan")
        table.add_column("Action")
        table.add_column("Size", justify="right")
        table.add_column("Detail", style="dim")

        for item in status.items:
            style = ACTION_STYLES[item.action]
            table.add_row(
                item.name,
                f"[{style}]{item.action.value}[/{style}]",
                humanize.naturalsize(item.size, binary=True) if item.size else "",
                item.reason,
            )
        console.print(table)

    summary = status.summary
    console.print(
        f"[green]{summary.transferred} transferred[/green] "
        f"({humanize.naturalsize(summary.bytes_transferred, binary=True)}), "
        f"[yellow]{summary.skipped} skipped[/yellow], "
        f"[red]{summary.errors} failed[/red]"
    )


def run_verb(
    manager: SyncManager,
    verb: str,
    files: tuple[str, ...],
    destination: Path,
    show_progress: bool,
) -> Catalog | SyncStatus:
    if not show_progress or verb == VERB_LIST:
        return manager.run(verb, files, destination)

    with Progress(
        TextColumn("[cyan]{task.description}"),
        BarColumn(),
        DownloadColumn(binary_units=True),
        TransferSpeedColumn(),
        console=console,
        transient=True,
    ) as progress:
        manager.on_progress = TransferProgress(progress)
        return manager.run(verb, files, destination)


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)
@click.version_option(version=__version__, prog_name="azc")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_PROPERTIES_FILE,
    show_default=True,
    help="Properties file with account, key and container",
)
@click.option("--silent", "-s", is_flag=True, help="Do not emit anything; failures set the exit status")
@click.option(
    "--verb",
    "-v",
    type=click.Choice(VERBS),
    default=VERB_LIST,
    show_default=True,
    help="Operation to run",
)
@click.option(
    "--file",
    "-f",
    "files",
    multiple=True,
    help="Name to get, or path of a file to send; repeatable",
)
@click.option(
    "--dest",
    "-d",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Folder to put downloaded files in [default: current directory]",
)
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
@click.option(
    "--client-config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file with logging and transfer settings",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path,
    silent: bool,
    verb: str,
    files: tuple[str, ...],
    dest: Path | None,
    json_output: bool,
    client_config: Path | None,
) -> None:
    """
    azc - Azure Blobstore Client.

    List a container, send local files to it, and get files from it,
    skipping downloads whose local copy already has the remote size.
    """
    if verb in ("send", "get") and not files:
        raise click.UsageError(f"--file is required for {verb}")

    try:
        config = AzcConfig.load(client_config) if client_config else load_config()
        setup_logging(config.logging, silent=silent)

        backend = create_backend(load_settings(config_path), silent=silent)
        result = run_verb(
            SyncManager(backend, config.transfer),
            verb,
            files,
            dest or Path.cwd(),
            show_progress=not (silent or json_output),
        )
    except KeyboardInterrupt:
        if not silent:
            err_console.print("\n[yellow]Operation cancelled[/yellow]")
        ctx.exit(130)
    except Exception:
        # Silent runs report fatal errors only through the exit status
        if silent:
            ctx.exit(1)
        raise

    if silent:
        return

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
    elif isinstance(result, Catalog):
        render_catalog(result)
    else:
        render_status(result)


def main() -> None:
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled[/yellow]")
        sys.exit(130)
    except SetupError as e:
        err_console.print(f"[red]Setup failed: {e}[/red]")
        sys.exit(1)
    except Exception as e:
        err_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
