#!/usr/bin/env python3
"""Loomstats CLI - Inspect the size of workflow mutable state."""

import json
import logging
import sys
from typing import IO, Tuple

import click
from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from ..common.config import get_log_level, get_output_format
from ..common.errors import ConfigError, RequestDecodeError
from ..common.loader import REQUEST_KINDS, load_request, load_session_stats
from ..core.computer import merge_update_session_stats, stats_computer
from ..core.logger import configure_logging

console = Console()

logger = logging.getLogger("loomstats.cli")

SIZE_ROWS = [
    ("Execution info", "execution_info_size"),
    ("Activities", "activity_info_size"),
    ("Timers", "timer_info_size"),
    ("Child executions", "child_info_size"),
    ("Signals", "signal_info_size"),
    ("Buffered events", "buffered_events_size"),
]

COUNT_ROWS = [
    ("Activities", "activity_info_count"),
    ("Timers", "timer_info_count"),
    ("Child executions", "child_info_count"),
    ("Signals", "signal_info_count"),
    ("Request cancels", "request_cancel_info_count"),
    ("Buffered events", "buffered_events_count"),
]

DELETE_ROWS = [
    ("Activities", "delete_activity_info_count"),
    ("Timers", "delete_timer_info_count"),
    ("Child executions", "delete_child_info_count"),
    ("Signals", "delete_signal_info_count"),
    ("Request cancels", "delete_request_cancel_info_count"),
]


def echo(message: str, **kwargs):
    """Print with rich console."""
    console.print(message, **kwargs)


def fail(message: str):
    echo(f"[red]{message}[/red]")
    sys.exit(1)


def render_stats(stats: BaseModel, title: str) -> Table:
    """Build a table of every size and count carried by a statistics model."""
    fields = type(stats).model_fields

    table = Table(title=title)
    table.add_column("Kind", style="cyan")
    table.add_column("Size (bytes)", justify="right")
    table.add_column("Count", justify="right")
    table.add_column("Deleted", justify="right", style="red")

    counts = {label: name for label, name in COUNT_ROWS if name in fields}
    deletes = {label: name for label, name in DELETE_ROWS if name in fields}

    for label, size_field in SIZE_ROWS:
        count_field = counts.get(label)
        delete_field = deletes.get(label)
        table.add_row(
            label,
            str(getattr(stats, size_field)),
            str(getattr(stats, count_field)) if count_field else "-",
            str(getattr(stats, delete_field)) if delete_field else "-",
        )

    delete_field = deletes.get("Request cancels")
    table.add_row(
        "Request cancels",
        "-",
        str(getattr(stats, counts["Request cancels"])),
        str(getattr(stats, delete_field)) if delete_field else "-",
    )

    table.add_section()
    table.add_row("[bold]Total[/bold]", f"[bold]{stats.mutable_state_size}[/bold]", "", "")

    return table


def render_tasks(stats: BaseModel) -> Table | None:
    tasks = getattr(stats, "task_count_by_category", None)
    if not tasks:
        return None

    table = Table(title="Tasks by category")
    table.add_column("Category", style="cyan")
    table.add_column("Count", justify="right")
    for category in sorted(tasks, key=str):
        table.add_row(str(getattr(category, "value", category)), str(tasks[category]))
    return table


def show(stats: BaseModel, title: str, output: str):
    if output == "json":
        click.echo(json.dumps(stats.model_dump(mode="json"), indent=2, sort_keys=True))
        return

    console.print(render_stats(stats, title))
    tasks = render_tasks(stats)
    if tasks is not None:
        console.print(tasks)


@click.group()
@click.version_option(version="0.1.0", prog_name="loomstats")
def cli():
    """Loomstats - Workflow mutable state size instrumentation.

    Computes byte sizes and entity counts of workflow execution state and of
    the mutations and snapshots written to it.
    """
    try:
        configure_logging(get_log_level())
    except ConfigError as e:
        fail(str(e))


@cli.command()
@click.argument("path", type=click.File("r"), default="-")
@click.option(
    "--kind",
    "-k",
    type=click.Choice(REQUEST_KINDS, case_sensitive=False),
    default="state",
    help="Shape of the request document",
    show_default=True,
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the statistics as JSON instead of a table",
)
def compute(path: IO[str], kind: str, as_json: bool):
    """Compute statistics of a workflow state or write request.

    PATH is a JSON document; use '-' (the default) to read standard input.

    Examples:
        loomstats compute state.json                      # Full state
        loomstats compute -k update update.json           # Update session
        loomstats compute -k conflict-resolve reset.json --json
    """
    kind = kind.lower()
    try:
        output = "json" if as_json else get_output_format()
        request = load_request(path, kind, source=path.name)  # type: ignore[arg-type]
    except (RequestDecodeError, ConfigError) as e:
        fail(str(e))

    if kind == "state":
        stats = stats_computer.compute_mutable_state_stats(request)
    elif kind == "update":
        stats = stats_computer.compute_mutable_state_update_stats(request)
    elif kind == "create":
        stats = stats_computer.compute_mutable_state_create_stats(request)
    else:
        stats = stats_computer.compute_mutable_state_conflict_resolve_stats(request)

    logger.debug("Computed %s statistics from %s", kind, path.name)
    show(stats, f"Mutable state ({kind})", output)


@cli.command()
@click.argument("paths", type=click.File("r"), nargs=-1, required=True)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the merged statistics as JSON instead of a table",
)
def merge(paths: Tuple[IO[str], ...], as_json: bool):
    """Merge update session statistics produced by 'compute --json'.

    Examples:
        loomstats merge a.json b.json
        loomstats merge a.json b.json c.json --json
    """
    try:
        output = "json" if as_json else get_output_format()
        parts = [load_session_stats(path, source=path.name) for path in paths]
    except (RequestDecodeError, ConfigError) as e:
        fail(str(e))

    show(merge_update_session_stats(*parts), f"Merged ({len(parts)} sessions)", output)


if __name__ == "__main__":
    cli()
