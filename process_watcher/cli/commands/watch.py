"""Watch command for process lifecycle monitoring.

Implements the 'watch' command that polls the process table and prints an
event each time a process is created or closed.
"""

import json
import sys
from typing import Optional

import click

from ...exceptions import ConfigurationException, ProcessEnumerationError
from ...lib.signal_handler import SignalHandler
from ...models.lifecycle_event import LifecycleEvent
from ...models.watch_configuration import OutputFormat
from ...services.process_source import PsutilProcessSource
from ...services.process_watcher import ProcessWatcher


@click.command()
@click.option(
    "--interval",
    "watch_interval",
    type=int,
    help="Polling interval in milliseconds (default: 200)",
)
@click.option(
    "--name", "-n", "process_name", multiple=True,
    help="Only report processes with this name (repeatable)",
)
@click.option(
    "--id", "-i", "process_id", type=int, multiple=True,
    help="Only report processes with this id (repeatable)",
)
@click.option(
    "--exclude-name", "-x", "exclude_process_name", multiple=True,
    help="Never report processes with this name (repeatable)",
)
@click.option(
    "--exclude-id", "exclude_process_id", type=int, multiple=True,
    help="Never report processes with this id (repeatable)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    help="Event output format",
)
@click.option(
    "--cycles",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Stop after this many polling cycles (0 = watch until interrupted)",
)
@click.pass_context
def watch(
    ctx,
    watch_interval: Optional[int],
    process_name: tuple,
    process_id: tuple,
    exclude_process_name: tuple,
    exclude_process_id: tuple,
    output_format: Optional[str],
    cycles: int,
):
    """Watch for processes being created and closed.

    Name/id filters (--name, --id) and exclusions (--exclude-name,
    --exclude-id) cannot be combined.

    Examples:
      process-watcher watch
      process-watcher watch --interval 500 --name python --name node
      process-watcher watch --exclude-name chrome --format json
    """
    cli_ctx = ctx.find_root().obj

    try:
        config = cli_ctx.load_config(
            overrides={
                "watch_interval": watch_interval,
                "process_name": process_name,
                "process_id": process_id,
                "exclude_process_name": exclude_process_name,
                "exclude_process_id": exclude_process_id,
                "output_format": output_format,
            }
        )
    except ConfigurationException as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(2)

    watcher = ProcessWatcher(config, PsutilProcessSource())

    if not cli_ctx.quiet:
        click.echo(
            f"Watching processes every {config.watch_interval}ms "
            f"({config.filter_mode.value}). Press Ctrl+C to stop.",
            err=True,
        )

    try:
        with SignalHandler(watcher):
            for event in watcher.watch(max_cycles=cycles or None):
                click.echo(_render(event, config.output_format))
    except ProcessEnumerationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    if not cli_ctx.quiet:
        status = watcher.get_status()
        click.echo(
            f"Stopped after {status['cycles']} cycle(s), "
            f"{status['events']} event(s) reported",
            err=True,
        )


def _render(event: LifecycleEvent, output_format: OutputFormat) -> str:
    if output_format is OutputFormat.JSON:
        return json.dumps(event.to_dict())
    return event.render()
