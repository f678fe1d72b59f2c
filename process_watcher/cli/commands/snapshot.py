"""Snapshot command: print the current process table once."""

import json
import sys

import click

from ...exceptions import ProcessEnumerationError
from ...models.filter_policy import UnrestrictedPolicy, WhitelistPolicy
from ...services.process_source import PsutilProcessSource, take_snapshot


@click.command()
@click.option("--name", "-n", "names", multiple=True,
              help="Only list processes with this name (repeatable)")
@click.option("--json", "output_json", is_flag=True, help="Output in JSON format")
@click.pass_context
def snapshot(ctx, names: tuple, output_json: bool):
    """List the processes currently running.

    Examples:
      process-watcher snapshot
      process-watcher snapshot --name python --json
    """
    cli_ctx = ctx.find_root().obj

    try:
        current = take_snapshot(PsutilProcessSource())
    except ProcessEnumerationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    policy = WhitelistPolicy(names=frozenset(names)) if names else UnrestrictedPolicy()
    records = sorted(
        (record for record in current if policy.allows(record)),
        key=lambda record: record.pid,
    )

    if output_json:
        click.echo(
            json.dumps(
                {
                    "taken_at": current.taken_at.isoformat(),
                    "processes": [record.model_dump() for record in records],
                },
                indent=2,
            )
        )
        return

    click.echo(f"{'PID':>8}  NAME")
    for record in records:
        click.echo(f"{record.pid:>8}  {record.name}")
    if not cli_ctx.quiet:
        click.echo(f"{len(records)} process(es)", err=True)
