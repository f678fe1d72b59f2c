"""Config command for configuration management."""

import json
import os
import sys

import click

from ...exceptions import ConfigurationException
from ...models.watch_configuration import WatchConfiguration


@click.group()
@click.pass_context
def config(ctx):
    """Manage watcher configuration.

    Examples:
      process-watcher config show
      process-watcher --config watcher.json config validate
      process-watcher config init watcher.json
    """
    pass


@config.command()
@click.option("--json", "output_json", is_flag=True, help="Output in JSON format")
@click.pass_context
def show(ctx, output_json: bool):
    """Display the effective configuration (file + environment)."""
    cli_ctx = ctx.find_root().obj

    try:
        current_config = cli_ctx.load_config()
    except ConfigurationException as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(2)

    if output_json:
        click.echo(json.dumps(current_config.to_dict(), indent=2))
        return

    data = current_config.to_dict()
    click.echo("=== Current Configuration ===")
    click.echo(f"Config File: {cli_ctx.config_file or '(none)'}")
    click.echo(f"Filter Mode: {current_config.filter_mode.value}")
    click.echo()
    for key in (
        "WatchInterval",
        "ProcessName",
        "ProcessId",
        "ExcludeProcessName",
        "ExcludeProcessId",
    ):
        click.echo(f"  {key}: {data[key]}")
    click.echo()
    click.echo("Output and Logging:")
    for key in ("output_format", "log_level", "log_file_path", "max_log_size_mb", "backup_count"):
        click.echo(f"  {key}: {data[key]}")


@config.command()
@click.pass_context
def validate(ctx):
    """Validate the configuration file and environment overrides."""
    cli_ctx = ctx.find_root().obj

    try:
        current_config = cli_ctx.load_config()
    except ConfigurationException as e:
        click.echo(f"✗ Configuration is invalid: {e.message}", err=True)
        sys.exit(2)

    if not cli_ctx.quiet:
        click.echo(f"✓ Configuration is valid: {current_config}")


@config.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def init(ctx, path: str, force: bool):
    """Write a default configuration file to PATH."""
    cli_ctx = ctx.find_root().obj

    if os.path.exists(path) and not force:
        click.echo(f"Error: {path} already exists. Use --force to overwrite.", err=True)
        sys.exit(1)

    try:
        cli_ctx.config_manager.save_config(WatchConfiguration.create_default(), path)
    except OSError as e:
        click.echo(f"Error writing configuration: {e}", err=True)
        sys.exit(1)

    if not cli_ctx.quiet:
        click.echo(f"✓ Default configuration written to {path}")
