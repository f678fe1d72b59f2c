"""Main CLI entry point for Process Watcher.

Provides the command-line interface using the Click framework: watching the
process table, printing a one-off snapshot and managing configuration.
"""
import sys
from typing import Any, Mapping, Optional

import click

from .. import __version__
from ..models.watch_configuration import WatchConfiguration
from ..services.config_manager import ConfigManager
from ..utils.logging import configure_logging


class CLIContext:
    """Context object for CLI commands."""

    def __init__(self):
        self.config_file: Optional[str] = None
        self.config_manager: Optional[ConfigManager] = None
        self.config: Optional[WatchConfiguration] = None
        self.verbose = False
        self.quiet = False

    def load_config(
        self, overrides: Optional[Mapping[str, Any]] = None
    ) -> WatchConfiguration:
        """Load the configuration and set up logging from it.

        Raises:
            ConfigurationException: If the merged configuration is invalid
        """
        if self.config_manager is None:
            self.config_manager = ConfigManager(self.config_file)
        self.config = self.config_manager.load_config(overrides=overrides)

        level = "DEBUG" if self.verbose else self.config.log_level.value
        configure_logging(
            level=level,
            log_file=self.config.get_log_file_path(),
            max_size_mb=self.config.max_log_size_mb,
            backup_count=self.config.backup_count,
        )
        return self.config


pass_context = click.make_pass_decorator(CLIContext, ensure=True)


@click.group()
@click.option('--config', '-c',
              type=click.Path(dir_okay=False),
              help='Path to JSON configuration file')
@click.option('--verbose', '-v',
              is_flag=True,
              help='Enable verbose (debug) logging')
@click.option('--quiet', '-q',
              is_flag=True,
              help='Suppress non-essential output')
@click.version_option(__version__, prog_name="process-watcher")
@pass_context
def cli(ctx: CLIContext, config: Optional[str], verbose: bool, quiet: bool):
    """Process Watcher.

    Reports processes as they are created and closed on this host, with
    optional filtering by process name or id.
    """
    if verbose and quiet:
        click.echo("Error: --verbose and --quiet cannot be used together", err=True)
        sys.exit(1)

    ctx.config_file = config
    ctx.verbose = verbose
    ctx.quiet = quiet
    ctx.config_manager = ConfigManager(config)


# Import command modules
from .commands.config import config as config_cmd
from .commands.snapshot import snapshot
from .commands.watch import watch

# Add commands to main group
cli.add_command(watch)
cli.add_command(snapshot)
cli.add_command(config_cmd, name='config')


def main():
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user")
        sys.exit(1)


if __name__ == '__main__':
    main()
