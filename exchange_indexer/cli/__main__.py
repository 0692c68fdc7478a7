# exchange_indexer/cli/__main__.py

"""
Exchange Indexer CLI

Usage: python -m exchange_indexer.cli [--config FILE] [command] [options]
"""

from pathlib import Path

import click

from exchange_indexer.core.logging import IndexerLogger


DEFAULT_CONFIG_PATH = "config/config.yaml"


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--config', 'config_path', default=DEFAULT_CONFIG_PATH,
              envvar='INDEXER_CONFIG', show_default=True,
              help='Indexer configuration file (YAML or JSON)')
@click.pass_context
def cli(ctx, verbose, config_path):
    """Exchange Indexer - replay pair events into entity state"""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['config_path'] = config_path

    log_level = "DEBUG" if verbose else "INFO"
    IndexerLogger.configure(
        log_dir=Path.cwd() / "logs",
        log_level=log_level,
        console_enabled=True,
        file_enabled=False,
        structured_format=verbose,
    )


from exchange_indexer.cli.commands.replay import replay
from exchange_indexer.cli.commands.config import show_config

cli.add_command(replay)
cli.add_command(show_config)


if __name__ == '__main__':
    cli()
