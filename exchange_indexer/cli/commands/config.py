# exchange_indexer/cli/commands/config.py

import click
import msgspec
import yaml

from ..context import load_config


@click.command('show-config')
@click.option('--format', 'output_format', type=click.Choice(['yaml', 'json']),
              default='yaml', help='Output format')
@click.pass_context
def show_config(ctx, output_format):
    """Print the resolved configuration, environment overrides applied"""
    config = load_config(ctx)
    data = config.to_dict()

    if output_format == 'json':
        click.echo(msgspec.json.format(msgspec.json.encode(data), indent=2).decode())
    else:
        click.echo(yaml.safe_dump(data, sort_keys=False))
