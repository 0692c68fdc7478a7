# exchange_indexer/cli/context.py

import click
import msgspec

from ..core.config import IndexerConfig
from ..types import ConfigError


def load_config(ctx: click.Context) -> IndexerConfig:
    """Resolve the group's --config into an IndexerConfig, once per invocation

    --verbose raises the configured log level to DEBUG.
    """
    if 'config' not in ctx.obj:
        try:
            config = IndexerConfig.from_file(ctx.obj['config_path'])
        except ConfigError as e:
            raise click.ClickException(str(e))

        if ctx.obj.get('verbose'):
            config = msgspec.structs.replace(
                config,
                logging=msgspec.structs.replace(config.logging, log_level="DEBUG"),
            )
        ctx.obj['config'] = config
    return ctx.obj['config']
