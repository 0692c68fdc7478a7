# exchange_indexer/cli/commands/replay.py

"""
Replay a recorded event feed through the indexer.
"""

from pathlib import Path
from typing import Optional

import click
import msgspec

from ...core.logging import IndexerLogger
from ...pipeline.event_source import load_events
from ...storage.memory import MemoryEntityStore
from ...types import Bundle, Factory, IndexerError, BUNDLE_ID
from ..context import load_config


@click.command('replay')
@click.argument('events_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--database-url', help='Persist entities to this database instead of memory')
@click.option('--digest', is_flag=True, help='Print the sha256 of the resulting in-memory store')
@click.pass_context
def replay(ctx, events_file, database_url, digest):
    """Replay a JSON-lines event file in order

    Examples:
        # Replay into memory and print the store digest
        replay events.jsonl --digest

        # Persist into a SQLite file
        replay events.jsonl --database-url sqlite:///indexer.db
    """
    from ... import create_indexer

    config = load_config(ctx)
    logger = IndexerLogger.get_logger('cli.replay')

    store = None
    if database_url:
        if digest:
            raise click.UsageError("--digest is only available for in-memory replays")
        config = msgspec.structs.replace(
            config,
            database=msgspec.structs.replace(config.database, url=database_url),
        )
    else:
        store = MemoryEntityStore()

    container = create_indexer(config, store=store)
    try:
        click.echo(f"Replaying {Path(events_file).name}")
        stats = container.pipeline.process_events(load_events(events_file))

        click.echo(f"Events processed: {stats.events_processed}")
        for event_type, count in sorted(stats.events_by_type.items()):
            click.echo(f"   {event_type}: {count}")
        if stats.first_block is not None:
            click.echo(f"Blocks: {stats.first_block} - {stats.last_block}")

        _print_summary(container.store, config.factory_address)

        if digest:
            click.echo(f"Store digest: {container.store.digest()}")

    except IndexerError as e:
        logger.error(f"Replay halted: {e}")
        raise click.ClickException(f"Replay halted: {e}")
    finally:
        container.shutdown()


def _print_summary(store, factory_address: str) -> Optional[Factory]:
    factory = store.load(Factory, factory_address)
    if factory is None:
        click.echo("No factory indexed")
        return None

    bundle = store.load(Bundle, BUNDLE_ID)
    click.echo(f"Pairs: {factory.pair_count}")
    click.echo(f"Transactions: {factory.total_transactions}")
    click.echo(f"Volume USD: {factory.total_volume_usd}")
    click.echo(f"Liquidity USD: {factory.total_liquidity_usd}")
    if bundle is not None:
        click.echo(f"Native price USD: {bundle.native_price}")
    return factory
