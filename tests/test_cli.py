# tests/test_cli.py

import logging

import msgspec
import yaml
from click.testing import CliRunner

from exchange_indexer.cli.__main__ import cli

from conftest import E18, E6, FOO, FOO_PAIR, REF_PAIR, USDC, WNATIVE, EventBuilder, config_data


def write_inputs(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump(config_data()))

    events = EventBuilder()
    history = [
        events.pair_created(USDC, WNATIVE, REF_PAIR),
        events.pair_created(WNATIVE, FOO, FOO_PAIR),
    ]
    events.next_block()
    history += events.first_deposit(REF_PAIR, 100 * E18, 40_000 * E6, 20 * E18)
    events.next_block()
    tx_hash = events.new_tx()
    history.append(events.swap(REF_PAIR, 4000 * E6, 0, 0, 2 * E18, tx_hash))

    events_path = tmp_path / "events.jsonl"
    events_path.write_bytes(b"\n".join(msgspec.json.encode(e) for e in history))
    return config_path, events_path, len(history)


def test_replay_prints_summary_and_digest(tmp_path):
    config_path, events_path, count = write_inputs(tmp_path)

    runner = CliRunner()
    first = runner.invoke(cli, ['--config', str(config_path), 'replay', str(events_path), '--digest'])
    second = runner.invoke(cli, ['--config', str(config_path), 'replay', str(events_path), '--digest'])

    assert first.exit_code == 0, first.output
    assert f"Events processed: {count}" in first.output
    assert "Pairs: 2" in first.output

    digest_lines = [
        [line for line in result.output.splitlines() if line.startswith("Store digest:")]
        for result in (first, second)
    ]
    assert digest_lines[0] and digest_lines[0] == digest_lines[1]


def test_replay_into_sqlite(tmp_path):
    config_path, events_path, count = write_inputs(tmp_path)
    db_url = f"sqlite:///{tmp_path / 'indexer.db'}"

    result = CliRunner().invoke(cli, ['--config', str(config_path), 'replay', str(events_path),
                                      '--database-url', db_url])

    assert result.exit_code == 0, result.output
    assert f"Events processed: {count}" in result.output
    assert (tmp_path / "indexer.db").exists()


def test_show_config(tmp_path):
    config_path, _, _ = write_inputs(tmp_path)

    result = CliRunner().invoke(cli, ['--config', str(config_path), 'show-config', '--format', 'json'])

    assert result.exit_code == 0, result.output
    assert REF_PAIR in result.output


def test_missing_config_is_reported(tmp_path):
    result = CliRunner().invoke(cli, ['--config', str(tmp_path / "absent.yaml"), 'show-config'])

    assert result.exit_code != 0
    assert "Config file not found" in result.output


def test_replay_applies_configured_log_level(tmp_path):
    config_path, events_path, _ = write_inputs(tmp_path)
    data = config_data()
    data["logging"] = {"log_level": "WARNING"}
    config_path.write_text(yaml.safe_dump(data))

    result = CliRunner().invoke(cli, ['--config', str(config_path), 'replay', str(events_path)])

    assert result.exit_code == 0, result.output
    assert logging.getLogger("exchange_indexer").level == logging.WARNING


def test_verbose_overrides_configured_log_level(tmp_path):
    config_path, events_path, _ = write_inputs(tmp_path)
    data = config_data()
    data["logging"] = {"log_level": "WARNING"}
    config_path.write_text(yaml.safe_dump(data))

    result = CliRunner().invoke(cli, ['--verbose', '--config', str(config_path),
                                      'replay', str(events_path)])

    assert result.exit_code == 0, result.output
    assert logging.getLogger("exchange_indexer").level == logging.DEBUG
