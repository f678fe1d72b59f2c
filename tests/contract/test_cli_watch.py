"""Contract tests for the 'watch' command."""

import json

from process_watcher.cli.commands import watch as watch_module
from process_watcher.cli.main import cli


def _json_lines(output):
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


def test_watch_prints_created_and_closed(runner, fake_source):
    fake_source(watch_module, {1: "a"}, {1: "a", 2: "b"}, {2: "b"})

    result = runner.invoke(cli, ["watch", "--interval", "1", "--cycles", "2"])

    assert result.exit_code == 0, result.output
    assert "b (2) has been created" in result.output
    assert "a (1) has been closed" in result.output
    assert "Stopped after 2 cycle(s), 2 event(s) reported" in result.output


def test_watch_json_output(runner, fake_source):
    fake_source(watch_module, {}, {7: "svc"})

    result = runner.invoke(
        cli, ["-q", "watch", "--interval", "1", "--cycles", "1", "--format", "json"]
    )

    assert result.exit_code == 0, result.output
    (event,) = _json_lines(result.output)
    assert event["name"] == "svc"
    assert event["pid"] == 7
    assert event["action"] == "created"
    assert len(event["timestamp"]) == len("2024-01-01 12:00:00.00")


def test_watch_whitelist_by_name(runner, fake_source):
    fake_source(watch_module, {}, {1: "python", 2: "node", 3: "python"})

    result = runner.invoke(
        cli,
        ["-q", "watch", "--interval", "1", "--cycles", "1", "--name", "python",
         "--format", "json"],
    )

    assert result.exit_code == 0, result.output
    assert [line["pid"] for line in _json_lines(result.output)] == [1, 3]


def test_watch_blacklist_by_id(runner, fake_source):
    fake_source(watch_module, {1: "a", 2: "b"}, {})

    result = runner.invoke(
        cli,
        ["-q", "watch", "--interval", "1", "--cycles", "1", "--exclude-id", "1",
         "--format", "json"],
    )

    assert result.exit_code == 0, result.output
    assert [(l["pid"], l["action"]) for l in _json_lines(result.output)] == [
        (2, "closed")
    ]


def test_watch_rejects_mixed_filters(runner, fake_source):
    source = fake_source(watch_module, {1: "a"})

    result = runner.invoke(
        cli, ["watch", "--name", "a", "--exclude-name", "b", "--cycles", "1"]
    )

    assert result.exit_code == 2
    assert "cannot be combined" in result.output
    assert source.calls == 0


def test_watch_rejects_non_positive_interval(runner, fake_source):
    fake_source(watch_module, {1: "a"})

    result = runner.invoke(cli, ["watch", "--interval", "0", "--cycles", "1"])

    assert result.exit_code == 2
    assert "Invalid watcher configuration" in result.output


def test_watch_enumeration_failure(runner, fake_source):
    source = fake_source(watch_module, {1: "a"})
    source.fail_on_call = 2

    result = runner.invoke(cli, ["watch", "--interval", "1"])

    assert result.exit_code == 1
    assert "Access denied listing processes" in result.output


def test_watch_uses_config_file(runner, fake_source, tmp_path):
    config_file = tmp_path / "watcher.json"
    config_file.write_text(json.dumps({"WatchInterval": 1, "ProcessId": [2]}))
    fake_source(watch_module, {}, {1: "a", 2: "b"})

    result = runner.invoke(
        cli, ["-q", "-c", str(config_file), "watch", "--cycles", "1", "--format", "json"]
    )

    assert result.exit_code == 0, result.output
    assert [line["pid"] for line in _json_lines(result.output)] == [2]


def test_verbose_and_quiet_are_exclusive(runner):
    result = runner.invoke(cli, ["-v", "-q", "watch"])
    assert result.exit_code == 1
    assert "cannot be used together" in result.output
