# Where: sam_runner/tests/test_cli.py
# What: Tests for CLI argument handling and exit codes.
# Why: Input errors should print a message, not a traceback.
from __future__ import annotations

import pytest

from sam_runner import cli, invoker

_CONFIG_KEYS = ("OUTPUT_DIR", "EVENTS_DIR", "TEMPLATE_PATH", "STACK_NAME", "PACKAGE_NAME")


@pytest.fixture
def project(monkeypatch, tmp_path):
    for key in _CONFIG_KEYS:
        # setenv first so monkeypatch restores keys that load_dotenv adds.
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    events_dir = tmp_path / "events"
    events_dir.mkdir()
    (events_dir / "query.json").write_text("{}", encoding="utf-8")
    (tmp_path / "template.yaml").write_text(
        "Resources:\n  QueryFunction:\n    Properties:\n      CodeUri: dist/query\n",
        encoding="utf-8",
    )
    (tmp_path / "runner.env").write_text(
        "OUTPUT_DIR=out\nEVENTS_DIR=events\nTEMPLATE_PATH=template.yaml\n",
        encoding="utf-8",
    )
    return tmp_path


def _install_popen(monkeypatch, output: bytes):
    class FakePopen:
        def __init__(self, cmd, stdin=None, stdout=None, stderr=None):
            stdout.write(output)

        def wait(self):
            return 0

    monkeypatch.setattr(invoker.subprocess, "Popen", FakePopen)


def test_parse_args_mode_and_filter() -> None:
    args = cli.parse_args(["local", "query", "--no-emoji"])

    assert args.mode == "local"
    assert args.filter == "query"
    assert args.emoji is False
    assert args.color is None
    assert args.verbose is False


def test_parse_args_filter_is_optional() -> None:
    args = cli.parse_args(["remote"])

    assert args.filter is None


def test_invalid_mode_prints_message_and_fails(project, capsys) -> None:
    code = cli.main(["staging", "--env-file", str(project / "runner.env")])

    assert code == 1
    err = capsys.readouterr().err
    assert "second argument must be 'remote' or 'local'" in err
    assert "Traceback" not in err


def test_invalid_mode_is_reported_before_configuration(project, capsys) -> None:
    code = cli.main(["staging"])

    assert code == 1
    err = capsys.readouterr().err
    assert "second argument must be 'remote' or 'local'" in err
    assert "missing required configuration" not in err


def test_missing_configuration_fails(project, capsys) -> None:
    code = cli.main(["local"])

    assert code == 1
    assert "OUTPUT_DIR" in capsys.readouterr().err


def test_local_run_succeeds(project, monkeypatch, capsys) -> None:
    _install_popen(monkeypatch, b'{"statusCode": 200, "body": "{}"}')

    code = cli.main(["local", "--env-file", str(project / "runner.env"), "--emoji", "--no-color"])

    assert code == 0
    assert "✅ query" in capsys.readouterr().out
    assert (project / "out" / "query.json").is_file()


def test_filter_without_match_fails(project, monkeypatch, capsys) -> None:
    _install_popen(monkeypatch, b"")

    code = cli.main(["local", "missing", "--env-file", str(project / "runner.env")])

    assert code == 1
    assert "no lambdas specified; args: local missing" in capsys.readouterr().err
