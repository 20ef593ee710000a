from __future__ import annotations

from pathlib import Path

import pytest

from elaguila.config_manager import main


def _run_cli(tmp_path: Path, capsys: pytest.CaptureFixture[str], *args: str):
    config_file = tmp_path / "config.toml"
    if not config_file.exists():
        config_file.write_text("[news]\nmax_items = 10\n", encoding="utf-8")
    code = main(["--config", str(config_file), *args])
    captured = capsys.readouterr()
    return code, captured.out, captured.err


def test_validate_success(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _err = _run_cli(tmp_path, capsys, "--validate")
    assert code == 0
    assert "Configuration OK" in out


def test_explain_reports_source(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("ELAGUILA__NEWS__MAX_ITEMS", raising=False)
    (tmp_path / ".env").write_text("ELAGUILA__NEWS__MAX_ITEMS=20\n", encoding="utf-8")
    code, out, _err = _run_cli(tmp_path, capsys, "--explain", "news.max_items")
    assert code == 0
    assert "news.max_items = 20" in out
    assert "ELAGUILA__NEWS__MAX_ITEMS" in out


def test_set_updates_file_and_creates_backup(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("[collection]\nrequest_timeout_seconds = 10\n", encoding="utf-8")
    code, out, _err = _run_cli(tmp_path, capsys, "--set", "collection.request_timeout_seconds=45")
    assert code == 0
    assert "collection.request_timeout_seconds" in out
    assert "request_timeout_seconds = 45" in config_file.read_text(encoding="utf-8")
    assert list((tmp_path / "backups").glob("config.toml.*.bak")), "CLI updates must generate backups"


def test_set_rejects_malformed_assignment(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code, _out, err = _run_cli(tmp_path, capsys, "--set", "news.max_items")
    assert code == 1
    assert "Invalid --set argument" in err


def test_validate_failure_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("[collection]\nrequest_timeout_seconds = 'oops'\n", encoding="utf-8")
    code, _out, err = _run_cli(tmp_path, capsys, "--validate")
    assert code == 1
    assert "collection.request_timeout_seconds" in err
    assert "file" in err


def test_dump_defaults_prints_toml(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _err = _run_cli(tmp_path, capsys, "--dump-defaults")
    assert code == 0
    assert "[events]" in out
    assert 'default_city = "sanjose"' in out
