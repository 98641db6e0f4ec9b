"""Tests for the snapguard command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from snapguard.cli import app
from snapguard.cli.commands import config_cmd

runner = CliRunner()


def _artifact(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "box.kt"
    path.write_text(text, encoding="utf-8")
    return path


def test_directives_json(tmp_path: Path) -> None:
    path = _artifact(tmp_path, "// IGNORE_BACKEND: JVM\n// WITH_STDLIB\nfun f(){}\n")

    result = runner.invoke(app, ["directives", str(path), "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == [
        {"name": "IGNORE_BACKEND", "value": "JVM"},
        {"name": "WITH_STDLIB", "value": None},
    ]


def test_directives_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["directives", str(tmp_path / "nope.kt")])
    assert result.exit_code == 1


def test_status_reports_ignored(tmp_path: Path) -> None:
    path = _artifact(tmp_path, "// IGNORE_BACKEND: JVM\nfun f(){}\n")

    ignored = runner.invoke(app, ["status", str(path), "--backend", "jvm"])
    active = runner.invoke(app, ["status", str(path), "--backend", "JS"])

    assert ignored.exit_code == 0
    assert "ignored" in ignored.stdout
    assert "active" in active.stdout


def test_status_unknown_backend(tmp_path: Path) -> None:
    path = _artifact(tmp_path, "fun f(){}\n")
    result = runner.invoke(app, ["status", str(path), "--backend", "COBOL"])
    assert result.exit_code != 0


def test_mute_and_unmute(tmp_path: Path) -> None:
    path = _artifact(tmp_path, "// WITH_STDLIB\nfun f(){}\n")

    muted = runner.invoke(app, ["mute", str(path), "--backend", "WASM"])
    assert muted.exit_code == 0
    assert path.read_text(encoding="utf-8") == "// WITH_STDLIB\n// IGNORE_BACKEND: WASM\nfun f(){}\n"

    unmuted = runner.invoke(app, ["unmute", str(path), "--backend", "WASM"])
    assert unmuted.exit_code == 0
    assert path.read_text(encoding="utf-8") == "// WITH_STDLIB\nfun f(){}\n"


def test_compare_and_accept(tmp_path: Path) -> None:
    golden = tmp_path / "box.txt"
    golden.write_text("old\n", encoding="utf-8")
    actual = tmp_path / "actual.txt"
    actual.write_text("new\n", encoding="utf-8")

    mismatch = runner.invoke(app, ["compare", str(golden), str(actual)])
    assert mismatch.exit_code == 1

    accepted = runner.invoke(app, ["accept", str(golden), str(actual)])
    assert accepted.exit_code == 0
    assert golden.read_text(encoding="utf-8") == "new\n"

    match = runner.invoke(app, ["compare", str(golden), str(actual)])
    assert match.exit_code == 0


def test_compare_missing_golden_in_ci_mode(tmp_path: Path) -> None:
    actual = tmp_path / "actual.txt"
    actual.write_text("x\n", encoding="utf-8")

    result = runner.invoke(app, ["compare", str(tmp_path / "missing.txt"), str(actual), "--ci"])

    assert result.exit_code == 1
    assert not (tmp_path / "missing.txt").exists()


def test_compare_detects_ci_from_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("CI", "true")
    actual = tmp_path / "actual.txt"
    actual.write_text("x\n", encoding="utf-8")
    golden = tmp_path / "missing.txt"

    result = runner.invoke(app, ["compare", str(golden), str(actual)])

    assert result.exit_code == 1
    assert not golden.exists()


def test_compare_no_ci_generates_golden_under_ci(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("CI", "true")
    actual = tmp_path / "actual.txt"
    actual.write_text("x\n", encoding="utf-8")
    golden = tmp_path / "generated.txt"

    result = runner.invoke(app, ["compare", str(golden), str(actual), "--no-ci"])

    assert result.exit_code == 1
    assert golden.read_text(encoding="utf-8") == "x\n"


def test_compare_and_accept_report_missing_actual(tmp_path: Path) -> None:
    golden = tmp_path / "box.txt"
    golden.write_text("old\n", encoding="utf-8")
    missing = tmp_path / "absent.txt"

    for command in ("compare", "accept"):
        result = runner.invoke(app, [command, str(golden), str(missing)])
        assert result.exit_code == 1
        assert "Error:" in result.stdout
        assert result.exception is None or isinstance(result.exception, SystemExit)

    assert golden.read_text(encoding="utf-8") == "old\n"


def test_unmute_drops_backend_from_list(tmp_path: Path) -> None:
    path = _artifact(tmp_path, "// IGNORE_BACKEND: JVM, JS\nfun f(){}\n")

    result = runner.invoke(app, ["unmute", str(path), "--backend", "JVM"])

    assert result.exit_code == 0
    assert path.read_text(encoding="utf-8") == "// IGNORE_BACKEND: JS\nfun f(){}\n"


# --- config ---


def test_config_set_and_show(tmp_path: Path) -> None:
    saved = runner.invoke(
        app, ["config", "--root", str(tmp_path), "--set", "auto_mute_failures=true", "--json"]
    )
    assert saved.exit_code == 0
    assert (tmp_path / ".snapguard" / "config.yaml").exists()

    shown = runner.invoke(app, ["config", "--root", str(tmp_path), "--json"])
    assert shown.exit_code == 0
    assert json.loads(shown.stdout)["auto_mute_failures"] is True


def test_config_table_names_sources(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    runner.invoke(app, ["config", "--root", str(tmp_path), "--set", "auto_mute_failures=yes"])
    monkeypatch.setenv("SNAPGUARD_VERBOSE_IGNORED", "1")
    monkeypatch.setattr(config_cmd.console, "width", 200)

    result = runner.invoke(app, ["config", "--root", str(tmp_path)])

    assert result.exit_code == 0
    assert "config" in result.stdout
    assert "SNAPGUARD_VERBOSE_IGNORED" in result.stdout


def test_config_rejects_unknown_option(tmp_path: Path) -> None:
    result = runner.invoke(app, ["config", "--root", str(tmp_path), "--set", "auto_mute=true"])

    assert result.exit_code == 1
    assert "Unknown lifecycle option" in result.stdout
    assert not (tmp_path / ".snapguard" / "config.yaml").exists()
