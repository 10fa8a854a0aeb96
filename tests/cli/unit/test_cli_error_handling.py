"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

from tfc_run_worker.cli import main


def test_missing_required_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["run"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Missing option" in captured.err
    assert "--config" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["run", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option: --bogus" in captured.err
    assert "Traceback" not in captured.err


def test_configuration_errors_exit_with_status_one(tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "worker.yaml"
    config_path.write_text("queue:\n  backend: sqs\n", encoding="utf-8")

    exit_code = main(["run", "--config", str(config_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "queue.url is required for the sqs backend." in captured.err


def test_missing_configuration_file_exits_with_status_one(tmp_path: Path, capsys) -> None:
    exit_code = main(["run", "--config", str(tmp_path / "absent.yaml")])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Traceback" not in captured.err


def test_config_version_id_without_hyphen_exits_with_status_one(capsys) -> None:
    exit_code = main(["config-version-id", "bundle.tar.gz"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Could not extract configuration version id" in captured.err
