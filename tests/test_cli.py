"""
tests/test_cli.py
Tests for daogen.cli: argument handling, exit codes and the printed report.
"""

from __future__ import annotations

import logging
import pathlib
from typing import List

import pytest

from daogen import __version__
from daogen.cli import (
    EXIT_CONFIG_ERROR,
    EXIT_GENERATION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_METADATA_ERROR,
    EXIT_SUCCESS,
    cli_main,
)


def _exit_code(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as info:
        cli_main(argv)
    return info.value.code


class TestCli:
    def test_version(self, capsys: pytest.CaptureFixture) -> None:
        assert _exit_code(["--version"]) == 0
        assert __version__ in capsys.readouterr().out

    def test_generate_from_url(
        self, sqlite_url: str, tmp_path: pathlib.Path, capsys: pytest.CaptureFixture
    ) -> None:
        out_dir = tmp_path / "out"
        code = _exit_code(
            [
                "--url", sqlite_url,
                "-o", str(out_dir),
                "--model-package", "com.shop.model",
                "--dao-package", "com.shop.dao",
                "--table", "customer",
            ]
        )

        assert code == EXIT_SUCCESS
        assert (out_dir / "com" / "shop" / "dao" / "CustomerDao.java").is_file()
        assert not (out_dir / "com" / "shop" / "dao" / "OrderLineDao.java").exists()
        summary = capsys.readouterr().out
        assert "✅ SUCCESS" in summary
        assert "Tables succeeded: 1" in summary

    def test_config_file_with_flag_overrides(
        self, sqlite_url: str, tmp_path: pathlib.Path
    ) -> None:
        config_path = tmp_path / "database.properties"
        config_path.write_text(
            f"db.url={sqlite_url}\ngenerator.output_dir={tmp_path / 'from_file'}\n",
            encoding="utf-8",
        )
        out_dir = tmp_path / "from_flag"

        code = _exit_code(["-c", str(config_path), "-o", str(out_dir), "--exclude", "event_log"])

        assert code == EXIT_SUCCESS
        assert (out_dir / "com" / "example" / "model" / "CustomerData.java").is_file()
        assert not (out_dir / "com" / "example" / "dao" / "EventLogDao.java").exists()
        assert not (tmp_path / "from_file").exists()

    def test_dry_run(self, sqlite_url: str, tmp_path: pathlib.Path) -> None:
        out_dir = tmp_path / "out"
        assert _exit_code(["--url", sqlite_url, "-o", str(out_dir), "--dry-run"]) == EXIT_SUCCESS
        assert not out_dir.exists()

    def test_no_source_of_settings(self) -> None:
        assert _exit_code([]) == EXIT_INPUT_ERROR

    def test_missing_config_file(self, tmp_path: pathlib.Path) -> None:
        assert _exit_code(["-c", str(tmp_path / "missing.yaml")]) == EXIT_INPUT_ERROR

    def test_config_error(self, tmp_path: pathlib.Path) -> None:
        config_path = tmp_path / "daogen.yaml"
        config_path.write_text("output_dir: out\n", encoding="utf-8")
        assert _exit_code(["-c", str(config_path)]) == EXIT_CONFIG_ERROR

    def test_invalid_package_is_config_error(self, sqlite_url: str) -> None:
        assert _exit_code(["--url", sqlite_url, "--dao-package", "9dao"]) == EXIT_CONFIG_ERROR

    def test_connection_error(self, tmp_path: pathlib.Path) -> None:
        code = _exit_code(
            ["--url", "sqlite:////no/such/dir/x.db", "-o", str(tmp_path / "out")]
        )
        assert code == EXIT_METADATA_ERROR

    def test_table_failure_is_generation_error(
        self, sqlite_url: str, tmp_path: pathlib.Path, capsys: pytest.CaptureFixture
    ) -> None:
        empty_templates = tmp_path / "templates"
        empty_templates.mkdir()
        code = _exit_code(
            ["--url", sqlite_url, "-o", str(tmp_path / "out"), "-t", str(empty_templates)]
        )
        assert code == EXIT_GENERATION_ERROR
        assert "❌ FAILED" in capsys.readouterr().out

    def test_verbose_configures_package_logger(
        self, sqlite_url: str, tmp_path: pathlib.Path
    ) -> None:
        _exit_code(["--url", sqlite_url, "-o", str(tmp_path / "out"), "-vv"])
        package_logger = logging.getLogger("daogen")
        assert package_logger.level == logging.DEBUG
        assert package_logger.propagate is False
        assert len(package_logger.handlers) == 1

    def test_quiet_still_prints_summary(
        self, sqlite_url: str, tmp_path: pathlib.Path, capsys: pytest.CaptureFixture
    ) -> None:
        code = _exit_code(["--url", sqlite_url, "-o", str(tmp_path / "out"), "-q"])
        assert code == EXIT_SUCCESS
        captured = capsys.readouterr()
        assert "Generation Report" in captured.out
        assert captured.err == ""
