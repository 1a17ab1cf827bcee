"""Tests for the command-line interface."""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

import lunardisk.__main__ as cli
from lunardisk.core.cancellation import CancellationToken, ScanCancelledError
from lunardisk.core.config import MainConfig


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run with an empty working and home directory so no config is discovered."""
    workdir = tmp_path / "workdir"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setenv("HOME", str(workdir))
    return workdir


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(argv)
    code = exc_info.value.code
    assert isinstance(code, int)
    return code


class FailingRunner:
    """ApplicationRunner stand-in raising a fixed exception."""

    error: BaseException = TimeoutError()

    def __init__(self, config: MainConfig) -> None:
        self.config: MainConfig = config

    async def run(self, path: str, *, query: str | None = None, cancellation: CancellationToken | None = None) -> None:
        raise self.error


@pytest.mark.unit
class TestBuildParser:
    """Test argument parsing."""

    def test_defaults(self) -> None:
        """Test optional arguments default to unset."""
        args = cli.build_parser().parse_args(["/data"])

        assert args.path == "/data"
        assert args.max_depth is None
        assert args.display_depth == cli.DEFAULT_DISPLAY_DEPTH
        assert args.search is None
        assert args.limit is None
        assert args.timeout is None
        assert args.config is None
        assert not args.json

    @pytest.mark.parametrize(
        "argv",
        [
            ["/data", "--max-depth", "-1"],
            ["/data", "--limit", "-3"],
            ["/data", "--timeout", "0"],
            ["/data", "--log-level", "LOUD"],
        ],
    )
    def test_invalid_values_rejected(self, argv: list[str]) -> None:
        """Test argparse rejects out-of-range values."""
        with pytest.raises(SystemExit):
            _ = cli.build_parser().parse_args(argv)

    def test_apply_overrides(self) -> None:
        """Test command-line values replace configuration values."""
        args = cli.build_parser().parse_args(
            ["/data", "--max-depth", "3", "--timeout", "2.5", "--limit", "7", "--log-level", "DEBUG"]
        )

        config = cli.apply_overrides(MainConfig(), args)

        assert config.scan.max_depth == 3
        assert config.scan.timeout_seconds == 2.5
        assert config.search.limit == 7
        assert config.application.log_level == "DEBUG"

    def test_apply_overrides_keeps_config_values(self) -> None:
        """Test unset arguments leave configuration untouched."""
        base = MainConfig.model_validate({"search": {"limit": 11}, "scan": {"max_depth": 1}})

        config = cli.apply_overrides(base, cli.build_parser().parse_args(["/data"]))

        assert config == base


@pytest.mark.unit
class TestMain:
    """Test the main entry point end to end."""

    def test_text_report(self, isolated_env: Path, sample_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a successful scan prints the tree and exits 0."""
        code = _run([str(sample_dir)])

        out = capsys.readouterr().out
        assert code == cli.EXIT_SUCCESS
        assert "root/" in out
        assert "a.bin" in out
        assert "Total 10 bytes in 2 files and 2 directories" in out

    def test_search_output(self, isolated_env: Path, sample_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --search and --limit shape the search section."""
        code = _run([str(sample_dir), "--search", "bin", "--limit", "1"])

        out = capsys.readouterr().out
        assert code == cli.EXIT_SUCCESS
        assert 'Search "bin": 2 matches, 10 bytes total' in out
        assert "... 1 more not shown" in out

    def test_json_output(self, isolated_env: Path, sample_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --json prints a machine-readable report."""
        code = _run([str(sample_dir), "--json", "--max-depth", "0"])

        payload = json.loads(capsys.readouterr().out)
        assert code == cli.EXIT_SUCCESS
        assert payload["root"]["size_bytes"] == 10
        assert payload["root"]["children"] == []

    def test_undecodable_file_name(
        self,
        isolated_env: Path,
        sample_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test names that are not valid UTF-8 are printed with replacement characters."""
        raw_name = os.path.join(os.fsencode(sample_dir), b"bad\xffname.bin")
        try:
            with open(raw_name, "wb") as f:
                _ = f.write(b"12")
        except OSError:
            pytest.skip("filesystem rejects non-UTF-8 file names")

        code = _run([str(sample_dir)])

        out = capsys.readouterr().out
        assert code == cli.EXIT_SUCCESS
        assert "bad\ufffdname.bin" in out
        assert "Total 12 bytes in 3 files" in out

    def test_logging_configured_from_config(self, isolated_env: Path, sample_dir: Path) -> None:
        """Test logging is set up from the effective configuration."""
        _ = (isolated_env / "lunardisk.yaml").write_text("application:\n  log_format: json\n")

        with patch.object(cli, "configure_logging") as mock_configure:
            code = _run([str(sample_dir), "--log-level", "DEBUG"])

        assert code == cli.EXIT_SUCCESS
        mock_configure.assert_called_once_with(log_level="DEBUG", log_format="json")

    def test_missing_path(self, isolated_env: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a missing root exits with the scan error code."""
        missing = str(tmp_path / "nowhere")

        code = _run([missing])

        assert code == cli.EXIT_SCAN_ERROR
        assert f"Path not found: {missing}" in capsys.readouterr().err

    def test_invalid_config(self, isolated_env: Path, sample_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test an invalid config file exits with the configuration error code."""
        config_file = isolated_env / "bad.yaml"
        _ = config_file.write_text("search:\n  limit: -1\n")

        code = _run([str(sample_dir), "--config", str(config_file)])

        assert code == cli.EXIT_CONFIG_ERROR
        assert "search → limit" in capsys.readouterr().err

    def test_discovered_config_is_used(
        self,
        isolated_env: Path,
        sample_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test a lunardisk.yaml in the working directory is picked up."""
        _ = (isolated_env / "lunardisk.yaml").write_text("search:\n  limit: 0\n")

        code = _run([str(sample_dir), "--search", "bin"])

        out = capsys.readouterr().out
        assert code == cli.EXIT_SUCCESS
        assert "... 2 more not shown" in out

    def test_timeout_exit_code(
        self,
        isolated_env: Path,
        sample_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test a timed-out scan exits with the timeout code."""
        monkeypatch.setattr(FailingRunner, "error", TimeoutError())
        monkeypatch.setattr(cli, "ApplicationRunner", FailingRunner)

        code = _run([str(sample_dir), "--timeout", "5"])

        assert code == cli.EXIT_TIMEOUT
        assert "timed out after 5.0 seconds" in capsys.readouterr().err

    def test_cancelled_exit_code(
        self,
        isolated_env: Path,
        sample_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test a cancelled scan exits with the interrupt code."""
        monkeypatch.setattr(FailingRunner, "error", ScanCancelledError(str(sample_dir)))
        monkeypatch.setattr(cli, "ApplicationRunner", FailingRunner)

        code = _run([str(sample_dir)])

        assert code == cli.EXIT_INTERRUPTED
        assert "Scan cancelled" in capsys.readouterr().err
