"""Tests for the command-line interface."""

import io
import json
import subprocess

import pytest
from rich.console import Console

from audit_tracker.cli import EXIT_REGRESSION, TrackerCLI


@pytest.fixture
def console():
    return Console(file=io.StringIO(), force_terminal=False, color_system=None, width=200)


@pytest.fixture
def cli(console):
    return TrackerCLI(console=console)


@pytest.fixture
def config_path(temp_dir):
    return temp_dir / "tracker.json"


@pytest.fixture
def fake_lighthouse(monkeypatch):
    """Make every Lighthouse invocation print the next queued report."""
    reports = []

    def fake_run(command, **kwargs):
        return subprocess.CompletedProcess(
            args=command, returncode=0, stdout=json.dumps(reports.pop(0)), stderr=""
        )

    monkeypatch.setattr(subprocess, "run", fake_run)
    return reports


def run_cli(cli, config_path, *args):
    return cli.run(["--config", str(config_path), *args])


class TestRunCommand:
    """Tests for the run command."""

    def test_first_run(self, cli, console, config_path, temp_snapshot_dir, fake_lighthouse, report_factory):
        fake_lighthouse.append(report_factory(first_contentful_paint=1000))

        code = run_cli(cli, config_path, "run", "https://example.com", "--snapshot-dir", str(temp_snapshot_dir))

        assert code == 0
        assert "No comparison available" in console.file.getvalue()
        assert len(list((temp_snapshot_dir / "example.com").iterdir())) == 1

    def test_second_run_prints_deltas(
        self, cli, console, config_path, temp_snapshot_dir, fake_lighthouse, report_factory
    ):
        fake_lighthouse.append(report_factory("2020-01-01T00:00:00.000Z", first_contentful_paint=1000))
        fake_lighthouse.append(report_factory("2020-01-02T00:00:00.000Z", first_contentful_paint=1250))
        args = ("run", "https://example.com", "--snapshot-dir", str(temp_snapshot_dir))

        run_cli(cli, config_path, *args)
        code = run_cli(TrackerCLI(console=console), config_path, *args)

        assert code == 0
        assert "First Contentful Paint is 25% slower" in console.file.getvalue()

    def test_fail_on_regression(
        self, cli, config_path, temp_snapshot_dir, fake_lighthouse, report_factory
    ):
        fake_lighthouse.append(report_factory("2020-01-01T00:00:00.000Z", interactive=1000))
        fake_lighthouse.append(report_factory("2020-01-02T00:00:00.000Z", interactive=1100))
        args = ("run", "https://example.com", "--snapshot-dir", str(temp_snapshot_dir), "--fail-on-regression")

        assert run_cli(cli, config_path, *args) == 0
        assert run_cli(cli, config_path, *args) == EXIT_REGRESSION

    def test_invalid_url(self, cli, config_path, temp_snapshot_dir):
        code = run_cli(cli, config_path, "run", "nope", "--snapshot-dir", str(temp_snapshot_dir))

        assert code == 1

    def test_audit_failure(self, cli, config_path, temp_snapshot_dir, monkeypatch):
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda command, **kwargs: subprocess.CompletedProcess(command, 1, "", "boom"),
        )

        code = run_cli(cli, config_path, "run", "https://example.com", "--snapshot-dir", str(temp_snapshot_dir))

        assert code == 1


class TestOtherCommands:
    """Tests for compare, history and config."""

    def test_compare(self, cli, console, config_path, temp_dir, report_factory):
        (temp_dir / "a.json").write_text(json.dumps(report_factory(speed_index=2000)))
        (temp_dir / "b.json").write_text(json.dumps(report_factory(speed_index=1000)))

        code = run_cli(cli, config_path, "compare", str(temp_dir / "a"), str(temp_dir / "b"))

        assert code == 0
        assert "Speed Index is 50% faster" in console.file.getvalue()

    def test_compare_without_common_metrics(self, cli, console, config_path, temp_dir, report_factory):
        (temp_dir / "a.json").write_text(json.dumps(report_factory(speed_index=2000)))
        (temp_dir / "b.json").write_text(json.dumps(report_factory(interactive=1000)))

        assert run_cli(cli, config_path, "compare", str(temp_dir / "a"), str(temp_dir / "b")) == 0
        output = console.file.getvalue()
        assert "No comparable metrics" in output
        assert "No comparison available" not in output

    def test_history(self, cli, console, config_path, temp_snapshot_dir, fake_lighthouse, report_factory):
        fake_lighthouse.append(report_factory("2020-01-01T00:00:00.000Z", interactive=1))
        run_cli(cli, config_path, "run", "https://example.com/a", "--snapshot-dir", str(temp_snapshot_dir))

        code = run_cli(cli, config_path, "history", "https://example.com/a", "--snapshot-dir", str(temp_snapshot_dir))

        assert code == 0
        assert "2020-01-01T00:00:00+00:00  1 metrics" in console.file.getvalue()

    def test_config_init(self, cli, config_path):
        assert run_cli(cli, config_path, "config", "--init") == 0
        assert json.loads(config_path.read_text())["lighthouse_path"] == "lighthouse"

    def test_snapshot_dir_from_config(self, cli, config_path, temp_dir, fake_lighthouse, report_factory):
        config_path.write_text(json.dumps({"snapshot_dir": str(temp_dir / "from-config")}))
        (temp_dir / "from-config").mkdir()
        fake_lighthouse.append(report_factory(interactive=1))

        assert run_cli(cli, config_path, "run", "https://example.com") == 0
        assert (temp_dir / "from-config" / "example.com").is_dir()

    def test_no_command(self, cli, config_path):
        assert run_cli(cli, config_path) == 1
