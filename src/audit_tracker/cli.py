"""
Command-line interface for audit tracking.

This module provides CLI commands for auditing a URL, comparing it with
its previous run, and inspecting stored snapshots.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.text import Text

from . import configure_logging
from .comparator import Comparator, Direction
from .config import ConfigManager
from .errors import TrackerError
from .formatting import render_deltas, render_no_comparable_metrics, render_no_comparison
from .runner import AuditRunner
from .storage import SnapshotStore
from .tracker import Tracker

logger = logging.getLogger(__name__)

EXIT_REGRESSION = 2


class TrackerCLI:
    """Command-line interface for audit tracking."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.config_manager = None
        self.config = None

    def run(self, args: Optional[list[str]] = None) -> int:
        """Run the CLI with given arguments."""
        parser = self._create_parser()
        parsed_args = parser.parse_args(args)

        self.config_manager = ConfigManager(parsed_args.config)
        self.config = self.config_manager.get_config()
        if parsed_args.verbose:
            self.config.verbose = True
        if parsed_args.quiet:
            self.config.quiet = True
        self._apply_log_level()

        if not getattr(parsed_args, "func", None):
            parser.print_help()
            return 1

        try:
            return parsed_args.func(parsed_args)
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            return 1
        except TrackerError as e:
            logger.error(f"Error: {e}")
            return 1
        except Exception as e:
            logger.error(f"Error: {e}")
            if self.config.verbose:
                logger.exception("Unexpected failure")
            return 1

    def _apply_log_level(self) -> None:
        if self.config.verbose:
            level = logging.DEBUG
        elif self.config.quiet:
            level = logging.WARNING
        else:
            level = logging.INFO
        package_logger = configure_logging(level)
        package_logger.setLevel(level)
        for handler in package_logger.handlers:
            handler.setLevel(level)

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            description="Track Lighthouse performance audits and report regressions",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument("--config", "-c", type=Path, help="Configuration file path")

        parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

        parser.add_argument("--quiet", "-q", action="store_true", help="Quiet output")

        subparsers = parser.add_subparsers(dest="command", help="Available commands")

        # Run command
        run_parser = subparsers.add_parser(
            "run", help="Audit a URL and compare it with its previous run"
        )
        run_parser.add_argument("url", help="URL to audit")
        run_parser.add_argument(
            "--snapshot-dir", type=Path, help="Directory to store snapshots"
        )
        run_parser.add_argument(
            "--fail-on-regression",
            action="store_true",
            help=f"Exit with code {EXIT_REGRESSION} if any metric got slower",
        )
        run_parser.set_defaults(func=self._run_command)

        # Compare command
        compare_parser = subparsers.add_parser(
            "compare", help="Compare two stored report files"
        )
        compare_parser.add_argument("from_report", type=Path, help="Baseline report")
        compare_parser.add_argument("to_report", type=Path, help="Report to compare")
        compare_parser.set_defaults(func=self._compare_command)

        # History command
        history_parser = subparsers.add_parser(
            "history", help="List stored snapshots of a URL"
        )
        history_parser.add_argument("url", help="Audited URL")
        history_parser.add_argument(
            "--snapshot-dir", type=Path, help="Directory containing snapshots"
        )
        history_parser.set_defaults(func=self._history_command)

        # Config command
        config_parser = subparsers.add_parser("config", help="Configuration management")
        config_parser.add_argument(
            "--init", action="store_true", help="Initialize default configuration file"
        )
        config_parser.add_argument("--show", action="store_true", help="Show current configuration")
        config_parser.set_defaults(func=self._config_command)

        return parser

    def _make_tracker(self, args, with_audit: bool = True) -> Tracker:
        if getattr(args, "snapshot_dir", None):
            self.config.snapshot_dir = str(args.snapshot_dir)

        snapshot_dir = self.config.get_snapshot_dir()
        logger.debug(f"Using snapshots in {snapshot_dir}")

        return Tracker(
            store=SnapshotStore(snapshot_dir),
            audit=AuditRunner.from_config(self.config) if with_audit else None,
            comparator=Comparator(self.config.comparison_config()),
        )

    def _run_command(self, args) -> int:
        """Handle the run command."""
        tracker = self._make_tracker(args)
        result = tracker.track(args.url)

        if not result.compared:
            render_no_comparison(self.console)
            return 0

        render_deltas(self.console, result.deltas, result.titles)

        if args.fail_on_regression and any(
            d.direction is Direction.SLOWER for d in result.deltas
        ):
            logger.warning("Performance regressed since the previous run")
            return EXIT_REGRESSION
        return 0

    def _compare_command(self, args) -> int:
        """Handle the compare command."""
        tracker = self._make_tracker(args, with_audit=False)
        deltas, titles = tracker.compare_files(args.from_report, args.to_report)

        if not deltas:
            render_no_comparable_metrics(self.console)
            return 0

        render_deltas(self.console, deltas, titles)
        stats = tracker.comparator.get_summary_stats(deltas)
        logger.debug(
            f"{stats['slower']} slower, {stats['faster']} faster, "
            f"{stats['unchanged']} unchanged (mean change {stats['mean_change']}%)"
        )
        return 0

    def _history_command(self, args) -> int:
        """Handle the history command."""
        tracker = self._make_tracker(args, with_audit=False)
        snapshots = tracker.history(args.url)

        logger.info(f"Found {len(snapshots)} snapshots for {args.url}")
        for snapshot in snapshots:
            self.console.print(
                Text(f"{snapshot.timestamp.isoformat()}  {len(snapshot.metrics)} metrics")
            )
        return 0

    def _config_command(self, args) -> int:
        """Handle the config command."""
        if args.init:
            self.config_manager.create_default_config()
            return 0

        if args.show:
            logger.info("Current configuration:")
            config_dict = self.config.to_dict()
            for key, value in config_dict.items():
                logger.info(f"  {key}: {value}")
            return 0

        logger.info("Use --init to create default config or --show to display current config")
        return 0


def main():
    """Main entry point for the CLI."""
    cli = TrackerCLI()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
