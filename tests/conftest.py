"""
Pytest configuration and shared fixtures for audit_tracker tests.
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from audit_tracker.storage import SnapshotStore

TITLES = {
    "first-contentful-paint": "First Contentful Paint",
    "speed-index": "Speed Index",
    "interactive": "Time to Interactive",
    "total-blocking-time": "Total Blocking Time",
}


def build_report(fetch_time="2019-12-03T10:15:42.123Z", **metrics):
    """Build a minimal Lighthouse-shaped report.

    Keyword arguments use underscores for the metric key's dashes.
    """
    audits = {}
    for name, value in metrics.items():
        key = name.replace("_", "-")
        audits[key] = {
            "id": key,
            "title": TITLES.get(key, key),
            "numericValue": value,
        }
    return {"fetchTime": fetch_time, "finalUrl": "https://example.com/", "audits": audits}


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    # Cleanup
    if temp_path.exists():
        shutil.rmtree(temp_path)


@pytest.fixture
def temp_snapshot_dir(temp_dir):
    """Create a temporary snapshot directory."""
    snapshot_path = temp_dir / "snapshots"
    snapshot_path.mkdir(parents=True, exist_ok=True)
    return snapshot_path


@pytest.fixture
def store(temp_snapshot_dir):
    """Create a SnapshotStore on the temporary snapshot directory."""
    return SnapshotStore(temp_snapshot_dir)


@pytest.fixture
def report_factory():
    return build_report
