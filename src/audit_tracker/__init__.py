"""
Performance audit tracking.

This package stores Lighthouse audit results per target URL and reports
how each tracked metric changed since the previous run.
"""

import logging
import sys

__version__ = "0.1.0"

# Configure logging for the package
def configure_logging(level=logging.INFO):
    """Configure logging for the audit_tracker package."""
    # Configure the package-level logger
    logger = logging.getLogger('audit_tracker')

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        formatter = logging.Formatter('%(levelname)s: %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(level)

    return logger

# Configure logging by default
configure_logging()

# Import main classes for public API
from .baseline import select_baseline
from .cli import TrackerCLI, main
from .comparator import (
    DEFAULT_TRACKED_METRICS,
    Comparator,
    ComparisonConfig,
    Direction,
    MetricDelta,
    diff,
)
from .config import ConfigManager, TrackerConfig
from .errors import (
    AuditEngineError,
    CorruptSnapshotError,
    InvalidTargetError,
    PersistenceError,
    TrackerError,
)
from .identity import resolve
from .runner import AuditRunner
from .storage import (
    LocalStorage,
    Snapshot,
    SnapshotStore,
    StorageBackend,
    escape_timestamp,
    parse_stored_name,
    unescape_name,
)
from .tracker import Tracker, TrackResult

__all__ = [
    # Version
    "__version__",
    "configure_logging",
    # Identity
    "resolve",
    # Storage
    "Snapshot",
    "SnapshotStore",
    "StorageBackend",
    "LocalStorage",
    "escape_timestamp",
    "unescape_name",
    "parse_stored_name",
    # Baseline
    "select_baseline",
    # Comparator
    "Comparator",
    "ComparisonConfig",
    "Direction",
    "MetricDelta",
    "DEFAULT_TRACKED_METRICS",
    "diff",
    # Runner
    "AuditRunner",
    "Tracker",
    "TrackResult",
    # Config
    "ConfigManager",
    "TrackerConfig",
    # Errors
    "TrackerError",
    "InvalidTargetError",
    "PersistenceError",
    "CorruptSnapshotError",
    "AuditEngineError",
    # CLI
    "TrackerCLI",
    "main",
]
