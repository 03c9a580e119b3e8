"""
Tracking workflow: audit a URL, compare it with the previous run, store it.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Union

from .baseline import select_baseline
from .comparator import Comparator, MetricDelta
from .errors import AuditEngineError, CorruptSnapshotError, PersistenceError, TrackerError
from .identity import resolve
from .storage import SNAPSHOT_EXTENSION, Snapshot, SnapshotStore

logger = logging.getLogger(__name__)

AuditFunction = Callable[[str], dict[str, Any]]


@dataclass
class TrackResult:
    """Outcome of tracking one URL."""

    identity: str
    stored_name: str
    baseline_name: Optional[str] = None
    deltas: list[MetricDelta] = field(default_factory=list)
    titles: dict[str, str] = field(default_factory=dict)
    baseline_error: Optional[TrackerError] = None

    @property
    def compared(self) -> bool:
        return self.baseline_name is not None and self.baseline_error is None


class Tracker:
    """Runs audits and keeps their history per target."""

    def __init__(
        self,
        store: SnapshotStore,
        audit: Optional[AuditFunction] = None,
        comparator: Optional[Comparator] = None,
    ):
        self.store = store
        self.audit = audit
        self.comparator = comparator or Comparator()

    def track(self, url: str) -> TrackResult:
        """Audit ``url``, diff it against the latest stored run and store it.

        A baseline that cannot be read is logged and skipped; the new run is
        stored regardless.
        """
        if self.audit is None:
            raise AuditEngineError("No audit engine configured")

        identity = resolve(url)
        self.store.ensure_partition(identity)

        # The listing must be taken before the new snapshot is written
        baseline_name = select_baseline(self.store.list(identity))
        if baseline_name is None:
            logger.info(f"No previous snapshots for {identity}")
        else:
            logger.info(f"Comparing against {identity}/{baseline_name}")

        logger.info(f"Auditing {url}")
        report = self.audit(url)
        try:
            current = Snapshot.from_report(report)
        except ValueError as e:
            raise AuditEngineError(f"Audit of {url} returned an unusable report: {e}") from e

        result = TrackResult(
            identity=identity,
            stored_name="",
            baseline_name=baseline_name,
            titles=current.titles,
        )

        if baseline_name is not None:
            try:
                baseline = self.store.read(identity, baseline_name)
            except (CorruptSnapshotError, PersistenceError) as e:
                logger.warning(f"Skipping comparison, baseline unreadable: {e}")
                result.baseline_error = e
            else:
                result.deltas = self.comparator.diff(baseline, current)
                result.titles = {**baseline.titles, **current.titles}

        result.stored_name = self.store.write(identity, current)
        logger.info(f"Stored snapshot {identity}/{result.stored_name}")
        return result

    def history(self, url: str) -> list[Snapshot]:
        """Read every readable snapshot of ``url``, oldest first."""
        identity = resolve(url)
        snapshots = []
        for name in self.store.list(identity):
            try:
                snapshots.append(self.store.read(identity, name))
            except (CorruptSnapshotError, PersistenceError) as e:
                logger.warning(f"Skipping {identity}/{name}: {e}")
        return sorted(snapshots, key=lambda s: s.timestamp)

    def compare_files(
        self, from_path: Union[str, Path], to_path: Union[str, Path]
    ) -> tuple[list[MetricDelta], dict[str, str]]:
        """Compare two report files directly.

        Returns the deltas and the metric titles of both reports.
        """
        baseline = load_report_file(from_path)
        current = load_report_file(to_path)
        deltas = self.comparator.diff(baseline, current)
        return deltas, {**baseline.titles, **current.titles}


def load_report_file(path: Union[str, Path]) -> Snapshot:
    """Load a report file, appending the ``.json`` extension when omitted."""
    path = Path(path)
    if not path.exists() and path.suffix != SNAPSHOT_EXTENSION:
        path = path.with_name(path.name + SNAPSHOT_EXTENSION)

    try:
        with open(path, "r", encoding="utf-8") as f:
            report = json.load(f)
    except OSError as e:
        raise PersistenceError(f"Failed to read report {path}: {e}") from e
    except ValueError as e:
        raise CorruptSnapshotError(str(path), str(e)) from e

    try:
        return Snapshot.from_report(report)
    except ValueError as e:
        raise CorruptSnapshotError(str(path), str(e)) from e
