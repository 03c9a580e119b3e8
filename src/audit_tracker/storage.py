"""
Snapshot storage and management system.

Each audit run is stored as a JSON file named after its capture instant,
inside a directory named after the target identity::

    <root>/<identity>/<fetchTime with ':' replaced by '_'>.json

The name alone is enough to recover the timestamp, so no index file is kept.
"""
from __future__ import annotations

import fnmatch
import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Union

from .errors import CorruptSnapshotError, PersistenceError
from .report import (
    extract_metrics,
    extract_titles,
    fetch_time,
    format_timestamp,
    parse_timestamp,
    validate_report,
)

logger = logging.getLogger(__name__)

SNAPSHOT_EXTENSION = ".json"

PathLike = Union[str, Path]


def escape_timestamp(text: str) -> str:
    """Make a timestamp safe for use in a file name."""
    return text.replace(":", "_")


def unescape_name(name: str) -> str:
    """Reverse :func:`escape_timestamp` after dropping any file extension."""
    stem, ext = os.path.splitext(name)
    # Fractional seconds look like an extension ('.123Z'), real ones are alphabetic
    if ext and ext[1:].isalpha():
        name = stem
    return name.replace("_", ":")


def parse_stored_name(name: str) -> datetime:
    """Recover the capture instant from a stored snapshot name."""
    try:
        return parse_timestamp(unescape_name(name))
    except ValueError as e:
        raise CorruptSnapshotError(name, f"unparsable timestamp ({e})") from e


def stored_name_for(timestamp: datetime) -> str:
    """Return the stored name for a snapshot captured at ``timestamp``."""
    return escape_timestamp(format_timestamp(timestamp)) + SNAPSHOT_EXTENSION


def snapshot_name(snapshot: "Snapshot") -> str:
    """Return the stored name for ``snapshot``.

    The report's own ``fetchTime`` text is kept as written so its full
    precision and offset survive; a computed name is used only when that
    text is missing or disagrees with the snapshot's timestamp.
    """
    text = snapshot.raw_report.get("fetchTime")
    if isinstance(text, str) and "/" not in text and "\\" not in text and "_" not in text:
        try:
            if parse_timestamp(text) == snapshot.timestamp:
                return escape_timestamp(text) + SNAPSHOT_EXTENSION
        except ValueError:
            pass
    return stored_name_for(snapshot.timestamp)


@dataclass
class Snapshot:
    """One audit result for one target at one instant."""

    timestamp: datetime
    metrics: dict[str, float]
    raw_report: dict[str, Any] = field(repr=False)

    @property
    def titles(self) -> dict[str, str]:
        return extract_titles(self.raw_report)

    @classmethod
    def from_report(cls, report: dict[str, Any]) -> "Snapshot":
        """Build a snapshot from a freshly produced report.

        Raises ``ValueError`` if the report has no usable ``fetchTime`` or
        ``audits``.
        """
        validate_report(report)
        return cls(
            timestamp=fetch_time(report),
            metrics=extract_metrics(report),
            raw_report=report,
        )


class StorageBackend(ABC):
    """Minimal file primitives the snapshot store is built on.

    Every method raises ``OSError`` carrying the underlying cause.
    """

    @abstractmethod
    def exists(self, path: PathLike) -> bool:
        ...

    @abstractmethod
    def mkdir(self, path: PathLike) -> None:
        ...

    @abstractmethod
    def list_files(self, directory: PathLike, pattern: str = "*") -> list[str]:
        ...

    @abstractmethod
    def read_file(self, path: PathLike) -> bytes:
        ...

    @abstractmethod
    def write_file(self, path: PathLike, data: bytes) -> None:
        ...


class LocalStorage(StorageBackend):
    """Storage primitives on the local filesystem, relative to ``root``."""

    def __init__(self, root: PathLike):
        self.root = Path(root)

    def _resolve(self, path: PathLike) -> Path:
        return self.root / path

    def exists(self, path: PathLike) -> bool:
        return self._resolve(path).exists()

    def mkdir(self, path: PathLike) -> None:
        self._resolve(path).mkdir(parents=True, exist_ok=True)

    def list_files(self, directory: PathLike, pattern: str = "*") -> list[str]:
        target = self._resolve(directory)
        if not target.is_dir():
            return []
        return [
            entry.name
            for entry in target.iterdir()
            if entry.is_file() and fnmatch.fnmatchcase(entry.name, pattern)
        ]

    def read_file(self, path: PathLike) -> bytes:
        return self._resolve(path).read_bytes()

    def write_file(self, path: PathLike, data: bytes) -> None:
        target = self._resolve(path)
        # Exclusive create: never clobber an existing snapshot
        with open(target, "xb") as f:
            f.write(data)


class SnapshotStore:
    """Persists, enumerates and reads snapshots partitioned by target identity."""

    def __init__(self, backend: Union[StorageBackend, PathLike]):
        if not isinstance(backend, StorageBackend):
            backend = LocalStorage(backend)
        self.backend = backend

    def ensure_partition(self, identity: str) -> None:
        """Create the partition for ``identity`` if it does not exist yet."""
        try:
            if not self.backend.exists(identity):
                logger.debug(f"Creating snapshot partition {identity}")
                self.backend.mkdir(identity)
        except OSError as e:
            raise PersistenceError(f"Cannot create partition {identity}: {e}") from e

    def list(self, identity: str) -> list[str]:
        """List the stored snapshot names of ``identity``, sorted by name."""
        try:
            names = self.backend.list_files(identity, f"*{SNAPSHOT_EXTENSION}")
        except OSError as e:
            raise PersistenceError(f"Cannot list snapshots of {identity}: {e}") from e
        return sorted(names)

    def write(self, identity: str, snapshot: Snapshot) -> str:
        """Persist ``snapshot.raw_report`` and return the stored name."""
        name = snapshot_name(snapshot)
        path = f"{identity}/{name}"

        try:
            data = json.dumps(snapshot.raw_report, indent=2).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Cannot serialize snapshot {name}: {e}") from e

        try:
            if self.backend.exists(path):
                raise PersistenceError(
                    f"Snapshot {name} already exists for {identity}"
                )
            self.backend.write_file(path, data)
        except OSError as e:
            raise PersistenceError(f"Failed to write snapshot {path}: {e}") from e

        logger.debug(f"Stored snapshot {path}")
        return name

    def read(self, identity: str, stored_name: str) -> Snapshot:
        """Load a stored snapshot, recovering its timestamp from the name."""
        timestamp = parse_stored_name(stored_name)
        path = f"{identity}/{stored_name}"

        try:
            data = self.backend.read_file(path)
        except OSError as e:
            raise PersistenceError(f"Failed to read snapshot {path}: {e}") from e

        try:
            report = json.loads(data.decode("utf-8"))
            validate_report(report)
        except (UnicodeDecodeError, ValueError) as e:
            raise CorruptSnapshotError(stored_name, str(e)) from e

        return Snapshot(
            timestamp=timestamp,
            metrics=extract_metrics(report),
            raw_report=report,
        )
