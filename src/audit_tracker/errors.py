"""
Exception types raised by the audit tracker.

Storage primitives raise plain ``OSError``; the snapshot store wraps those
into :class:`PersistenceError` so callers only need to handle this hierarchy.
"""
from __future__ import annotations

from typing import Optional


class TrackerError(Exception):
    """Base class for all audit tracker errors."""


class InvalidTargetError(TrackerError):
    """The target URL is malformed and cannot be turned into an identity."""


class PersistenceError(TrackerError):
    """A snapshot could not be written to or read from storage."""


class CorruptSnapshotError(TrackerError):
    """A stored snapshot has an unparsable name or payload."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Corrupt snapshot {name}: {reason}")
        self.name = name
        self.reason = reason


class AuditEngineError(TrackerError):
    """The external audit engine failed to produce a report."""

    def __init__(self, message: str, stderr: Optional[str] = None):
        super().__init__(message)
        self.stderr = stderr
