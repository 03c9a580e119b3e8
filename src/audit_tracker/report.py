"""
Helpers for reading the few fields of an audit report the tracker relies on.

Reports are kept as plain mappings exactly as the audit engine produced them.
Only ``fetchTime`` and ``audits[key].numericValue``/``title`` are interpreted.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 instant such as ``2019-12-03T10:15:42.123Z``.

    Naive values are taken to be UTC. Raises ``ValueError`` when unparsable.
    """
    if not isinstance(text, str) or not text:
        raise ValueError(f"Not a timestamp: {text!r}")
    value = text
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(moment: datetime) -> str:
    """Format ``moment`` the way audit reports write ``fetchTime``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def validate_report(report: Any) -> None:
    """Raise ``ValueError`` if ``report`` lacks the shape the tracker needs."""
    if not isinstance(report, Mapping):
        raise ValueError(f"Report must be an object, got {type(report).__name__}")
    audits = report.get("audits")
    if not isinstance(audits, Mapping):
        raise ValueError("Report has no 'audits' object")


def fetch_time(report: Mapping[str, Any]) -> datetime:
    """Return the capture instant recorded in the report."""
    return parse_timestamp(report.get("fetchTime"))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def extract_metrics(report: Mapping[str, Any]) -> dict[str, float]:
    """Map every audit carrying a numeric value to that value."""
    metrics = {}
    for key, audit in (report.get("audits") or {}).items():
        if isinstance(audit, Mapping) and _is_number(audit.get("numericValue")):
            metrics[key] = audit["numericValue"]
    return metrics


def extract_titles(report: Mapping[str, Any]) -> dict[str, str]:
    """Map every audit to its display title."""
    titles = {}
    for key, audit in (report.get("audits") or {}).items():
        if isinstance(audit, Mapping) and isinstance(audit.get("title"), str):
            titles[key] = audit["title"]
    return titles
