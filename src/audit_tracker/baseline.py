"""
Baseline selection.

Picks the snapshot a new run is compared against: the most recent one in a
listing taken before the new snapshot is written.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from .errors import CorruptSnapshotError
from .storage import parse_stored_name

logger = logging.getLogger(__name__)


def select_baseline(names: Iterable[str]) -> Optional[str]:
    """Return the stored name with the latest timestamp, or None.

    Names whose timestamp cannot be recovered are skipped. Equal timestamps
    are resolved in favour of the lexicographically greatest name.
    """
    best = None
    for name in names:
        try:
            timestamp = parse_stored_name(name)
        except CorruptSnapshotError as e:
            logger.warning(f"Ignoring snapshot while selecting baseline: {e}")
            continue

        candidate = (timestamp, name)
        if best is None or candidate > best:
            best = candidate

    return best[1] if best is not None else None
