"""Tests for baseline selection."""

import random

from audit_tracker.baseline import select_baseline

T1 = "2021-01-01T09_00_00.000Z.json"
T2 = "2021-01-01T10_00_00.000Z.json"
T3 = "2021-03-15T08_00_00.000Z.json"


class TestSelectBaseline:
    """Tests for select_baseline()."""

    def test_empty_listing(self):
        assert select_baseline([]) is None

    def test_latest_selected(self):
        assert select_baseline([T1, T2, T3]) == T3

    def test_listing_order_irrelevant(self):
        names = [T1, T2, T3]
        random.Random(7).shuffle(names)

        assert select_baseline(names) == T3

    def test_single_entry(self):
        assert select_baseline([T1]) == T1

    def test_compares_instants_not_names(self):
        # 09:30 UTC, although its name sorts after T2
        offset = "2021-01-01T11_30_00.000+02_00.json"

        assert select_baseline([T2, offset]) == T2
        assert select_baseline([T1, offset]) == offset

    def test_equal_instants_resolved_deterministically(self):
        a = "2021-01-01T10_00_00Z.json"
        b = "2021-01-01T10_00_00.000Z.json"

        assert select_baseline([a, b]) == select_baseline([b, a])

    def test_unparsable_names_skipped(self):
        assert select_baseline(["latest.json", T1]) == T1
        assert select_baseline(["latest.json"]) is None

    def test_accepts_iterators(self):
        assert select_baseline(iter([T2, T1])) == T2
