"""Tests for rolling window statistics."""

import pytest

from vix_fields.errors import UndefinedRank


class TestRankAndPercentile:
    """Tests for the rank/percentile formulas."""

    def test_rank_and_percentile_values(self):
        """Test rank and percentile of the current value within the window."""
        from vix_fields.stats.rolling import RollingWindow

        window = RollingWindow(capacity=10)
        window.warm_up([1.0, 2.0, 3.0, 4.0])
        stats = window.observe(3.0)

        assert stats.rank == pytest.approx(2 / 3)
        assert stats.percentile == pytest.approx(2 / 5)

    def test_current_is_new_high(self):
        """Test that a new high has rank 1 and counts itself in the percentile base."""
        from vix_fields.stats.rolling import rank_and_percentile

        stats = rank_and_percentile([0.2, 0.1, 0.3, 0.5])

        assert stats.rank == 1.0
        assert stats.percentile == pytest.approx(3 / 4)

    def test_all_equal_rank_undefined(self):
        """Test that a flat window yields an undefined rank, not 0 or 1."""
        from vix_fields.stats.rolling import RollingWindow

        window = RollingWindow(capacity=5)
        window.warm_up([0.25] * 4)
        stats = window.observe(0.25)

        assert stats.rank is None
        assert stats.percentile == 0.0

    def test_compute_rank_raises_on_degenerate_range(self):
        """Test the explicit degenerate-range error."""
        from vix_fields.stats.rolling import compute_rank

        with pytest.raises(UndefinedRank):
            compute_rank([1.0, 1.0], 1.0)

    def test_compute_percentile_raises_on_empty(self):
        """Test the explicit empty-window error."""
        from vix_fields.stats.rolling import compute_percentile

        with pytest.raises(UndefinedRank):
            compute_percentile([], 1.0)

    def test_missing_current_is_undefined(self):
        """Test that a missing current value yields no statistics."""
        from vix_fields.stats.rolling import RollingWindow

        window = RollingWindow(capacity=5)
        window.warm_up([1.0, 2.0])
        stats = window.observe(None)

        assert stats.rank is None
        assert stats.percentile is None
        assert len(window) == 3

    def test_missing_slots_ignored(self):
        """Test that missing observations do not enter the statistics."""
        from vix_fields.stats.rolling import rank_and_percentile

        stats = rank_and_percentile([1.0, None, 3.0, None, 2.0])

        assert stats.rank == pytest.approx(0.5)
        assert stats.percentile == pytest.approx(1 / 3)

    def test_empty_sequence(self):
        """Test that an empty sequence yields no statistics."""
        from vix_fields.stats.rolling import rank_and_percentile

        stats = rank_and_percentile([])

        assert stats.rank is None
        assert stats.percentile is None


class TestRollingWindow:
    """Tests for ring-buffer behaviour."""

    def test_eviction_at_capacity(self):
        """Test that the 253rd value evicts only the oldest of 252."""
        from vix_fields.stats.rolling import RollingWindow

        window = RollingWindow(capacity=252)
        window.warm_up(float(i) for i in range(252))
        assert window.is_full

        stats = window.observe(1000.0)
        values = window.values()

        assert len(window) == 252
        assert values[0] == 1.0
        assert values[-1] == 1000.0
        assert values[:-1] == [float(i) for i in range(1, 252)]
        assert stats.rank == 1.0
        assert stats.percentile == pytest.approx(251 / 252)

    def test_require_full_withholds(self):
        """Test that gated statistics wait until the window is full."""
        from vix_fields.stats.rolling import RollingWindow

        window = RollingWindow(capacity=3)
        assert window.observe(1.0, require_full=True).rank is None
        second = window.observe(2.0, require_full=True)
        assert second.rank is None and second.percentile is None

        third = window.observe(3.0, require_full=True)
        assert third.rank == 1.0
        assert third.percentile == pytest.approx(2 / 3)

    def test_missing_values_count_toward_capacity(self):
        """Test that a missing observation still occupies a slot."""
        from vix_fields.stats.rolling import RollingWindow

        window = RollingWindow(capacity=3)
        window.warm_up([1.0, None])
        stats = window.observe(2.0, require_full=True)

        assert window.is_full
        assert stats.rank == 1.0
        assert stats.percentile == pytest.approx(1 / 2)

    def test_invalid_capacity(self):
        """Test that a non-positive capacity is rejected."""
        from vix_fields.stats.rolling import RollingWindow

        with pytest.raises(ValueError):
            RollingWindow(capacity=0)


class TestWindowStore:
    """Tests for the per-underlying window store."""

    def test_windows_created_on_first_use(self):
        """Test lazy creation with the store's capacity."""
        from vix_fields.stats.store import WindowStore

        store = WindowStore(capacity=5)
        windows = store.windows_for("SPY")

        assert "SPY" in store
        assert len(windows.iv) == 0
        assert windows.vix.capacity == 5
        assert store.windows_for("SPY") is windows

    def test_underlyings_isolated(self):
        """Test that updates to one underlying leave others untouched."""
        from vix_fields.stats.store import WindowStore

        store = WindowStore(capacity=5)
        store.warm_up("SPY", [0.1, 0.2], vixes=[15.0])
        store.warm_up("QQQ", [0.3])

        assert store.windows_for("SPY").iv.values() == [0.1, 0.2]
        assert store.windows_for("SPY").vix.values() == [15.0]
        assert store.windows_for("QQQ").iv.values() == [0.3]
        assert len(store.windows_for("QQQ").vix) == 0
        assert sorted(store.underlyings()) == ["QQQ", "SPY"]
