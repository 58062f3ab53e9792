"""Tests for the synthetic analytics data source."""

import random
from datetime import date, datetime, timezone

from analytics_widget.producers.analytics_producer import (
    generate_fake_analytics,
    make_data_source,
)

NOW = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)


class TestGenerateFakeAnalytics:
    """Test generated snapshot shape and ranges."""

    def test_history_covers_seven_days_ending_today(self):
        snapshot = generate_fake_analytics(now=NOW, rng=random.Random(3))

        days = [point.day for point in snapshot.page_views_history]
        assert len(days) == 7
        assert days[0] == date(2026, 10, 13)
        assert days[-1] == date(2026, 10, 19)

    def test_history_length_follows_window(self):
        snapshot = generate_fake_analytics(now=NOW, rng=random.Random(3), history_days=30)
        assert len(snapshot.page_views_history) == 30

    def test_figures_within_reference_ranges(self):
        rng = random.Random(11)
        for _ in range(50):
            snapshot = generate_fake_analytics(now=NOW, rng=rng)
            assert all(100 <= p.views <= 599 for p in snapshot.page_views_history)
            assert snapshot.page_views == sum(p.views for p in snapshot.page_views_history)
            assert 0.6 * snapshot.page_views - 1 <= snapshot.unique_visitors <= snapshot.page_views
            assert 20 <= snapshot.bounce_rate <= 50
            assert 45 <= snapshot.avg_time_on_page <= 225
            assert snapshot.last_updated == NOW

    def test_uses_utc_calendar_day(self):
        late_evening = datetime.fromisoformat("2026-10-19T23:30:00-05:00")

        snapshot = generate_fake_analytics(now=late_evening, rng=random.Random(0))

        assert snapshot.page_views_history[-1].day == date(2026, 10, 20)


class TestMakeDataSource:
    """Test seeded data sources."""

    def test_same_seed_same_snapshots(self):
        first = make_data_source(seed=42, clock=lambda: NOW)
        second = make_data_source(seed=42, clock=lambda: NOW)

        assert first() == second()
        assert first() == second()

    def test_consecutive_calls_differ(self):
        source = make_data_source(seed=42, clock=lambda: NOW)
        assert source() != source()
