"""Synthetic analytics data source.

The controller only needs a zero-argument callable returning an
``AnalyticsSnapshot``. ``make_data_source`` binds the generator to its own
``random.Random`` so tests can pass a seed and get reproducible snapshots.
"""

import math
import random
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from analytics_widget.models.analytics import AnalyticsSnapshot, PageViewsPoint

DataSource = Callable[[], AnalyticsSnapshot]

DEFAULT_HISTORY_DAYS = 7


def generate_fake_analytics(
    now: datetime | None = None,
    rng: random.Random | None = None,
    history_days: int = DEFAULT_HISTORY_DAYS,
) -> AnalyticsSnapshot:
    """Generate a snapshot covering ``history_days`` UTC days ending today."""
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)
    today = now.astimezone(timezone.utc).date()

    history = [
        PageViewsPoint(
            day=today - timedelta(days=history_days - 1 - i),
            views=rng.randint(100, 599),
        )
        for i in range(history_days)
    ]
    total_views = sum(point.views for point in history)

    return AnalyticsSnapshot(
        page_views=total_views,
        # 60-80% of page views
        unique_visitors=math.floor(total_views * (0.6 + rng.random() * 0.2)),
        bounce_rate=round(20 + rng.random() * 30, 1),
        avg_time_on_page=round(45 + rng.random() * 180, 1),
        last_updated=now,
        page_views_history=history,
    )


def make_data_source(
    seed: int | None = None,
    history_days: int = DEFAULT_HISTORY_DAYS,
    clock: Callable[[], datetime] | None = None,
) -> DataSource:
    rng = random.Random(seed)
    clock = clock or (lambda: datetime.now(timezone.utc))

    def generate() -> AnalyticsSnapshot:
        return generate_fake_analytics(now=clock(), rng=rng, history_days=history_days)

    return generate
