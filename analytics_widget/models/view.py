"""Pydantic models describing what the widget presents to the user."""

import enum
from datetime import date

from pydantic import BaseModel

from analytics_widget.models.analytics import AnalyticsSnapshot


class DisplayStatus(str, enum.Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"
    REFRESHING = "refreshing"


class StatCard(BaseModel):
    """A single headline figure.

    ``trend`` is a whole percentage change; ``None`` when there is nothing
    to compare against.
    """

    title: str
    value: str
    subtitle: str | None = None
    trend: int | None = None


class HistoryBar(BaseModel):
    """One bar of the daily page views chart."""

    day: date
    label: str
    views: int


class DashboardView(BaseModel):
    """Render-ready view of the dashboard.

    While refreshing, ``snapshot`` is still the previous snapshot and
    ``is_refreshing`` is set so the presenter can show progress.
    """

    item_name: str
    item_codename: str
    status: DisplayStatus
    snapshot: AnalyticsSnapshot | None = None
    is_refreshing: bool = False
    refresh_enabled: bool = False
    refresh_label: str = "Refresh Data"
    last_updated: str | None = None
    service_label: str | None = None
    cards: list[StatCard] = []
    history: list[HistoryBar] = []
