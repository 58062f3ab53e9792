"""Pydantic models for the analytics snapshot and its persisted wrapper."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model whose JSON keys are the host's camelCase names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PageViewsPoint(CamelModel):
    """Views recorded for a single calendar day."""

    day: date = Field(alias="date")
    views: int = Field(ge=0)


class AnalyticsSnapshot(CamelModel):
    """One complete set of analytics figures plus its daily history.

    ``unique_visitors <= page_views`` holds for generated snapshots but is not
    checked here, so stored values from older widgets still load.
    """

    page_views: int = Field(ge=0)
    unique_visitors: int = Field(ge=0)
    bounce_rate: float = Field(ge=0, le=100, description="Percentage")
    avg_time_on_page: float = Field(ge=0, description="Seconds")
    last_updated: datetime
    page_views_history: list[PageViewsPoint]


class PersistedValue(CamelModel):
    """Wrapper object exchanged with the host through the value channel.

    ``analytics_data`` is ``None`` when no snapshot has been stored yet.
    Values decoded from the host may carry an unchecked payload here; see
    ``analytics_widget.element.value.parse_value``.
    """

    analytics_data: AnalyticsSnapshot | None

    def has_snapshot(self) -> bool:
        return isinstance(self.analytics_data, AnalyticsSnapshot)
