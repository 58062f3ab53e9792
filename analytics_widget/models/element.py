"""Pydantic models for the data the host hands to the widget."""

from pydantic import ConfigDict, Field

from analytics_widget.models.analytics import CamelModel


class WidgetConfig(CamelModel):
    """Per-item configuration supplied by the host. Every field is optional."""

    model_config = ConfigDict(extra="ignore")

    analytics_service: str | None = Field(
        default=None, description="Analytics service to simulate, e.g. 'google-analytics'"
    )
    refresh_interval: int | None = Field(
        default=None, description="Auto refresh interval in minutes"
    )


class ItemInfo(CamelModel):
    """Identity of the content item being analyzed."""

    model_config = ConfigDict(frozen=True)

    name: str
    codename: str
