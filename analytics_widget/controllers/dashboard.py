"""Dashboard controller: load-or-generate on mount, refresh on demand.

The controller owns a single ``DisplayState``. Every state change that
produces a new snapshot is written back to the host as a whole
``PersistedValue``. A refresh moves to REFRESHING synchronously, so a second
request made before the first one finishes is dropped rather than queued.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import timezone

from analytics_widget.config import get_settings
from analytics_widget.element.channels import ConfigChannel, ValueChannel
from analytics_widget.element.config import resolve_config
from analytics_widget.element.value import INVALID_VALUE, parse_value, serialize_value
from analytics_widget.errors import ChannelError
from analytics_widget.models.analytics import AnalyticsSnapshot, PersistedValue
from analytics_widget.models.element import ItemInfo, WidgetConfig
from analytics_widget.models.view import DashboardView, DisplayStatus, HistoryBar, StatCard
from analytics_widget.producers.analytics_producer import DataSource, make_data_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisplayState:
    status: DisplayStatus
    snapshot: AnalyticsSnapshot | None = None


class DashboardController:
    def __init__(
        self,
        value_channel: ValueChannel,
        config_channel: ConfigChannel,
        item: ItemInfo,
        data_source: DataSource | None = None,
        refresh_latency: float | None = None,
    ) -> None:
        settings = get_settings()
        self.value_channel = value_channel
        self.config_channel = config_channel
        self.item = item
        self.data_source = data_source or make_data_source(history_days=settings.widget.history_days)
        self.refresh_latency = (
            settings.widget.refresh_latency_sec if refresh_latency is None else refresh_latency
        )
        self.config = WidgetConfig()
        self.display_state = DisplayState(DisplayStatus.EMPTY)
        self._mounted = False
        self._refresh_task: asyncio.Task | None = None

    @property
    def can_refresh(self) -> bool:
        pending = self._refresh_task is not None and not self._refresh_task.done()
        return self.display_state.status is DisplayStatus.READY and not pending

    @property
    def auto_refresh_period(self) -> float | None:
        """Seconds between automatic refreshes, or None when disabled."""
        interval = self.config.refresh_interval
        if interval is None or interval <= 0:
            return None
        return interval * 60.0

    async def mount(self) -> DisplayState:
        """Load the stored snapshot, or generate and store a fresh one."""
        if self._mounted:
            return self.display_state
        self._mounted = True
        self.display_state = DisplayState(DisplayStatus.LOADING)

        self.config = resolve_config(await self._read_config())
        value = await self._read_value()

        if isinstance(value, PersistedValue) and value.has_snapshot():
            logger.info("Loaded stored analytics for %s", self.item.codename)
            self._set_ready(value.analytics_data)
            return self.display_state

        if isinstance(value, PersistedValue) and value.analytics_data is not None:
            logger.warning("Stored analytics for %s is malformed; regenerating", self.item.codename)

        snapshot = self.data_source()
        self._set_ready(snapshot)
        logger.info("Generated initial analytics for %s", self.item.codename)
        await self._persist(snapshot)
        return self.display_state

    def start_refresh(self) -> asyncio.Task | None:
        """Begin a refresh and return its task, or None if one cannot start now."""
        if not self.can_refresh:
            logger.debug(
                "Refresh ignored for %s (status=%s)", self.item.codename, self.display_state.status.value
            )
            return None
        self.display_state = DisplayState(DisplayStatus.REFRESHING, self.display_state.snapshot)
        self._refresh_task = asyncio.get_running_loop().create_task(self._run_refresh())
        self._refresh_task.add_done_callback(_retrieve_refresh_error)
        return self._refresh_task

    async def refresh(self) -> bool:
        """Refresh and wait for it to finish. Returns False if the request was dropped."""
        task = self.start_refresh()
        if task is None:
            return False
        # A started refresh always completes, even if the caller goes away.
        await asyncio.shield(task)
        return True

    async def run_auto_refresh(self, stop_event: asyncio.Event) -> None:
        period = self.auto_refresh_period
        if period is None:
            return
        logger.info("Auto refresh for %s every %.0f seconds", self.item.codename, period)
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=period)
            except asyncio.TimeoutError:
                try:
                    await self.refresh()
                except Exception:
                    logger.exception("Auto refresh failed for %s", self.item.codename)

    def view(self) -> DashboardView:
        return build_view(self.display_state, self.item, self.config, self.can_refresh)

    async def _run_refresh(self) -> None:
        previous = self.display_state.snapshot
        await asyncio.sleep(self.refresh_latency)
        try:
            snapshot = self.data_source()
        except Exception:
            logger.exception("Data source failed while refreshing %s", self.item.codename)
            self._set_ready(previous)
            raise
        self._set_ready(snapshot)
        await self._persist(snapshot)
        logger.info("Refreshed analytics for %s", self.item.codename)

    async def _read_config(self):
        try:
            return await self.config_channel.read()
        except ChannelError as e:
            logger.warning("Could not read widget config: %s", e.to_info().model_dump(exclude_none=True))
            return None

    async def _read_value(self):
        try:
            raw = await self.value_channel.read()
        except ChannelError as e:
            logger.warning(
                "Could not read stored value for %s: %s",
                self.item.codename,
                e.to_info().model_dump(exclude_none=True),
            )
            return INVALID_VALUE
        return parse_value(raw)

    async def _persist(self, snapshot: AnalyticsSnapshot) -> None:
        payload = serialize_value(PersistedValue(analytics_data=snapshot))
        try:
            await self.value_channel.write(payload)
        except ChannelError as e:
            logger.warning(
                "Could not store analytics for %s: %s",
                self.item.codename,
                e.to_info().model_dump(exclude_none=True),
            )

    def _set_ready(self, snapshot: AnalyticsSnapshot) -> None:
        self.display_state = DisplayState(DisplayStatus.READY, snapshot)


def _retrieve_refresh_error(task: asyncio.Task) -> None:
    # Errors are logged in _run_refresh.
    if not task.cancelled():
        task.exception()


def format_time(seconds: float) -> str:
    """Format a duration in seconds as e.g. ``2m 5s``."""
    return f"{int(seconds // 60)}m {int(seconds % 60)}s"


def views_trend(snapshot: AnalyticsSnapshot) -> int | None:
    """Percent change of the latest day against the average of the days before it."""
    views = [point.views for point in snapshot.page_views_history]
    if len(views) < 2:
        return None
    baseline = sum(views[:-1]) / (len(views) - 1)
    if baseline == 0:
        return None
    return round((views[-1] - baseline) / baseline * 100)


def build_view(
    state: DisplayState,
    item: ItemInfo,
    config: WidgetConfig,
    refresh_enabled: bool = False,
) -> DashboardView:
    view = DashboardView(
        item_name=item.name,
        item_codename=item.codename,
        status=state.status,
        is_refreshing=state.status is DisplayStatus.REFRESHING,
        refresh_enabled=refresh_enabled,
        service_label=f"Simulating: {config.analytics_service}" if config.analytics_service else None,
    )
    if view.is_refreshing:
        view.refresh_label = "Refreshing..."

    snapshot = state.snapshot
    if snapshot is None:
        return view

    window = f"Last {len(snapshot.page_views_history)} days"
    view.snapshot = snapshot
    view.last_updated = snapshot.last_updated.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    view.history = [
        HistoryBar(day=point.day, label=point.day.strftime("%a"), views=point.views)
        for point in snapshot.page_views_history
    ]
    view.cards = [
        StatCard(
            title="Page Views",
            value=f"{snapshot.page_views:,}",
            subtitle=window,
            trend=views_trend(snapshot),
        ),
        StatCard(title="Unique Visitors", value=f"{snapshot.unique_visitors:,}", subtitle=window),
        StatCard(title="Bounce Rate", value=f"{snapshot.bounce_rate}%", subtitle="Lower is better"),
        StatCard(
            title="Avg. Time on Page",
            value=format_time(snapshot.avg_time_on_page),
            subtitle="Higher is better",
        ),
    ]
    return view
