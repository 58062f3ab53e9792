"""Widget lifespan management.

This module wires the widget together for one mount inside a host: it builds
the host channels (optionally Redis backed), creates and mounts the
controller, starts the auto-refresh background task, and tears everything
down again.

Usage:
    async with widget_lifespan(item, config=host_config) as resources:
        view = resources.controller.view()
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import redis.asyncio as redis

from analytics_widget.config import get_settings
from analytics_widget.controllers.dashboard import DashboardController
from analytics_widget.element.channels import (
    InMemoryValueChannel,
    RedisValueChannel,
    StaticConfigChannel,
    ValueChannel,
)
from analytics_widget.models.element import ItemInfo
from analytics_widget.producers.analytics_producer import DataSource

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"


def configure_logging() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.logging.log_level.upper(), format=LOG_FORMAT)
    if settings.logging.debug:
        logging.getLogger("analytics_widget").setLevel(logging.DEBUG)


@dataclass
class WidgetResources:
    """Container for resources created for one widget mount."""

    controller: DashboardController | None = None
    redis_client: redis.Redis | None = None
    stop_event: asyncio.Event | None = None
    background_tasks: list[asyncio.Task] = field(default_factory=list)


async def init_redis() -> redis.Redis:
    """Create a Redis client from settings.

    Returns:
        Configured Redis client.
    """
    settings = get_settings()
    return redis.Redis(
        host=settings.redis.host,
        port=settings.redis.port,
        password=settings.redis.password if settings.redis.password else None,
        db=settings.redis.db,
        socket_timeout=settings.redis.socket_timeout,
        socket_connect_timeout=settings.redis.socket_connect_timeout,
        decode_responses=True,
    )


async def setup_widget(
    item: ItemInfo,
    config: Mapping[str, Any] | None = None,
    value_channel: ValueChannel | None = None,
    data_source: DataSource | None = None,
) -> WidgetResources:
    """Build channels and controller, mount, and start background tasks.

    Args:
        item: The content item the widget is shown for.
        config: The host's raw config mapping (may be ``None``).
        value_channel: Host value channel; when omitted a Redis or in-memory
            channel is created depending on settings.
        data_source: Snapshot generator override.

    Returns:
        WidgetResources holding the mounted controller.
    """
    settings = get_settings()
    resources = WidgetResources()

    if value_channel is None:
        if settings.widget.use_redis:
            resources.redis_client = await init_redis()
            value_channel = RedisValueChannel(
                resources.redis_client, item, key_prefix=settings.widget.value_key_prefix
            )
        else:
            value_channel = InMemoryValueChannel()

    try:
        resources.controller = DashboardController(
            value_channel=value_channel,
            config_channel=StaticConfigChannel(config),
            item=item,
            data_source=data_source,
        )
        await resources.controller.mount()

        if resources.controller.auto_refresh_period is not None:
            resources.stop_event = asyncio.Event()
            resources.background_tasks.append(
                asyncio.create_task(resources.controller.run_auto_refresh(resources.stop_event))
            )
    except Exception:
        logger.exception("Widget setup failed for %s", item.codename)
        await cleanup_widget(resources)
        raise

    return resources


async def cleanup_widget(resources: WidgetResources) -> None:
    """Stop background tasks and release resources.

    Args:
        resources: The resources to clean up.
    """
    if resources.background_tasks and resources.stop_event:
        resources.stop_event.set()
        try:
            await asyncio.wait_for(
                asyncio.gather(*resources.background_tasks, return_exceptions=True),
                timeout=5,
            )
        except asyncio.TimeoutError:
            logger.warning("Background tasks did not stop in time; cancelling")
            for t in resources.background_tasks:
                t.cancel()
        resources.background_tasks.clear()

    if resources.redis_client:
        await resources.redis_client.aclose()
        resources.redis_client = None


@asynccontextmanager
async def widget_lifespan(
    item: ItemInfo,
    config: Mapping[str, Any] | None = None,
    value_channel: ValueChannel | None = None,
    data_source: DataSource | None = None,
) -> AsyncIterator[WidgetResources]:
    configure_logging()
    resources = await setup_widget(item, config, value_channel, data_source)
    try:
        yield resources
    finally:
        await cleanup_widget(resources)
