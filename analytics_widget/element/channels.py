"""Host channels the widget reads from and writes to.

The controller only sees the ``ValueChannel`` and ``ConfigChannel``
protocols. The in-memory implementations back tests and simple embeddings;
``RedisValueChannel`` keeps each item's value string under its own key.
"""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

import redis.asyncio as redis
from redis.exceptions import RedisError

from analytics_widget.errors import ChannelError
from analytics_widget.models.element import ItemInfo

logger = logging.getLogger(__name__)


class ValueChannel(Protocol):
    async def read(self) -> str | None: ...

    async def write(self, value: str) -> None: ...


class ConfigChannel(Protocol):
    async def read(self) -> Mapping[str, Any] | None: ...


class InMemoryValueChannel:
    """Value channel holding the stored string in memory."""

    def __init__(self, initial: str | None = None) -> None:
        self.value = initial
        self.writes: list[str] = []

    async def read(self) -> str | None:
        return self.value

    async def write(self, value: str) -> None:
        self.value = value
        self.writes.append(value)


class StaticConfigChannel:
    """Config channel returning a fixed mapping (or ``None``)."""

    def __init__(self, config: Mapping[str, Any] | None = None) -> None:
        self._config = config

    async def read(self) -> Mapping[str, Any] | None:
        return self._config


class RedisValueChannel:
    """Value channel storing the string in Redis, one key per content item."""

    def __init__(self, redis_client: redis.Redis, item: ItemInfo, key_prefix: str = "widget:value:") -> None:
        self.redis_client = redis_client
        self.key = f"{key_prefix}{item.codename}"

    async def read(self) -> str | None:
        try:
            value = await self.redis_client.get(self.key)
            if isinstance(value, bytes):
                value = value.decode("utf-8")
        except RedisError as e:
            raise ChannelError(detail="Failed to read widget value", key=self.key) from e
        except UnicodeDecodeError as e:
            raise ChannelError(detail="Stored widget value is not UTF-8", key=self.key) from e
        return value

    async def write(self, value: str) -> None:
        try:
            await self.redis_client.set(self.key, value)
        except RedisError as e:
            raise ChannelError(detail="Failed to write widget value", key=self.key) from e
        logger.debug("Stored widget value under %s (%d bytes)", self.key, len(value))
