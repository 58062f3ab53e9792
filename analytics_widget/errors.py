"""Error signals raised at the widget's host boundary.

This module provides:
1. A base exception carrying a stable error code and optional context
2. The boundary errors for the value channel, the config channel and host I/O
3. A serializable error model for logging or diagnostics

None of these errors is fatal. The boundary components (value codec, config
gate, host channels) raise them and the caller falls back to a safe default.

Usage:
    from analytics_widget.errors import InvalidValueError

    try:
        value = decode_value(raw)
    except InvalidValueError as exc:
        logger.warning("Ignoring stored value: %s", exc.detail)
"""

from typing import Any

from pydantic import BaseModel


class ErrorInfo(BaseModel):
    """Standard error description model."""

    error: str
    detail: str | None = None
    context: dict[str, Any] | None = None


class WidgetError(Exception):
    """Base class for widget errors."""

    error: str = "widget_error"
    detail: str = "An unexpected widget error occurred"

    def __init__(self, detail: str | None = None, **context: Any) -> None:
        self.detail = detail or self.__class__.detail
        self.context = context if context else None
        super().__init__(self.detail)

    def to_info(self) -> ErrorInfo:
        """Convert exception to error description model."""
        return ErrorInfo(error=self.error, detail=self.detail, context=self.context)


class InvalidValueError(WidgetError):
    """The stored value string is not a well-formed wrapper object."""

    error = "invalid_value"
    detail = "Stored widget value is malformed"


class MissingConfigError(WidgetError):
    """The host supplied no configuration object."""

    error = "missing_config"
    detail = "Widget configuration is missing"


class ChannelError(WidgetError):
    """Reading from or writing to a host channel failed."""

    error = "channel_error"
    detail = "Host channel operation failed"
