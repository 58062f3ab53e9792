"""Codec for the opaque value string the host stores for the widget.

Validation is shallow on purpose: a stored string is accepted as long as it is
a JSON object with an ``analyticsData`` key. The snapshot under that key is
returned typed when it validates, otherwise it is passed through unchecked
and the caller decides what to do with it.
"""

import enum
import json
import logging
from typing import Any

from pydantic import ValidationError

from analytics_widget.errors import InvalidValueError
from analytics_widget.models.analytics import AnalyticsSnapshot, PersistedValue

logger = logging.getLogger(__name__)

VALUE_KEY = "analyticsData"


class _Invalid(enum.Enum):
    INVALID_VALUE = "invalidValue"

    def __repr__(self) -> str:
        return "INVALID_VALUE"


INVALID_VALUE = _Invalid.INVALID_VALUE


def _coerce_snapshot(data: Any) -> AnalyticsSnapshot | Any:
    if data is None:
        return None
    try:
        return AnalyticsSnapshot.model_validate(data)
    except ValidationError as e:
        logger.debug("Stored analyticsData is not a valid snapshot: %s", e)
        return data


def decode_value(raw: str | None) -> PersistedValue | None:
    """Decode a stored value string.

    Raises:
        InvalidValueError: If ``raw`` is not JSON or lacks ``analyticsData``.

    Returns:
        ``None`` when nothing was stored, else the wrapper object.
    """
    if raw is None:
        return None

    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise InvalidValueError(detail="Stored value is not valid JSON", reason=str(e)) from e

    if not isinstance(parsed, dict) or VALUE_KEY not in parsed:
        raise InvalidValueError(detail=f"Stored value has no {VALUE_KEY!r} field")

    return PersistedValue.model_construct(analytics_data=_coerce_snapshot(parsed[VALUE_KEY]))


def parse_value(raw: str | None) -> PersistedValue | None | _Invalid:
    """Decode a stored value string, returning ``INVALID_VALUE`` on malformed input."""
    try:
        return decode_value(raw)
    except InvalidValueError as e:
        logger.warning("Ignoring stored widget value: %s", e.detail)
        return INVALID_VALUE


def serialize_value(value: PersistedValue) -> str:
    """Encode the wrapper object as the string handed back to the host."""
    return value.model_dump_json(by_alias=True)
