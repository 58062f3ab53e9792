"""Gate for the configuration object the host passes to the widget.

The gate only rejects absence. Any mapping, including ``{}``, is accepted and
every field of the resulting ``WidgetConfig`` stays optional.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from analytics_widget.errors import MissingConfigError
from analytics_widget.models.element import WidgetConfig

logger = logging.getLogger(__name__)


def is_config(raw: Mapping[str, Any] | None) -> bool:
    return raw is not None


def load_config(raw: Mapping[str, Any] | None) -> WidgetConfig:
    """Build a ``WidgetConfig`` from the host's raw config mapping.

    Fields with the wrong type are dropped and treated as absent.

    Raises:
        MissingConfigError: If the host supplied no config at all.
    """
    if not is_config(raw):
        raise MissingConfigError()

    if not isinstance(raw, Mapping):
        logger.warning("Ignoring config of type %s; using defaults", type(raw).__name__)
        return WidgetConfig()

    data = dict(raw)
    try:
        return WidgetConfig.model_validate(data)
    except ValidationError as e:
        bad = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
        logger.warning("Dropping malformed config fields: %s", ", ".join(sorted(bad)))
        return WidgetConfig.model_validate({k: v for k, v in data.items() if k not in bad})


def resolve_config(raw: Mapping[str, Any] | None) -> WidgetConfig:
    """Like ``load_config`` but falls back to an all-default config."""
    try:
        return load_config(raw)
    except MissingConfigError as e:
        logger.warning("Using default config: %s", e.to_info().model_dump(exclude_none=True))
        return WidgetConfig()
