"""Tests for the host config gate."""

import pytest

from analytics_widget.element.config import is_config, load_config, resolve_config
from analytics_widget.errors import MissingConfigError
from analytics_widget.models.element import WidgetConfig


class TestIsConfig:
    """Test is_config: reject absence, trust shape."""

    def test_none_is_rejected(self):
        assert is_config(None) is False

    def test_empty_mapping_is_accepted(self):
        assert is_config({}) is True

    def test_any_mapping_is_accepted(self):
        assert is_config({"unexpected": object()}) is True


class TestLoadConfig:
    """Test load_config."""

    def test_all_fields_absent(self):
        config = load_config({})

        assert config.analytics_service is None
        assert config.refresh_interval is None

    def test_reads_host_keys(self):
        config = load_config({"analyticsService": "google-analytics", "refreshInterval": 15})

        assert config.analytics_service == "google-analytics"
        assert config.refresh_interval == 15

    def test_unknown_keys_ignored(self):
        config = load_config({"analyticsService": "custom", "theme": "dark"})

        assert config == WidgetConfig(analytics_service="custom")

    def test_malformed_field_is_dropped(self):
        """A wrong-typed field is treated as absent; the rest is kept."""
        config = load_config({"analyticsService": "custom", "refreshInterval": "soon"})

        assert config.analytics_service == "custom"
        assert config.refresh_interval is None

    def test_missing_config_raises(self):
        with pytest.raises(MissingConfigError) as exc_info:
            load_config(None)
        assert exc_info.value.error == "missing_config"


class TestResolveConfig:
    """Test resolve_config fallback."""

    def test_none_falls_back_to_defaults(self):
        assert resolve_config(None) == WidgetConfig()

    def test_passes_valid_config_through(self):
        assert resolve_config({"refreshInterval": 5}).refresh_interval == 5

    def test_non_mapping_config_falls_back_to_defaults(self, caplog):
        with caplog.at_level("WARNING"):
            assert resolve_config(["analyticsService"]) == WidgetConfig()
            assert resolve_config("google-analytics") == WidgetConfig()
        assert "Ignoring config of type list" in caplog.text

    def test_missing_config_logs_error_code(self, caplog):
        with caplog.at_level("WARNING"):
            resolve_config(None)
        assert "missing_config" in caplog.text
