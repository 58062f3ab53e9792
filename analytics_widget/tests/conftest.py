import os
import random
import sys
from datetime import datetime, timezone

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

import pytest

from analytics_widget.config import clear_settings_cache
from analytics_widget.models.element import ItemInfo
from analytics_widget.producers.analytics_producer import generate_fake_analytics


@pytest.fixture(autouse=True)
def _fresh_settings():
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def item() -> ItemInfo:
    return ItemInfo(name="Spring launch article", codename="spring_launch_article")


@pytest.fixture
def snapshot():
    return generate_fake_analytics(
        now=datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc),
        rng=random.Random(1),
    )
