import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]

# Prefer this checkout over any installed copy of the package
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

import pytest  # noqa: E402
import pytz  # noqa: E402

from analytics_backend.config.settings import clear_settings_cache  # noqa: E402


@pytest.fixture
def berlin():
    """A zone with daylight saving transitions"""
    return pytz.timezone("Europe/Berlin")


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test reads settings from its own environment"""
    clear_settings_cache()
    yield
    clear_settings_cache()
