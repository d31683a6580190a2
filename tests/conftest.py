import pathlib
import sys

import pytest

p = str(pathlib.Path(__file__).resolve().parents[1])
sys.path.insert(0, p) if p not in sys.path else None

from taxplanner.config import get_settings  # noqa: E402
from taxplanner.data import clear_cache  # noqa: E402

_ENV_KEYS = (
    "TAX_YEAR",
    "DEFAULT_PROVINCE",
    "TAX_DATA_DIR",
    "LOG_DIR",
    "TELEMETRY_LOG_ENABLED",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    clear_cache()
    yield
    get_settings.cache_clear()
    clear_cache()
