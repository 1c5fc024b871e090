import pytest

from geoproximity.config.settings import get_logging_config, get_settings
from geoproximity.core.env import get_project_root, load_dotenv_if_present


@pytest.fixture(autouse=True)
def _fresh_settings_cache():
    # Settings and project-root lookups are lru_cached; env-dependent tests must not leak into each other.
    for cached in (get_settings, get_logging_config, get_project_root, load_dotenv_if_present):
        cached.cache_clear()
    yield
    for cached in (get_settings, get_logging_config, get_project_root, load_dotenv_if_present):
        cached.cache_clear()
