import pytest
from typer.testing import CliRunner
from pathlib import Path

from swrcache.api import reset_default_context
from swrcache.core.context import CacheContext
from swrcache.domain.models.options import CacheSettings
from swrcache.infrastructure.config import settings as config_settings

MIN_TIME_TO_STALE = 30 * 60
MAX_TIME_TO_LIVE = 7 * 24 * 60 * 60

SWRCACHE_ENV_VARS = [
    config_settings.ENV_CACHE_DIR,
    config_settings.ENV_ENABLED,
    config_settings.ENV_MIN_TIME_TO_STALE,
    config_settings.ENV_MAX_TIME_TO_LIVE,
    config_settings.ENV_CONFIG_FILE,
    config_settings.ENV_LOG_LEVEL,
    config_settings.ENV_LOG_FILE,
]


class FakeClock:
    """Callable clock whose time only moves when a test says so."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_configuration(monkeypatch, tmp_path: Path):
    """Keeps the user's environment, .env and YAML files out of every test."""
    for var in SWRCACHE_ENV_VARS:
        # setenv first so teardown also removes values a test loaded from a .env file
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.setenv(config_settings.ENV_CONFIG_FILE, str(tmp_path / "no-such-config.yaml"))
    monkeypatch.chdir(tmp_path)
    config_settings.reset_configuration()
    config_settings.clear_test_config()
    reset_default_context()
    yield
    config_settings.reset_configuration()
    config_settings.clear_test_config()
    reset_default_context()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "stores"


@pytest.fixture
def settings(cache_dir: Path) -> CacheSettings:
    return CacheSettings(
        cache_dir=cache_dir,
        enabled=True,
        min_time_to_stale=MIN_TIME_TO_STALE,
        max_time_to_live=MAX_TIME_TO_LIVE,
    )


@pytest.fixture
def context(settings: CacheSettings, clock: FakeClock) -> CacheContext:
    return CacheContext(settings, clock=clock)


@pytest.fixture
def disabled_context(cache_dir: Path, clock: FakeClock) -> CacheContext:
    settings = CacheSettings(cache_dir=cache_dir, enabled=False)
    return CacheContext(settings, clock=clock)


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()
