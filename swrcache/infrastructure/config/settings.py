"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and an optional
YAML configuration file (e.g., ~/.swrcache/config.yaml), and turns them into
the validated CacheSettings every CacheContext is built from.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from swrcache.domain.exceptions import CacheConfigError
from swrcache.domain.models.options import (
    CacheSettings,
    DEFAULT_MAX_TIME_TO_LIVE,
    DEFAULT_MIN_TIME_TO_STALE,
)

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".swrcache"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
DEFAULT_CACHE_DIR = DEFAULT_CONFIG_DIR / "stores"
ENV_FILE_NAME = ".env"

# Environment variable -> YAML key
ENV_CACHE_DIR = "SWRCACHE_DIR"
ENV_ENABLED = "SWRCACHE_ENABLED"
ENV_MIN_TIME_TO_STALE = "SWRCACHE_MIN_TIME_TO_STALE"
ENV_MAX_TIME_TO_LIVE = "SWRCACHE_MAX_TIME_TO_LIVE"
ENV_CONFIG_FILE = "SWRCACHE_CONFIG_FILE"
ENV_LOG_LEVEL = "SWRCACHE_LOG_LEVEL"
ENV_LOG_FILE = "SWRCACHE_LOG_FILE"

YAML_KEYS = {
    ENV_CACHE_DIR: "cache.dir",
    ENV_ENABLED: "cache.enabled",
    ENV_MIN_TIME_TO_STALE: "cache.min_time_to_stale",
    ENV_MAX_TIME_TO_LIVE: "cache.max_time_to_live",
    ENV_LOG_LEVEL: "logging.level",
    ENV_LOG_FILE: "logging.file",
}

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flattens nested YAML mappings into dotted keys ({'cache': {'dir': x}} -> {'cache.dir': x})."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Test overrides
    2. Environment Variables
    3. .env file
    4. YAML configuration file
    5. Default values

    Args:
        config_file: Path to the YAML configuration file. Defaults to
            ``$SWRCACHE_CONFIG_FILE`` or ~/.swrcache/config.yaml.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. .env first so it can point at a config file; never overrides real env vars
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug(".env file not found at or above current directory.")

    # 2. YAML file (lowest priority)
    if config_file is None:
        config_file = Path(os.environ.get(ENV_CONFIG_FILE, DEFAULT_CONFIG_FILE)).expanduser()
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 3. Environment variables are read on demand by get_config
    _loaded = True
    logger.debug("Configuration loading process completed.")


def reset_configuration() -> None:
    """Forgets loaded configuration so the next load_configuration() reads again."""
    global _config, _loaded
    _config = {}
    _loaded = False


def _coerce(value: str) -> Any:
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except (ValueError, TypeError):
        return value


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration
    2. Environment variable (``key`` as given, uppercased)
    3. YAML config (the dotted key mapped from ``key``, or ``key`` itself)
    4. Default value

    Args:
        key: The configuration key, e.g. 'SWRCACHE_DIR' or 'cache.dir'
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = key.upper()
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    yaml_key = YAML_KEYS.get(key, key)
    if yaml_key in _config:
        return _config[yaml_key]

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    try:
        cwd = Path.cwd()
        for path in [cwd] + list(cwd.parents):
            env_path = path / ENV_FILE_NAME
            if env_path.is_file():
                return env_path
    except OSError as e:
        logger.warning(f"Error searching for .env file: {e}")
    return None


def _as_bool(key: str, value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value.lower() in ('true', '1', 'yes', 'on'):
            return True
        if value.lower() in ('false', '0', 'no', 'off'):
            return False
        logger.warning(f"Unexpected string value for {key}: '{value}'. Defaulting to {default}.")
        return default
    if value is None:
        return default
    return bool(value)


def _as_seconds(key: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise CacheConfigError(f"{key} must be a number of seconds, got {value!r}") from e


# --- Convenience Functions ---

def get_cache_dir() -> Path:
    return Path(str(get_config(ENV_CACHE_DIR, DEFAULT_CACHE_DIR))).expanduser()


def get_cache_enabled(dev_mode: bool = False, dev_caching: bool = False) -> bool:
    """Whether caching is on.

    Caching is always on outside development mode. In development mode it is
    off unless ``dev_caching`` opts in, so a dev workflow sees fresh output.
    An explicit SWRCACHE_ENABLED wins over both.
    """
    default = (not dev_mode) or dev_caching
    return _as_bool(ENV_ENABLED, get_config(ENV_ENABLED), default)


def load_cache_settings(dev_mode: bool = False, dev_caching: bool = False) -> CacheSettings:
    """Builds validated CacheSettings from the loaded configuration.

    Raises:
        CacheConfigError: If a value is malformed or the time window is inconsistent.
    """
    load_configuration()
    settings = CacheSettings(
        cache_dir=get_cache_dir(),
        enabled=get_cache_enabled(dev_mode=dev_mode, dev_caching=dev_caching),
        min_time_to_stale=_as_seconds(ENV_MIN_TIME_TO_STALE, get_config(ENV_MIN_TIME_TO_STALE, DEFAULT_MIN_TIME_TO_STALE)),
        max_time_to_live=_as_seconds(ENV_MAX_TIME_TO_LIVE, get_config(ENV_MAX_TIME_TO_LIVE, DEFAULT_MAX_TIME_TO_LIVE)),
    )
    logger.debug(f"Resolved cache settings: {settings}")
    return settings


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")


# --- Logging Settings (used by the command line) ---

def get_log_level(default: int = logging.WARNING) -> int:
    """Resolves SWRCACHE_LOG_LEVEL / logging.level to a logging level number.

    Accepts level names in any case ('debug', 'INFO') or numbers.

    Raises:
        CacheConfigError: If the value names no known level.
    """
    load_configuration()
    value = get_config(ENV_LOG_LEVEL)
    if value is None or value == "":
        return default
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    level = logging.getLevelName(str(value).upper())
    if not isinstance(level, int):
        raise CacheConfigError(f"{ENV_LOG_LEVEL} must be a logging level name, got {value!r}")
    return level


def get_log_file() -> Optional[Path]:
    """Path from SWRCACHE_LOG_FILE / logging.file, or None to log to the console only."""
    load_configuration()
    value = get_config(ENV_LOG_FILE)
    if not value:
        return None
    return Path(str(value)).expanduser()
