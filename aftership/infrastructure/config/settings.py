"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
configuration file (~/.aftership/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Dict

from dotenv import load_dotenv
import yaml

from aftership.domain.models.common import BackoffPolicy
from aftership.domain.models.errors import ConfigurationError

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".aftership"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

DEFAULT_ENDPOINT = "https://api.aftership.com/tracking/2023-10"
DEFAULT_TIMEOUT_S = 30.0
AUTH_TYPE_API_KEY = "api_key"
AUTH_TYPE_AES = "aes"
AUTH_TYPES = (AUTH_TYPE_API_KEY, AUTH_TYPE_AES)

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Turns nested YAML mappings into dotted keys ('aftership.api_key')."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. Load from YAML file (Lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r') as f:
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

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: ENV VARS take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no .env found).")

    # 3. Environment Variables (Highest priority) are handled in get_config
    _loaded = True
    logger.debug("Configuration loading process completed.")


def reset_configuration() -> None:
    """Forgets loaded configuration so the next load_configuration reads again."""
    global _config, _loaded
    _config = {}
    _loaded = False


def _coerce_env_value(value: str) -> Any:
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        return float(value) if '.' in value else int(value)
    except ValueError:
        return value


def get_config(key: str, default: Any = None, raw: bool = False) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (key upper-cased, dots replaced by underscores)
    3. YAML config
    4. Default value

    Args:
        key: The configuration key, e.g. 'aftership.timeout'
        default: Default value if the key is not found
        raw: Return environment values as given, without bool/number coercion

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = key.upper().replace('.', '_')
    if env_key in os.environ:
        value = os.environ[env_key]
        return value if raw else _coerce_env_value(value)

    if key in _config:
        return _config[key]

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


# --- Convenience Functions ---

def get_api_key() -> str:
    """Returns the AfterShip API key.

    Raises:
        ConfigurationError: If no key is configured.
    """
    # Checks ENV AFTERSHIP_API_KEY first, then yaml aftership.api_key
    key = get_config('AFTERSHIP_API_KEY', raw=True) or get_config('aftership.api_key', raw=True)
    if not key:
        raise ConfigurationError(
            "AfterShip API key not provided. Set AFTERSHIP_API_KEY or aftership.api_key."
        )
    return str(key)


def get_api_secret() -> Optional[str]:
    """Returns the secret used for AES request signing, if any."""
    secret = get_config('AFTERSHIP_API_SECRET', raw=True) or get_config('aftership.api_secret', raw=True)
    return str(secret) if secret else None


def get_auth_type() -> str:
    """Returns the configured authentication type ('api_key' or 'aes')."""
    auth_type = str(get_config('aftership.auth_type', AUTH_TYPE_API_KEY)).lower()
    if auth_type not in AUTH_TYPES:
        raise ConfigurationError(f"Unknown auth type '{auth_type}'. Expected one of {AUTH_TYPES}.")
    return auth_type


def get_endpoint() -> str:
    """Returns the API base URL without a trailing slash."""
    return str(get_config('aftership.endpoint', DEFAULT_ENDPOINT)).rstrip('/')


def get_user_agent() -> Optional[str]:
    value = get_config('aftership.user_agent')
    return str(value) if value else None


def get_timeout() -> float:
    """Returns the request timeout in seconds."""
    try:
        return float(get_config('aftership.timeout', DEFAULT_TIMEOUT_S))
    except (TypeError, ValueError):
        logger.warning("Invalid aftership.timeout setting. Falling back to default.")
        return DEFAULT_TIMEOUT_S


def get_backoff_policy() -> BackoffPolicy:
    """Returns retry settings. Retries are disabled unless configured.

    Raises:
        ConfigurationError: If a retry setting is not a number, or max_retries is negative.
    """
    try:
        policy = BackoffPolicy(
            max_retries=int(get_config('retry.max_retries', 0)),
            initial_delay=float(get_config('retry.initial_backoff_s', 1.0)),
            factor=float(get_config('retry.backoff_factor', 2.0)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid retry setting: {e}") from e
    if policy["max_retries"] < 0:
        raise ConfigurationError("retry.max_retries must be >= 0")
    return policy


def set_config(key: str, value: Any) -> None:
    """Sets a configuration value for the current process.

    Args:
        key: Configuration key (e.g., 'logging.level')
        value: Value to set
    """
    logger.debug(f"Setting config: {key} = {value}")
    _config[key] = value


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
