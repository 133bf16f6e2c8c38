"""Configuration management for podshelf.

Handles TOML configuration loading from local and global paths,
with environment variable precedence for deployment-specific values.
Configuration is read once at process start and passed around as a
``Config`` object.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from podshelf.core.errors import ConfigError

# Configuration file paths
LOCAL_CONFIG_PATH = Path(".podshelf/config")
GLOBAL_CONFIG_PATH = Path.home() / ".podshelf" / "config"

DEVELOPMENT = "development"
PRODUCTION = "production"
VALID_ENVIRONMENTS = {DEVELOPMENT, PRODUCTION}

DEFAULT_API_BASE_URLS = {
    DEVELOPMENT: "http://localhost:3001/api",
    PRODUCTION: "https://podcast-api.up.railway.app/api",
}

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# Environment variables and the config keys they override
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "PODSHELF_ENV": ("server", "environment"),
    "PODSHELF_API_BASE_URL": ("server", "api_base_url"),
    "PODSHELF_ALLOWED_ORIGIN": ("server", "allowed_origin"),
    "DATABASE_URL": ("database", "url"),
}

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "server": {
        "environment": DEVELOPMENT,
        "api_base_url": "",
        "allowed_origin": "*",
        "host": "127.0.0.1",
        "port": 3001,
    },
    "database": {
        "url": "sqlite:///.podshelf/podshelf.db",
        "timeout": 30.0,
    },
    "feeds": {
        "timeout": 30.0,
    },
    "logging": {
        "level": "INFO",
        "file": ".podshelf/logs/podshelf.log",
    },
}


@dataclass
class ServerConfig:
    """HTTP server settings."""

    environment: str = DEVELOPMENT
    api_base_url: str = DEFAULT_API_BASE_URLS[DEVELOPMENT]
    allowed_origin: str = "*"
    host: str = "127.0.0.1"
    port: int = 3001


@dataclass
class DatabaseConfig:
    """Database settings."""

    url: str = "sqlite:///.podshelf/podshelf.db"
    timeout: float = 30.0


@dataclass
class FeedsConfig:
    """Feed fetching settings."""

    timeout: float = 30.0


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    file: str = ".podshelf/logs/podshelf.log"


@dataclass
class Config:
    """Main configuration container.

    Holds all configuration settings for podshelf, loaded from
    local and global config files with environment variable overrides.
    """

    server: ServerConfig = field(default_factory=ServerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    feeds: FeedsConfig = field(default_factory=FeedsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def is_production(self) -> bool:
        return self.server.environment == PRODUCTION

    @classmethod
    def load(cls, config_path: str | None = None) -> Config:
        """Load configuration, optionally from an explicit file path."""
        if config_path:
            return load_config(local_path=Path(config_path), auto_create_local=False)
        return load_config()


def _generate_default_config_toml() -> str:
    """Generate default configuration as TOML string."""
    return """# podshelf configuration file

[server]
# development or production; PODSHELF_ENV takes precedence
environment = "development"
# Public API base URL; PODSHELF_API_BASE_URL takes precedence
api_base_url = ""
# Value of the Access-Control-Allow-Origin header
allowed_origin = "*"
host = "127.0.0.1"
port = 3001

[database]
# SQLAlchemy database URL; DATABASE_URL takes precedence
url = "sqlite:///.podshelf/podshelf.db"
# Seconds to wait on a locked database before giving up
timeout = 30.0

[feeds]
# Seconds to wait for a remote RSS feed
timeout = 30.0

[logging]
level = "INFO"
file = ".podshelf/logs/podshelf.log"
"""


def _ensure_local_config_exists(local_path: Path) -> None:
    """Create local config file with defaults if it doesn't exist."""
    if not local_path.exists():
        local_path.parent.mkdir(parents=True, exist_ok=True)
        local_path.write_text(_generate_default_config_toml())


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load and parse a TOML configuration file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed configuration dictionary, empty if the file does not exist.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    if not path.exists():
        return {}

    try:
        content = path.read_text()
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {path}: {e}") from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Overlay recognized environment variables onto the merged config."""
    overrides: dict[str, Any] = {}
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name, "")
        if value:
            overrides.setdefault(section, {})[key] = value
    return _deep_merge(config_dict, overrides)


def _validate_positive_number(value: Any, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number, got {type(value).__name__}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")


def _validate_config(config_dict: dict[str, Any]) -> None:
    """Validate configuration values.

    Raises:
        ConfigError: If configuration values are invalid.
    """
    server = config_dict.get("server", {})
    environment = server.get("environment", DEVELOPMENT)
    if environment not in VALID_ENVIRONMENTS:
        raise ConfigError(
            f"Invalid environment '{environment}'. "
            f"Valid options: {', '.join(sorted(VALID_ENVIRONMENTS))}"
        )

    for key in ["api_base_url", "allowed_origin", "host"]:
        value = server.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"server.{key} must be a string, got {type(value).__name__}")

    port = server.get("port", 3001)
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ConfigError(f"server.port must be an integer between 1 and 65535, got {port!r}")

    database = config_dict.get("database", {})
    url = database.get("url")
    if not isinstance(url, str) or not url.strip():
        raise ConfigError("database.url must be a non-empty string")
    _validate_positive_number(database.get("timeout", 30.0), "database.timeout")

    _validate_positive_number(config_dict.get("feeds", {}).get("timeout", 30.0), "feeds.timeout")

    level = config_dict.get("logging", {}).get("level", "INFO")
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level '{level}'. Valid options: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )


def _dict_to_config(config_dict: dict[str, Any]) -> Config:
    """Convert configuration dictionary to Config dataclass."""
    server_dict = config_dict.get("server", {})
    database_dict = config_dict.get("database", {})
    feeds_dict = config_dict.get("feeds", {})
    logging_dict = config_dict.get("logging", {})

    environment = server_dict.get("environment", DEVELOPMENT)

    return Config(
        server=ServerConfig(
            environment=environment,
            api_base_url=server_dict.get("api_base_url") or DEFAULT_API_BASE_URLS[environment],
            allowed_origin=server_dict.get("allowed_origin", "*"),
            host=server_dict.get("host", "127.0.0.1"),
            port=server_dict.get("port", 3001),
        ),
        database=DatabaseConfig(
            url=database_dict["url"],
            timeout=float(database_dict.get("timeout", 30.0)),
        ),
        feeds=FeedsConfig(
            timeout=float(feeds_dict.get("timeout", 30.0)),
        ),
        logging=LoggingConfig(
            level=logging_dict.get("level", "INFO").upper(),
            file=logging_dict.get("file", ".podshelf/logs/podshelf.log"),
        ),
    )


def load_config(
    local_path: Path | None = None,
    global_path: Path | None = None,
    auto_create_local: bool = True,
    load_env_file: bool = True,
) -> Config:
    """Load configuration from local and global config files.

    Configuration priority (highest to lowest):
    1. Environment variables (PODSHELF_ENV, PODSHELF_API_BASE_URL,
       PODSHELF_ALLOWED_ORIGIN, DATABASE_URL), including a ``.env`` file
    2. Local config file (.podshelf/config in current directory)
    3. Global config file ($HOME/.podshelf/config)
    4. Default values

    If no configuration file exists, creates local config with defaults.

    Args:
        local_path: Override path for local config file.
        global_path: Override path for global config file.
        auto_create_local: If True, create local config with defaults if no config exists.
        load_env_file: If True, read a ``.env`` file into the environment first.

    Returns:
        Config object with merged configuration values.

    Raises:
        ConfigError: If configuration files or values are invalid.
    """
    local_path = local_path or LOCAL_CONFIG_PATH
    global_path = global_path or GLOBAL_CONFIG_PATH

    if load_env_file:
        load_dotenv()

    merged_config = {section: values.copy() for section, values in DEFAULT_CONFIG.items()}

    global_config = _load_toml_file(global_path)
    if global_config:
        merged_config = _deep_merge(merged_config, global_config)

    local_config = _load_toml_file(local_path)
    if local_config:
        merged_config = _deep_merge(merged_config, local_config)

    if auto_create_local and not local_config and not global_config:
        _ensure_local_config_exists(local_path)

    merged_config = _apply_env_overrides(merged_config)

    _validate_config(merged_config)

    return _dict_to_config(merged_config)


def get_config() -> Config:
    """Get the application configuration using default paths."""
    return load_config()
