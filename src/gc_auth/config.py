"""Configuration management for gc-auth.

Provides the immutable ``FlowConfig`` consumed by the login flow and the
application-level ``Config`` loaded from environment variables, .env files
and optional configuration files with proper precedence handling.
"""

from __future__ import annotations

import contextlib
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

ENV_PREFIX = "GC_"

DEFAULT_HTTP_TIMEOUT = 30.0


class ConfigError(Exception):
    """Raised when configuration validation fails."""


class LogLevel(str, Enum):
    """Supported log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _validate_environment(value: str) -> str:
    value = value.strip()
    if not value:
        msg = "environment must be a non-empty host suffix"
        raise ValueError(msg)
    if "://" in value or "/" in value or any(c.isspace() for c in value):
        msg = f"environment must be a bare host suffix such as 'mypurecloud.com', got {value!r}"
        raise ValueError(msg)
    return value


def _validate_redirect_uri(value: str) -> str:
    parts = urlsplit(value)
    if not parts.scheme or not parts.netloc:
        msg = f"redirect_uri must be an absolute URI, got {value!r}"
        raise ValueError(msg)
    return value


class FlowConfig(BaseModel):
    """Settings for one OAuth login flow.

    Immutable once built. The flow engine receives it at construction and
    never reads configuration storage itself.
    """

    environment: str = Field(description="Identity provider host suffix, e.g. mypurecloud.com")
    client_id: str = Field(min_length=1, description="OAuth client identifier")
    redirect_uri: str = Field(description="Registered redirect URI")
    use_pkce: bool = Field(
        default=True, description="Use the PKCE code grant instead of the implicit grant"
    )
    auth_org: str | None = Field(default=None, description="Organization routing hint")
    auth_provider: str | None = Field(default=None, description="Identity provider routing hint")

    model_config = {"frozen": True}

    @field_validator("environment")
    @classmethod
    def check_environment(cls, v: str) -> str:
        """Require a bare, non-empty host suffix."""
        return _validate_environment(v)

    @field_validator("redirect_uri")
    @classmethod
    def check_redirect_uri(cls, v: str) -> str:
        """Require an absolute redirect URI."""
        return _validate_redirect_uri(v)

    @property
    def has_org_routing(self) -> bool:
        """Whether both org and provider routing hints are set."""
        return bool(self.auth_org) and bool(self.auth_provider)


class Config(BaseModel):
    """Application configuration for the gc-auth command-line shell.

    Configuration can be loaded from:
    - Environment variables with GC_ prefix
    - Optional .env file in the working directory
    - Optional configuration file passed via CLI
    """

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    http_timeout: float = Field(
        default=DEFAULT_HTTP_TIMEOUT, gt=0, description="Token endpoint timeout in seconds"
    )

    environment: str | None = Field(default=None, description="Identity provider host suffix")
    client_id: str | None = Field(default=None, description="OAuth client identifier")
    redirect_uri: str | None = Field(default=None, description="Registered redirect URI")
    use_pkce: bool = Field(default=True, description="Use the PKCE code grant")
    auth_org: str | None = Field(default=None, description="Organization routing hint")
    auth_provider: str | None = Field(default=None, description="Identity provider routing hint")

    model_config = {"validate_assignment": True}

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    def to_flow_config(self) -> FlowConfig:
        """Build the FlowConfig for the login flow.

        Returns:
            Validated FlowConfig

        Raises:
            ConfigError: If required flow settings are missing or invalid
        """
        required_fields = [
            ("environment", self.environment),
            ("client_id", self.client_id),
            ("redirect_uri", self.redirect_uri),
        ]
        missing = [name for name, value in required_fields if not value]
        if missing:
            msg = f"Login flow configuration is missing required fields: {', '.join(missing)}"
            raise ConfigError(msg)

        try:
            return FlowConfig(
                environment=self.environment,
                client_id=self.client_id,
                redirect_uri=self.redirect_uri,
                use_pkce=self.use_pkce,
                auth_org=self.auth_org,
                auth_provider=self.auth_provider,
            )
        except ValidationError as e:
            msg = f"Login flow configuration is invalid: {e}"
            raise ConfigError(msg) from e


# Field name -> environment variable suffix
ENV_MAPPING = {
    "log_level": "LOG_LEVEL",
    "http_timeout": "HTTP_TIMEOUT",
    "environment": "ENVIRONMENT",
    "client_id": "CLIENT_ID",
    "redirect_uri": "REDIRECT_URL",
    "use_pkce": "USE_PKCE",
    "auth_org": "USE_ORG",
    "auth_provider": "USE_PROVIDER",
}

_BOOL_FIELDS = {"use_pkce"}
_FLOAT_FIELDS = {"http_timeout"}


def _get_env_value(key: str, prefix: str = ENV_PREFIX) -> str | None:
    """Get environment variable value with prefix."""
    return os.environ.get(f"{prefix}{key.upper()}")


def _load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config: dict[str, Any] = {}
    for field_name, env_suffix in ENV_MAPPING.items():
        value: Any = _get_env_value(env_suffix)
        if value is None:
            continue
        if field_name in _BOOL_FIELDS:
            value = value.strip().lower() in ("true", "1", "yes")
        elif field_name in _FLOAT_FIELDS:
            with contextlib.suppress(ValueError):
                value = float(value)
        config[field_name] = value

    return config


def _load_file_config(path: str | Path) -> dict[str, Any]:
    """Load configuration from a file (JSON or YAML)."""
    import json

    path = Path(path)
    if not path.exists():
        msg = f"Configuration file not found: {path}"
        raise ConfigError(msg)

    suffix = path.suffix.lower()
    content = path.read_text()

    if suffix == ".json":
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            msg = f"Invalid JSON in configuration file {path}: {e}"
            raise ConfigError(msg) from e
    elif suffix in (".yaml", ".yml"):
        try:
            import yaml
        except ImportError:
            msg = "PyYAML is required to load YAML configuration files"
            raise ConfigError(msg) from None

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            msg = f"Invalid YAML in configuration file {path}: {e}"
            raise ConfigError(msg) from e
    else:
        msg = f"Unsupported configuration file format: {suffix}"
        raise ConfigError(msg)

    if not isinstance(data, dict):
        msg = f"Configuration file {path} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return data


def load_config(
    path: str | Path | None = None,
    cli_args: dict[str, Any] | None = None,
) -> Config:
    """Load and validate configuration.

    Precedence (highest to lowest):
    1. CLI arguments
    2. Environment variables
    3. Configuration file
    4. Model defaults

    Args:
        path: Optional path to configuration file
        cli_args: Optional CLI argument overrides

    Returns:
        Validated Config instance

    Raises:
        ConfigError: If configuration is invalid
    """
    load_dotenv()

    config_dict: dict[str, Any] = {}
    if path:
        logger.debug("Loading configuration from file: %s", path)
        config_dict.update(_load_file_config(path))

    for key, value in _load_env_config().items():
        config_dict[key] = value
        logger.debug("Config %s from environment: %s", key, value)

    if cli_args:
        for key, value in cli_args.items():
            if value is not None:
                config_dict[key] = value
                logger.debug("Config %s from CLI: %s", key, value)

    try:
        return Config(**config_dict)
    except ValidationError as e:
        msg = f"Configuration validation failed: {e}"
        raise ConfigError(msg) from e
