"""
Configuration Module
====================

Validated client configuration loaded from overrides, environment and YAML.

Key Components:
- BaseConfig: Pydantic configuration foundation with semantic validation
- ClientConfig: Endpoints, authentication, timeouts and retries
- load_config / build_connection / new_client: From settings to a ready client
"""

from .client_config import ClientConfig, build_connection, load_config, new_client
from .config_base import BaseConfig, ConfigError, ConfigValidationError

__all__ = [
    'BaseConfig',
    'ClientConfig',
    'ConfigError',
    'ConfigValidationError',
    'build_connection',
    'load_config',
    'new_client',
]
