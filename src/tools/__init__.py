"""Configuration tools and utilities."""

from .config_loader import API_KEY_ENV_VARS, ConfigLoader, get_config

__all__ = [
    "API_KEY_ENV_VARS",
    "ConfigLoader",
    "get_config",
]
