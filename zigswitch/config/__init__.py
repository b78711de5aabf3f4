"""
Configuration for zigswitch.
"""

from zigswitch.config.settings import (
    DEFAULT_INDEX_URL,
    Settings,
    default_profile,
    load_settings,
    load_yaml_config,
)

__all__ = [
    "DEFAULT_INDEX_URL",
    "Settings",
    "default_profile",
    "load_settings",
    "load_yaml_config",
]
