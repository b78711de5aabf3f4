"""
Configuration loading for zigswitch.

Settings come from three layers, later layers winning:

1. built-in defaults
2. YAML file (<root>/config.yaml, or --config PATH)
3. environment variables (ZIGSWITCH_INDEX_URL, ZIGSWITCH_PLATFORM,
   ZIGSWITCH_PROFILE)

Example config.yaml:

    index_url: https://ziglang.org/download/index.json
    platform: aarch64-macos
    profile: ~/.config/fish/env.sh
    timeout: 60
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from zigswitch.core.directory import RootLayout, get_root_dir
from zigswitch.core.exceptions import ConfigError
from zigswitch.core.platform import detect_platform

logger = logging.getLogger(__name__)

DEFAULT_INDEX_URL = "https://ziglang.org/download/index.json"
DEFAULT_TIMEOUT = 30

ENV_OVERRIDES = {
    "index_url": "ZIGSWITCH_INDEX_URL",
    "platform": "ZIGSWITCH_PLATFORM",
    "profile": "ZIGSWITCH_PROFILE",
}

KNOWN_KEYS = {"index_url", "platform", "profile", "timeout"}


@dataclass
class Settings:
    """Resolved runtime configuration."""

    layout: RootLayout
    index_url: str
    platform: str
    profile: Path
    timeout: int = DEFAULT_TIMEOUT


def default_profile(environ: Mapping[str, str], home: Path) -> Path:
    """
    Pick the shell profile to edit from $SHELL.

    Example:
        >>> default_profile({"SHELL": "/usr/bin/zsh"}, Path("/home/me"))
        PosixPath('/home/me/.zshrc')
    """
    shell = Path(environ.get("SHELL", "")).name
    if shell == "zsh":
        return home / ".zshrc"
    if shell == "bash":
        return home / ".bashrc"
    return home / ".profile"


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigError: If the file is required and missing, or is not valid YAML
    """
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigError(f"Configuration in {config_file} must be a mapping")

    for key in sorted(set(config) - KNOWN_KEYS):
        logger.warning(f"Ignoring unknown configuration key '{key}' in {config_file}")

    return {k: v for k, v in config.items() if k in KNOWN_KEYS}


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Settings:
    """
    Resolve settings from defaults, config file and environment.

    Args:
        config_path: Explicit config file (must exist); defaults to <root>/config.yaml
        environ: Environment mapping (defaults to os.environ)
        home: Home directory (defaults to Path.home())

    Raises:
        ConfigError: On invalid configuration values
        UnsupportedPlatformError: If no platform is configured and the host is unknown
    """
    environ = os.environ if environ is None else environ
    home = home or Path.home()
    layout = RootLayout(get_root_dir(environ))

    if config_path is not None:
        values = load_yaml_config(Path(config_path).expanduser(), required=True)
    else:
        values = load_yaml_config(layout.config_file)

    for key, env_var in ENV_OVERRIDES.items():
        if environ.get(env_var):
            values[key] = environ[env_var]

    for key in ("index_url", "platform", "profile"):
        if key in values and not isinstance(values[key], str):
            raise ConfigError(f"Configuration value '{key}' must be a string")

    timeout = values.get("timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
        raise ConfigError(f"Configuration value 'timeout' must be a positive integer, got {timeout!r}")

    platform_key = values.get("platform") or detect_platform().platform_string()
    profile = (
        Path(values["profile"]).expanduser()
        if values.get("profile")
        else default_profile(environ, home)
    )

    settings = Settings(
        layout=layout,
        index_url=values.get("index_url") or DEFAULT_INDEX_URL,
        platform=platform_key,
        profile=profile,
        timeout=timeout,
    )
    logger.debug(f"Settings: {settings}")
    return settings
