"""Configuration: TOML settings and logging setup."""

from pokvault.config.settings import Settings, configure_logging, get_settings, load_config

__all__ = ["Settings", "configure_logging", "get_settings", "load_config"]
