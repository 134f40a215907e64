"""Configuration loading for setup-doctl."""

from .settings import SetupConfig, load_config, load_yaml_config, parse_bool

__all__ = ["SetupConfig", "load_config", "load_yaml_config", "parse_bool"]
