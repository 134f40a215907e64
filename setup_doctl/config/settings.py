"""Configuration for setup-doctl.

Settings come from three places, later ones winning:
an optional YAML file, the action inputs, and command-line flags.
"""

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from setup_doctl.actions.workflow import ActionsContext
from setup_doctl.core.exceptions import ConfigError

_TRUE = {"true", "yes", "1", "on"}
_FALSE = {"false", "no", "0", "off", ""}


def parse_bool(value: Any) -> bool:
    """Parse a boolean input value."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"Invalid boolean value: {value!r}")


def _parse_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid integer for {name}: {value!r}") from e


@dataclass
class SetupConfig:
    """Settings for one installation run."""

    version: str = "latest"
    token: Optional[str] = None
    no_auth: bool = False
    github_token: Optional[str] = None
    cache_dir: Optional[Path] = None
    fallback_count: int = 5
    timeout: int = 60
    platform: Optional[str] = None  # 'linux', 'darwin', 'win32'
    arch: Optional[str] = None  # 'x64', 'arm64', 'ia32'

    def validate(self) -> "SetupConfig":
        """
        Check value ranges.

        Raises:
            ConfigError: If a value is out of range
        """
        if self.fallback_count < 1:
            raise ConfigError(
                f"fallback_count must be at least 1, got {self.fallback_count}"
            )
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        return self

    def merged(self, overrides: Dict[str, Any]) -> "SetupConfig":
        """
        Return a copy with every non-None override applied.

        Raises:
            ConfigError: If an override names an unknown setting or has the
                wrong type
        """
        known = {f.name for f in dataclasses.fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        values = {}
        for key, value in overrides.items():
            if value is None:
                continue
            if key in ("fallback_count", "timeout"):
                value = _parse_int(key, value)
            elif key == "no_auth":
                value = parse_bool(value)
            elif key == "cache_dir":
                value = Path(value)
            elif not isinstance(value, str):
                # YAML reads an unquoted 1.100 as the float 1.1
                raise ConfigError(
                    f"{key} must be a string, got {value!r}; quote it in YAML"
                )
            values[key] = value
        return dataclasses.replace(self, **values)


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Returns:
        Configuration dictionary (empty if the file is absent and not required)

    Raises:
        ConfigError: If the file is required but missing, or is invalid YAML
    """
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        return {}

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {config_file}")
    return data


def inputs_overrides(ctx: ActionsContext) -> Dict[str, Any]:
    """
    Collect the non-empty action inputs.

    The token is not read here; it is required only when authenticating.
    """
    overrides = {}
    for f in dataclasses.fields(SetupConfig):
        if f.name == "token":
            continue
        value = ctx.get_input(f.name)
        if value:
            overrides[f.name] = value
    return overrides


def load_config(
    config_file: Optional[Path] = None,
    ctx: Optional[ActionsContext] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> SetupConfig:
    """
    Assemble and validate configuration from file, inputs and overrides.

    Example:
        >>> config = load_config(Path("setup-doctl.yaml"), ActionsContext())
        >>> config.version
        'latest'
    """
    config = SetupConfig()
    if config_file is not None:
        config = config.merged(load_yaml_config(config_file, required=True))
    if ctx is not None:
        config = config.merged(inputs_overrides(ctx))
    if overrides:
        config = config.merged(overrides)
    return config.validate()


__all__ = [
    "SetupConfig",
    "parse_bool",
    "load_yaml_config",
    "inputs_overrides",
    "load_config",
]
