"""
Assembler configuration.

Options can come from a YAML file; command-line flags override them. Example:

    tab_width: 8
    hexdump: true
    hexdump_width: 8
    verbose: false
"""

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml


class ConfigError(Exception):
    """Raised when a configuration file is invalid."""
    pass


@dataclass(frozen=True)
class AssemblerConfig:
    """
    Assembler options.

    Attributes:
        tab_width: Spaces per tab when rendering source lines in diagnostics
        hexdump: Also write a hex dump next to the binary image
        hexdump_width: Bytes per hex dump row
        verbose: Print progress information
    """

    tab_width: int = 4
    hexdump: bool = False
    hexdump_width: int = 16
    verbose: bool = False

    def override(self, **changes: Any) -> "AssemblerConfig":
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def parse_config(yaml_content: str) -> AssemblerConfig:
    """
    Parse and validate a YAML configuration.

    Args:
        yaml_content: Raw YAML string content

    Returns:
        Validated configuration (defaults for missing keys)

    Raises:
        ConfigError: If the configuration is invalid
    """
    try:
        data = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        return AssemblerConfig()
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a YAML mapping/dictionary")

    known = {f.name for f in fields(AssemblerConfig)}
    for key in data:
        if key not in known:
            raise ConfigError(f"Unknown configuration key '{key}'")

    _validate_options(data)
    return AssemblerConfig(**data)


def validate_config(config: AssemblerConfig) -> AssemblerConfig:
    """
    Check option bounds on a configuration built outside a YAML file,
    e.g. after command-line overrides.

    Raises:
        ConfigError: If an option is out of range
    """
    _validate_options(asdict(config))
    return config


def load_config(path: str) -> AssemblerConfig:
    """
    Load a configuration file.

    Raises:
        ConfigError: If the file cannot be read or is invalid
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}")
    return parse_config(content)


def _validate_options(data: dict) -> None:
    _validate_int(data, "tab_width", 1, 16)
    _validate_int(data, "hexdump_width", 1, 64)
    _validate_bool(data, "hexdump")
    _validate_bool(data, "verbose")


def _validate_int(data: dict, key: str, minimum: int, maximum: int) -> None:
    if key not in data:
        return
    value = data[key]
    # bool is an int subclass; `true` is not a width
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigError(f"'{key}' must be an integer")
    if not minimum <= value <= maximum:
        raise ConfigError(f"'{key}' must be between {minimum} and {maximum}, got {value}")


def _validate_bool(data: dict, key: str) -> None:
    if key in data and not isinstance(data[key], bool):
        raise ConfigError(f"'{key}' must be true or false")
