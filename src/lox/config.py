"""
Configuration for the Lox command-line driver.

Settings are layered: built-in defaults, then a YAML file, then
environment variables. Command-line flags are applied last by the CLI.

Example lox.yaml:
    prompt: "lox> "
    show_tokens: false
    show_ast: true
    log_level: DEBUG
    mode: auto
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .runtime.interpreter import MODES

logger = logging.getLogger(__name__)

CONFIG_ENV = "LOX_CONFIG"

# environment variable -> config field
ENV_OVERRIDES = {
    "LOX_PROMPT": "prompt",
    "LOX_LOG_LEVEL": "log_level",
    "LOX_MODE": "mode",
}


@dataclass
class LoxConfig:
    """Driver settings."""
    prompt: str = "> "
    show_tokens: bool = False   # Print the token stream before running
    show_ast: bool = False      # Print the parsed tree before running
    log_level: str = "WARNING"
    mode: str = "auto"          # auto, expression or program

    def update(self, values: Mapping[str, Any]) -> None:
        """Apply a mapping of settings, rejecting unknown keys."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"unknown config key(s): {', '.join(unknown)}")
        for name, value in values.items():
            setattr(self, name, value)
        self.validate()

    def validate(self) -> None:
        for name in ("show_tokens", "show_ast"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be true or false, got {getattr(self, name)!r}")
        if not isinstance(self.prompt, str):
            raise ValueError(f"prompt must be a string, got {self.prompt!r}")
        if self.mode not in MODES:
            raise ValueError(f"invalid mode {self.mode!r}, expected one of {', '.join(MODES)}")
        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"invalid log level {self.log_level!r}")


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as fp:
        try:
            data = yaml.safe_load(fp) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"config file {path} is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping")
    return data


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> LoxConfig:
    """
    Build the configuration.

    Args:
        path: YAML file to read; defaults to $LOX_CONFIG when set
        environ: Environment mapping (defaults to os.environ)

    Returns:
        LoxConfig with file and environment settings applied

    Raises:
        FileNotFoundError: If the config file does not exist
        ValueError: On unknown keys or invalid values
    """
    environ = os.environ if environ is None else environ
    config = LoxConfig()

    if path is None and environ.get(CONFIG_ENV):
        path = environ[CONFIG_ENV]
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"config file not found: {config_path}")
        logger.debug("loading config from %s", config_path)
        config.update(_read_yaml(config_path))

    overrides = {
        name: environ[var] for var, name in ENV_OVERRIDES.items() if var in environ
    }
    if overrides:
        config.update(overrides)

    return config
