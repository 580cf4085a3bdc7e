"""Configuration management for the design token tools."""

import os
import logging
from pathlib import Path
from dataclasses import dataclass, fields
from typing import Optional, Dict, Any
import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DESIGN_TOKENS_CONFIG"
DEFAULT_CONFIG_FILE = "design_tokens.yaml"

OUTPUT_FORMATS = ("yaml", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ConfigModel:
    """Settings for loading and resolving design tokens."""

    # Token sources
    token_file: Optional[str] = None  # user token document; overrides preset
    preset: str = "sage"
    base_theme: str = "default"

    # Output
    output_format: str = "yaml"  # yaml, json

    # Diagnostics
    log_level: str = "WARNING"

    def __post_init__(self):
        """Post-initialization validation."""
        if self.token_file:
            self.token_file = os.path.expanduser(self.token_file)

        self.output_format = str(self.output_format).lower()
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output_format '{self.output_format}' "
                f"(expected one of: {', '.join(OUTPUT_FORMATS)})"
            )

        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level '{self.log_level}'")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token_file": self.token_file,
            "preset": self.preset,
            "base_theme": self.base_theme,
            "output_format": self.output_format,
            "log_level": self.log_level,
        }

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        return yaml.dump(self.to_dict(), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML.

        Unknown keys are ignored with a warning.
        """
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a mapping")

        known = {f.name for f in fields(cls)}
        for key in sorted(set(data) - known):
            logger.warning(f"Ignoring unknown config key: {key}")

        return cls(**{key: value for key, value in data.items() if key in known})


def get_config_path() -> Path:
    """Get the config file path from the environment or working directory."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.cwd() / DEFAULT_CONFIG_FILE


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file, falling back to defaults.

    Args:
        config_path: Explicit config path; defaults to ``get_config_path()``

    Returns:
        ConfigModel instance

    Raises:
        ValueError: If the config file exists but is invalid
    """
    if config_path is None:
        config_path = get_config_path()

    config_path = Path(config_path)
    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using defaults")
        return ConfigModel()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            yaml_content = f.read()
        config = ConfigModel.from_yaml(yaml_content)
    except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e

    logger.info(f"Loaded configuration from {config_path}")
    return config


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> Path:
    """Save configuration to file.

    Returns:
        Path the configuration was written to
    """
    if config_path is None:
        config_path = get_config_path()

    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        f.write(config.to_yaml())

    logger.info(f"Configuration saved to {config_path}")
    return config_path
