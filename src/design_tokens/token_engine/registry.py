"""Token registry for design token configurations.

This module provides the TokenRegistry class, a read-only view over one token
configuration document, along with the loaders for built-in presets, base
themes and user token files.
"""

import copy
from collections.abc import Hashable
import json
import yaml
from pathlib import Path
from typing import Dict, List, Optional, Any, Union
import logging

from pydantic import ValidationError

from .schema import (
    TokenConfig,
    ThemeTokens,
    ThemeMode,
    ColorToken,
    FontFamilyToken,
    AnimationToken,
    KeyframeToken,
    ScaleExtension,
    to_camel_case,
)

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).parent.parent
BUILTIN_PRESETS_DIR = PACKAGE_DIR / "token_presets"
BASE_THEMES_DIR = PACKAGE_DIR / "base_themes"

DEFAULT_PRESET = "sage"
DEFAULT_BASE_THEME = "default"


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects duplicate keys within a mapping.

    Scalar keys are kept exactly as written, so token names such as ``on``,
    ``off`` or ``050`` are not resolved to booleans or octal integers.
    """

    def construct_mapping(self, node, deep=False):
        self.flatten_mapping(node)
        mapping = {}
        for key_node, value_node in node.value:
            if isinstance(key_node, yaml.ScalarNode):
                key = key_node.value
            else:
                key = self.construct_object(key_node, deep=deep)
                if not isinstance(key, Hashable):
                    raise yaml.constructor.ConstructorError(
                        "while constructing a mapping", node.start_mark,
                        "found unhashable key", key_node.start_mark
                    )
            if key in mapping:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping", node.start_mark,
                    f"found duplicate key {key!r}", key_node.start_mark
                )
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping


def _reject_duplicate_keys(pairs):
    result = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"found duplicate key {key!r}")
        result[key] = value
    return result


def load_yaml_file(file_path: Path) -> Dict[str, Any]:
    """Load YAML file safely, rejecting duplicate keys."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return yaml.load(f, Loader=_UniqueKeyLoader) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {file_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Error reading {file_path}: {e}") from e


def load_json_file(file_path: Path) -> Dict[str, Any]:
    """Load JSON file safely, rejecting duplicate keys."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f, object_pairs_hook=_reject_duplicate_keys)
    except ValueError as e:
        raise ValueError(f"Invalid JSON in {file_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Error reading {file_path}: {e}") from e


def load_document(file_path: Union[str, Path]) -> Dict[str, Any]:
    """Load a token document from a YAML or JSON file.

    Args:
        file_path: Path to a ``.yaml``, ``.yml`` or ``.json`` file

    Returns:
        Raw document dictionary

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file format is unsupported or the content is invalid
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Token file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix in ('.yaml', '.yml'):
        return load_yaml_file(file_path)
    elif suffix == '.json':
        return load_json_file(file_path)

    raise ValueError(f"Unsupported file format: {file_path.suffix}")


def list_presets() -> List[str]:
    """List the names of built-in token presets."""
    if not BUILTIN_PRESETS_DIR.exists():
        logger.warning(f"Built-in presets directory not found: {BUILTIN_PRESETS_DIR}")
        return []
    return sorted(path.stem for path in BUILTIN_PRESETS_DIR.glob("*.yaml"))


def list_base_themes() -> List[str]:
    """List the names of built-in base themes."""
    if not BASE_THEMES_DIR.exists():
        logger.warning(f"Base themes directory not found: {BASE_THEMES_DIR}")
        return []
    return sorted(path.stem for path in BASE_THEMES_DIR.glob("*.yaml"))


def load_base_theme(name: str = DEFAULT_BASE_THEME) -> ThemeTokens:
    """Load a built-in base theme.

    Args:
        name: Base theme name (file stem under ``base_themes``)

    Returns:
        ThemeTokens holding the base defaults

    Raises:
        FileNotFoundError: If no base theme has that name
        ValueError: If the base theme is invalid
    """
    theme_path = BASE_THEMES_DIR / f"{name}.yaml"
    if not theme_path.exists():
        raise FileNotFoundError(f"Base theme '{name}' not found")

    data = load_yaml_file(theme_path)
    try:
        theme = ThemeTokens.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid base theme '{name}': {e}") from e

    logger.debug(f"Loaded base theme: {name}")
    return theme


class TokenRegistry:
    """Read-only registry of theme extension tokens.

    Wraps a single frozen TokenConfig. Every getter returns a copy, so the
    registry cannot be changed after construction. The registry stores values
    only; cross-checks such as dangling keyframe references belong to the
    merge step in the token engine.
    """

    def __init__(self, config: Optional[TokenConfig] = None, source: str = "<memory>"):
        """Initialize the token registry.

        Args:
            config: Parsed token configuration (empty configuration if omitted)
            source: Where the configuration came from, for messages
        """
        self._config = config if config is not None else TokenConfig()
        self.source = source

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str = "<memory>") -> 'TokenRegistry':
        """Create a registry from a raw token document.

        Raises:
            ValueError: If the document is structurally invalid
        """
        if not isinstance(data, dict):
            raise ValueError(
                f"Invalid token configuration in {source}: expected a mapping, "
                f"got {type(data).__name__}"
            )

        try:
            config = TokenConfig.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid token configuration in {source}: {e}") from e

        return cls(config, source=source)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'TokenRegistry':
        """Create a registry from a YAML or JSON token file."""
        data = load_document(file_path)
        registry = cls.from_dict(data, source=str(file_path))
        logger.info(f"Loaded token configuration from {file_path}")
        return registry

    @classmethod
    def from_preset(cls, name: str = DEFAULT_PRESET) -> 'TokenRegistry':
        """Create a registry from a built-in preset.

        Raises:
            FileNotFoundError: If no preset has that name
        """
        preset_path = BUILTIN_PRESETS_DIR / f"{name}.yaml"
        if not preset_path.exists():
            raise FileNotFoundError(f"Token preset '{name}' not found")

        registry = cls.from_dict(load_yaml_file(preset_path), source=f"preset:{name}")
        logger.debug(f"Loaded built-in preset: {name}")
        return registry

    @classmethod
    def from_yaml(cls, yaml_str: str) -> 'TokenRegistry':
        """Create a registry from a YAML string."""
        try:
            data = yaml.load(yaml_str, Loader=_UniqueKeyLoader) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_json(cls, json_str: str) -> 'TokenRegistry':
        """Create a registry from a JSON string."""
        try:
            data = json.loads(json_str, object_pairs_hook=_reject_duplicate_keys)
        except ValueError as e:
            raise ValueError(f"Invalid JSON: {e}") from e
        return cls.from_dict(data)

    @property
    def config(self) -> TokenConfig:
        return self._config

    @property
    def extension(self) -> ThemeTokens:
        """The ``theme.extend`` tokens."""
        return self._config.theme.extend

    def get_content_globs(self) -> List[str]:
        """Get the source globs scanned for class usage, in declared order."""
        return list(self._config.content)

    def get_theme_mode(self) -> ThemeMode:
        """Get the dark-mode strategy (``media`` when not declared)."""
        return self._config.dark_mode

    def get_color_extensions(self) -> Dict[str, ColorToken]:
        return copy.deepcopy(self.extension.colors)

    def get_font_extensions(self) -> Dict[str, FontFamilyToken]:
        return copy.deepcopy(self.extension.font_family)

    def get_animation_extensions(self) -> Dict[str, AnimationToken]:
        return dict(self.extension.animation)

    def get_keyframe_extensions(self) -> Dict[str, KeyframeToken]:
        return copy.deepcopy(self.extension.keyframes)

    def get_scale_extension(self, scale_name: str) -> ScaleExtension:
        """Get an additive scale extension such as ``backdropBlur``.

        Args:
            scale_name: Scale name in camelCase, snake_case or kebab-case

        Returns:
            Mapping of key to literal value; empty if the scale is not extended
        """
        return dict(self.extension.scales.get(to_camel_case(scale_name), {}))

    def get_scale_names(self) -> List[str]:
        return list(self.extension.scales)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the token document shape."""
        return self._config.to_document()

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False, indent=2)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def save(self, file_path: Union[str, Path]) -> None:
        """Write the registry to a YAML or JSON file chosen by suffix.

        Raises:
            ValueError: If the suffix is unsupported or the file cannot be written
        """
        file_path = Path(file_path)
        suffix = file_path.suffix.lower()

        if suffix in ('.yaml', '.yml'):
            content = self.to_yaml()
        elif suffix == '.json':
            content = self.to_json()
        else:
            raise ValueError(f"Unsupported file format: {file_path.suffix}")

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            raise ValueError(f"Error saving token configuration to {file_path}: {e}") from e

        logger.info(f"Saved token configuration to {file_path}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TokenRegistry):
            return NotImplemented
        return self._config.model_dump() == other._config.model_dump()

    def __repr__(self) -> str:
        return f"TokenRegistry(source={self.source!r})"
