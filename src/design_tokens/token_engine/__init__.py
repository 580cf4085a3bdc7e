"""Design Tokens Token Engine Package.

This package provides the token registry and merge resolver: schema models for
colors, font stacks, animations, keyframes and scale extensions, additive
merging onto a base theme, and validation of the merged result.
"""

from .engine import TokenEngine, merge_theme, find_dangling_animations, validate_theme
from .registry import (
    TokenRegistry,
    list_presets,
    list_base_themes,
    load_base_theme,
    load_document,
)
from .schema import (
    # Core models
    TokenConfig,
    ThemeSection,
    ThemeTokens,
    ResolvedTheme,
    AnimationSpec,

    # Enums and constants
    ThemeMode,
    DEFAULT_THEME_MODE,
    SHADE_KEYS,
)
from .utils import (
    deep_merge_dict,
    parse_animation,
    get_keyframe_reference,
    parse_keyframe_selector,
    check_color_scale,
    split_top_level,
)

__all__ = [
    # Main classes
    "TokenEngine",
    "TokenRegistry",

    # Merge and validation
    "merge_theme",
    "find_dangling_animations",
    "validate_theme",

    # Loading
    "list_presets",
    "list_base_themes",
    "load_base_theme",
    "load_document",

    # Schema models
    "TokenConfig",
    "ThemeSection",
    "ThemeTokens",
    "ResolvedTheme",
    "AnimationSpec",
    "ThemeMode",
    "DEFAULT_THEME_MODE",
    "SHADE_KEYS",

    # Utilities
    "deep_merge_dict",
    "parse_animation",
    "get_keyframe_reference",
    "parse_keyframe_selector",
    "check_color_scale",
    "split_top_level",
]
