"""Token schema definitions for the design token system.

This module defines the Pydantic models that validate and structure token
documents: color palettes and shade scales, font stacks, animation shorthands,
keyframe definitions, free-form scale extensions, and the top-level
configuration that wraps them in a ``theme.extend`` section.

All models are frozen. A document is parsed once at load time and is never
mutated afterwards.
"""

from typing import Dict, Any, Optional, List, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum


# Shade keys of a color scale, lightest to darkest
SHADE_KEYS = ("50", "100", "200", "300", "400", "500", "600", "700", "800", "900", "950")

# Theme keys that map to a named category; everything else is a scale
CATEGORY_ALIASES = {
    "colors": "colors",
    "fontFamily": "font_family",
    "animation": "animation",
    "keyframes": "keyframes",
}


class ThemeMode(str, Enum):
    """Strategy used to select the dark variant of tokens"""
    MEDIA = "media"
    CLASS = "class"
    SELECTOR = "selector"


DEFAULT_THEME_MODE = ThemeMode.MEDIA


def to_camel_case(name: str) -> str:
    parts = name.replace("-", "_").split("_")
    return parts[0] + "".join(part[:1].upper() + part[1:] for part in parts[1:])


def _stringify(value: Any) -> Any:
    """Coerce YAML scalars (ints, floats) to strings; leave containers alone."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    return value


def _string_mapping(mapping: Any) -> Any:
    """Stringify keys and scalar values of a flat mapping."""
    if not isinstance(mapping, dict):
        return mapping
    return {str(key): _stringify(value) for key, value in mapping.items()}


# Type aliases for convenience
ColorScale = Dict[str, str]
ColorToken = Union[str, ColorScale]
FontFamilyToken = List[str]
AnimationToken = str
KeyframeToken = Dict[str, Dict[str, str]]
ScaleExtension = Dict[str, str]
TokenDict = Dict[str, Any]


class ThemeTokens(BaseModel):
    """A set of theme tokens grouped by category.

    Used both for a base theme and for the extension layer merged onto it.
    Keys other than the four named categories are collected into ``scales``
    (e.g. ``backdropBlur``, ``animationDelay``) and written back at the top
    level when serialized.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    colors: Dict[str, ColorToken] = Field(default_factory=dict)
    font_family: Dict[str, FontFamilyToken] = Field(default_factory=dict, alias="fontFamily")
    animation: Dict[str, AnimationToken] = Field(default_factory=dict)
    keyframes: Dict[str, KeyframeToken] = Field(default_factory=dict)
    scales: Dict[str, ScaleExtension] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_scales(cls, data: Any) -> Any:
        """Move non-category keys into ``scales`` under their camelCase name.

        Two spellings of one name (``animationDelay`` and ``animation-delay``)
        are a duplicate key, not a silent overwrite.
        """
        if not isinstance(data, dict):
            return data

        result: Dict[str, Any] = {}
        scales: Dict[str, Any] = {}
        given_as: Dict[str, str] = {}

        for key, value in data.items():
            key = str(key)
            name = to_camel_case(key)
            target = CATEGORY_ALIASES.get(name, name)
            if target in given_as:
                raise ValueError(f"duplicate key {key!r} (also given as {given_as[target]!r})")
            given_as[target] = key

            if name in CATEGORY_ALIASES:
                result[target] = value
            else:
                scales[name] = value

        result["scales"] = scales
        return result

    @field_validator("colors", mode="before")
    @classmethod
    def normalize_colors(cls, v):
        """Shade keys may arrive as YAML integers (``50: '#f7f9f5'``)"""
        if not isinstance(v, dict):
            return v
        return {
            str(name): _string_mapping(token) if isinstance(token, dict) else _stringify(token)
            for name, token in v.items()
        }

    @field_validator("font_family", mode="before")
    @classmethod
    def normalize_font_family(cls, v):
        """Accept a bare family name as a single-entry stack"""
        if not isinstance(v, dict):
            return v
        return {
            str(name): [stack] if isinstance(stack, str) else stack
            for name, stack in v.items()
        }

    @field_validator("font_family")
    @classmethod
    def validate_font_family(cls, v):
        for name, stack in v.items():
            if not stack:
                raise ValueError(f"Font family '{name}' must list at least one face")
        return v

    @field_validator("animation", mode="before")
    @classmethod
    def normalize_animation(cls, v):
        return _string_mapping(v)

    @field_validator("keyframes", mode="before")
    @classmethod
    def normalize_keyframes(cls, v):
        if not isinstance(v, dict):
            return v
        return {
            str(name): (
                {str(step): _string_mapping(props) for step, props in steps.items()}
                if isinstance(steps, dict) else steps
            )
            for name, steps in v.items()
        }

    @field_validator("scales", mode="before")
    @classmethod
    def normalize_scales(cls, v):
        if not isinstance(v, dict):
            return v
        return {str(name): _string_mapping(scale) for name, scale in v.items()}

    def is_empty(self) -> bool:
        return not (self.colors or self.font_family or self.animation
                    or self.keyframes or any(self.scales.values()))

    def to_document(self) -> TokenDict:
        """Convert to the document shape (camelCase keys, scales inlined).

        Empty categories are omitted; parsing the result yields an equal model.
        """
        data = self.model_dump()
        document: TokenDict = {}
        if data["colors"]:
            document["colors"] = data["colors"]
        if data["font_family"]:
            document["fontFamily"] = data["font_family"]
        if data["animation"]:
            document["animation"] = data["animation"]
        if data["keyframes"]:
            document["keyframes"] = data["keyframes"]
        document.update(data["scales"])
        return document


class ThemeSection(BaseModel):
    """The ``theme`` section of a token document.

    Only ``extend`` is supported. A category placed directly under ``theme``
    would replace the whole base category, which is rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    extend: ThemeTokens = Field(default_factory=ThemeTokens)

    @model_validator(mode="before")
    @classmethod
    def reject_replacement(cls, data: Any) -> Any:
        if isinstance(data, dict):
            replaced = sorted(str(key) for key in data if key != "extend")
            if replaced:
                raise ValueError(
                    f"theme.{replaced[0]} would replace the base '{replaced[0]}' category; "
                    f"move it under theme.extend"
                )
            if data.get("extend") is None:
                return {}
        return data


class TokenConfig(BaseModel):
    """Complete token configuration document"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    content: List[str] = Field(default_factory=list, description="Source globs scanned for class usage")
    dark_mode: ThemeMode = Field(DEFAULT_THEME_MODE, alias="darkMode")
    theme: ThemeSection = Field(default_factory=ThemeSection)
    plugins: List[str] = Field(default_factory=list)

    @field_validator("dark_mode", mode="before")
    @classmethod
    def normalize_dark_mode(cls, v):
        """``None`` falls back to the default; ``['class', '.dark']`` keeps the strategy"""
        if v is None:
            return DEFAULT_THEME_MODE
        if isinstance(v, (list, tuple)) and v:
            return v[0]
        return v

    def to_document(self) -> TokenDict:
        document: TokenDict = {
            "content": list(self.content),
            "darkMode": self.dark_mode.value,
            "theme": {"extend": self.theme.extend.to_document()},
            "plugins": list(self.plugins),
        }
        return document


class AnimationSpec(BaseModel):
    """One parsed animation from a shorthand declaration"""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None  # keyframes reference; None for ``none``
    duration: Optional[str] = None
    timing_function: Optional[str] = None
    delay: Optional[str] = None
    iteration_count: Optional[str] = None
    direction: Optional[str] = None
    fill_mode: Optional[str] = None
    play_state: Optional[str] = None


class ResolvedTheme(BaseModel):
    """Effective theme after merging an extension onto a base theme"""

    model_config = ConfigDict(frozen=True)

    content: List[str] = Field(default_factory=list)
    dark_mode: ThemeMode = DEFAULT_THEME_MODE
    theme: ThemeTokens = Field(default_factory=ThemeTokens)
    plugins: List[str] = Field(default_factory=list)

    # Non-fatal issues found while merging (dangling references etc.)
    warnings: List[str] = Field(default_factory=list)

    def to_document(self) -> TokenDict:
        return {
            "content": list(self.content),
            "darkMode": self.dark_mode.value,
            "theme": self.theme.to_document(),
            "plugins": list(self.plugins),
        }
