"""Utility functions for token engine operations.

This module provides the additive deep merge used to layer extensions onto a
base theme, the animation shorthand and keyframe selector parsers, and the
color scale checks used during validation.
"""

import copy
import re
from typing import Dict, Any, List, Optional

from .schema import AnimationSpec, SHADE_KEYS


TIME_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)m?s$', re.IGNORECASE)
NUMBER_PATTERN = re.compile(r'^(\d+\.?\d*|\.\d+)$')
PERCENT_PATTERN = re.compile(r'^(\d+\.?\d*|\.\d+)%$')

TIMING_KEYWORDS = {
    'linear', 'ease', 'ease-in', 'ease-out', 'ease-in-out', 'step-start', 'step-end',
}
TIMING_FUNCTIONS = ('cubic-bezier(', 'steps(', 'linear(')
DIRECTION_KEYWORDS = {'normal', 'reverse', 'alternate', 'alternate-reverse'}
FILL_MODE_KEYWORDS = {'forwards', 'backwards', 'both'}
PLAY_STATE_KEYWORDS = {'running', 'paused'}


def deep_merge_dict(base: Dict[Any, Any], overlay: Dict[Any, Any]) -> Dict[Any, Any]:
    """Deep merge two dictionaries, with overlay taking precedence.

    Nested dictionaries are merged key by key; any other value (strings,
    lists) is a leaf and replaced as a whole. Neither input is modified.

    Args:
        base: Base dictionary
        overlay: Overlay dictionary (takes precedence)

    Returns:
        New merged dictionary
    """
    result = copy.deepcopy(base)
    _merge_into(result, overlay)
    return result


def _merge_into(target: Dict[Any, Any], overlay: Dict[Any, Any]) -> None:
    for key, value in overlay.items():
        if key in target and isinstance(target[key], dict) and isinstance(value, dict):
            _merge_into(target[key], value)
        else:
            target[key] = copy.deepcopy(value)


def split_top_level(value: str, separator: str = ',') -> List[str]:
    """Split on a separator, ignoring separators nested inside parentheses.

    Args:
        value: String such as ``"spin 1s linear, ping 1s cubic-bezier(0, 0, 0.2, 1)"``
        separator: Single separator character, or ``None`` for whitespace

    Returns:
        List of stripped, non-empty parts
    """
    parts = []
    depth = 0
    current = []

    for char in value:
        if char == '(':
            depth += 1
        elif char == ')':
            depth = max(0, depth - 1)

        is_separator = char.isspace() if separator is None else char == separator
        if is_separator and depth == 0:
            parts.append(''.join(current))
            current = []
        else:
            current.append(char)

    parts.append(''.join(current))
    return [part.strip() for part in parts if part.strip()]


def parse_animation(value: str) -> List[AnimationSpec]:
    """Parse an animation shorthand into its components.

    Handles comma-separated lists of animations. Tokens that are not a time,
    timing function, iteration count or keyword are taken as the keyframes
    name. ``none`` names no keyframes.

    Args:
        value: Shorthand such as ``"float 6s ease-in-out infinite"``

    Returns:
        One AnimationSpec per comma-separated animation
    """
    specs = []

    for declaration in split_top_level(value, ','):
        fields: Dict[str, Optional[str]] = {}

        for token in split_top_level(declaration, None):
            lower = token.lower()

            if TIME_PATTERN.match(token):
                # First time is the duration, second the delay
                key = 'duration' if 'duration' not in fields else 'delay'
                fields.setdefault(key, token)
            elif lower in TIMING_KEYWORDS or lower.startswith(TIMING_FUNCTIONS):
                fields.setdefault('timing_function', token)
            elif lower == 'infinite' or NUMBER_PATTERN.match(token):
                fields.setdefault('iteration_count', token)
            elif lower in DIRECTION_KEYWORDS:
                fields.setdefault('direction', token)
            elif lower in FILL_MODE_KEYWORDS:
                fields.setdefault('fill_mode', token)
            elif lower in PLAY_STATE_KEYWORDS:
                fields.setdefault('play_state', token)
            elif lower == 'none':
                fields.setdefault('fill_mode', token)
            else:
                fields.setdefault('name', token)

        specs.append(AnimationSpec(**fields))

    return specs


def get_keyframe_reference(animation: str) -> List[str]:
    """Return the keyframes names referenced by an animation shorthand."""
    return [spec.name for spec in parse_animation(animation) if spec.name]


def parse_keyframe_selector(selector: str) -> List[float]:
    """Expand a keyframe step selector into percentages.

    Args:
        selector: ``"50%"``, ``"0%, 100%"``, ``"from"`` or ``"to"``

    Returns:
        List of percentages in the order written

    Raises:
        ValueError: If any part is not a percentage or from/to keyword
    """
    percentages = []

    for part in selector.split(','):
        part = part.strip().lower()
        if part == 'from':
            percentages.append(0.0)
        elif part == 'to':
            percentages.append(100.0)
        else:
            match = PERCENT_PATTERN.match(part)
            if not match:
                raise ValueError(f"Invalid keyframe selector: {selector!r}")
            percentage = float(match.group(1))
            if percentage > 100:
                raise ValueError(f"Keyframe selector out of range: {selector!r}")
            percentages.append(percentage)

    return percentages


def check_color_scale(name: str, scale: Dict[str, str]) -> List[str]:
    """Check a color scale against the documented shade keys.

    Args:
        name: Color family name, for messages
        scale: Mapping of shade key to color value

    Returns:
        List of issues (empty if the scale is complete and ordered)
    """
    issues = []

    missing = [shade for shade in SHADE_KEYS if shade not in scale]
    unknown = [shade for shade in scale if shade not in SHADE_KEYS and shade != 'DEFAULT']

    if missing:
        issues.append(f"Color scale '{name}' is missing shades: {', '.join(missing)}")
    if unknown:
        issues.append(f"Color scale '{name}' has unknown shades: {', '.join(unknown)}")

    known = [shade for shade in scale if shade in SHADE_KEYS]
    if known != sorted(known, key=SHADE_KEYS.index):
        issues.append(f"Color scale '{name}' shades are not ordered lightest to darkest")

    return issues
