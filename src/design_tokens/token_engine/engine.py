"""Core token engine for the design token system.

This module merges a registry's extension tokens onto a base theme, checks the
result for dangling keyframe references and malformed scales, and exposes the
resolved tokens. Problems found while resolving are logged as warnings and
never abort the merge.
"""

from typing import Dict, Optional, Any, List
import logging

from .schema import ThemeTokens, ResolvedTheme
from .registry import TokenRegistry, load_base_theme, DEFAULT_BASE_THEME
from .utils import (
    deep_merge_dict,
    get_keyframe_reference,
    parse_keyframe_selector,
    check_color_scale,
)

logger = logging.getLogger(__name__)


def merge_theme(base: ThemeTokens, extension: ThemeTokens) -> ThemeTokens:
    """Merge extension tokens onto a base theme.

    Each category (colors, fontFamily, animation, keyframes and every named
    scale) is merged key by key: extension values win on shared keys, base-only
    keys are kept, extension-only keys are added. No category is replaced
    wholesale.

    Args:
        base: Base theme tokens
        extension: Extension tokens

    Returns:
        New merged ThemeTokens
    """
    if extension.is_empty():
        return base

    merged = deep_merge_dict(base.to_document(), extension.to_document())
    return ThemeTokens.model_validate(merged)


def find_dangling_animations(theme: ThemeTokens) -> List[str]:
    """Find animations whose keyframes reference is not defined.

    Args:
        theme: Theme tokens to check

    Returns:
        List of warning messages, one per dangling reference
    """
    warnings = []

    for name, value in theme.animation.items():
        for reference in get_keyframe_reference(value):
            if reference not in theme.keyframes:
                warnings.append(
                    f"Animation '{name}' references undefined keyframes '{reference}'"
                )

    return warnings


def validate_theme(theme: ThemeTokens) -> List[str]:
    """Validate theme tokens and return any issues.

    Checks keyframe references, color scale shades and keyframe step
    selectors. Literal values (colors, durations) are not checked.

    Args:
        theme: Theme tokens to validate

    Returns:
        List of validation issues (empty if valid)
    """
    issues = find_dangling_animations(theme)

    for name, token in theme.colors.items():
        if isinstance(token, dict):
            issues.extend(check_color_scale(name, token))

    for name, steps in theme.keyframes.items():
        for selector in steps:
            try:
                parse_keyframe_selector(selector)
            except ValueError as e:
                issues.append(f"Keyframes '{name}': {e}")

    return issues


class TokenEngine:
    """Resolver that layers a registry's extensions onto a base theme."""

    def __init__(self, registry: TokenRegistry, base: Optional[ThemeTokens] = None,
                 base_theme: str = DEFAULT_BASE_THEME):
        """Initialize the token engine.

        Args:
            registry: Registry holding the extension tokens
            base: Base theme tokens; loaded from ``base_theme`` if omitted
            base_theme: Name of the built-in base theme to load
        """
        self.registry = registry
        self.base = base if base is not None else load_base_theme(base_theme)

        self._resolved: Optional[ResolvedTheme] = None

        logger.debug(f"TokenEngine initialized for {registry.source}")

    @classmethod
    def from_config(cls, config) -> 'TokenEngine':
        """Create a token engine from application config.

        Args:
            config: Application configuration object

        Returns:
            TokenEngine instance
        """
        if config.token_file:
            registry = TokenRegistry.from_file(config.token_file)
        else:
            registry = TokenRegistry.from_preset(config.preset)
        return cls(registry, base_theme=config.base_theme)

    def resolve(self) -> ResolvedTheme:
        """Merge the registry onto the base theme.

        Returns:
            ResolvedTheme with any validation warnings attached
        """
        if self._resolved is not None:
            return self._resolved

        theme = merge_theme(self.base, self.registry.extension)
        warnings = validate_theme(theme)

        for warning in warnings:
            logger.warning(warning)

        self._resolved = ResolvedTheme(
            content=self.registry.get_content_globs(),
            dark_mode=self.registry.get_theme_mode(),
            theme=theme,
            plugins=list(self.registry.config.plugins),
            warnings=warnings,
        )

        logger.debug(f"Resolved tokens for {self.registry.source} with {len(warnings)} warnings")
        return self._resolved

    def validate(self) -> List[str]:
        """Return the warnings produced by resolving."""
        return list(self.resolve().warnings)

    def get_token(self, path: str) -> Any:
        """Look up a resolved token by dotted path.

        Args:
            path: Path such as ``colors.sage.500`` or ``fontFamily.sans``

        Returns:
            Token value (string, list or mapping)

        Raises:
            KeyError: If any segment of the path is not defined
        """
        node: Any = self.resolve().theme.to_document()

        for segment in path.split('.'):
            if not isinstance(node, dict) or segment not in node:
                raise KeyError(f"Token '{path}' not found")
            node = node[segment]

        return node

    def get_category(self, category: str) -> Dict[str, Any]:
        """Get one resolved category, or an empty mapping if absent."""
        return self.resolve().theme.to_document().get(category, {})
