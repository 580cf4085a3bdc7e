"""Design Tokens - a design-token registry that extends a base theme."""

__version__ = "0.1.0"
__author__ = "Design Tokens Team"

from .token_engine import (
    TokenEngine,
    TokenRegistry,
    ThemeMode,
)

__all__ = ["TokenEngine", "TokenRegistry", "ThemeMode", "__version__"]
