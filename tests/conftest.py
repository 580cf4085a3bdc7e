"""Pytest configuration and shared fixtures."""

import sys
import copy
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from design_tokens.token_engine import TokenRegistry, load_base_theme  # noqa: E402


SAGE_DOCUMENT = {
    "content": ["./src/**/*.{rs,html,css}", "./dist/**/*.html"],
    "darkMode": "media",
    "theme": {
        "extend": {
            "colors": {
                "spotify-green": "#1DB954",
                "sage": {
                    50: "#f7f9f5", 100: "#eef3ea", 200: "#dde7d5", 300: "#c1d4b6",
                    400: "#9fc08e", 500: "#7fa86d", 600: "#648a54", 700: "#4f6d44",
                    800: "#3d5435", 900: "#2c3e28", 950: "#1a2218",
                },
            },
            "fontFamily": {"sans": ["Inter", "system-ui", "sans-serif"]},
            "animation": {
                "float": "float 6s ease-in-out infinite",
                "pulse-sage": "pulse-sage 2s cubic-bezier(0.4, 0, 0.6, 1) infinite",
            },
            "keyframes": {
                "float": {
                    "0%, 100%": {"transform": "translateY(0px)"},
                    "50%": {"transform": "translateY(-10px)"},
                },
                "pulse-sage": {
                    "0%, 100%": {"opacity": "1", "backgroundColor": "rgb(193, 212, 182)"},
                    "50%": {"opacity": "0.7", "backgroundColor": "rgb(159, 192, 142)"},
                },
            },
            "backdropBlur": {"xs": "2px"},
            "animationDelay": {"75": "75ms", "150": "150ms"},
        }
    },
}


@pytest.fixture
def sage_document():
    """A fresh copy of a sage token document."""
    return copy.deepcopy(SAGE_DOCUMENT)


@pytest.fixture
def sage_registry():
    """Registry loaded from the built-in sage preset."""
    return TokenRegistry.from_preset("sage")


@pytest.fixture
def base_theme():
    """The built-in default base theme."""
    return load_base_theme("default")


@pytest.fixture
def isolated_config(tmp_path):
    """Path to a config file that does not exist, so defaults apply."""
    return tmp_path / "design_tokens.yaml"
