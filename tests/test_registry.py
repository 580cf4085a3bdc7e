"""Tests for the token registry."""

import json

import pytest
from pydantic import ValidationError

from design_tokens.token_engine import (
    TokenRegistry,
    ThemeMode,
    SHADE_KEYS,
    list_presets,
    load_document,
)


class TestRegistryGetters:
    """Test the read-only getters of a loaded registry."""

    def setup_method(self):
        self.registry = TokenRegistry.from_preset("sage")

    def test_content_globs_in_declared_order(self):
        """Test content globs cover sources and rendered output."""
        assert self.registry.get_content_globs() == [
            "./src/**/*.{rs,html,css}",
            "./dist/**/*.html",
        ]

    def test_theme_mode(self):
        assert self.registry.get_theme_mode() == ThemeMode.MEDIA

    def test_color_extensions(self):
        """Test single colors and shade scales are both exposed."""
        colors = self.registry.get_color_extensions()

        assert colors["spotify-green"] == "#1DB954"
        assert colors["sage"]["500"] == "#7fa86d"

    def test_sage_scale_declares_every_shade_once(self):
        """Test the sage scale holds exactly the eleven documented shades."""
        sage = self.registry.get_color_extensions()["sage"]

        assert list(sage) == list(SHADE_KEYS)
        assert len(sage) == len(set(sage)) == 11

    def test_font_extensions(self):
        fonts = self.registry.get_font_extensions()
        assert fonts == {"sans": ["Inter", "system-ui", "sans-serif"]}

    def test_animation_extensions(self):
        animations = self.registry.get_animation_extensions()

        assert animations["float"] == "float 6s ease-in-out infinite"
        assert animations["pulse-sage"] == "pulse-sage 2s cubic-bezier(0.4, 0, 0.6, 1) infinite"
        assert animations["sparkle"] == "sparkle 2s ease-in-out infinite"

    def test_keyframe_steps_keep_declared_order(self):
        keyframes = self.registry.get_keyframe_extensions()

        assert list(keyframes["sparkle"]) == ["0%, 100%", "25%", "50%", "75%"]
        assert keyframes["float"]["50%"] == {"transform": "translateY(-10px)"}
        assert keyframes["pulse-sage"]["0%, 100%"]["backgroundColor"] == "rgb(193, 212, 182)"

    def test_scale_extensions(self):
        assert self.registry.get_scale_extension("backdropBlur") == {"xs": "2px"}
        assert self.registry.get_scale_extension("animationDelay") == {
            "75": "75ms",
            "150": "150ms",
        }

    def test_scale_name_spellings(self):
        """Test snake_case and kebab-case names find the camelCase scale."""
        assert self.registry.get_scale_extension("backdrop_blur") == {"xs": "2px"}
        assert self.registry.get_scale_extension("animation-delay")["150"] == "150ms"

    def test_unknown_scale_is_empty(self):
        """Test an unrecognized scale yields an empty mapping, not an error."""
        assert self.registry.get_scale_extension("nonexistent") == {}
        assert self.registry.get_scale_extension("colors") == {}

    def test_getters_return_copies(self):
        """Test mutating returned values does not change the registry."""
        colors = self.registry.get_color_extensions()
        colors["sage"]["500"] = "#000000"
        colors["new"] = "#ffffff"

        fonts = self.registry.get_font_extensions()
        fonts["sans"].append("serif")

        globs = self.registry.get_content_globs()
        globs.clear()

        assert self.registry.get_color_extensions()["sage"]["500"] == "#7fa86d"
        assert "new" not in self.registry.get_color_extensions()
        assert self.registry.get_font_extensions()["sans"] == ["Inter", "system-ui", "sans-serif"]
        assert len(self.registry.get_content_globs()) == 2

    def test_config_is_frozen(self):
        with pytest.raises(ValidationError):
            self.registry.config.content = []


class TestRegistryLoading:
    """Test building registries from documents and files."""

    def test_from_dict(self, sage_document):
        registry = TokenRegistry.from_dict(sage_document)

        assert registry.get_color_extensions()["sage"]["50"] == "#f7f9f5"
        assert registry.get_scale_extension("backdropBlur") == {"xs": "2px"}

    def test_empty_document_uses_defaults(self):
        """Test an absent darkMode falls back to the media strategy."""
        registry = TokenRegistry.from_dict({})

        assert registry.get_theme_mode() == ThemeMode.MEDIA
        assert registry.get_content_globs() == []
        assert registry.get_color_extensions() == {}
        assert registry.get_scale_extension("backdropBlur") == {}

    def test_null_dark_mode_uses_default(self):
        registry = TokenRegistry.from_dict({"darkMode": None})
        assert registry.get_theme_mode() == ThemeMode.MEDIA

    def test_class_dark_mode(self):
        registry = TokenRegistry.from_dict({"darkMode": "class"})
        assert registry.get_theme_mode() == ThemeMode.CLASS

    def test_dark_mode_with_selector_argument(self):
        registry = TokenRegistry.from_dict({"darkMode": ["class", ".dark"]})
        assert registry.get_theme_mode() == ThemeMode.CLASS

    def test_invalid_dark_mode(self):
        with pytest.raises(ValueError, match="Invalid token configuration"):
            TokenRegistry.from_dict({"darkMode": "sometimes"})

    def test_theme_replacement_is_rejected(self):
        """Test a category outside theme.extend cannot replace the base."""
        with pytest.raises(ValueError, match="replace the base 'colors' category"):
            TokenRegistry.from_dict({"theme": {"colors": {"sage": "#7fa86d"}}})

    def test_non_mapping_category_is_rejected(self):
        with pytest.raises(ValueError):
            TokenRegistry.from_dict({"theme": {"extend": {"backdropBlur": "2px"}}})

    def test_null_value_is_rejected(self):
        with pytest.raises(ValueError):
            TokenRegistry.from_dict({"theme": {"extend": {"colors": {"sage": None}}}})

    def test_non_mapping_document_is_rejected(self):
        with pytest.raises(ValueError, match="expected a mapping"):
            TokenRegistry.from_dict(["content"])

    def test_unknown_top_level_key_is_rejected(self):
        with pytest.raises(ValueError):
            TokenRegistry.from_dict({"prefix": "tw-"})

    def test_bare_font_name_becomes_stack(self):
        registry = TokenRegistry.from_dict(
            {"theme": {"extend": {"fontFamily": {"display": "Lobster"}}}}
        )
        assert registry.get_font_extensions() == {"display": ["Lobster"]}

    def test_empty_font_stack_is_rejected(self):
        with pytest.raises(ValueError, match="at least one face"):
            TokenRegistry.from_dict({"theme": {"extend": {"fontFamily": {"display": []}}}})

    def test_custom_scale_is_kept(self):
        registry = TokenRegistry.from_dict(
            {"theme": {"extend": {"transition-duration": {"2000": "2000ms"}}}}
        )
        assert registry.get_scale_extension("transitionDuration") == {"2000": "2000ms"}
        assert registry.get_scale_names() == ["transitionDuration"]

    def test_scale_spelled_twice_is_rejected(self):
        """Test two spellings of one scale name fail instead of overwriting."""
        with pytest.raises(ValueError, match="also given as 'animationDelay'"):
            TokenRegistry.from_yaml(
                "theme:\n"
                "  extend:\n"
                "    animationDelay:\n"
                "      '75': 75ms\n"
                "    animation-delay:\n"
                "      '150': 150ms\n"
            )

    def test_font_family_spelled_twice_is_rejected(self):
        with pytest.raises(ValueError, match="duplicate key 'font_family'"):
            TokenRegistry.from_dict({"theme": {"extend": {
                "fontFamily": {"sans": ["A"]},
                "font_family": {"mono": ["B"]},
            }}})

    def test_kebab_case_font_family_is_the_category(self):
        registry = TokenRegistry.from_dict(
            {"theme": {"extend": {"font-family": {"mono": ["B"]}}}}
        )

        assert registry.get_font_extensions() == {"mono": ["B"]}
        assert registry.get_scale_names() == []

    def test_scales_is_an_ordinary_scale_name(self):
        registry = TokenRegistry.from_dict({"theme": {"extend": {"scales": {"sm": "1px"}}}})

        assert registry.get_scale_extension("scales") == {"sm": "1px"}
        assert registry == TokenRegistry.from_dict(registry.to_dict())

    def test_non_mapping_scales_is_rejected(self):
        with pytest.raises(ValueError, match="Invalid token configuration"):
            TokenRegistry.from_dict({"theme": {"extend": {"scales": 5}}})

    def test_yaml_keys_are_kept_as_written(self):
        """Test on/off and octal-looking keys are not resolved as bool or int."""
        registry = TokenRegistry.from_yaml(
            "theme:\n"
            "  extend:\n"
            "    animationDelay:\n"
            "      on: 10ms\n"
            "      off: 0ms\n"
            "      050: 50ms\n"
            "    colors:\n"
            "      brand:\n"
            "        50: '#f7f9f5'\n"
        )

        assert registry.get_scale_extension("animationDelay") == {
            "on": "10ms",
            "off": "0ms",
            "050": "50ms",
        }
        assert registry.get_color_extensions() == {"brand": {"50": "#f7f9f5"}}

    def test_from_missing_preset(self):
        with pytest.raises(FileNotFoundError):
            TokenRegistry.from_preset("does_not_exist")

    def test_list_presets(self):
        assert "sage" in list_presets()

    def test_from_yaml_file(self, tmp_path):
        token_file = tmp_path / "tokens.yaml"
        token_file.write_text(
            "darkMode: class\n"
            "theme:\n"
            "  extend:\n"
            "    colors:\n"
            "      brand: '#123456'\n"
        )

        registry = TokenRegistry.from_file(token_file)

        assert registry.get_theme_mode() == ThemeMode.CLASS
        assert registry.get_color_extensions() == {"brand": "#123456"}
        assert registry.source == str(token_file)

    def test_from_json_file(self, tmp_path, sage_document):
        token_file = tmp_path / "tokens.json"
        token_file.write_text(json.dumps(sage_document))

        registry = TokenRegistry.from_file(token_file)

        assert registry == TokenRegistry.from_dict(sage_document)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TokenRegistry.from_file(tmp_path / "missing.yaml")

    def test_unsupported_format(self, tmp_path):
        token_file = tmp_path / "tailwind.config.js"
        token_file.write_text("module.exports = {}")

        with pytest.raises(ValueError, match="Unsupported file format"):
            TokenRegistry.from_file(token_file)

    def test_duplicate_yaml_key_is_rejected(self, tmp_path):
        """Test duplicate keys within one category fail at load time."""
        token_file = tmp_path / "tokens.yaml"
        token_file.write_text(
            "theme:\n"
            "  extend:\n"
            "    colors:\n"
            "      brand: '#111111'\n"
            "      brand: '#222222'\n"
        )

        with pytest.raises(ValueError, match="duplicate key"):
            TokenRegistry.from_file(token_file)

    def test_duplicate_json_key_is_rejected(self, tmp_path):
        token_file = tmp_path / "tokens.json"
        token_file.write_text('{"theme": {"extend": {"animation": {"a": "x", "a": "y"}}}}')

        with pytest.raises(ValueError, match="duplicate key"):
            load_document(token_file)

    def test_invalid_yaml(self):
        with pytest.raises(ValueError, match="Invalid YAML"):
            TokenRegistry.from_yaml("theme: [unclosed")


class TestRegistryRoundTrip:
    """Test serializing a registry and parsing it back."""

    def test_yaml_round_trip(self, sage_registry):
        restored = TokenRegistry.from_yaml(sage_registry.to_yaml())

        assert restored == sage_registry
        assert restored.to_dict() == sage_registry.to_dict()

    def test_json_round_trip(self, sage_registry):
        restored = TokenRegistry.from_json(sage_registry.to_json())

        assert restored == sage_registry
        assert restored.get_keyframe_extensions() == sage_registry.get_keyframe_extensions()

    def test_file_round_trip(self, tmp_path, sage_registry):
        for name in ("tokens.yaml", "tokens.json"):
            path = tmp_path / name
            sage_registry.save(path)
            assert TokenRegistry.from_file(path) == sage_registry

    def test_document_shape(self, sage_registry):
        """Test the document uses camelCase keys and inlines scales."""
        document = sage_registry.to_dict()
        extend = document["theme"]["extend"]

        assert document["darkMode"] == "media"
        assert set(extend) == {
            "colors", "fontFamily", "animation", "keyframes", "backdropBlur", "animationDelay",
        }
        assert "scales" not in extend

    def test_save_unsupported_format(self, tmp_path, sage_registry):
        with pytest.raises(ValueError, match="Unsupported file format"):
            sage_registry.save(tmp_path / "tokens.toml")
