"""Tests for the color contrast engine."""

import random

import pytest

from fitdeck.color_engine import (
    PALETTE_CATALOG,
    ColorEngine,
    calculate_contrast_ratio,
    darken,
    generate_shades,
    hex_to_rgb,
    lighten,
    relative_luminance
)
from fitdeck.models import ColorPalette, ContrastLevel, SurfaceColors, TextColors


def random_color(rng: random.Random) -> str:
    return "#" + "".join(f"{rng.randrange(256):02X}" for _ in range(3))


def make_palette(**overrides) -> ColorPalette:
    data = {
        "id": "test",
        "name": "Test",
        "domain": "corporate",
        "primary": "#1A365D",
        "secondary": "#2B6CB0",
        "accent": "#B45309",
        "text": TextColors(primary="#111827", secondary="#4B5563", inverse="#FFFFFF"),
        "surfaces": SurfaceColors(background="#FFFFFF", card="#F3F4F6", overlay="rgba(0, 0, 0, 0.5)"),
    }
    data.update(overrides)
    return ColorPalette(**data)


class TestColorMath:
    """Tests for luminance and contrast helpers."""

    def test_hex_to_rgb(self):
        assert hex_to_rgb("#1A365D") == (26, 54, 93)
        assert hex_to_rgb("ffffff") == (255, 255, 255)
        assert hex_to_rgb("#abc") is None
        assert hex_to_rgb("not a color") is None

    def test_luminance_extremes(self):
        assert relative_luminance("#FFFFFF") == pytest.approx(1.0)
        assert relative_luminance("#000000") == pytest.approx(0.0)

    def test_unparseable_color_has_zero_luminance(self):
        assert relative_luminance("red") == 0.0

    def test_black_on_white(self):
        assert calculate_contrast_ratio("#000000", "#FFFFFF") == pytest.approx(21.0, abs=0.01)

    def test_mid_grey_on_white(self):
        """Test the classic #767676 AA boundary grey."""
        assert calculate_contrast_ratio("#767676", "#FFFFFF") == pytest.approx(4.54, abs=0.01)

    @pytest.mark.parametrize("seed", range(20))
    def test_contrast_is_symmetric(self, seed):
        rng = random.Random(seed)
        a, b = random_color(rng), random_color(rng)

        assert calculate_contrast_ratio(a, b) == pytest.approx(calculate_contrast_ratio(b, a))
        assert calculate_contrast_ratio(a, b) >= 1.0

    def test_lighten_and_darken(self):
        assert lighten("#000000", 0.5) == "#808080"
        assert darken("#FFFFFF", 0.5) == "#808080"
        assert lighten("#1A365D", 0) == "#1A365D"
        assert darken("#1A365D", 1) == "#000000"

    def test_generate_shades(self):
        shades = generate_shades("#1A365D")

        assert list(shades) == ["50", "100", "200", "300", "400", "500", "600", "700", "800", "900"]
        assert shades["500"] == "#1A365D"
        luminances = [relative_luminance(color) for color in shades.values()]
        assert luminances == sorted(luminances, reverse=True)


class TestColorEngine:
    """Tests for ColorEngine class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = ColorEngine()

    def test_check_contrast_pass(self):
        check = self.engine.check_contrast("#000000", "#FFFFFF")

        assert check.passes is True
        assert check.level == ContrastLevel.AAA
        assert check.ratio == 21.0
        assert check.recommendation is None

    def test_check_contrast_thresholds(self):
        """Test #767676 passes AA but fails AAA for normal text."""
        aaa = self.engine.check_contrast("#767676", "#FFFFFF", "normal", "AAA")
        aa = self.engine.check_contrast("#767676", "#FFFFFF", "normal", "AA")
        large = self.engine.check_contrast("#767676", "#FFFFFF", "large", "AAA")

        assert aaa.passes is False
        assert aaa.level == ContrastLevel.AA
        assert aaa.required_ratio == 7.0
        assert "7:1" in aaa.recommendation
        assert aa.passes is True
        assert large.passes is True

    def test_check_contrast_ui(self):
        check = self.engine.check_contrast("#949494", "#FFFFFF", "ui", "AA")

        assert check.required_ratio == 3.0
        assert check.passes is True
        assert check.level == ContrastLevel.FAIL

    def test_check_contrast_rejects_unknown_requirement(self):
        with pytest.raises(ValueError):
            self.engine.check_contrast("#000000", "#FFFFFF", "huge", "AAA")

    def test_ensure_contrast_darkens_on_light_background(self):
        color = self.engine.ensure_contrast("#999999", "#FFFFFF", 7.0)

        assert calculate_contrast_ratio(color, "#FFFFFF") >= 7.0
        assert relative_luminance(color) < relative_luminance("#999999")

    def test_ensure_contrast_lightens_on_dark_background(self):
        color = self.engine.ensure_contrast("#444444", "#000000", 7.0)

        assert calculate_contrast_ratio(color, "#000000") >= 7.0
        assert relative_luminance(color) > relative_luminance("#444444")

    def test_ensure_contrast_already_passing(self):
        result = self.engine.ensure_contrast_detailed("#000000", "#FFFFFF", 7.0)

        assert result.color == "#000000"
        assert result.iterations == 0
        assert result.converged is True
        assert result.exhausted is False

    def test_ensure_contrast_unreachable_target_stops_at_cap(self):
        """Test that an unreachable target ends after the iteration cap."""
        result = self.engine.ensure_contrast_detailed("#777777", "#777777", 7.0, max_iterations=50)

        assert result.converged is False
        assert result.exhausted is True
        assert result.iterations == 50
        assert result.ratio < 7.0
        assert self.engine.ensure_contrast("#777777", "#777777", 7.0) == result.color

    @pytest.mark.parametrize("seed", range(25))
    def test_ensure_contrast_converges_or_exhausts(self, seed):
        """Test the bounded search either reaches the target or uses every step."""
        rng = random.Random(seed)
        fg, bg = random_color(rng), random_color(rng)
        target = rng.choice([3.0, 4.5, 7.0])

        result = self.engine.ensure_contrast_detailed(fg, bg, target, max_iterations=50)

        if result.converged:
            assert calculate_contrast_ratio(result.color, bg) >= target
        else:
            assert result.exhausted is True
            assert result.iterations == 50

    def test_corporate_blue_is_valid(self):
        """Test the default palette scores at least 90 with no errors."""
        result = self.engine.validate_palette(PALETTE_CATALOG["corporate-blue"])

        assert result.valid is True
        assert result.errors == []
        assert result.score >= 90
        assert any("Accent" in warning for warning in result.warnings)

    @pytest.mark.parametrize("palette_id", list(PALETTE_CATALOG))
    def test_valid_palettes_pass_primary_text_check(self, palette_id):
        """Test that a palette without errors has AAA primary text."""
        palette = PALETTE_CATALOG[palette_id]
        result = self.engine.validate_palette(palette)

        if result.valid:
            check = self.engine.check_contrast(palette.text.primary, palette.surfaces.background, "normal", "AAA")
            assert check.passes is True

    def test_validate_palette_failures(self):
        """Test every palette rule and its penalty."""
        palette = make_palette(
            primary="#2B6CB0",
            secondary="#2B6CB1",
            accent="#FDE68A",
            text=TextColors(primary="#9CA3AF", secondary="#D1D5DB", inverse="#6B7280")
        )

        result = self.engine.validate_palette(palette)

        assert result.valid is False
        assert len(result.errors) == 3
        assert len(result.warnings) == 2
        assert result.score == 100 - 30 - 20 - 10 - 25 - 5
        assert len(result.recommendations) == 5

    def test_inverse_text_skipped_for_light_primary(self):
        palette = make_palette(primary="#FDE68A", text=TextColors(primary="#111827", secondary="#4B5563",
                                                                   inverse="#FFFFFF"))

        result = self.engine.validate_palette(palette)

        assert not any("Inverse" in error for error in result.errors)

    def test_get_palette(self):
        assert self.engine.get_palette("tech-purple").primary == "#6B21A8"
        assert self.engine.get_palette("finance").id == "finance-green"
        assert self.engine.get_palette("unknown") is None

    def test_catalog_shades(self):
        for palette in self.engine.all_palettes():
            assert palette.shades["500"] == palette.primary
            assert len(palette.shades) == 10

    def test_generate_css(self):
        css = self.engine.generate_css(PALETTE_CATALOG["corporate-blue"])

        assert css.startswith(":root {")
        assert "--color-primary: #1A365D;" in css
        assert "--color-primary-500: #1A365D;" in css
        assert css.endswith("}")
