"""Tests for layout selector."""

import pytest

from fitdeck.layout_selector import LAYOUT_CATALOG, LayoutSelector, parse_span
from fitdeck.models import Complexity, ContentAnalysis, SlideArchetype


def make_analysis(word_count=30, bullet_count=0, has_image=False, has_chart=False,
                  complexity=Complexity.SIMPLE) -> ContentAnalysis:
    return ContentAnalysis(
        word_count=word_count,
        bullet_count=bullet_count,
        has_image=has_image,
        has_chart=has_chart,
        slide_archetype=SlideArchetype.CONTENT,
        complexity=complexity
    )


class TestLayoutCatalog:
    """Tests for the fixed layout catalog."""

    def test_catalog_keys(self):
        assert list(LAYOUT_CATALOG) == [
            "title-centered",
            "split-50-50",
            "hero-70-30",
            "content-focused",
            "sidebar-content",
            "two-column",
        ]

    def test_catalog_is_read_only(self):
        """Test that the catalog cannot be modified."""
        with pytest.raises(TypeError):
            LAYOUT_CATALOG["custom"] = LAYOUT_CATALOG["two-column"]

    def test_only_two_column_has_two_columns(self):
        assert [key for key, layout in LAYOUT_CATALOG.items() if layout.columns == 2] == ["two-column"]

    def test_constraints(self):
        layout = LAYOUT_CATALOG["split-50-50"]

        assert layout.whitespace_percent == 40
        assert layout.constraints.min_text_width == 300
        assert layout.constraints.max_text_width == 600
        assert layout.constraints.min_image_size == 400
        assert layout.areas["image"].grid_column == "7 / span 6"

    @pytest.mark.parametrize("value,expected", [
        ("1 / span 6", 6),
        ("2/span 10", 10),
        ("3", 1),
        ("", 1),
    ])
    def test_parse_span(self, value, expected):
        assert parse_span(value) == expected


class TestLayoutSelector:
    """Tests for LayoutSelector class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.selector = LayoutSelector()

    @pytest.mark.parametrize("index,total", [(0, 1), (0, 10), (9, 10), (4, 5)])
    def test_first_and_last_slides_are_centered(self, index, total):
        """Test that position overrides content for the first and last slide."""
        analysis = make_analysis(word_count=200, bullet_count=9, has_image=True,
                                 complexity=Complexity.COMPLEX)

        assert self.selector.select_layout(analysis, index, total).key == "title-centered"

    @pytest.mark.parametrize("analysis,expected", [
        (make_analysis(word_count=30, has_image=True), "hero-70-30"),
        (make_analysis(word_count=50, has_image=True), "split-50-50"),
        (make_analysis(word_count=100, has_image=True), "split-50-50"),
        (make_analysis(word_count=30, bullet_count=5), "two-column"),
        (make_analysis(word_count=80, complexity=Complexity.COMPLEX), "two-column"),
        (make_analysis(word_count=120, has_image=True, complexity=Complexity.COMPLEX), "two-column"),
        (make_analysis(word_count=30), "content-focused"),
    ])
    def test_select_layout_rules(self, analysis, expected):
        """Test the decision order for middle slides."""
        assert self.selector.select_layout(analysis, 2, 5).key == expected

    def test_sidebar_for_long_image_slides(self):
        """Test sidebar layout is reachable when complexity does not win first."""
        analysis = make_analysis(word_count=120, bullet_count=2, has_image=True,
                                 complexity=Complexity.MEDIUM)

        assert self.selector.select_layout(analysis, 1, 3).key == "sidebar-content"

    def test_get_layout(self):
        assert self.selector.get_layout("two-column") is LAYOUT_CATALOG["two-column"]
        assert self.selector.get_layout("missing") is None

    def test_available_layouts(self):
        assert len(self.selector.available_layouts()) == 6

    def test_validate_clean_layout(self):
        """Test a layout within every constraint."""
        result = self.selector.validate_layout(LAYOUT_CATALOG["split-50-50"], make_analysis(has_image=True))

        assert result.valid is True
        assert result.score == 100
        assert result.whitespace_percent == 40

    def test_validate_low_whitespace(self):
        """Test hero layout is penalized for whitespace below 40%."""
        result = self.selector.validate_layout(LAYOUT_CATALOG["hero-70-30"], make_analysis(has_image=True))

        assert result.valid is False
        assert result.score == 85
        assert any("whitespace" in error.lower() for error in result.errors)

    def test_validate_image_too_small(self):
        """Test image warning on layouts without an image budget."""
        result = self.selector.validate_layout(LAYOUT_CATALOG["content-focused"], make_analysis(has_image=True))

        assert result.valid is True
        assert result.score == 95
        assert len(result.warnings) == 1

    def test_validate_too_many_words_single_column(self):
        """Test word volume error only applies to single-column layouts."""
        analysis = make_analysis(word_count=90)

        single = self.selector.validate_layout(LAYOUT_CATALOG["content-focused"], analysis)
        double = self.selector.validate_layout(LAYOUT_CATALOG["two-column"], analysis)

        assert single.valid is False
        assert single.score == 90
        assert single.findings[0].topic == "word-count"
        assert double.valid is True

    def test_grid_geometry(self):
        """Test column and row sizes of the 12-column grid."""
        assert self.selector.column_width() == pytest.approx(130)
        assert self.selector.row_height() == pytest.approx(228)

    def test_grid_system(self):
        grid = self.selector.grid_system()

        assert grid.columns == 12
        assert grid.gutter == 24
        assert grid.margin == 48
        assert grid.base_unit == 8

    def test_content_container_content_area(self):
        """Test the content area width is capped at the max text width."""
        box = self.selector.content_container(LAYOUT_CATALOG["content-focused"])

        assert box.area == "content"
        assert box.width == 800
        assert box.height == pytest.approx(3 * 228 + 2 * 24)

    def test_content_container_narrow_area(self):
        """Test a container narrower than the max text width keeps its span."""
        box = self.selector.content_container(LAYOUT_CATALOG["hero-70-30"])

        assert box.width == 400
        box = self.selector.content_container(LAYOUT_CATALOG["sidebar-content"])
        assert box.width == pytest.approx(4 * 130 + 3 * 24)

    def test_content_container_uses_subtitle(self):
        """Test centered layouts place body text in the subtitle area."""
        box = self.selector.content_container(LAYOUT_CATALOG["title-centered"], padding=16)

        assert box.area == "subtitle"
        assert box.width == 800 - 32
        assert box.height == pytest.approx(228 - 32)

    def test_calculate_whitespace(self):
        whitespace = self.selector.calculate_whitespace(LAYOUT_CATALOG["two-column"])

        assert 0 < whitespace < 100
        assert whitespace > self.selector.calculate_whitespace(LAYOUT_CATALOG["two-column"], content_areas=1)

    def test_generate_css(self):
        css = self.selector.generate_css(LAYOUT_CATALOG["split-50-50"], "slide-1")

        assert "#slide-1 {" in css
        assert "grid-template-columns: repeat(12, 1fr);" in css
        assert "#slide-1 .image {" in css
        assert "grid-column: 7 / span 6;" in css
        assert "@media (max-width: 768px)" in css
        assert ".title {" not in css.split("@media")[0]
