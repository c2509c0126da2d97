"""Layout selector mapping content analysis to grid layout templates."""

import logging
import re
from types import MappingProxyType
from typing import List, Mapping, Optional

from .models import (
    Complexity,
    ContainerBox,
    ContentAnalysis,
    GridArea,
    GridConstraints,
    GridLayout,
    GridSystem,
    LayoutValidation,
    ValidationFinding
)

logger = logging.getLogger(__name__)

GRID_SYSTEM = GridSystem()

_SPAN_PATTERN = re.compile(r"^\s*(\d+)\s*/\s*span\s+(\d+)\s*$")


def _layout(key: str, name: str, description: str, areas: dict, whitespace: float,
            min_text: int, max_text: int, min_image: int, columns: int = 1) -> GridLayout:
    return GridLayout(
        key=key,
        name=name,
        description=description,
        areas={area: GridArea(**bounds) for area, bounds in areas.items()},
        whitespace_percent=whitespace,
        constraints=GridConstraints(
            min_text_width=min_text,
            max_text_width=max_text,
            min_image_size=min_image
        ),
        columns=columns
    )


LAYOUT_CATALOG: Mapping[str, GridLayout] = MappingProxyType({
    layout.key: layout for layout in (
        _layout(
            "title-centered", "Title Centered",
            "Centered title and subtitle for opening and closing slides",
            {
                "title": {"grid_column": "3 / span 8", "grid_row": "2 / span 1",
                          "justify_self": "center", "align_self": "center"},
                "subtitle": {"grid_column": "3 / span 8", "grid_row": "3 / span 1",
                             "justify_self": "center", "align_self": "start"},
            },
            60, 200, 800, 0
        ),
        _layout(
            "split-50-50", "Split 50/50", "Equal split for content and image",
            {
                "content": {"grid_column": "1 / span 6", "grid_row": "1 / span 4",
                            "justify_self": "start", "align_self": "start"},
                "image": {"grid_column": "7 / span 6", "grid_row": "1 / span 4",
                          "justify_self": "center", "align_self": "center"},
            },
            40, 300, 600, 400
        ),
        _layout(
            "hero-70-30", "Hero Image 70/30", "Large image (70%) with supporting text (30%)",
            {
                "image": {"grid_column": "1 / span 8", "grid_row": "1 / span 4",
                          "justify_self": "center", "align_self": "center"},
                "content": {"grid_column": "9 / span 4", "grid_row": "1 / span 4",
                            "justify_self": "start", "align_self": "center"},
            },
            35, 200, 400, 600
        ),
        _layout(
            "content-focused", "Content Focused", "Full-width content with generous margins",
            {
                "title": {"grid_column": "2 / span 10", "grid_row": "1 / span 1",
                          "justify_self": "start", "align_self": "start"},
                "content": {"grid_column": "2 / span 10", "grid_row": "2 / span 3",
                            "justify_self": "start", "align_self": "start"},
            },
            45, 400, 800, 0
        ),
        _layout(
            "sidebar-content", "Sidebar + Content", "33/67 split for sidebar text and main visual",
            {
                "content": {"grid_column": "1 / span 4", "grid_row": "1 / span 4",
                            "justify_self": "start", "align_self": "start"},
                "image": {"grid_column": "5 / span 8", "grid_row": "1 / span 4",
                          "justify_self": "start", "align_self": "start"},
            },
            40, 250, 700, 500
        ),
        _layout(
            "two-column", "Two Column", "Two equal columns for balanced content",
            {
                "title": {"grid_column": "1 / span 12", "grid_row": "1 / span 1",
                          "justify_self": "start", "align_self": "start"},
                "content": {"grid_column": "1 / span 6", "grid_row": "2 / span 3",
                            "justify_self": "start", "align_self": "start"},
                "image": {"grid_column": "7 / span 6", "grid_row": "2 / span 3",
                          "justify_self": "start", "align_self": "start"},
            },
            40, 300, 550, 0, columns=2
        ),
    )
})

DEFAULT_LAYOUT = "content-focused"


def parse_span(value: str) -> int:
    """Return the span of a CSS grid placement such as ``'2 / span 3'``."""
    match = _SPAN_PATTERN.match(value)
    if not match:
        return 1
    return int(match.group(2))


class LayoutSelector:
    """Selects, validates and describes grid layouts from the fixed catalog."""

    def __init__(
        self,
        catalog: Optional[Mapping[str, GridLayout]] = None,
        grid: Optional[GridSystem] = None
    ):
        """
        Initialize the layout selector.

        Args:
            catalog: Layout catalog to select from (defaults to LAYOUT_CATALOG)
            grid: Grid system the layouts are placed on
        """
        self.catalog = catalog if catalog is not None else LAYOUT_CATALOG
        self.grid = grid or GRID_SYSTEM

        logger.info(f"LayoutSelector initialized with {len(self.catalog)} layouts")

    def select_layout(
        self,
        analysis: ContentAnalysis,
        slide_index: int,
        total_slides: int
    ) -> GridLayout:
        """
        Select a layout for a slide.

        Slide position overrides content shape: the first and last slides are
        always centered. Image rules are checked before bullet and complexity
        rules since image presence and word volume are the stronger signals.

        Args:
            analysis: Content analysis of the slide
            slide_index: Zero-based slide index
            total_slides: Number of slides in the deck

        Returns:
            GridLayout from the catalog
        """
        key = self._select_key(analysis, slide_index, total_slides)
        logger.debug(f"Slide {slide_index}/{total_slides}: selected layout '{key}'")
        return self.catalog[key]

    def _select_key(self, analysis: ContentAnalysis, slide_index: int, total_slides: int) -> str:
        if slide_index == 0 or slide_index == total_slides - 1:
            return "title-centered"

        words = analysis.word_count
        if analysis.has_image and words < 50:
            return "hero-70-30"
        if analysis.has_image and 50 <= words <= 100:
            return "split-50-50"
        if analysis.bullet_count >= 5 or analysis.complexity == Complexity.COMPLEX:
            return "two-column"
        if analysis.has_image and words > 100:
            return "sidebar-content"
        return DEFAULT_LAYOUT

    def validate_layout(self, layout: GridLayout, analysis: ContentAnalysis) -> LayoutValidation:
        """
        Score a layout against its constraints and the slide's content.

        Args:
            layout: Layout to validate
            analysis: Content analysis of the slide using it

        Returns:
            LayoutValidation with errors, warnings and a 0-100 score
        """
        findings: List[ValidationFinding] = []
        constraints = layout.constraints

        if constraints.min_text_width < 200:
            findings.append(ValidationFinding(
                source="layout", severity="error", penalty=20,
                message=f"Text area too narrow ({constraints.min_text_width}px, minimum 200px)",
                suggestion="Use a layout with at least 200px of text width"
            ))

        if constraints.max_text_width > 800:
            findings.append(ValidationFinding(
                source="layout", severity="warning", penalty=5,
                message=f"Text area very wide ({constraints.max_text_width}px, optimal ≤800px)",
                suggestion="Limit text width to 800px (~75 characters per line)"
            ))

        whitespace = layout.whitespace_percent
        if whitespace < 40:
            findings.append(ValidationFinding(
                source="layout", severity="error", penalty=15,
                message=f"Insufficient whitespace ({whitespace:g}%, need ≥40%)",
                suggestion="Increase whitespace to at least 40% of the slide"
            ))
        elif whitespace > 70:
            findings.append(ValidationFinding(
                source="layout", severity="warning", penalty=5,
                message=f"Too much whitespace ({whitespace:g}%, optimal 40-60%)",
                suggestion="Reduce whitespace to 40-60% of the slide"
            ))

        if analysis.has_image and constraints.min_image_size < 300:
            findings.append(ValidationFinding(
                source="layout", severity="warning", penalty=5,
                message=f"Image area small ({constraints.min_image_size}px, recommended ≥300px)",
                suggestion="Give the image at least 300px"
            ))

        if analysis.word_count > 75 and layout.columns == 1:
            findings.append(ValidationFinding(
                source="layout", severity="error", penalty=10, topic="word-count",
                message=f"Too much text ({analysis.word_count} words) for single-column layout",
                suggestion="Use a two-column layout or reduce content to 75 words"
            ))

        result = LayoutValidation.from_findings(findings, whitespace_percent=whitespace)
        logger.debug(f"Layout '{layout.key}' validation score: {result.score}")
        return result

    def get_layout(self, key: str) -> Optional[GridLayout]:
        """Get a layout by catalog key, or None when it does not exist."""
        return self.catalog.get(key)

    def available_layouts(self) -> List[GridLayout]:
        """Return all layouts in catalog order."""
        return list(self.catalog.values())

    def grid_system(self) -> GridSystem:
        return self.grid

    def column_width(self) -> float:
        grid = self.grid
        usable = grid.slide_width - 2 * grid.margin - (grid.columns - 1) * grid.gutter
        return usable / grid.columns

    def row_height(self) -> float:
        grid = self.grid
        usable = grid.slide_height - 2 * grid.margin - (grid.rows - 1) * grid.gutter
        return usable / grid.rows

    def area_size(self, area: GridArea) -> ContainerBox:
        """Return the pixel size of a grid area on the reference slide."""
        columns = min(parse_span(area.grid_column), self.grid.columns)
        rows = min(parse_span(area.grid_row), self.grid.rows)
        width = columns * self.column_width() + (columns - 1) * self.grid.gutter
        height = rows * self.row_height() + (rows - 1) * self.grid.gutter
        return ContainerBox(width=width, height=height)

    def content_container(self, layout: GridLayout, padding: int = 0) -> ContainerBox:
        """
        Compute the box available to body text in a layout.

        The content area is used when present, then the subtitle area (centered
        title layouts), then the whole inner slide. The width is capped at the
        layout's maximum text width.

        Args:
            layout: Layout the text is placed in
            padding: Inner padding subtracted on every side

        Returns:
            ContainerBox with width, height and source area
        """
        for area_name in ("content", "subtitle"):
            area = layout.areas.get(area_name)
            if area is not None:
                size = self.area_size(area)
                break
        else:
            area_name = None
            size = ContainerBox(
                width=self.grid.slide_width - 2 * self.grid.margin,
                height=self.grid.slide_height - 2 * self.grid.margin
            )

        width = min(size.width, layout.constraints.max_text_width) - 2 * padding
        height = size.height - 2 * padding
        return ContainerBox(width=max(width, 1.0), height=max(height, 0.0), area=area_name)

    def calculate_whitespace(self, layout: GridLayout, content_areas: Optional[int] = None) -> float:
        """
        Rough whitespace percentage contributed by margins and gutters.

        Args:
            layout: Layout being measured
            content_areas: Number of occupied areas (defaults to the layout's area count)

        Returns:
            Whitespace percentage of the reference slide
        """
        grid = self.grid
        if content_areas is None:
            content_areas = len(layout.areas)
        slide_area = grid.slide_width * grid.slide_height
        margin_area = grid.margin * 2 * (grid.slide_width + grid.slide_height)
        gutter_area = grid.gutter * content_areas * 100
        occupied_percent = (slide_area - margin_area - gutter_area) / slide_area * 100
        return 100 - occupied_percent

    def generate_css(self, layout: GridLayout, slide_id: str) -> str:
        """Generate the CSS grid block for a slide using this layout."""
        grid = self.grid
        parts = [
            f"/* Grid Layout: {layout.name} */",
            f"#{slide_id} {{",
            "  display: grid;",
            f"  grid-template-columns: repeat({grid.columns}, 1fr);",
            "  grid-template-rows: auto;",
            f"  gap: {grid.gutter}px;",
            f"  padding: {grid.margin}px;",
            "  width: 100%;",
            "  height: 100%;",
            "  box-sizing: border-box;",
            "}",
        ]

        for area_name in ("title", "subtitle", "content", "image", "footer"):
            area = layout.areas.get(area_name)
            if area is None:
                continue
            parts.append("")
            parts.append(f"#{slide_id} .{area_name} {{")
            parts.append(f"  grid-column: {area.grid_column};")
            parts.append(f"  grid-row: {area.grid_row};")
            if area.justify_self:
                parts.append(f"  justify-self: {area.justify_self};")
            if area.align_self:
                parts.append(f"  align-self: {area.align_self};")
            parts.append("}")

        half_columns = grid.columns // 2
        parts.extend([
            "",
            f"@media (max-width: {grid.breakpoints['tablet']}px) {{",
            f"  #{slide_id} {{",
            f"    grid-template-columns: repeat({half_columns}, 1fr);",
            "  }",
            f"  #{slide_id} .title, #{slide_id} .subtitle, #{slide_id} .content, #{slide_id} .image {{",
            f"    grid-column: 1 / span {half_columns} !important;",
            "  }",
            "}",
            "",
            f"@media (max-width: {grid.breakpoints['mobile']}px) {{",
            f"  #{slide_id} {{",
            f"    padding: {grid.margin // 2}px;",
            f"    gap: {grid.gutter // 2}px;",
            "  }",
            "}",
        ])
        return "\n".join(parts)
