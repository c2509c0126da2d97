"""Slide designer that runs the full layout and content-fitting pipeline."""

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from .color_engine import PALETTE_CATALOG, ColorEngine
from .content_analyzer import ContentAnalyzer
from .exceptions import SlideDesignError
from .layout_selector import DEFAULT_LAYOUT, LayoutSelector
from .models import (
    ColorPalette,
    ContentAnalysis,
    DesignConfig,
    GridLayout,
    OverflowMetrics,
    OverflowResult,
    SlideContent,
    SlideDesign,
    TypographySizes,
    ValidationFinding,
    ValidationResult
)
from .overflow_resolver import OverflowResolver
from .summarizer import Summarizer
from .typography_engine import TypographyEngine

logger = logging.getLogger(__name__)

DEFAULT_PALETTE = "corporate-blue"

_SEVERITY_ORDER = {"error": 0, "warning": 1}

T = TypeVar("T")


def merge_validations(*results: ValidationResult) -> ValidationResult:
    """
    Merge validation results from several components into one.

    Findings are ordered most severe first (errors before warnings, then by
    penalty). Findings sharing a topic describe the same problem, so only the
    one with the highest penalty is kept.

    Args:
        *results: Validation results to merge

    Returns:
        Combined ValidationResult scored from the kept findings
    """
    kept: Dict[str, ValidationFinding] = {}
    untopical: List[ValidationFinding] = []

    for result in results:
        for finding in result.findings:
            if finding.topic is None:
                untopical.append(finding)
                continue
            current = kept.get(finding.topic)
            if current is None or finding.penalty > current.penalty:
                kept[finding.topic] = finding

    findings = untopical + list(kept.values())
    findings.sort(key=lambda f: (_SEVERITY_ORDER[f.severity], -f.penalty))
    return ValidationResult.from_findings(findings)


class SlideDesigner:
    """Produces a SlideDesign for every slide of a deck."""

    def __init__(
        self,
        palette: Optional[str] = None,
        summarizer: Optional[Summarizer] = None,
        config: Optional[DesignConfig] = None
    ):
        """
        Initialize the slide designer.

        Args:
            palette: Palette id or domain (overrides the config)
            summarizer: Optional summarizer for prose that overflows badly
            config: Design configuration
        """
        self.config = config or DesignConfig()
        self.analyzer = ContentAnalyzer()
        self.layout_selector = LayoutSelector()
        self.typography_engine = TypographyEngine()
        self.color_engine = ColorEngine()
        self.overflow_resolver = OverflowResolver(summarizer=summarizer, config=self.config.overflow)

        self.palette = self._resolve_palette(palette or self.config.palette)
        self.palette_validation = self.color_engine.validate_palette(self.palette)

        logger.info(
            f"SlideDesigner initialized with palette '{self.palette.id}' "
            f"(score {self.palette_validation.score})"
        )

    def _resolve_palette(self, name: str) -> ColorPalette:
        palette = self.color_engine.get_palette(name)
        if palette is not None:
            return palette

        fallback = self.color_engine.get_palette(self.config.palette)
        if fallback is None:
            fallback = PALETTE_CATALOG[DEFAULT_PALETTE]
        logger.warning(f"Unknown palette '{name}', using '{fallback.id}'")
        return fallback

    def _stage(self, stage: str, index: int, func: Callable[..., T], *args) -> T:
        try:
            return func(*args)
        except SlideDesignError:
            raise
        except Exception as e:
            raise SlideDesignError(str(e), slide_index=index, stage=stage) from e

    def _prepare(
        self,
        content: SlideContent,
        index: int,
        total: int
    ) -> Tuple[ContentAnalysis, GridLayout, TypographySizes, ValidationResult, OverflowMetrics]:
        analysis = self._stage("analysis", index, self.analyzer.analyze, content)
        metrics = self._stage("analysis", index, self.analyzer.analyze_metrics, content)

        layout = self._stage("layout", index, self.layout_selector.select_layout, analysis, index, total)
        layout_validation = self._stage(
            "layout", index, self.layout_selector.validate_layout, layout, analysis
        )

        typography = self._stage(
            "typography", index, self.typography_engine.calculate_sizes, metrics, analysis.slide_archetype
        )
        typography_validation = self._stage(
            "typography", index, self.typography_engine.validate_typography, typography, metrics
        )

        container = self._stage(
            "layout", index, self.layout_selector.content_container, layout, self.config.container_padding
        )
        overflow_metrics = self._stage(
            "overflow", index, lambda: OverflowMetrics(
                text=content.as_text(),
                container_height=container.height,
                container_width=container.width,
                current_font_size=typography.body,
                line_height=typography.line_height.body
            )
        )

        validation = merge_validations(layout_validation, typography_validation, self.palette_validation)
        return analysis, layout, typography, validation, overflow_metrics

    def _assemble(
        self,
        content: SlideContent,
        index: int,
        prepared: Tuple[ContentAnalysis, GridLayout, TypographySizes, ValidationResult, OverflowMetrics],
        overflow: OverflowResult
    ) -> SlideDesign:
        analysis, layout, typography, validation, _ = prepared
        logger.debug(
            f"Slide {index}: {analysis.slide_archetype.value} -> {layout.key}, "
            f"h1={typography.h1}px, overflow={overflow.mode}, score={validation.score}"
        )
        return SlideDesign(
            index=index,
            content=content,
            analysis=analysis,
            layout=layout,
            typography=typography,
            palette=self.palette,
            overflow=overflow,
            validation=validation
        )

    def _failed(self, content: SlideContent, error: SlideDesignError) -> SlideDesign:
        logger.error(f"Failed to design slide: {error}")
        return SlideDesign(
            index=error.slide_index if error.slide_index is not None else -1,
            content=content,
            layout=self.layout_selector.get_layout(DEFAULT_LAYOUT),
            palette=self.palette,
            error=str(error)
        )

    def design_slide(self, content: SlideContent, index: int = 0, total: int = 1) -> SlideDesign:
        """
        Design a single slide.

        Args:
            content: Slide content
            index: Position of the slide in the deck
            total: Number of slides in the deck

        Returns:
            SlideDesign; on failure ``error`` is set and best-effort defaults are used
        """
        try:
            prepared = self._prepare(content, index, total)
            overflow = self._stage("overflow", index, self.overflow_resolver.resolve, prepared[4])
            return self._assemble(content, index, prepared, overflow)
        except SlideDesignError as e:
            return self._failed(content, e)

    async def design_slide_async(self, content: SlideContent, index: int = 0, total: int = 1) -> SlideDesign:
        """Asynchronous version of ``design_slide``."""
        try:
            prepared = self._prepare(content, index, total)
            try:
                overflow = await self.overflow_resolver.resolve_async(prepared[4])
            except Exception as e:
                raise SlideDesignError(str(e), slide_index=index, stage="overflow") from e
            return self._assemble(content, index, prepared, overflow)
        except SlideDesignError as e:
            return self._failed(content, e)

    def design_deck(self, slides: List[SlideContent]) -> List[SlideDesign]:
        """
        Design every slide of a deck independently.

        Args:
            slides: Slide contents in deck order

        Returns:
            One SlideDesign per slide; a failing slide never aborts the deck
        """
        logger.info(f"Designing deck of {len(slides)} slides")
        designs = [self.design_slide(content, index, len(slides)) for index, content in enumerate(slides)]
        self._log_summary(designs)
        return designs

    async def design_deck_async(self, slides: List[SlideContent]) -> List[SlideDesign]:
        """Asynchronous version of ``design_deck`` designing slides concurrently."""
        logger.info(f"Designing deck of {len(slides)} slides (async)")
        tasks = [
            self.design_slide_async(content, index, len(slides))
            for index, content in enumerate(slides)
        ]
        designs = list(await asyncio.gather(*tasks))
        self._log_summary(designs)
        return designs

    def _log_summary(self, designs: List[SlideDesign]) -> None:
        failed = sum(1 for design in designs if not design.ok)
        logger.info(f"Deck design completed: {len(designs) - failed} ok, {failed} failed")
