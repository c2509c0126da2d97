"""Overflow resolver: fits text into its container by compressing, splitting or summarizing."""

import logging
import math
import re
from typing import Callable, List, Optional, Tuple

from .exceptions import SummarizationError
from .models import (
    CompressStrategy,
    NoOverflowStrategy,
    OverflowConfig,
    OverflowMetadata,
    OverflowMetrics,
    OverflowResult,
    SplitStrategy,
    SummarizeStrategy
)
from .summarizer import Summarizer

logger = logging.getLogger(__name__)

LIST_PATTERNS = (
    re.compile(r"^[ \t]*[•\-\*]\s+", re.MULTILINE),
    re.compile(r"^[ \t]*\d+\.\s+", re.MULTILINE),
    re.compile(r"^[ \t]*[a-z]\)\s+", re.MULTILINE),
)

BULLET_MARKERS = (
    re.compile(r"^[•\-\*]\s+"),
    re.compile(r"^\d+\.\s+"),
    re.compile(r"^[a-z]\)\s+"),
)

MIN_LIST_ITEMS = 2

# (strategy, applies(overflow, config, is_list)); first applicable rule whose
# handler accepts the text wins, a rejected rule falls through to the next one.
RULES: Tuple[Tuple[str, Callable[[float, OverflowConfig, bool], bool]], ...] = (
    ("none", lambda overflow, config, is_list: overflow <= 0),
    ("compress", lambda overflow, config, is_list: overflow < config.split_threshold),
    ("split", lambda overflow, config, is_list: is_list),
    ("summarize", lambda overflow, config, is_list: True),
)


def is_list(text: str) -> bool:
    """Return True if at least two lines start with the same kind of list marker."""
    return any(len(pattern.findall(text)) >= MIN_LIST_ITEMS for pattern in LIST_PATTERNS)


def extract_bullets(text: str) -> List[str]:
    """Return the text of every list item, markers stripped. Other lines are dropped."""
    bullets = []
    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        for marker in BULLET_MARKERS:
            if marker.match(stripped):
                bullets.append(marker.sub("", stripped, count=1))
                break
    return bullets


class OverflowResolver:
    """Chooses an overflow strategy with a deterministic fallback chain."""

    def __init__(
        self,
        summarizer: Optional[Summarizer] = None,
        config: Optional[OverflowConfig] = None
    ):
        """
        Initialize the overflow resolver.

        Args:
            summarizer: Generative summarizer; without one, prose is truncated
            config: Overflow configuration
        """
        self.summarizer = summarizer
        self.config = config or OverflowConfig()

        logger.info(
            f"OverflowResolver initialized (summarizer={'yes' if summarizer else 'no'}, "
            f"split threshold {self.config.split_threshold}px)"
        )

    def update_config(self, **changes) -> OverflowConfig:
        """Replace the configuration with a validated copy carrying ``changes``."""
        self.config = OverflowConfig(**{**self.config.model_dump(), **changes})
        logger.debug(f"Overflow config updated: {changes}")
        return self.config

    def estimate_height(
        self,
        text: str,
        font_size: float,
        line_height: float,
        container_width: float
    ) -> float:
        chars_per_line = max(1, math.floor(container_width / (font_size * self.config.char_width_factor)))
        lines = math.ceil(len(text) / chars_per_line)
        return lines * font_size * line_height

    def measure_overflow(self, metrics: OverflowMetrics) -> float:
        """Return estimated height minus container height, in pixels."""
        height = self.estimate_height(
            metrics.text,
            metrics.current_font_size,
            metrics.line_height,
            metrics.container_width
        )
        return height - metrics.container_height

    def resolve(self, metrics: OverflowMetrics) -> OverflowResult:
        """
        Resolve overflow for one text container.

        Args:
            metrics: Text and container measurements

        Returns:
            OverflowResult; this never raises for summarizer failures
        """
        overflow, chain, result = self._plan(metrics)
        if result is not None:
            return result

        summary = None
        if self.summarizer is None:
            logger.warning("No summarizer configured; falling back to truncation")
        else:
            try:
                summary = self.summarizer.summarize(metrics.text, self._target_words(metrics.text))
            except SummarizationError as e:
                logger.error(f"Summarization failed: {e}")
            except Exception as e:
                logger.error(f"Unexpected summarizer error: {e}")

        return self._finish_summary(metrics, overflow, chain, summary)

    async def resolve_async(self, metrics: OverflowMetrics) -> OverflowResult:
        """Asynchronous version of ``resolve``; the summarizer must wrap an async client."""
        overflow, chain, result = self._plan(metrics)
        if result is not None:
            return result

        summary = None
        if self.summarizer is None:
            logger.warning("No summarizer configured; falling back to truncation")
        else:
            try:
                summary = await self.summarizer.summarize_async(
                    metrics.text, self._target_words(metrics.text)
                )
            except SummarizationError as e:
                logger.error(f"Summarization failed: {e}")
            except Exception as e:
                logger.error(f"Unexpected summarizer error: {e}")

        return self._finish_summary(metrics, overflow, chain, summary)

    def _plan(self, metrics: OverflowMetrics) -> Tuple[float, List[str], Optional[OverflowResult]]:
        """
        Walk the rule table up to the summarize rule.

        Returns the measured overflow, the strategies attempted and a result,
        or None when the text has to be summarized.
        """
        overflow = self.measure_overflow(metrics)
        list_like = is_list(metrics.text)
        chain: List[str] = []

        for name, applies in RULES:
            if not applies(overflow, self.config, list_like):
                continue
            chain.append(name)
            if name == "none":
                return overflow, chain, self._no_overflow(metrics, chain)
            if name == "compress":
                result = self._compress(metrics, overflow, chain)
            elif name == "split":
                result = self._split(metrics, overflow, chain)
            else:
                return overflow, chain, None
            if result is not None:
                return overflow, chain, result
            logger.debug(f"Overflow strategy '{name}' rejected, trying next rule")

        raise AssertionError("overflow rule table has no catch-all rule")

    def _no_overflow(self, metrics: OverflowMetrics, chain: List[str]) -> OverflowResult:
        length = len(metrics.text)
        return OverflowResult(
            has_overflow=False,
            strategy=NoOverflowStrategy(),
            result=metrics.text,
            metadata=OverflowMetadata(
                original_length=length,
                final_length=length,
                overflow=0.0,
                action="No action needed",
                fallback_chain=list(chain)
            )
        )

    def _compress(
        self,
        metrics: OverflowMetrics,
        overflow: float,
        chain: List[str]
    ) -> Optional[OverflowResult]:
        current = metrics.current_font_size
        reduction_ratio = overflow / (metrics.container_height + overflow)
        final_size = max(current * (1 - reduction_ratio), self.config.min_font_size)
        actual_reduction = (current - final_size) / current

        if actual_reduction > self.config.max_reduction:
            logger.debug(
                f"Compression would need {actual_reduction:.0%} reduction "
                f"(max {self.config.max_reduction:.0%})"
            )
            return None

        reduced = int(math.floor(final_size + 0.5))
        length = len(metrics.text)
        logger.debug(f"Compressing font {current:g}px -> {reduced}px for {overflow:.0f}px overflow")
        return OverflowResult(
            has_overflow=True,
            strategy=CompressStrategy(
                original_font_size=current,
                reduced_font_size=reduced,
                reduction_percent=int(math.floor(actual_reduction * 100 + 0.5))
            ),
            result=metrics.text,
            metadata=OverflowMetadata(
                original_length=length,
                final_length=length,
                overflow=overflow,
                action=f"Reduced font size from {current:g}px to {reduced}px",
                fallback_chain=list(chain)
            )
        )

    def _split(
        self,
        metrics: OverflowMetrics,
        overflow: float,
        chain: List[str]
    ) -> Optional[OverflowResult]:
        bullets = extract_bullets(metrics.text)
        if not bullets:
            logger.debug("No bullets found to split")
            return None

        per_slide = self.config.max_bullets_per_slide
        groups = [bullets[i:i + per_slide] for i in range(0, len(bullets), per_slide)]
        slides = ["\n".join(f"• {bullet}" for bullet in group) for group in groups]

        logger.debug(f"Splitting {len(bullets)} bullets into {len(slides)} slides")
        return OverflowResult(
            has_overflow=True,
            strategy=SplitStrategy(total_slides=len(slides), content=slides),
            result=slides,
            metadata=OverflowMetadata(
                original_length=len(metrics.text),
                final_length=len(" ".join(slides)),
                overflow=overflow,
                action=f"Split into {len(slides)} slides ({per_slide} bullets each)",
                fallback_chain=list(chain)
            )
        )

    def _target_words(self, text: str) -> int:
        return max(1, math.floor(len(text.split()) * self.config.summary_ratio))

    def _finish_summary(
        self,
        metrics: OverflowMetrics,
        overflow: float,
        chain: List[str],
        summary: Optional[str]
    ) -> OverflowResult:
        text = metrics.text
        original_length = len(text)

        if summary is not None:
            if len(summary) < original_length * (1 - self.config.min_summary_gain):
                reduction = int(math.floor((original_length - len(summary)) / original_length * 100 + 0.5))
                logger.info(f"Summarized text from {original_length} to {len(summary)} chars")
                return OverflowResult(
                    has_overflow=True,
                    strategy=SummarizeStrategy(
                        original_length=original_length,
                        summarized_length=len(summary),
                        reduction_percent=reduction
                    ),
                    result=summary,
                    metadata=OverflowMetadata(
                        original_length=original_length,
                        final_length=len(summary),
                        overflow=overflow,
                        action=f"AI summarized ({reduction}% reduction)",
                        fallback_chain=list(chain)
                    )
                )

            # List-like text never gets here without split having been rejected
            logger.warning(
                f"Summary too long ({len(summary)} of {original_length} chars); truncating instead"
            )

        chain.append("truncate")
        truncated = text[:math.floor(original_length * self.config.truncate_ratio)] + "..."
        reduction = 0
        if original_length:
            reduction = int(math.floor((original_length - len(truncated)) / original_length * 100 + 0.5))
        logger.warning(f"Truncated text from {original_length} to {len(truncated)} chars")
        return OverflowResult(
            has_overflow=True,
            strategy=SummarizeStrategy(
                original_length=original_length,
                summarized_length=len(truncated),
                reduction_percent=reduction,
                truncated=True
            ),
            result=truncated,
            metadata=OverflowMetadata(
                original_length=original_length,
                final_length=len(truncated),
                overflow=overflow,
                action="Truncated (AI summarization unavailable)",
                fallback_chain=list(chain)
            )
        )
