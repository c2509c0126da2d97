"""Content analyzer that classifies raw slide content."""

import logging
from typing import List, Optional, Union

from .models import (
    Complexity,
    ContentAnalysis,
    ContentMetrics,
    SlideArchetype,
    SlideContent
)

logger = logging.getLogger(__name__)

TITLE_MAX_WORDS = 20
IMAGE_FOCUS_MAX_WORDS = 50
CLOSING_MAX_WORDS = 10
COMPLEX_MIN_WORDS = 75
COMPLEX_MIN_BULLETS = 5
MEDIUM_MIN_WORDS = 40
MEDIUM_MIN_BULLETS = 3


def count_words(text: Optional[str]) -> int:
    """Count whitespace-separated tokens. Empty or missing text counts zero."""
    if not text:
        return 0
    return len(text.split())


class ContentAnalyzer:
    """Turns raw slide content into a ContentAnalysis."""

    def analyze(
        self,
        text: Union[str, SlideContent],
        bullets: Optional[List[str]] = None,
        has_image: bool = False,
        has_chart: bool = False
    ) -> ContentAnalysis:
        """
        Classify slide content into an archetype and complexity tier.

        Args:
            text: Visible text of the slide, or a SlideContent
            bullets: Bullet points (ignored when a SlideContent is given)
            has_image: Whether the slide carries an image
            has_chart: Whether the slide carries a chart

        Returns:
            ContentAnalysis for the content
        """
        if isinstance(text, SlideContent):
            content = text
            text = content.visible_text()
            bullets = content.bullets
            has_image = content.has_image
            has_chart = content.has_chart

        bullets = bullets or []
        word_count = count_words(text)
        bullet_count = len(bullets)

        archetype = self.classify_archetype(word_count, bullet_count, has_image, has_chart)
        complexity = self.classify_complexity(word_count, bullet_count)

        logger.debug(
            f"Analyzed content: {word_count} words, {bullet_count} bullets, "
            f"archetype={archetype.value}, complexity={complexity.value}"
        )

        return ContentAnalysis(
            word_count=word_count,
            bullet_count=bullet_count,
            has_image=has_image,
            has_chart=has_chart,
            slide_archetype=archetype,
            complexity=complexity
        )

    @staticmethod
    def classify_archetype(
        word_count: int,
        bullet_count: int,
        has_image: bool,
        has_chart: bool
    ) -> SlideArchetype:
        """Pick the archetype; rules are checked in priority order, first match wins."""
        if word_count < TITLE_MAX_WORDS and bullet_count == 0:
            return SlideArchetype.TITLE
        if has_chart:
            return SlideArchetype.DATA
        if has_image and word_count < IMAGE_FOCUS_MAX_WORDS:
            return SlideArchetype.IMAGE_FOCUS
        if word_count < CLOSING_MAX_WORDS and not has_image:
            return SlideArchetype.CLOSING
        return SlideArchetype.CONTENT

    @staticmethod
    def classify_complexity(word_count: int, bullet_count: int) -> Complexity:
        if word_count > COMPLEX_MIN_WORDS or bullet_count > COMPLEX_MIN_BULLETS:
            return Complexity.COMPLEX
        if word_count > MEDIUM_MIN_WORDS or bullet_count > MEDIUM_MIN_BULLETS:
            return Complexity.MEDIUM
        return Complexity.SIMPLE

    def analyze_metrics(self, content: SlideContent) -> ContentMetrics:
        """
        Measure per-field word counts, the longest line and a rough height.

        Args:
            content: Slide content to measure

        Returns:
            ContentMetrics for typography sizing and validation
        """
        title_words = count_words(content.title)
        subtitle_words = count_words(content.subtitle)
        body_words = count_words(content.body)
        bullet_words = sum(count_words(bullet) for bullet in content.bullets)

        lines = [content.title, content.subtitle or ""]
        lines.extend((content.body or "").split("\n"))
        lines.extend(content.bullets)
        longest_line = max(len(line) for line in lines)

        # ~2 words per 18px line for prose, ~30px per bullet
        estimated_height = (
            (60 if title_words else 0)
            + (36 if subtitle_words else 0)
            + body_words * 0.5
            + len(content.bullets) * 30
        )

        return ContentMetrics(
            word_count=title_words + subtitle_words + body_words + bullet_words,
            bullet_count=len(content.bullets),
            longest_line=longest_line,
            estimated_height=estimated_height,
            title_words=title_words,
            subtitle_words=subtitle_words,
            body_words=body_words,
            bullet_words=bullet_words
        )
