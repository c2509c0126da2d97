"""Typography sizing engine built on a Major Third (1.250) type scale."""

import logging
import math
from types import MappingProxyType
from typing import Dict, List, Mapping, Union

from .models import (
    ContentMetrics,
    SlideArchetype,
    TypographySizes,
    ValidationFinding,
    ValidationResult
)

logger = logging.getLogger(__name__)

TYPE_SCALE: Mapping[str, int] = MappingProxyType({
    "xs": 12,
    "sm": 15,
    "base": 18,
    "md": 22,
    "lg": 28,
    "xl": 35,
    "2xl": 44,
    "3xl": 55,
    "4xl": 69,
})

MIN_SIZES: Mapping[str, int] = MappingProxyType({
    "title": 32,
    "body": 18,
    "caption": 14,
})

LIMITS: Mapping[str, int] = MappingProxyType({
    "title_max_words": 8,
    "bullet_max_words": 12,
    "slide_max_words": 75,
    "line_max_chars": 60,
})

MIN_HIERARCHY_RATIO = 2.5
MAX_BULLETS = 5
LIGHT_CONTENT_WORDS = 30
# Lines are only flagged once they run well past the optimum
LINE_LENGTH_TOLERANCE = 15
MIN_BODY_LINE_HEIGHT = 1.5


def _round_px(value: float) -> int:
    return int(math.floor(value + 0.5))


class TypographyEngine:
    """Calculates font sizes from content density and validates the result."""

    def __init__(self):
        self.scale = TYPE_SCALE
        self.min_sizes = MIN_SIZES
        self.limits_table = LIMITS

        logger.info("TypographyEngine initialized")

    def calculate_sizes(
        self,
        metrics: ContentMetrics,
        archetype: Union[SlideArchetype, str] = SlideArchetype.CONTENT
    ) -> TypographySizes:
        """
        Calculate font sizes for a slide.

        Heavy content shrinks the titles, light title slides get a hero title
        and many bullets pin the body at its minimum. Minimums and the 2.5:1
        title/body hierarchy are enforced on the returned integers.

        Args:
            metrics: Content metrics of the slide
            archetype: Slide archetype

        Returns:
            TypographySizes in whole pixels
        """
        archetype = SlideArchetype(archetype)
        scale = self.scale

        h1: float = scale["2xl"]
        h2: float = scale["xl"]
        h3: float = scale["lg"]
        body: float = scale["base"]
        caption: float = scale["sm"]

        if metrics.word_count > LIMITS["slide_max_words"]:
            h1 = scale["xl"]
            h2 = scale["lg"]
            body = scale["base"]
        elif metrics.word_count < LIGHT_CONTENT_WORDS and archetype == SlideArchetype.TITLE:
            h1 = scale["3xl"]
            h2 = scale["2xl"]

        if metrics.bullet_count > MAX_BULLETS:
            body = scale["base"]
            h1 = scale["xl"]

        h1 = max(h1, self.min_sizes["title"])
        h2 = max(h2, self.min_sizes["title"] * 0.8)
        h3 = max(h3, self.min_sizes["body"] + 4)
        body = max(body, self.min_sizes["body"])
        caption = max(caption, self.min_sizes["caption"])

        if h1 / body < MIN_HIERARCHY_RATIO:
            h1 = body * MIN_HIERARCHY_RATIO

        body_px = _round_px(body)
        h1_px = _round_px(h1)
        # Rounding must not break the hierarchy
        if h1_px / body_px < MIN_HIERARCHY_RATIO:
            h1_px = math.ceil(body_px * MIN_HIERARCHY_RATIO)

        sizes = TypographySizes(
            h1=h1_px,
            h2=_round_px(h2),
            h3=_round_px(h3),
            body=body_px,
            caption=_round_px(caption)
        )

        logger.debug(
            f"Typography for {archetype.value} slide ({metrics.word_count} words, "
            f"{metrics.bullet_count} bullets): h1={sizes.h1} h2={sizes.h2} body={sizes.body}"
        )
        return sizes

    def validate_typography(self, sizes: TypographySizes, metrics: ContentMetrics) -> ValidationResult:
        """
        Validate sizes and content against readability limits.

        Args:
            sizes: Computed typography sizes
            metrics: Content metrics of the slide

        Returns:
            ValidationResult; every finding carries a concrete remediation
        """
        findings: List[ValidationFinding] = []
        max_words = LIMITS["slide_max_words"]

        if metrics.word_count > max_words:
            findings.append(ValidationFinding(
                source="typography", severity="error", penalty=20, topic="word-count",
                message=f"Too many words ({metrics.word_count}, maximum {max_words} per slide)",
                suggestion=f"Reduce content to {max_words} words or split into multiple slides"
            ))

        ratio = sizes.hierarchy_ratio
        if sizes.body > 0 and ratio < MIN_HIERARCHY_RATIO:
            target = sizes.body * MIN_HIERARCHY_RATIO
            findings.append(ValidationFinding(
                source="typography", severity="error", penalty=15,
                message=f"Poor title hierarchy ({ratio:.1f}:1 ratio, need ≥2.5:1)",
                suggestion=f"Increase title size to {target:g}px for better hierarchy"
            ))

        if sizes.body < self.min_sizes["body"]:
            findings.append(ValidationFinding(
                source="typography", severity="error", penalty=25,
                message=f"Body text too small ({sizes.body}px, minimum {self.min_sizes['body']}px for WCAG AAA)",
                suggestion=f"Increase body text to at least {self.min_sizes['body']}px"
            ))

        if sizes.h1 < self.min_sizes["title"]:
            findings.append(ValidationFinding(
                source="typography", severity="error", penalty=15,
                message=f"Title too small ({sizes.h1}px, minimum {self.min_sizes['title']}px)",
                suggestion=f"Increase title to at least {self.min_sizes['title']}px"
            ))

        if metrics.longest_line > LIMITS["line_max_chars"] + LINE_LENGTH_TOLERANCE:
            findings.append(ValidationFinding(
                source="typography", severity="warning", penalty=10,
                message=f"Lines too long ({metrics.longest_line} chars, optimal ≤{LIMITS['line_max_chars']})",
                suggestion="Break long lines or use two-column layout"
            ))

        if metrics.bullet_count > MAX_BULLETS:
            findings.append(ValidationFinding(
                source="typography", severity="warning", penalty=10, topic="bullet-count",
                message=f"Too many bullets ({metrics.bullet_count}, recommend ≤{MAX_BULLETS} per slide)",
                suggestion=f"Reduce to {MAX_BULLETS} bullets or split into multiple slides"
            ))

        if sizes.line_height.body < MIN_BODY_LINE_HEIGHT:
            findings.append(ValidationFinding(
                source="typography", severity="warning", penalty=5,
                message=f"Line height too tight ({sizes.line_height.body}, recommend ≥1.5)",
                suggestion="Increase line height to 1.5-1.75 for better readability"
            ))

        return ValidationResult.from_findings(findings)

    def type_scale(self) -> Dict[str, int]:
        return dict(self.scale)

    def limits(self) -> Dict[str, int]:
        return dict(self.limits_table)

    def calculate_scale(self, base: float, ratio: float, steps: int) -> List[int]:
        """Return a modular scale from two steps below ``base`` up to ``steps`` above it."""
        return [_round_px(base * ratio ** i) for i in range(-2, steps + 1)]

    def estimate_text_height(
        self,
        text: str,
        font_size: float,
        line_height: float,
        max_width: float
    ) -> float:
        """Estimate rendered height assuming glyphs average 0.6 of the font size."""
        chars_per_line = max(1, math.floor(max_width / (font_size * 0.6)))
        lines = math.ceil(len(text) / chars_per_line)
        return lines * font_size * line_height

    def generate_css(self, sizes: TypographySizes, slide_id: str) -> str:
        """Generate responsive CSS (clamp() between 80-90% and 100% of each size)."""
        sel = f"#{slide_id}"
        css = f"""
/* Typography: Responsive Type Scale */
{sel} h1,
{sel} .title {{
  font-size: clamp({sizes.h1 * 0.8:g}px, 4vw, {sizes.h1}px);
  line-height: {sizes.line_height.title};
  letter-spacing: {sizes.letter_spacing.title};
  font-weight: 700;
  margin: 0 0 {sizes.h1 * 0.5:g}px 0;
}}

{sel} h2,
{sel} .subtitle {{
  font-size: clamp({sizes.h2 * 0.85:g}px, 3vw, {sizes.h2}px);
  line-height: {sizes.line_height.title};
  letter-spacing: {sizes.letter_spacing.title};
  font-weight: 600;
  margin: 0 0 {sizes.h2 * 0.4:g}px 0;
}}

{sel} h3 {{
  font-size: clamp({sizes.h3 * 0.9:g}px, 2.5vw, {sizes.h3}px);
  line-height: {sizes.line_height.title};
  letter-spacing: {sizes.letter_spacing.body};
  font-weight: 600;
}}

{sel} p,
{sel} li,
{sel} .body {{
  font-size: clamp({sizes.body * 0.9:g}px, 1.5vw, {sizes.body}px);
  line-height: {sizes.line_height.body};
  letter-spacing: {sizes.letter_spacing.body};
  font-weight: 400;
  margin: 0 0 {sizes.body * 0.75:g}px 0;
  max-width: {LIMITS["line_max_chars"]}ch;
}}

{sel} .caption,
{sel} .footnote {{
  font-size: clamp({sizes.caption * 0.9:g}px, 1vw, {sizes.caption}px);
  line-height: 1.4;
  font-weight: 400;
}}

{sel} ul,
{sel} ol {{
  margin: {sizes.body}px 0;
  padding-left: {sizes.body * 1.5:g}px;
}}

@media (max-width: 1024px) {{
  {sel} p,
  {sel} li {{
    max-width: 50ch;
  }}
}}

@media (max-width: 768px) {{
  {sel} h1 {{
    font-size: {sizes.h1 * 0.75:g}px;
  }}

  {sel} p,
  {sel} li {{
    max-width: 40ch;
  }}
}}
"""
        return css.strip()
