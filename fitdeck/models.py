"""Domain models for the fitdeck layout and content-fitting engine."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class SlideArchetype(str, Enum):
    """Coarse content category driving layout and typography choices."""

    TITLE = "title"
    CONTENT = "content"
    IMAGE_FOCUS = "image-focus"
    DATA = "data"
    CLOSING = "closing"


class Complexity(str, Enum):
    """Content complexity tier."""

    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class ContrastLevel(str, Enum):
    """WCAG conformance level actually achieved by a color pair."""

    AAA = "AAA"
    AA = "AA"
    FAIL = "FAIL"


AreaName = Literal["title", "subtitle", "content", "image", "footer"]
Alignment = Literal["start", "center", "end", "stretch"]


class SlideContent(BaseModel):
    """Raw, loosely structured content for a single slide."""

    title: str = Field(default="", description="Main title of the slide")
    subtitle: Optional[str] = Field(None, description="Optional subtitle or tagline")
    body: Optional[str] = Field(None, description="Free-form body text")
    bullets: List[str] = Field(
        default_factory=list, description="List of bullet points for the slide"
    )
    has_image: bool = Field(default=False, description="Whether the slide carries an image")
    has_chart: bool = Field(default=False, description="Whether the slide carries a chart")

    def text_fields(self) -> List[str]:
        """Return every non-empty visible text field in reading order."""
        fields = [self.title, self.subtitle or "", self.body or ""]
        fields.extend(self.bullets)
        return [field for field in fields if field and field.strip()]

    def visible_text(self) -> str:
        """Return all visible text joined into a single string."""
        return " ".join(self.text_fields())

    def as_text(self) -> str:
        """
        Render the body area of the slide as plain text.

        The title is excluded since it lives in its own grid area. Bullets are
        rendered one per line with a ``•`` marker so that list detection in the
        overflow resolver recognises them.
        """
        lines = []
        if self.body and self.body.strip():
            lines.append(self.body.strip())
        lines.extend(f"• {bullet.strip()}" for bullet in self.bullets if bullet.strip())
        return "\n".join(lines)

    class Config:
        """Pydantic configuration."""

        json_schema_extra = {
            "example": {
                "title": "Market Overview",
                "subtitle": None,
                "body": None,
                "bullets": [
                    "Market size: $10B and growing",
                    "Key trends: Digital transformation",
                    "Competitive landscape: 3 major players"
                ],
                "has_image": False,
                "has_chart": True
            }
        }


class ContentAnalysis(BaseModel):
    """Structured classification of a slide's raw content."""

    word_count: int = Field(..., ge=0, description="Whitespace-separated token count")
    bullet_count: int = Field(..., ge=0, description="Number of bullet points")
    has_image: bool = Field(default=False, description="Whether the slide carries an image")
    has_chart: bool = Field(default=False, description="Whether the slide carries a chart")
    slide_archetype: SlideArchetype = Field(..., description="Detected slide archetype")
    complexity: Complexity = Field(..., description="Detected complexity tier")

    class Config:
        """Pydantic configuration."""

        frozen = True
        json_schema_extra = {
            "example": {
                "word_count": 42,
                "bullet_count": 4,
                "has_image": False,
                "has_chart": False,
                "slide_archetype": "content",
                "complexity": "medium"
            }
        }


class ContentMetrics(BaseModel):
    """Per-field text metrics used for typography sizing and validation."""

    word_count: int = Field(..., ge=0, description="Total words across all fields")
    bullet_count: int = Field(default=0, ge=0, description="Number of bullet points")
    longest_line: int = Field(default=0, ge=0, description="Longest line in characters")
    estimated_height: float = Field(default=0.0, ge=0.0, description="Rough content height in pixels")
    title_words: int = Field(default=0, ge=0, description="Words in the title")
    subtitle_words: int = Field(default=0, ge=0, description="Words in the subtitle")
    body_words: int = Field(default=0, ge=0, description="Words in the body text")
    bullet_words: int = Field(default=0, ge=0, description="Words across all bullets")

    class Config:
        """Pydantic configuration."""

        frozen = True
        json_schema_extra = {
            "example": {
                "word_count": 58,
                "bullet_count": 4,
                "longest_line": 72,
                "estimated_height": 180.0,
                "title_words": 3,
                "subtitle_words": 0,
                "body_words": 20,
                "bullet_words": 35
            }
        }


class GridArea(BaseModel):
    """Placement of a named area on the 12-column grid."""

    grid_column: str = Field(..., description="CSS grid-column value, e.g. '1 / span 6'")
    grid_row: str = Field(..., description="CSS grid-row value, e.g. '1 / span 4'")
    justify_self: Optional[Alignment] = Field(None, description="Horizontal alignment")
    align_self: Optional[Alignment] = Field(None, description="Vertical alignment")

    class Config:
        """Pydantic configuration."""

        frozen = True


class GridConstraints(BaseModel):
    """Width and size constraints attached to a layout template."""

    min_text_width: int = Field(..., description="Minimum readable text width in pixels")
    max_text_width: int = Field(..., description="Maximum text width in pixels (~75 chars)")
    min_image_size: int = Field(..., description="Minimum image edge in pixels")

    class Config:
        """Pydantic configuration."""

        frozen = True


class GridLayout(BaseModel):
    """A named spatial layout template from the fixed catalog."""

    key: str = Field(..., description="Catalog key, e.g. 'title-centered'")
    name: str = Field(..., description="Human-readable layout name")
    description: str = Field(..., description="What the layout is meant for")
    areas: Dict[AreaName, GridArea] = Field(..., description="Named grid areas")
    whitespace_percent: float = Field(..., description="Target whitespace percentage")
    constraints: GridConstraints = Field(..., description="Text and image size constraints")
    columns: int = Field(default=1, ge=1, description="Number of text columns")

    class Config:
        """Pydantic configuration."""

        frozen = True
        json_schema_extra = {
            "example": {
                "key": "split-50-50",
                "name": "Split 50/50",
                "description": "Equal split for content and image",
                "areas": {
                    "content": {
                        "grid_column": "1 / span 6",
                        "grid_row": "1 / span 4",
                        "justify_self": "start",
                        "align_self": "start"
                    },
                    "image": {
                        "grid_column": "7 / span 6",
                        "grid_row": "1 / span 4",
                        "justify_self": "center",
                        "align_self": "center"
                    }
                },
                "whitespace_percent": 40,
                "constraints": {
                    "min_text_width": 300,
                    "max_text_width": 600,
                    "min_image_size": 400
                },
                "columns": 1
            }
        }


class GridSystem(BaseModel):
    """The 12-column grid on an 8-point spacing system."""

    columns: int = Field(default=12, description="Number of grid columns")
    rows: int = Field(default=4, description="Number of grid rows used by layouts")
    gutter: int = Field(default=24, description="Gap between columns and rows in pixels")
    margin: int = Field(default=48, description="Outer slide padding in pixels")
    base_unit: int = Field(default=8, description="Spacing base unit in pixels")
    slide_width: int = Field(default=1920, description="Reference slide width in pixels")
    slide_height: int = Field(default=1080, description="Reference slide height in pixels")
    breakpoints: Dict[str, int] = Field(
        default_factory=lambda: {"mobile": 768, "tablet": 1024, "desktop": 1920},
        description="Responsive breakpoints in pixels"
    )

    class Config:
        """Pydantic configuration."""

        frozen = True


class ContainerBox(BaseModel):
    """Pixel box available to the body text of a slide."""

    width: float = Field(..., gt=0, description="Container width in pixels")
    height: float = Field(..., ge=0, description="Container height in pixels")
    area: Optional[AreaName] = Field(None, description="Grid area the box was derived from")

    class Config:
        """Pydantic configuration."""

        frozen = True


class LineHeights(BaseModel):
    """Line heights for title and body roles."""

    title: float = Field(default=1.2, description="Tight line height for titles")
    body: float = Field(default=1.6, description="Comfortable line height for reading")

    class Config:
        """Pydantic configuration."""

        frozen = True


class LetterSpacing(BaseModel):
    """Letter spacing for title and body roles."""

    title: str = Field(default="-0.02em", description="Tighter tracking for large text")
    body: str = Field(default="0", description="Normal tracking for body text")

    class Config:
        """Pydantic configuration."""

        frozen = True


class TypographySizes(BaseModel):
    """Concrete type scale computed for one slide."""

    h1: int = Field(..., description="Main title size in pixels")
    h2: int = Field(..., description="Subtitle / section header size in pixels")
    h3: int = Field(..., description="Subsection size in pixels")
    body: int = Field(..., description="Body text size in pixels")
    caption: int = Field(..., description="Caption size in pixels")
    line_height: LineHeights = Field(default_factory=LineHeights)
    letter_spacing: LetterSpacing = Field(default_factory=LetterSpacing)

    @property
    def hierarchy_ratio(self) -> float:
        """Return the title-to-body size ratio (0 when the body size is not positive)."""
        if self.body <= 0:
            return 0.0
        return self.h1 / self.body

    class Config:
        """Pydantic configuration."""

        frozen = True
        json_schema_extra = {
            "example": {
                "h1": 55,
                "h2": 44,
                "h3": 28,
                "body": 18,
                "caption": 15,
                "line_height": {"title": 1.2, "body": 1.6},
                "letter_spacing": {"title": "-0.02em", "body": "0"}
            }
        }


class TextColors(BaseModel):
    """Semantic text colors of a palette."""

    primary: str = Field(..., description="Body text color")
    secondary: str = Field(..., description="Less important text color")
    inverse: str = Field(..., description="Text color used on dark brand surfaces")

    class Config:
        """Pydantic configuration."""

        frozen = True


class SurfaceColors(BaseModel):
    """Surface colors of a palette."""

    background: str = Field(..., description="Main slide background")
    card: str = Field(..., description="Card / container background")
    overlay: str = Field(..., description="Modal overlay color (may be rgba)")

    class Config:
        """Pydantic configuration."""

        frozen = True


class ColorPalette(BaseModel):
    """A named, brand-level color palette."""

    id: str = Field(..., description="Palette identifier, e.g. 'corporate-blue'")
    name: str = Field(..., description="Human-readable palette name")
    domain: Literal["corporate", "tech", "creative", "finance", "healthcare", "education"] = Field(
        ..., description="Business domain the palette targets"
    )
    primary: str = Field(..., description="Brand color for large areas (60%)")
    secondary: str = Field(..., description="Supporting color (30%)")
    accent: str = Field(..., description="Highlight color (10%)")
    text: TextColors = Field(..., description="Semantic text colors")
    surfaces: SurfaceColors = Field(..., description="Surface colors")
    shades: Dict[str, str] = Field(
        default_factory=dict, description="Ten-step ramp (50..900) derived from the primary color"
    )

    class Config:
        """Pydantic configuration."""

        frozen = True
        json_schema_extra = {
            "example": {
                "id": "corporate-blue",
                "name": "Corporate Blue",
                "domain": "corporate",
                "primary": "#1A365D",
                "secondary": "#2B6CB0",
                "accent": "#F59E0B",
                "text": {"primary": "#1F2937", "secondary": "#4B5563", "inverse": "#F9FAFB"},
                "surfaces": {
                    "background": "#FFFFFF",
                    "card": "#F3F4F6",
                    "overlay": "rgba(17, 24, 39, 0.75)"
                },
                "shades": {}
            }
        }


class ContrastCheck(BaseModel):
    """Result of checking one foreground/background pair."""

    ratio: float = Field(..., description="Observed contrast ratio, rounded to 2 decimals")
    level: ContrastLevel = Field(..., description="Level actually achieved")
    passes: bool = Field(..., description="Whether the requested threshold is met")
    required_ratio: float = Field(..., description="Threshold that was requested")
    recommendation: Optional[str] = Field(None, description="How to fix a failing pair")

    class Config:
        """Pydantic configuration."""

        frozen = True


class ContrastAdjustment(BaseModel):
    """Outcome of the bounded foreground search in ``ensure_contrast``."""

    color: str = Field(..., description="Last foreground color reached")
    ratio: float = Field(..., description="Contrast ratio of that color on the background")
    iterations: int = Field(..., ge=0, description="Adjustment steps performed")
    converged: bool = Field(..., description="Whether the target ratio was reached")
    exhausted: bool = Field(..., description="Whether the iteration cap stopped the search")

    class Config:
        """Pydantic configuration."""

        frozen = True


class ValidationFinding(BaseModel):
    """A single validation error or warning."""

    source: Literal["layout", "typography", "color"] = Field(..., description="Component that produced it")
    severity: Literal["error", "warning"] = Field(..., description="Finding severity")
    message: str = Field(..., description="Human-readable description")
    penalty: int = Field(default=0, ge=0, description="Score points deducted")
    suggestion: Optional[str] = Field(None, description="Concrete remediation")
    topic: Optional[str] = Field(
        None, description="Shared key for findings that describe the same problem"
    )


class ValidationResult(BaseModel):
    """Non-fatal validation outcome shared by every validate operation."""

    valid: bool = Field(..., description="True when there are no errors")
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    score: int = Field(..., ge=0, le=100, description="Quality score (0-100)")
    recommendations: List[str] = Field(default_factory=list)
    findings: List[ValidationFinding] = Field(default_factory=list)

    @classmethod
    def from_findings(cls, findings: List[ValidationFinding], **extra) -> "ValidationResult":
        """Build a result, deducting each finding's penalty from 100."""
        score = 100 - sum(finding.penalty for finding in findings)
        return cls(
            valid=not any(f.severity == "error" for f in findings),
            errors=[f.message for f in findings if f.severity == "error"],
            warnings=[f.message for f in findings if f.severity == "warning"],
            score=max(0, score),
            recommendations=[f.suggestion for f in findings if f.suggestion],
            findings=list(findings),
            **extra
        )

    class Config:
        """Pydantic configuration."""

        json_schema_extra = {
            "example": {
                "valid": False,
                "errors": ["Too many words (92, maximum 75 per slide)"],
                "warnings": ["Too many bullets (7, recommend ≤5 per slide)"],
                "score": 70,
                "recommendations": [
                    "Reduce content to 75 words or split into multiple slides",
                    "Reduce to 5 bullets or split into multiple slides"
                ],
                "findings": []
            }
        }


class LayoutValidation(ValidationResult):
    """Layout validation result, reporting the layout's whitespace target."""

    whitespace_percent: float = Field(..., description="Whitespace target of the layout")


class OverflowConfig(BaseModel):
    """Configuration for overflow resolution."""

    min_font_size: int = Field(default=18, description="Never compress below this size")
    max_reduction: float = Field(default=0.2, ge=0.0, le=1.0, description="Max font-size reduction ratio")
    max_bullets_per_slide: int = Field(default=5, ge=1, description="Bullets per slide when splitting")
    split_threshold: float = Field(default=100.0, description="Overflow in pixels at which compression stops applying")
    summary_ratio: float = Field(default=0.7, gt=0.0, le=1.0, description="Target length of a summary relative to the original")
    min_summary_gain: float = Field(default=0.05, ge=0.0, le=1.0, description="Minimum shrink a summary must achieve")
    truncate_ratio: float = Field(default=0.7, gt=0.0, le=1.0, description="Share of text kept by hard truncation")
    char_width_factor: float = Field(default=0.6, gt=0.0, description="Average glyph width as a fraction of the font size")

    class Config:
        """Pydantic configuration."""

        frozen = True
        json_schema_extra = {
            "example": {
                "min_font_size": 18,
                "max_reduction": 0.2,
                "max_bullets_per_slide": 5,
                "split_threshold": 100,
                "summary_ratio": 0.7,
                "min_summary_gain": 0.05,
                "truncate_ratio": 0.7,
                "char_width_factor": 0.6
            }
        }


class OverflowMetrics(BaseModel):
    """Text and container measurements handed to the overflow resolver."""

    text: str = Field(..., description="Text placed in the container")
    container_height: float = Field(..., ge=0, description="Container height in pixels")
    container_width: float = Field(..., gt=0, description="Container width in pixels")
    current_font_size: float = Field(..., gt=0, description="Current body font size in pixels")
    line_height: float = Field(default=1.6, gt=0, description="Line height multiplier")


class NoOverflowStrategy(BaseModel):
    """Content fits; nothing to do."""

    mode: Literal["none"] = "none"


class CompressStrategy(BaseModel):
    """Shrink the body font size."""

    mode: Literal["compress"] = "compress"
    original_font_size: float = Field(..., description="Font size before compression")
    reduced_font_size: int = Field(..., description="Font size after compression")
    reduction_percent: int = Field(..., description="Reduction in percent of the original size")


class SplitStrategy(BaseModel):
    """Spread a bullet list over several slides."""

    mode: Literal["split"] = "split"
    total_slides: int = Field(..., ge=1, description="Number of resulting slides")
    content: List[str] = Field(..., description="Text of each resulting slide")


class SummarizeStrategy(BaseModel):
    """Shorten prose, by rewriting or by hard truncation."""

    mode: Literal["summarize"] = "summarize"
    original_length: int = Field(..., description="Characters before shortening")
    summarized_length: int = Field(..., description="Characters after shortening")
    reduction_percent: int = Field(..., description="Length reduction in percent")
    truncated: bool = Field(default=False, description="True when hard truncation was used")


OverflowStrategy = Annotated[
    Union[NoOverflowStrategy, CompressStrategy, SplitStrategy, SummarizeStrategy],
    Field(discriminator="mode")
]


class OverflowMetadata(BaseModel):
    """Bookkeeping attached to an overflow decision."""

    original_length: int = Field(..., description="Characters before resolution")
    final_length: int = Field(..., description="Characters after resolution")
    overflow: float = Field(..., description="Estimated overflow in pixels")
    action: str = Field(..., description="Human-readable description of the action")
    fallback_chain: List[str] = Field(
        default_factory=list, description="Strategies attempted, in order"
    )


class OverflowResult(BaseModel):
    """Decision produced by the overflow resolver."""

    has_overflow: bool = Field(..., description="Whether the text overflowed its container")
    strategy: OverflowStrategy = Field(..., description="Strategy chosen")
    result: Union[str, List[str]] = Field(..., description="Resolved text or per-slide fragments")
    metadata: OverflowMetadata = Field(..., description="Lengths, overflow and action")

    @property
    def mode(self) -> str:
        """Return the chosen strategy mode."""
        return self.strategy.mode

    @property
    def slide_count(self) -> int:
        """Return how many slides the resolved content occupies."""
        if isinstance(self.result, list):
            return len(self.result)
        return 1

    class Config:
        """Pydantic configuration."""

        json_schema_extra = {
            "example": {
                "has_overflow": True,
                "strategy": {
                    "mode": "split",
                    "total_slides": 3,
                    "content": ["• One\n• Two", "• Three\n• Four", "• Five"]
                },
                "result": ["• One\n• Two", "• Three\n• Four", "• Five"],
                "metadata": {
                    "original_length": 420,
                    "final_length": 398,
                    "overflow": 180.0,
                    "action": "Split into 3 slides (5 bullets each)",
                    "fallback_chain": ["split"]
                }
            }
        }


class DesignConfig(BaseModel):
    """Configuration for the slide design pipeline."""

    palette: str = Field(default="corporate-blue", description="Palette id or domain")
    summarizer_model: str = Field(default="gpt-4.1", description="OpenAI model used for summaries")
    summarizer_temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="Sampling temperature for summaries")
    container_padding: int = Field(default=0, ge=0, description="Inner padding subtracted from the text container")
    overflow: OverflowConfig = Field(default_factory=OverflowConfig)

    class Config:
        """Pydantic configuration."""

        json_schema_extra = {
            "example": {
                "palette": "corporate-blue",
                "summarizer_model": "gpt-4.1",
                "summarizer_temperature": 0.3,
                "container_padding": 16,
                "overflow": {"min_font_size": 18, "max_bullets_per_slide": 5}
            }
        }


class SlideDesign(BaseModel):
    """Every decision a renderer needs to emit one slide."""

    index: int = Field(..., description="Slide index in the deck")
    content: SlideContent = Field(..., description="Content the decisions were made for")
    analysis: Optional[ContentAnalysis] = Field(None, description="Content classification")
    layout: Optional[GridLayout] = Field(None, description="Selected layout template")
    typography: Optional[TypographySizes] = Field(None, description="Computed type scale")
    palette: Optional[ColorPalette] = Field(None, description="Palette in use")
    overflow: Optional[OverflowResult] = Field(None, description="Overflow decision")
    validation: Optional[ValidationResult] = Field(None, description="Merged validation findings")
    error: Optional[str] = Field(None, description="Set when the slide could not be designed")

    @property
    def ok(self) -> bool:
        """Return True when the slide was designed without a fatal error."""
        return self.error is None
