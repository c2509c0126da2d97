"""WCAG color contrast engine with palette validation and auto-adjustment."""

import logging
import math
import re
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .models import (
    ColorPalette,
    ContrastAdjustment,
    ContrastCheck,
    ContrastLevel,
    SurfaceColors,
    TextColors,
    ValidationFinding,
    ValidationResult
)

logger = logging.getLogger(__name__)

_HEX_PATTERN = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)

# Required ratios keyed by (level, text size)
WCAG_THRESHOLDS: Mapping[Tuple[str, str], float] = MappingProxyType({
    ("AAA", "normal"): 7.0,
    ("AAA", "large"): 4.5,
    ("AAA", "ui"): 3.0,
    ("AA", "normal"): 4.5,
    ("AA", "large"): 3.0,
    ("AA", "ui"): 3.0,
})

LIGHT_BACKGROUND_LUMINANCE = 0.5
ADJUSTMENT_STEP = 0.05

SHADE_STEPS = (
    ("50", "lighten", 0.95),
    ("100", "lighten", 0.90),
    ("200", "lighten", 0.75),
    ("300", "lighten", 0.50),
    ("400", "lighten", 0.25),
    ("500", None, 0.0),
    ("600", "darken", 0.15),
    ("700", "darken", 0.30),
    ("800", "darken", 0.45),
    ("900", "darken", 0.60),
)


def hex_to_rgb(hex_color: str) -> Optional[Tuple[int, int, int]]:
    """Parse ``#RRGGBB`` (``#`` optional). Returns None when unparseable."""
    match = _HEX_PATTERN.match(hex_color.strip())
    if not match:
        return None
    return tuple(int(channel, 16) for channel in match.groups())


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Format channels as ``#RRGGBB``, rounding half up."""
    return "#" + "".join(f"{int(math.floor(value + 0.5)):02X}" for value in (r, g, b))


def relative_luminance(color: str) -> float:
    """
    Calculate WCAG relative luminance of a hex color.

    Unparseable colors have luminance 0.
    """
    rgb = hex_to_rgb(color)
    if rgb is None:
        return 0.0

    linear = []
    for channel in rgb:
        value = channel / 255
        if value <= 0.03928:
            linear.append(value / 12.92)
        else:
            linear.append(((value + 0.055) / 1.055) ** 2.4)

    r, g, b = linear
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def calculate_contrast_ratio(color1: str, color2: str) -> float:
    """Calculate the WCAG contrast ratio between two colors (order-independent)."""
    l1 = relative_luminance(color1)
    l2 = relative_luminance(color2)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def lighten(color: str, amount: float) -> str:
    """Move each channel ``amount`` of the remaining distance toward white."""
    rgb = hex_to_rgb(color)
    if rgb is None:
        return color
    return rgb_to_hex(*(min(255, value + (255 - value) * amount) for value in rgb))


def darken(color: str, amount: float) -> str:
    """Move each channel ``amount`` of the remaining distance toward black."""
    rgb = hex_to_rgb(color)
    if rgb is None:
        return color
    return rgb_to_hex(*(max(0, value * (1 - amount)) for value in rgb))


def generate_shades(base_color: str) -> Dict[str, str]:
    """Generate the ten-stop shade ramp (50..900); stop 500 is the base color."""
    shades = {}
    for stop, operation, amount in SHADE_STEPS:
        if operation == "lighten":
            shades[stop] = lighten(base_color, amount)
        elif operation == "darken":
            shades[stop] = darken(base_color, amount)
        else:
            shades[stop] = base_color
    return shades


def _palette(palette_id: str, name: str, domain: str, primary: str, secondary: str,
             accent: str, text: Tuple[str, str, str], card: str) -> ColorPalette:
    return ColorPalette(
        id=palette_id,
        name=name,
        domain=domain,
        primary=primary,
        secondary=secondary,
        accent=accent,
        text=TextColors(primary=text[0], secondary=text[1], inverse=text[2]),
        surfaces=SurfaceColors(
            background="#FFFFFF",
            card=card,
            overlay="rgba(17, 24, 39, 0.75)"
        ),
        shades=generate_shades(primary)
    )


PALETTE_CATALOG: Mapping[str, ColorPalette] = MappingProxyType({
    palette.id: palette for palette in (
        _palette("corporate-blue", "Corporate Blue", "corporate",
                 "#1A365D", "#2B6CB0", "#F59E0B",
                 ("#1F2937", "#4B5563", "#F9FAFB"), "#F3F4F6"),
        _palette("tech-purple", "Tech Purple", "tech",
                 "#6B21A8", "#9333EA", "#10B981",
                 ("#111827", "#374151", "#F9FAFB"), "#FAF5FF"),
        _palette("creative-coral", "Creative Coral", "creative",
                 "#DC2626", "#FB923C", "#8B5CF6",
                 ("#1F2937", "#4B5563", "#FAFAFA"), "#FEF2F2"),
        _palette("finance-green", "Finance Green", "finance",
                 "#065F46", "#10B981", "#F59E0B",
                 ("#111827", "#374151", "#F9FAFB"), "#ECFDF5"),
        _palette("healthcare-teal", "Healthcare Teal", "healthcare",
                 "#0F766E", "#14B8A6", "#EC4899",
                 ("#1F2937", "#4B5563", "#F9FAFB"), "#F0FDFA"),
        _palette("education-indigo", "Education Indigo", "education",
                 "#3730A3", "#6366F1", "#F59E0B",
                 ("#111827", "#374151", "#F9FAFB"), "#EEF2FF"),
    )
})


class ColorEngine:
    """Validates palettes and corrects foreground colors against WCAG thresholds."""

    def __init__(self, palettes: Optional[Mapping[str, ColorPalette]] = None):
        """
        Initialize the color engine.

        Args:
            palettes: Palette catalog (defaults to PALETTE_CATALOG)
        """
        self.palettes = palettes if palettes is not None else PALETTE_CATALOG

        logger.info(f"ColorEngine initialized with {len(self.palettes)} palettes")

    def relative_luminance(self, color: str) -> float:
        return relative_luminance(color)

    def calculate_contrast_ratio(self, fg: str, bg: str) -> float:
        return calculate_contrast_ratio(fg, bg)

    def check_contrast(
        self,
        fg: str,
        bg: str,
        text_size: str = "normal",
        level: str = "AAA"
    ) -> ContrastCheck:
        """
        Check a foreground/background pair against a WCAG threshold.

        Args:
            fg: Foreground color
            bg: Background color
            text_size: 'normal', 'large' or 'ui'
            level: 'AAA' or 'AA'

        Returns:
            ContrastCheck with ratio, achieved level and pass/fail
        """
        key = (level.upper(), text_size.lower())
        if key not in WCAG_THRESHOLDS:
            raise ValueError(f"Unknown contrast requirement: level={level}, text_size={text_size}")
        required = WCAG_THRESHOLDS[key]

        ratio = calculate_contrast_ratio(fg, bg)
        passes = ratio >= required

        if ratio >= 7.0:
            achieved = ContrastLevel.AAA
        elif ratio >= 4.5:
            achieved = ContrastLevel.AA
        else:
            achieved = ContrastLevel.FAIL

        recommendation = None
        if not passes:
            recommendation = f"Increase contrast to {required:g}:1 (currently {ratio:.2f}:1)"

        return ContrastCheck(
            ratio=round(ratio, 2),
            level=achieved,
            passes=passes,
            required_ratio=required,
            recommendation=recommendation
        )

    def ensure_contrast(
        self,
        fg: str,
        bg: str,
        min_ratio: float = 7.0,
        max_iterations: int = 50
    ) -> str:
        """
        Adjust a foreground color until it reaches ``min_ratio`` on ``bg``.

        This is a bounded search: the returned color may still be below the
        target when the iteration cap is hit, so callers must re-check it (or
        use ``ensure_contrast_detailed`` to see whether it converged).
        """
        return self.ensure_contrast_detailed(fg, bg, min_ratio, max_iterations).color

    def ensure_contrast_detailed(
        self,
        fg: str,
        bg: str,
        min_ratio: float = 7.0,
        max_iterations: int = 50
    ) -> ContrastAdjustment:
        """
        Adjust a foreground color and report whether the search converged.

        On a light background (luminance > 0.5) the foreground is darkened by
        5% of its remaining distance to black per step, otherwise it is
        lightened toward white.

        Args:
            fg: Starting foreground color
            bg: Background color
            min_ratio: Target contrast ratio
            max_iterations: Maximum adjustment steps

        Returns:
            ContrastAdjustment with the last color reached and its ratio
        """
        adjusted = fg
        ratio = calculate_contrast_ratio(adjusted, bg)
        light_background = relative_luminance(bg) > LIGHT_BACKGROUND_LUMINANCE

        iterations = 0
        while ratio < min_ratio and iterations < max_iterations:
            if light_background:
                adjusted = darken(adjusted, ADJUSTMENT_STEP)
            else:
                adjusted = lighten(adjusted, ADJUSTMENT_STEP)
            ratio = calculate_contrast_ratio(adjusted, bg)
            iterations += 1

        converged = ratio >= min_ratio
        if not converged:
            logger.warning(
                f"Could not reach {min_ratio:g}:1 for {fg} on {bg} after {iterations} "
                f"iterations (best {ratio:.2f}:1 with {adjusted})"
            )
        else:
            logger.debug(f"Adjusted {fg} -> {adjusted} on {bg} ({ratio:.2f}:1, {iterations} steps)")

        return ContrastAdjustment(
            color=adjusted,
            ratio=round(ratio, 2),
            iterations=iterations,
            converged=converged,
            exhausted=not converged and iterations >= max_iterations
        )

    def generate_shades(self, base_color: str) -> Dict[str, str]:
        return generate_shades(base_color)

    def validate_palette(self, palette: ColorPalette) -> ValidationResult:
        """
        Validate a palette for WCAG compliance.

        Checks primary text (AAA), secondary text (AA), accent (AA large), the
        inverse text on a dark primary (AAA) and primary/secondary distinctness.
        Violations are reported, never fixed.

        Args:
            palette: Palette to validate

        Returns:
            ValidationResult with errors, warnings and a 0-100 score
        """
        findings: List[ValidationFinding] = []
        background = palette.surfaces.background

        text_check = self.check_contrast(palette.text.primary, background, "normal", "AAA")
        if not text_check.passes:
            findings.append(ValidationFinding(
                source="color", severity="error", penalty=30,
                message=f"Primary text fails WCAG AAA ({text_check.ratio}:1, need 7:1)",
                suggestion=f"Use {self.ensure_contrast(palette.text.primary, background, 7.0)} for primary text"
            ))

        secondary_check = self.check_contrast(palette.text.secondary, background, "normal", "AA")
        if not secondary_check.passes:
            findings.append(ValidationFinding(
                source="color", severity="error", penalty=20,
                message=f"Secondary text fails WCAG AA ({secondary_check.ratio}:1, need 4.5:1)",
                suggestion=f"Use {self.ensure_contrast(palette.text.secondary, background, 4.5)} for secondary text"
            ))

        accent_check = self.check_contrast(palette.accent, background, "large", "AA")
        if not accent_check.passes:
            findings.append(ValidationFinding(
                source="color", severity="warning", penalty=10,
                message=f"Accent color has low contrast ({accent_check.ratio}:1, recommend ≥3:1)",
                suggestion="Reserve the accent for large text and UI elements, or darken it"
            ))

        if relative_luminance(palette.primary) < LIGHT_BACKGROUND_LUMINANCE:
            inverse_check = self.check_contrast(palette.text.inverse, palette.primary, "normal", "AAA")
            if not inverse_check.passes:
                findings.append(ValidationFinding(
                    source="color", severity="error", penalty=25,
                    message=f"Inverse text fails on dark background ({inverse_check.ratio}:1, need 7:1)",
                    suggestion=f"Use {self.ensure_contrast(palette.text.inverse, palette.primary, 7.0)} for inverse text"
                ))

        similarity = calculate_contrast_ratio(palette.primary, palette.secondary)
        if similarity < 1.5:
            findings.append(ValidationFinding(
                source="color", severity="warning", penalty=5,
                message=f"Primary and secondary colors are too similar ({similarity:.2f}:1)",
                suggestion="Pick a secondary color at least 1.5:1 away from the primary"
            ))

        result = ValidationResult.from_findings(findings)
        logger.debug(f"Palette '{palette.id}' validation score: {result.score}")
        return result

    def get_palette(self, id_or_domain: str) -> Optional[ColorPalette]:
        """Get a palette by id, then by domain. Returns None when not found."""
        palette = self.palettes.get(id_or_domain)
        if palette is not None:
            return palette
        for candidate in self.palettes.values():
            if candidate.domain == id_or_domain:
                return candidate
        return None

    def all_palettes(self) -> List[ColorPalette]:
        return list(self.palettes.values())

    def generate_css(self, palette: ColorPalette) -> str:
        """Generate CSS custom properties for a palette."""
        lines = [
            ":root {",
            "  /* Primary colors */",
            f"  --color-primary: {palette.primary};",
            f"  --color-secondary: {palette.secondary};",
            f"  --color-accent: {palette.accent};",
            "",
            "  /* Text colors */",
            f"  --color-text-primary: {palette.text.primary};",
            f"  --color-text-secondary: {palette.text.secondary};",
            f"  --color-text-inverse: {palette.text.inverse};",
            "",
            "  /* Surface colors */",
            f"  --color-bg: {palette.surfaces.background};",
            f"  --color-card: {palette.surfaces.card};",
            f"  --color-overlay: {palette.surfaces.overlay};",
            "",
            "  /* Shades */",
        ]
        lines.extend(f"  --color-primary-{stop}: {color};" for stop, color in palette.shades.items())
        lines.append("}")
        return "\n".join(lines)
