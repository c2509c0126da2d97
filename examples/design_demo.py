#!/usr/bin/env python3
"""
Demo script for the fitdeck design pipeline.

Runs a small deck through content analysis, layout selection, typography,
color validation and overflow resolution, and prints the decisions.

Usage:
    python examples/design_demo.py
    python examples/design_demo.py examples/sample_deck.yaml
"""

import sys
from pathlib import Path
from typing import List

# Add the project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fitdeck.color_engine import ColorEngine
from fitdeck.config import load_deck
from fitdeck.models import SlideContent
from fitdeck.slide_designer import SlideDesigner


def create_stress_test_slides() -> List[SlideContent]:
    """Create slides covering each overflow strategy."""
    return [
        SlideContent(title="Quarterly Business Review", subtitle="Q4 2025"),
        SlideContent(
            title="Highlights",
            bullets=[
                "Revenue grew 12% year over year",
                "Operating margin held at 18%",
                "Two new regions launched"
            ]
        ),
        SlideContent(
            title="Findings",
            bullets=[f"Finding {i}: " + "supporting detail " * 8 for i in range(12)]
        ),
        SlideContent(
            title="Background",
            body=" ".join(["The market context shifted over the year as demand moved online."] * 40)
        ),
        SlideContent(title="Revenue by Region", has_chart=True, bullets=["EMEA leads", "APAC fastest growth"]),
        SlideContent(title="Thank you"),
    ]


def demo_deck(slides: List[SlideContent]):
    """Design a deck and print the per-slide decisions."""
    print("🎨 Designing deck...")

    designer = SlideDesigner()
    designs = designer.design_deck(slides)

    for design in designs:
        print(f"\n   Slide {design.index}: {design.content.title}")
        if not design.ok:
            print(f"      ❌ {design.error}")
            continue

        print(f"      Archetype: {design.analysis.slide_archetype.value} "
              f"({design.analysis.complexity.value})")
        print(f"      Layout: {design.layout.key} ({design.layout.whitespace_percent:g}% whitespace)")
        print(f"      Type: h1 {design.typography.h1}px / body {design.typography.body}px")

        overflow = design.overflow
        print(f"      Overflow: {overflow.mode} - {overflow.metadata.action}")
        if overflow.metadata.fallback_chain:
            print(f"      Strategies tried: {' -> '.join(overflow.metadata.fallback_chain)}")
        if overflow.slide_count > 1:
            print(f"      Continues over {overflow.slide_count} slides")

        print(f"      Score: {design.validation.score}")
        for finding in design.validation.findings:
            print(f"         {finding.severity}: {finding.message}")


def demo_palettes():
    """Show WCAG scores for the palette catalog."""
    print("\n🌈 Palette validation...")

    engine = ColorEngine()
    for palette in engine.all_palettes():
        result = engine.validate_palette(palette)
        status = "✅" if result.valid else "⚠️ "
        print(f"   {status} {palette.id}: {result.score}")

    adjustment = engine.ensure_contrast_detailed("#999999", "#FFFFFF", 7.0)
    print(f"\n   #999999 on white raised to {adjustment.color} ({adjustment.ratio}:1)")


def main():
    """Run the design demo."""
    print("📐 fitdeck Design Demo")
    print("=" * 60)

    if len(sys.argv) > 1:
        slides = load_deck(Path(sys.argv[1]))
    else:
        slides = create_stress_test_slides()

    demo_deck(slides)
    demo_palettes()

    print("\n🚀 Usage in CLI:")
    print("   fitdeck design examples/sample_deck.yaml")
    print("   fitdeck design examples/sample_deck.yaml --json --palette tech")
    print("   fitdeck design examples/sample_deck.yaml --summarize --model gpt-4o-mini")


if __name__ == "__main__":
    main()
