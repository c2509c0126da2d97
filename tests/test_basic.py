"""Basic tests to verify project structure."""

import pytest


def test_basic_import():
    """Test that we can import the main package."""
    import fitdeck
    assert fitdeck.__version__ == "0.1.0"


def test_public_components():
    """Test that the pipeline components are exported."""
    from fitdeck import (
        ColorEngine,
        ContentAnalyzer,
        LayoutSelector,
        OverflowResolver,
        SlideDesigner,
        Summarizer,
        TypographyEngine,
        merge_validations
    )

    assert callable(merge_validations)
    assert SlideDesigner is not None
