"""fitdeck - adaptive slide layout and content-fitting engine."""

__version__ = "0.1.0"

from .color_engine import ColorEngine
from .content_analyzer import ContentAnalyzer
from .layout_selector import LayoutSelector
from .overflow_resolver import OverflowResolver
from .slide_designer import SlideDesigner, merge_validations
from .summarizer import Summarizer
from .typography_engine import TypographyEngine
