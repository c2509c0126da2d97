"""Exceptions for the fitdeck layout and content-fitting engine."""

from typing import Optional


class FitdeckError(Exception):
    """Base class for all fitdeck errors."""
    pass


class SummarizationError(FitdeckError):
    """Raised when the generative-text service fails to produce a summary."""

    def __init__(self, message: str, model: Optional[str] = None):
        """
        Initialize SummarizationError.

        Args:
            message: Human-readable error message
            model: Model that was asked for the summary, if known
        """
        super().__init__(message)
        self.model = model

    def __str__(self) -> str:
        msg = super().__str__()
        if self.model:
            msg = f"{msg} (model: {self.model})"
        return msg


class SlideDesignError(FitdeckError):
    """Raised when a single slide cannot be designed at all."""

    def __init__(
        self,
        message: str,
        slide_index: Optional[int] = None,
        stage: Optional[str] = None
    ):
        """
        Initialize SlideDesignError.

        Args:
            message: Human-readable error message
            slide_index: Index of the slide that failed
            stage: Pipeline stage that failed (analysis, layout, typography, overflow)
        """
        super().__init__(message)
        self.slide_index = slide_index
        self.stage = stage

    def __str__(self) -> str:
        """Return formatted error message."""
        msg = super().__str__()

        if self.stage:
            msg = f"{msg} (stage: {self.stage})"

        if self.slide_index is not None:
            msg = f"Slide {self.slide_index}: {msg}"

        return msg


class DesignConfigError(FitdeckError):
    """Raised when a design configuration file is invalid."""
    pass
