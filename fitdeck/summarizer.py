"""Summarizer that shortens overflowing prose with an OpenAI chat model."""

import logging
from typing import Optional

import openai
from openai import AsyncOpenAI, OpenAI

from .exceptions import SummarizationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert editor who condenses presentation slide text "
    "without losing facts or figures."
)


def build_summary_prompt(text: str, target_words: int) -> str:
    """Build the user prompt asking for a summary of ``target_words`` words."""
    return f"""Summarize this text to approximately {target_words} words while preserving key information:

{text}

Requirements:
- Maintain all important facts and figures
- Use clear, concise language
- Professional tone
- Target word count: {target_words}
- Output only the summarized text (no explanation)"""


class Summarizer:
    """Issues a single chat completion per summary; no retries."""

    def __init__(
        self,
        client: OpenAI | AsyncOpenAI,
        model: str = "gpt-4.1",
        temperature: float = 0.3,
        max_tokens: int = 1000
    ):
        """
        Initialize the summarizer.

        Args:
            client: OpenAI client (sync for summarize, async for summarize_async)
            model: Model name to use
            temperature: Sampling temperature
            max_tokens: Upper bound on the summary length in tokens
        """
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

        logger.info(f"Summarizer initialized with model {model}")

    def _messages(self, text: str, target_words: int) -> list:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_summary_prompt(text, target_words)}
        ]

    def _extract(self, response) -> str:
        if not response.choices:
            raise SummarizationError("No choices in response from OpenAI", model=self.model)
        content: Optional[str] = response.choices[0].message.content
        summary = (content or "").strip()
        if not summary:
            raise SummarizationError("Empty response from OpenAI", model=self.model)
        return summary

    def summarize(self, text: str, target_words: int) -> str:
        """
        Summarize text to roughly ``target_words`` words.

        Args:
            text: Text to shorten
            target_words: Approximate length of the summary in words

        Returns:
            The summary, stripped of surrounding whitespace

        Raises:
            SummarizationError: If the request fails or returns no text
        """
        logger.debug(f"Requesting summary of {len(text)} chars to ~{target_words} words")
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=self._messages(text, target_words),
                temperature=self.temperature,
                max_tokens=self.max_tokens
            )
            return self._extract(response)
        except SummarizationError:
            raise
        except openai.OpenAIError as e:
            raise SummarizationError(f"Summarization request failed: {e}", model=self.model) from e
        except Exception as e:
            raise SummarizationError(f"Unexpected summarization failure: {e}", model=self.model) from e

    async def summarize_async(self, text: str, target_words: int) -> str:
        """Asynchronous version of ``summarize``; requires an AsyncOpenAI client."""
        logger.debug(f"Requesting summary of {len(text)} chars to ~{target_words} words (async)")
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=self._messages(text, target_words),
                temperature=self.temperature,
                max_tokens=self.max_tokens
            )
            return self._extract(response)
        except SummarizationError:
            raise
        except openai.OpenAIError as e:
            raise SummarizationError(f"Summarization request failed: {e}", model=self.model) from e
        except Exception as e:
            raise SummarizationError(f"Unexpected summarization failure: {e}", model=self.model) from e
