"""Base class for prompt-driven text generation.

The base owns the Anthropic client and the single request/response round
trip; subclasses supply the prompts and the output parsing.
"""

import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import anthropic

from app.config import settings

from .exceptions import GenerationError

logger = logging.getLogger(__name__)

TInput = TypeVar("TInput")
TOutput = TypeVar("TOutput")


class BaseInterpreter(ABC, Generic[TInput, TOutput]):
    """Abstract base for all Claude-backed interpreters.

    Subclass this to turn a typed input into a typed output through one
    Messages API call. No retries: any API error becomes GenerationError.
    """

    # Override in subclasses
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1000

    def __init__(self, api_key: str | None = None, client: anthropic.AsyncAnthropic | None = None):
        self.api_key = api_key or settings.anthropic_api_key
        self._client = client

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    @abstractmethod
    def format_input(self, input_data: TInput) -> str:
        """Convert typed input to prompt string."""
        ...

    @abstractmethod
    def parse_output(self, response_text: str) -> TOutput:
        """Parse LLM response into typed output."""
        ...

    async def interpret(self, input_data: TInput) -> TOutput:
        """Main entry point: interpret input and return structured output."""
        user_message = self.format_input(input_data)

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": user_message}],
            )
        except anthropic.APIError as e:
            logger.error(f"Claude request failed: {type(e).__name__}: {e}")
            raise GenerationError() from e

        # Concatenate the text blocks; tool or thinking blocks are ignored
        response_text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not response_text.strip():
            logger.error("Claude returned an empty response")
            raise GenerationError()

        return self.parse_output(response_text)
