# apps/adapters/llm/openrouter.py
"""
OpenRouter LLM Provider Adapter

Implements ILLMProvider using the OpenAI-compatible OpenRouter API.
"""
import logging
from typing import Dict, List

import openai

from apps.domain.models import LLMProviderError

logger = logging.getLogger(__name__)


class OpenRouterLLM:
    """
    OpenRouter API adapter for LLM access

    Provides access to multiple LLM models through unified API.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        model: str = "google/gemini-flash-1.5",
        temperature: float = 0.7,
        max_tokens: int = 800,
        timeout: float = 60.0,
    ):
        """
        Initialize OpenRouter LLM client

        Args:
            api_key: OpenRouter API key
            base_url: API base URL
            model: Model identifier
            temperature: Sampling temperature (0.0-1.0)
            max_tokens: Maximum tokens to generate
            timeout: Per-request timeout in seconds
        """
        if not api_key:
            raise ValueError("OpenRouter API key is required")

        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

        # OpenAI client is compatible with OpenRouter
        self.client = openai.OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    def generate(self, messages: List[Dict[str, str]], **kwargs) -> str:
        """
        Generate completion using OpenRouter

        Args:
            messages: List of message dicts
            **kwargs: Optional overrides (temperature, max_tokens)

        Returns:
            Generated text

        Raises:
            LLMProviderError: If generation fails
        """
        try:
            temperature = kwargs.get("temperature", self.temperature)
            max_tokens = kwargs.get("max_tokens", self.max_tokens)

            logger.debug(
                f"Generating completion with model={self.model}, "
                f"temp={temperature}, max_tokens={max_tokens}"
            )

            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                stream=False,
            )

            usage = getattr(response, "usage", None)
            if usage:
                logger.info(
                    f"Tokens used: {usage.total_tokens} "
                    f"(input={usage.prompt_tokens}, output={usage.completion_tokens})"
                )

            content = response.choices[0].message.content

            if not content:
                raise LLMProviderError("Empty response from LLM")

            return content

        except LLMProviderError:
            raise

        except openai.RateLimitError as e:
            logger.error(f"Rate limit exceeded: {e}")
            raise LLMProviderError(f"Rate limit exceeded: {e}")

        except openai.APIError as e:
            logger.error(f"OpenRouter API error: {e}")
            raise LLMProviderError(f"API error: {e}")

        except Exception as e:
            logger.error(f"Unexpected error in LLM generation: {e}")
            raise LLMProviderError(f"Generation failed: {e}")
