# apps/adapters/llm/fake.py
"""
Fake LLM Provider for testing

Provides deterministic responses without API calls.
"""
from typing import Dict, List, Optional

from apps.domain.models import LLMProviderError


class FakeLLM:
    """
    Fake LLM implementation for unit testing

    Returns a predetermined response, or raises LLMProviderError when
    constructed with an error message to simulate an unreachable backend.
    """

    model = "fake-model"

    def __init__(self, response: str = "This is a test response", error: Optional[str] = None):
        """
        Initialize fake LLM

        Args:
            response: The response to return for all generate() calls
            error: If set, generate() raises LLMProviderError with this message
        """
        self.response = response
        self.error = error
        self.generate_called = False
        self.call_count = 0
        self.last_messages = None

    def generate(self, messages: List[Dict[str, str]], **kwargs) -> str:
        """
        Return predetermined response

        Args:
            messages: Input messages (stored but not used)
            **kwargs: Ignored

        Returns:
            The predetermined response string
        """
        self.generate_called = True
        self.call_count += 1
        self.last_messages = messages

        if self.error:
            raise LLMProviderError(self.error)

        return self.response
