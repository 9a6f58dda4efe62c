# apps/domain/ports/llm.py

"""
LLM Provider Port - Interface for text generation

This port defines the contract for LLM providers.
Any adapter that implements these methods can be used by the domain.
"""

from typing import Dict, List, Protocol


class ILLMProvider(Protocol):
    """
    Interface for Large Language Model providers

    Implementations must provide batch text generation.
    """

    model: str

    def generate(self, messages: List[Dict[str, str]], **kwargs) -> str:
        """
        Generate a completion for the given messages

        Args:
            messages: List of message dicts with 'role' and 'content' keys
                Example: [
                    {"role": "system", "content": "You are a consultant"},
                    {"role": "user", "content": "How do I grow sales?"}
                ]
            **kwargs: Optional parameters (temperature, max_tokens, etc.)

        Returns:
            Generated text response

        Raises:
            LLMProviderError: If generation fails
        """
        ...
