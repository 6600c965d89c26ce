"""Base provider interface for LLM clients."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def __init__(self, config: dict[str, Any], model_name: str, **kwargs):
        """Initialize the provider with configuration."""
        pass

    @abstractmethod
    def raw(self, *, system: str, user: str) -> str:
        """
        Make a plain text call.

        The audit pipeline asks for JSON in the prompt and decodes the text
        itself, so providers never validate structure.

        Args:
            system: System prompt
            user: User prompt

        Returns:
            Raw text response (may be empty)

        Raises:
            ProviderTimeout: the request exceeded the configured timeout
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name for logging."""
        pass
