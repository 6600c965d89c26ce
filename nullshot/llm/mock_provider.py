"""Mock LLM provider for testing."""
from __future__ import annotations

import json
from typing import Any

from .base_provider import BaseLLMProvider


class MockProvider(BaseLLMProvider):
    """Scripted provider: replays predefined responses in order.

    A response may be a string (returned verbatim), a dict (returned as
    JSON) or an exception instance (raised).
    """

    def __init__(self, config: dict[str, Any], model_name: str, **kwargs):
        """Initialize mock provider."""
        self.config = config
        self.model_name = model_name
        self.call_count = 0
        self.calls: list[dict[str, str]] = []
        self.responses = list(kwargs.get('responses') or [])
        self.response_index = 0

    def set_responses(self, responses):
        """Set predefined responses for testing."""
        self.responses = list(responses)
        self.response_index = 0

    def raw(self, *, system: str, user: str) -> str:
        """Return the next scripted response."""
        self.call_count += 1
        self.calls.append({'system': system, 'user': user})

        if self.response_index < len(self.responses):
            response = self.responses[self.response_index]
            self.response_index += 1

            if isinstance(response, BaseException):
                raise response
            if isinstance(response, str):
                return response
            return json.dumps(response)

        # Nothing scripted: behave like a model that answered with nothing
        return ""

    @property
    def provider_name(self) -> str:
        """Return provider name."""
        return "mock"
