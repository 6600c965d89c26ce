"""Gemini provider implementation (google-genai SDK)."""
from __future__ import annotations

import logging
import os
import random
import time
from typing import Any

import httpx
from google import genai
from google.genai import types

from ..errors import ProviderTimeout
from .base_provider import BaseLLMProvider

logger = logging.getLogger(__name__)


class GeminiProvider(BaseLLMProvider):
    """Google Gemini API provider implementation."""

    def __init__(
        self,
        config: dict[str, Any],
        model_name: str,
        timeout: float = 60,
        retries: int = 1,
        backoff_min: float = 2.0,
        backoff_max: float = 8.0,
        verbose: bool = False,
        **kwargs
    ):
        """
        Initialize Gemini provider.

        Args:
            config: Configuration dictionary
            model_name: Gemini model name (e.g., "gemini-1.5-flash")
            timeout: Request timeout in seconds
            retries: Number of attempts per call
            backoff_min: Minimum backoff time in seconds
            backoff_max: Maximum backoff time in seconds
        """
        self.config = config
        self.model_name = model_name
        self.timeout = timeout
        self.retries = max(1, int(retries))
        self.backoff_min = backoff_min
        self.backoff_max = backoff_max
        self.verbose = verbose

        gcfg = config.get("gemini", {}) if isinstance(config, dict) else {}
        api_key_env = gcfg.get("api_key_env", "GEMINI_API_KEY")
        api_key = os.environ.get(api_key_env)
        if not api_key:
            raise ValueError(f"API key not found in environment variable: {api_key_env}")

        self._generation_config = {
            "temperature": gcfg.get("temperature", 0.7),
            "top_p": gcfg.get("top_p", 0.8),
            "top_k": gcfg.get("top_k", 40),
        }

        # google-genai takes the HTTP timeout in milliseconds
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(self.timeout * 1000)),
        )

    def raw(self, *, system: str, user: str) -> str:
        """Make a plain text call."""
        config = types.GenerateContentConfig(
            system_instruction=system or None,
            **self._generation_config,
        )

        if self.verbose:
            logger.debug("[Gemini Request] model=%s prompt=%s chars", self.model_name, f"{len(system) + len(user):,}")

        last_err: Exception | None = None
        for attempt in range(self.retries):
            try:
                response = self._client.models.generate_content(
                    model=self.model_name,
                    contents=user,
                    config=config,
                )
                return response.text or ""
            except Exception as e:
                last_err = e
                if self.verbose:
                    logger.debug("  Attempt %d/%d failed: %s", attempt + 1, self.retries, e)
                if attempt < self.retries - 1:
                    time.sleep(random.uniform(self.backoff_min, self.backoff_max))

        if isinstance(last_err, httpx.TimeoutException):
            raise ProviderTimeout(f"Gemini request timed out after {self.timeout}s") from last_err
        raise RuntimeError(f"Gemini raw call failed after {self.retries} attempts: {last_err}") from last_err

    @property
    def provider_name(self) -> str:
        """Return provider name."""
        return "Gemini"
