"""OpenAI provider implementation."""
from __future__ import annotations

import logging
import os
import random
import time
from typing import Any

from openai import APITimeoutError, OpenAI

from ..errors import ProviderTimeout
from .base_provider import BaseLLMProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseLLMProvider):
    """OpenAI chat-completions provider."""

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
        """Initialize OpenAI provider."""
        self.config = config
        self.model_name = model_name
        self.timeout = timeout
        self.retries = max(1, int(retries))
        self.backoff_min = backoff_min
        self.backoff_max = backoff_max
        self.verbose = verbose

        # Get API key from environment
        openai_cfg = config.get("openai", {}) if isinstance(config, dict) else {}
        api_key_env = openai_cfg.get("api_key_env", "OPENAI_API_KEY")
        api_key = os.environ.get(api_key_env)
        if not api_key:
            raise ValueError(f"API key not found in environment variable: {api_key_env}")

        # The SDK expects base_url to include the "/v1" path.
        raw_base_url = os.environ.get("OPENAI_BASE_URL") or openai_cfg.get("base_url")
        base_url = (raw_base_url or "https://api.openai.com/v1").rstrip("/")
        if not base_url.endswith("/v1"):
            base_url = base_url + "/v1"

        # Retries are driven by our own loop, not the SDK's.
        self.client = OpenAI(api_key=api_key, base_url=base_url, timeout=self.timeout, max_retries=0)
        if self.verbose:
            logger.debug("[OpenAI Provider] Using base_url: %s", base_url)

    def raw(self, *, system: str, user: str) -> str:
        """Make a plain text call."""
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": user}
        ]
        params: dict[str, Any] = {
            "model": self.model_name,
            "messages": messages,
            "timeout": self.timeout,
        }
        # JSON mode only when the caller explicitly asks for valid JSON.
        if "valid json" in (system or "").lower():
            params["response_format"] = {"type": "json_object"}

        if self.verbose:
            request_chars = len(system) + len(user)
            logger.debug("[OpenAI Request] model=%s prompt=%s chars", self.model_name, f"{request_chars:,}")

        last_err: Exception | None = None
        for attempt in range(self.retries):
            try:
                completion = self.client.chat.completions.create(**params)
                return completion.choices[0].message.content or ""
            except Exception as e:
                last_err = e
            if self.verbose:
                logger.debug("  Attempt %d/%d failed: %s", attempt + 1, self.retries, last_err)
            if attempt < self.retries - 1:
                time.sleep(random.uniform(self.backoff_min, self.backoff_max))

        if isinstance(last_err, APITimeoutError):
            raise ProviderTimeout(f"OpenAI request timed out after {self.timeout}s") from last_err
        raise RuntimeError(f"OpenAI raw call failed after {self.retries} attempts: {last_err}") from last_err

    @property
    def provider_name(self) -> str:
        """Return provider name."""
        return "OpenAI"
