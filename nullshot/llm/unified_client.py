"""Unified LLM client that supports multiple providers."""
from __future__ import annotations

import logging
import os
import time
from typing import Any

from ..errors import NullshotError, RemoteProviderFailure
from .base_provider import BaseLLMProvider
from .gemini_provider import GeminiProvider
from .mock_provider import MockProvider
from .openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)

# Profiles that may stand in for each other when one is not configured
PROFILE_FALLBACKS = {
    "auditor": ["fixer", "generator"],
    "fixer": ["auditor", "generator"],
    "generator": ["auditor", "fixer"],
}


class UnifiedLLMClient:
    """
    LLM client bound to one model profile of the configuration.

    The provider is built on first use, so a missing API key or an unknown
    provider name surfaces as ``RemoteProviderFailure`` at call time, where
    the caller's fallback policy can see it. Every error raised by the
    provider is wrapped the same way; ``ProviderTimeout`` passes through.

    Available providers: openai, gemini, mock
    """

    def __init__(self, cfg: dict[str, Any], profile: str = "auditor"):
        """
        Initialize the client with config and profile.

        Args:
            cfg: Configuration dictionary
            profile: Model profile to use ("auditor", "fixer", "generator")
        """
        self.cfg = cfg if isinstance(cfg, dict) else {}
        self.profile = profile
        self._provider: BaseLLMProvider | None = None

        models_cfg = self.cfg.get("models", {}) or {}
        profile_key = profile
        if profile_key not in models_cfg:
            for alt in PROFILE_FALLBACKS.get(profile_key, []):
                if alt in models_cfg:
                    profile_key = alt
                    break
        self.model_config: dict[str, Any] = models_cfg.get(profile_key, {}) or {}
        self.model = self.model_config.get("model")
        self.provider_key = str(self.model_config.get("provider", "openai")).lower()

        logging_cfg = self.cfg.get("logging", {}) or {}
        env_verbose = os.environ.get("NULLSHOT_LLM_VERBOSE", "").lower() in {"1", "true", "yes", "on"}
        self.verbose = bool(logging_cfg.get("llm_verbose", False) or env_verbose)

    def _build_provider(self) -> BaseLLMProvider:
        if not self.model:
            raise ValueError(f"Model profile '{self.profile}' not found in config and no fallback available")

        timeout_cfg = self.cfg.get("timeouts", {}) or {}
        retry_cfg = self.cfg.get("retries", {}) or {}
        common_kwargs = {
            "config": self.cfg,
            "model_name": self.model,
            "timeout": timeout_cfg.get("request_seconds", 60),
            "retries": retry_cfg.get("max_attempts", 1),
            "backoff_min": retry_cfg.get("backoff_min_seconds", 2),
            "backoff_max": retry_cfg.get("backoff_max_seconds", 8),
            "verbose": self.verbose,
        }

        if self.provider_key == "openai":
            return OpenAIProvider(**common_kwargs)
        if self.provider_key == "gemini":
            return GeminiProvider(**common_kwargs)
        if self.provider_key == "mock":
            return MockProvider(**common_kwargs, responses=self.model_config.get("responses"))
        raise ValueError(f"Unknown provider: {self.provider_key}")

    @property
    def provider(self) -> BaseLLMProvider:
        """The underlying provider, constructed on first access."""
        if self._provider is None:
            try:
                self._provider = self._build_provider()
            except Exception as e:
                raise RemoteProviderFailure(f"Could not initialize '{self.provider_key}' provider: {e}") from e
            logger.info("Initialized %s provider with model: %s", self._provider.provider_name, self.model)
        return self._provider

    def raw(self, *, system: str, user: str) -> str:
        """
        Plain text call.

        Delegates to the underlying provider and maps its failures onto the
        pipeline's error taxonomy.
        """
        provider = self.provider
        start_time = time.time()
        try:
            return provider.raw(system=system, user=user)
        except NullshotError:
            raise
        except Exception as e:
            raise RemoteProviderFailure(f"{provider.provider_name} call failed: {e}") from e
        finally:
            if self.verbose:
                logger.debug("%s call (%s) took %.2fs", provider.provider_name, self.profile, time.time() - start_time)

    @property
    def provider_name(self) -> str:
        """Get the name of the current provider."""
        return self.provider.provider_name
