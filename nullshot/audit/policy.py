"""Fallback policy applied at the boundary.

``PRIMARY`` surfaces every failure. ``FALLBACK_ON_ERROR`` substitutes the
heuristic result when the remote side fails; the substituted result carries
``source="heuristic"`` so the caller can tell it was degraded.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import TypeVar

from ..errors import REMOTE_FAILURES

logger = logging.getLogger(__name__)

R = TypeVar('R')


class FallbackPolicy(str, Enum):
    PRIMARY = "primary"
    FALLBACK_ON_ERROR = "fallback_on_error"


class FallbackStrategy:
    """Runs a primary call and, depending on policy, a fallback."""

    def __init__(self, policy: FallbackPolicy | str = FallbackPolicy.FALLBACK_ON_ERROR):
        self.policy = FallbackPolicy(policy)

    def run(self, operation: str, primary: Callable[..., R], fallback: Callable[..., R], *args) -> R:
        """Call ``primary(*args)``; on a remote failure and a permissive
        policy, log the cause and return ``fallback(*args)`` instead.

        Input errors (``InvalidSubmission``) and programming errors are never
        recovered.
        """
        try:
            return primary(*args)
        except REMOTE_FAILURES as e:
            if self.policy is FallbackPolicy.PRIMARY:
                raise
            logger.warning("%s: remote provider failed (%s: %s), using heuristic result",
                           operation, type(e).__name__, e)
            return fallback(*args)

    @classmethod
    def from_config(cls, cfg: dict) -> FallbackStrategy:
        fallback_cfg = cfg.get("fallback", {}) if isinstance(cfg, dict) else {}
        return cls(fallback_cfg.get("policy", FallbackPolicy.FALLBACK_ON_ERROR))
