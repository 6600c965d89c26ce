"""Wiring of clients, providers and fallback policy from configuration.

This is the boundary layer shared by the HTTP API and the CLI. Each
operation runs the remote pipeline first and lets the configured
``FallbackStrategy`` decide whether a remote failure is replaced by the
heuristic result.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .audit.auditors import HeuristicAuditProvider, RemoteAuditProvider
from .audit.fixers import FixTarget, HeuristicFixProvider, RemoteFixProvider
from .audit.generators import ContractGenerator, RemoteContractGenerator, TemplateContractGenerator
from .audit.models import AuditReport, FixSuggestion, GeneratedContract
from .audit.orchestrator import Orchestrator
from .audit.policy import FallbackStrategy
from .llm.unified_client import UnifiedLLMClient

logger = logging.getLogger(__name__)


@dataclass
class Services:
    primary: Orchestrator
    fallback: Orchestrator
    generator: ContractGenerator
    fallback_generator: ContractGenerator
    strategy: FallbackStrategy

    def audit(self, code: str) -> AuditReport:
        return self.strategy.run("audit", self.primary.start_audit, self.fallback.start_audit, code)

    def fix(self, code: str, target: FixTarget) -> FixSuggestion:
        return self.strategy.run("fix", self.primary.generate_fix, self.fallback.generate_fix, code, target)

    def generate(self, prompt: str) -> GeneratedContract:
        return self.strategy.run("generate", self.generator.generate, self.fallback_generator.generate, prompt)


def heuristic_orchestrator() -> Orchestrator:
    return Orchestrator(auditor=HeuristicAuditProvider(), fixer=HeuristicFixProvider())


def build_services(cfg: dict[str, Any], heuristic_only: bool = False) -> Services:
    """Build the service set described by ``cfg``.

    With ``heuristic_only`` no model client is created and every result is
    tagged ``heuristic``.
    """
    strategy = FallbackStrategy.from_config(cfg)
    fallback = heuristic_orchestrator()
    templates = TemplateContractGenerator()

    if heuristic_only:
        logger.info("Running with heuristic providers only")
        return Services(fallback, fallback, templates, templates, strategy)

    primary = Orchestrator(
        auditor=RemoteAuditProvider(UnifiedLLMClient(cfg, profile="auditor")),
        fixer=RemoteFixProvider(UnifiedLLMClient(cfg, profile="fixer")),
    )
    generator = RemoteContractGenerator(UnifiedLLMClient(cfg, profile="generator"))
    logger.info("Remote providers configured (fallback policy: %s)", strategy.policy.value)
    return Services(primary, fallback, generator, templates, strategy)
