"""Audit pipeline: models, providers, orchestrator and fallback policy."""

from .auditors import HeuristicAuditProvider, RemoteAuditProvider
from .fixers import HeuristicFixProvider, RemoteFixProvider
from .generators import RemoteContractGenerator, TemplateContractGenerator
from .models import (
    ALL_VULNERABILITIES,
    AuditReport,
    FixSuggestion,
    GeneratedContract,
    Severity,
    Verdict,
    Vulnerability,
    VulnerabilityKind,
)
from .orchestrator import Orchestrator, evaluate_report
from .policy import FallbackPolicy, FallbackStrategy

__all__ = [
    'ALL_VULNERABILITIES', 'AuditReport', 'FallbackPolicy', 'FallbackStrategy', 'FixSuggestion',
    'GeneratedContract', 'HeuristicAuditProvider', 'HeuristicFixProvider', 'Orchestrator',
    'RemoteAuditProvider', 'RemoteContractGenerator', 'RemoteFixProvider', 'Severity',
    'TemplateContractGenerator', 'Verdict', 'Vulnerability', 'VulnerabilityKind', 'evaluate_report',
]
