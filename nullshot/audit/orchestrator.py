"""Audit/fix orchestration.

A fixed two-operation facade over an audit provider and a fix provider.
No state is kept between calls and no failure is recovered here; callers
decide what to do when a provider fails (see ``policy``).
"""
from __future__ import annotations

import logging

from ..errors import InvalidSubmission
from .auditors import AuditProvider
from .fixers import FixProvider, FixTarget
from .models import AuditReport, FixSuggestion, Severity, Verdict

logger = logging.getLogger(__name__)


def evaluate_report(report: AuditReport) -> Verdict:
    """REJECT on any High finding, WARN on any Medium, else APPROVE.

    Informational only; nothing is gated on the verdict.
    """
    severities = {v.severity for v in report.vulnerabilities}
    if Severity.HIGH in severities:
        return Verdict.REJECT
    if Severity.MEDIUM in severities:
        return Verdict.WARN
    return Verdict.APPROVE


class Orchestrator:
    """Sequences validation, audit and fix calls around injected providers."""

    def __init__(self, auditor: AuditProvider, fixer: FixProvider):
        self.auditor = auditor
        self.fixer = fixer

    def start_audit(self, code: str) -> AuditReport:
        """Audit ``code`` with the configured provider.

        Raises:
            InvalidSubmission: ``code`` is empty or blank
        """
        logger.info("Observed new code submission (%d chars)", len(code or ""))
        if not code or not code.strip():
            raise InvalidSubmission("Invalid code submission: code is empty")

        report = self.auditor.audit(code)
        logger.info(
            "Audit %s complete via %s: %d issue(s), score %d, verdict %s",
            report.id, report.source, len(report.vulnerabilities), report.score,
            evaluate_report(report).value,
        )
        return report

    def generate_fix(self, code: str, target: FixTarget) -> FixSuggestion:
        """Delegate to the fix provider for one vulnerability or a batch."""
        return self.fixer.fix(code, target)

    def evaluate_report(self, report: AuditReport) -> Verdict:
        return evaluate_report(report)
