"""Audit providers: remote model-backed and deterministic heuristic."""
from __future__ import annotations

import logging
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from .models import AuditReport, Severity, Vulnerability, VulnerabilityKind
from .prompts import build_audit_prompt
from .structured import TextClient, decode, request_json

logger = logging.getLogger(__name__)


def new_audit_id() -> str:
    return f"audit-{uuid.uuid4()}"


def now_ms() -> int:
    return int(time.time() * 1000)


class AuditProvider(ABC):
    """Produces an ``AuditReport`` for a piece of Solidity source."""

    source: str

    @abstractmethod
    def audit(self, code: str) -> AuditReport:
        pass


def _line_number(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        line = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return line if line >= 1 else None


_LINE_KEYS = (("lineStart", "line_start"), ("lineEnd", "line_end"))


def drop_bad_lines(raw: Any) -> Any:
    """Clear a model-reported line range that is not a valid 1-based range.

    Locations are best-effort; a bad one (0 for "unknown", negatives,
    reversed bounds) is logged and reported as absent.
    """
    if not isinstance(raw, dict):
        return raw
    cleaned = {**raw}
    bounds: list[int | None] = []
    for alias, name in _LINE_KEYS:
        value = cleaned.pop(alias, cleaned.pop(name, None))
        line = _line_number(value)
        if value is not None and line is None:
            logger.warning("Dropping invalid %s=%r for %s", alias, value, raw.get("id"))
        bounds.append(line)
    start, end = bounds
    if start is not None and end is not None and end < start:
        logger.warning("Dropping reversed line range %d-%d for %s", start, end, raw.get("id"))
        start = end = None
    cleaned["lineStart"], cleaned["lineEnd"] = start, end
    return cleaned


class RemoteAuditProvider(AuditProvider):
    """Asks a language model for the report and decodes it strictly."""

    source = "remote"

    def __init__(self, client: TextClient):
        self.client = client

    def audit(self, code: str) -> AuditReport:
        system, user = build_audit_prompt(code)
        parsed = request_json(self.client, system=system, user=user)

        if isinstance(parsed, dict):
            if isinstance(parsed.get("vulnerabilities"), list):
                parsed["vulnerabilities"] = [drop_bad_lines(v) for v in parsed["vulnerabilities"]]
            claimed = parsed.pop("isApproved", parsed.pop("is_approved", None))
            parsed["id"] = parsed.get("id") or new_audit_id()
            parsed["timestamp"] = parsed.get("timestamp") or now_ms()
            parsed["source"] = self.source
        else:
            claimed = None

        report = decode(AuditReport, parsed)
        if claimed is not None and bool(claimed) != report.is_approved:
            logger.warning(
                "Model reported isApproved=%s for %s but findings imply %s; using derived value",
                claimed, report.id, report.is_approved,
            )
        return report


@dataclass(frozen=True)
class _Signal:
    vuln_id: str
    kind: VulnerabilityKind
    title: str
    description: str
    severity: Severity
    penalty: int
    suggestion: str
    needle: str | None = None      # localize at the first line containing this
    lines: tuple[int, int] = (1, 1)

    def triggered(self, code: str) -> bool:
        if self.kind is VulnerabilityKind.REENTRANCY:
            return EXTERNAL_CALL in code and REENTRANCY_GUARD not in code
        if self.kind is VulnerabilityKind.ACCESS_CONTROL:
            return ONLY_OWNER not in code and OWNABLE not in code
        if self.kind is VulnerabilityKind.INTEGER_OVERFLOW:
            return SAFE_PRAGMA not in code and any(op in code for op in ARITHMETIC_OPS)
        if self.kind is VulnerabilityKind.SELF_DESTRUCT:
            return SELF_DESTRUCT in code and ONLY_OWNER not in code
        return False


EXTERNAL_CALL = "call{value:"
REENTRANCY_GUARD = "nonReentrant"
ONLY_OWNER = "onlyOwner"
OWNABLE = "Ownable"
SAFE_PRAGMA = "pragma solidity ^0.8"
ARITHMETIC_OPS = ("+=", "*")
SELF_DESTRUCT = "selfdestruct"

GUARD_CONTRACT = "ReentrancyGuard"
AUDITED_LIBRARY = "@openzeppelin/contracts"
BONUSES = ((GUARD_CONTRACT, 10), (AUDITED_LIBRARY, 5))

SIGNALS = (
    _Signal(
        vuln_id="vuln-1",
        kind=VulnerabilityKind.REENTRANCY,
        title="Reentrancy Vulnerability",
        description=(
            "The contract performs external calls before updating state, which could allow "
            "attackers to recursively call back into the contract and drain funds."
        ),
        severity=Severity.HIGH,
        penalty=35,
        suggestion=(
            "Use the ReentrancyGuard from OpenZeppelin and apply the nonReentrant modifier to "
            "functions that make external calls. Always follow the checks-effects-interactions pattern."
        ),
        needle=EXTERNAL_CALL,
    ),
    _Signal(
        vuln_id="vuln-2",
        kind=VulnerabilityKind.ACCESS_CONTROL,
        title="Missing Access Control",
        description=(
            "Critical functions lack proper access control mechanisms, allowing any user to "
            "call sensitive operations."
        ),
        severity=Severity.HIGH,
        penalty=30,
        suggestion=(
            "Implement OpenZeppelin's Ownable or AccessControl contract. Use modifiers like "
            "onlyOwner to restrict sensitive functions to authorized addresses only."
        ),
        lines=(1, 5),
    ),
    _Signal(
        vuln_id="vuln-3",
        kind=VulnerabilityKind.INTEGER_OVERFLOW,
        title="Potential Integer Overflow",
        description=(
            "The contract uses Solidity version below 0.8.0 which doesn't have built-in "
            "overflow protection, making arithmetic operations vulnerable."
        ),
        severity=Severity.MEDIUM,
        penalty=20,
        suggestion=(
            "Upgrade to Solidity 0.8.0 or higher for built-in overflow protection, or use "
            "OpenZeppelin's SafeMath library for arithmetic operations."
        ),
    ),
    _Signal(
        vuln_id="vuln-4",
        kind=VulnerabilityKind.SELF_DESTRUCT,
        title="Unprotected Self-Destruct",
        description=(
            "The selfdestruct function is not properly protected, allowing anyone to destroy "
            "the contract and steal funds."
        ),
        severity=Severity.HIGH,
        penalty=40,
        suggestion=(
            "Add onlyOwner modifier to the function containing selfdestruct, or remove this "
            "functionality entirely as it's generally discouraged in modern contracts."
        ),
        needle=SELF_DESTRUCT,
    ),
)

CLEAN_SUMMARY = (
    "Excellent! No critical vulnerabilities detected. The contract follows security best "
    "practices including reentrancy protection, access control, and modern Solidity version."
)


def first_line_containing(code: str, needle: str) -> int:
    """1-based index of the first line containing ``needle``.

    Falls back to line 1 when nothing matches, which misreports the
    location; the miss is logged.
    """
    for i, line in enumerate(code.split("\n"), 1):
        if needle in line:
            return i
    logger.warning("Could not localize %r in submitted code; reporting line 1", needle)
    return 1


def summarize(vulnerabilities: list[Vulnerability]) -> str:
    if not vulnerabilities:
        return CLEAN_SUMMARY
    n = len(vulnerabilities)
    head = f"Security audit identified {n} issue{'s' if n > 1 else ''} in this smart contract."
    if any(v.severity is Severity.HIGH for v in vulnerabilities):
        tail = "Critical vulnerabilities were found that should be addressed before deployment."
    else:
        tail = "The issues found should be reviewed and fixed to improve contract security."
    return f"{head} {tail}"


class HeuristicAuditProvider(AuditProvider):
    """Substring checks for four well-known vulnerability classes.

    Deterministic in ``code``; makes no model call.
    """

    source = "heuristic"

    def audit(self, code: str) -> AuditReport:
        vulnerabilities: list[Vulnerability] = []
        score = 100

        for signal in SIGNALS:
            if not signal.triggered(code):
                continue
            if signal.needle:
                line = first_line_containing(code, signal.needle)
                start, end = line, line
            else:
                start, end = signal.lines
            vulnerabilities.append(Vulnerability(
                id=signal.vuln_id,
                title=signal.title,
                description=signal.description,
                severity=signal.severity,
                kind=signal.kind,
                line_start=start,
                line_end=end,
                suggestion=signal.suggestion,
            ))
            score -= signal.penalty

        for marker, bonus in BONUSES:
            if marker in code:
                score += bonus

        report = AuditReport(
            id=new_audit_id(),
            timestamp=now_ms(),
            vulnerabilities=vulnerabilities,
            score=max(0, min(100, score)),
            summary=summarize(vulnerabilities),
            source=self.source,
        )
        logger.info("Heuristic audit %s: %d issue(s), score %d", report.id, len(vulnerabilities), report.score)
        return report
