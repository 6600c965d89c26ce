"""Pydantic models for audit reports, vulnerabilities and fixes.

Field names are snake_case in Python and camelCase on the wire
(``lineStart``, ``isApproved``, ``vulnerabilityId``); both spellings are
accepted on input.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel

ResultSource = Literal["remote", "heuristic"]

# Sentinel vulnerability id for a fix that covers a whole batch
ALL_VULNERABILITIES = "all"


class Severity(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def _missing_(cls, value: object) -> Severity | None:
        # Models are not consistent about casing ("high", "HIGH")
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None

    @property
    def rank(self) -> int:
        """Ordering for gating decisions: High > Medium > Low."""
        return _SEVERITY_RANK[self.value]


_SEVERITY_RANK = {"High": 3, "Medium": 2, "Low": 1}


class VulnerabilityKind(str, Enum):
    """Closed set of remediation classes the heuristic fixer knows about."""
    REENTRANCY = "reentrancy"
    ACCESS_CONTROL = "access_control"
    INTEGER_OVERFLOW = "integer_overflow"
    SELF_DESTRUCT = "self_destruct"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value: object) -> VulnerabilityKind | None:
        if isinstance(value, str):
            norm = value.strip().lower().replace("-", "_").replace(" ", "_")
            for member in cls:
                if member.value == norm:
                    return member
        return None

    @classmethod
    def from_title(cls, title: str) -> VulnerabilityKind:
        """Classify a human-readable title. Used once, when a vulnerability
        arrives without an explicit kind."""
        t = (title or "").lower()
        if "reentran" in t:
            return cls.REENTRANCY
        if "access control" in t or "access-control" in t:
            return cls.ACCESS_CONTROL
        if "overflow" in t or "underflow" in t:
            return cls.INTEGER_OVERFLOW
        if "self-destruct" in t or "selfdestruct" in t or "self destruct" in t:
            return cls.SELF_DESTRUCT
        return cls.OTHER


def _known_kind(value: Any) -> bool:
    if isinstance(value, VulnerabilityKind):
        return True
    try:
        VulnerabilityKind(value)
    except (TypeError, ValueError):
        return False
    return True


class Verdict(str, Enum):
    APPROVE = "APPROVE"
    WARN = "WARN"
    REJECT = "REJECT"


class WireModel(BaseModel):
    """Immutable model with camelCase aliases."""
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict using the camelCase field names."""
        return self.model_dump(by_alias=True, mode="json")


class Vulnerability(WireModel):
    """One identified issue."""
    id: str = Field(description="Identifier, unique within one report")
    title: str = Field(description="Short human label")
    description: str = Field(description="Explanation of the issue")
    severity: Severity
    kind: VulnerabilityKind = Field(description="Remediation class")
    line_start: int | None = Field(None, ge=1, description="1-based first line")
    line_end: int | None = Field(None, ge=1, description="1-based last line")
    suggestion: str | None = Field(None, description="Remediation hint")

    @model_validator(mode="before")
    @classmethod
    def _attach_kind(cls, data: Any) -> Any:
        # Unrecognised kinds are reclassified from the title instead of failing the report
        if isinstance(data, dict) and isinstance(data.get("title"), str) and not _known_kind(data.get("kind")):
            data = {**data, "kind": VulnerabilityKind.from_title(data["title"])}
        return data

    @model_validator(mode="after")
    def _check_range(self) -> Vulnerability:
        if self.line_start is not None and self.line_end is not None and self.line_end < self.line_start:
            raise ValueError(f"lineEnd ({self.line_end}) precedes lineStart ({self.line_start})")
        return self


class AuditReport(WireModel):
    """Result of one audit invocation."""
    id: str
    timestamp: int = Field(description="Creation instant, epoch milliseconds")
    vulnerabilities: list[Vulnerability]
    score: int = Field(ge=0, le=100)
    summary: str
    source: ResultSource = "remote"

    @field_validator("vulnerabilities")
    @classmethod
    def _unique_ids(cls, value: list[Vulnerability]) -> list[Vulnerability]:
        seen: set[str] = set()
        for v in value:
            if v.id in seen:
                raise ValueError(f"duplicate vulnerability id: {v.id}")
            seen.add(v.id)
        return value

    @computed_field(alias="isApproved")
    @property
    def is_approved(self) -> bool:
        """True iff no vulnerability is High severity."""
        return not any(v.severity is Severity.HIGH for v in self.vulnerabilities)


class FixSuggestion(WireModel):
    """Proposed rewrite of a contract."""
    vulnerability_id: str = Field(description="Targeted vulnerability id, or 'all'")
    original_code: str
    fixed_code: str
    explanation: str
    source: ResultSource = "remote"


class FixPayload(WireModel):
    """Shape the fix prompt asks the model to return."""
    fixed_code: str
    explanation: str


class GeneratedContract(WireModel):
    """Contract produced from a natural-language request."""
    code: str
    explanation: str
    source: ResultSource = "remote"
