"""Prompt templates for the remote audit, fix and generation calls."""
from __future__ import annotations

from .models import Vulnerability

AUDIT_SYSTEM = """You are an expert smart contract auditor. Analyze the Solidity code you are given and return ONLY a valid JSON object (no markdown, no explanatory text).

Required JSON structure:
{
  "id": "unique-audit-id",
  "timestamp": <unix-timestamp-milliseconds>,
  "vulnerabilities": [
    {
      "id": "vuln-1",
      "title": "Vulnerability Title",
      "description": "Description of the issue",
      "severity": "High" | "Medium" | "Low",
      "kind": "reentrancy" | "access_control" | "integer_overflow" | "self_destruct" | "other",
      "lineStart": <number>,
      "lineEnd": <number>,
      "suggestion": "How to fix it"
    }
  ],
  "score": <0-100, where 100 is perfectly secure>,
  "summary": "Overall audit summary",
  "isApproved": <true if no High severity issues>
}

Vulnerability ids must be unique within the report. Line numbers are 1-based."""

AUDIT_USER = """Code to analyze:
{code}

Return ONLY the JSON object, nothing else."""

FIX_SYSTEM = """You are an expert smart contract developer. Fix the described vulnerabilities in the Solidity code you are given.

Return ONLY a valid JSON object (no markdown, no explanatory text) with this structure:
{
  "fixedCode": "The complete fixed Solidity code",
  "explanation": "Detailed explanation of what was changed and why"
}"""

FIX_USER = """Vulnerability Details:
{details}

Original Code:
{code}"""

FIX_ALL_USER = """Fix ALL of the following vulnerabilities in a single rewrite of the contract.
Mention every vulnerability by number in the explanation.

{details}

Original Code:
{code}"""

GENERATE_SYSTEM = """You are an expert Solidity smart contract developer. Write a robust, secure, and gas-optimized smart contract based on the user's request.

Return ONLY a valid JSON object (no markdown, no explanatory text) with this structure:
{
  "code": "The complete Solidity smart contract code with SPDX license, pragma, and all necessary imports",
  "explanation": "Detailed explanation of the contract, its features, security considerations, and usage instructions"
}"""

GENERATE_USER = """User Request:
{prompt}"""


def describe_vulnerability(v: Vulnerability) -> str:
    return (
        f"- Title: {v.title}\n"
        f"- Description: {v.description}\n"
        f"- Severity: {v.severity.value}"
    )


def build_audit_prompt(code: str) -> tuple[str, str]:
    return AUDIT_SYSTEM, AUDIT_USER.format(code=code)


def build_fix_prompt(code: str, vulnerability: Vulnerability) -> tuple[str, str]:
    return FIX_SYSTEM, FIX_USER.format(details=describe_vulnerability(vulnerability), code=code)


def build_fix_all_prompt(code: str, vulnerabilities: list[Vulnerability]) -> tuple[str, str]:
    blocks = [
        f"Vulnerability {i} (id {v.id}):\n{describe_vulnerability(v)}"
        for i, v in enumerate(vulnerabilities, 1)
    ]
    return FIX_SYSTEM, FIX_ALL_USER.format(details="\n\n".join(blocks), code=code)


def build_generate_prompt(prompt: str) -> tuple[str, str]:
    return GENERATE_SYSTEM, GENERATE_USER.format(prompt=prompt)
