"""Fix providers: remote model-backed and heuristic text rewrites."""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Union

from ..errors import InvalidSubmission
from .auditors import GUARD_CONTRACT, OWNABLE, SELF_DESTRUCT
from .models import ALL_VULNERABILITIES, FixPayload, FixSuggestion, Vulnerability, VulnerabilityKind
from .prompts import build_fix_all_prompt, build_fix_prompt
from .structured import TextClient, decode, request_json

logger = logging.getLogger(__name__)

FixTarget = Union[Vulnerability, Sequence[Vulnerability]]


def split_target(target: FixTarget) -> tuple[Vulnerability | None, list[Vulnerability]]:
    """Return (single, batch); exactly one of them is populated."""
    if isinstance(target, Vulnerability):
        return target, []
    batch = list(target or [])
    if not batch:
        raise InvalidSubmission("At least one vulnerability is required")
    return None, batch


class FixProvider(ABC):
    """Produces a ``FixSuggestion`` for one or many vulnerabilities."""

    source: str

    @abstractmethod
    def fix(self, code: str, target: FixTarget) -> FixSuggestion:
        pass


class RemoteFixProvider(FixProvider):
    """Asks a language model for the rewrite.

    A batch is sent as one combined prompt so the model produces a single
    rewrite covering every target.
    """

    source = "remote"

    def __init__(self, client: TextClient):
        self.client = client

    def fix(self, code: str, target: FixTarget) -> FixSuggestion:
        single, batch = split_target(target)
        if single is not None:
            system, user = build_fix_prompt(code, single)
            vulnerability_id = single.id
        else:
            system, user = build_fix_all_prompt(code, batch)
            vulnerability_id = ALL_VULNERABILITIES

        payload = decode(FixPayload, request_json(self.client, system=system, user=user))
        return FixSuggestion(
            vulnerability_id=vulnerability_id,
            original_code=code,
            fixed_code=payload.fixed_code,
            explanation=payload.explanation,
            source=self.source,
        )


# --- text rewrites -----------------------------------------------------------

GUARD_IMPORT = 'import "@openzeppelin/contracts/security/ReentrancyGuard.sol";'
OWNABLE_IMPORT = 'import "@openzeppelin/contracts/access/Ownable.sol";'
MODERN_PRAGMA = "pragma solidity ^0.8.20;"
REMOVED_PLACEHOLDER = "// Function removed: self-destruct is deprecated and dangerous"

_PRAGMA = re.compile(r"pragma solidity [^;]*;")
_CONTRACT_DECL = re.compile(r"^(\s*(?:abstract\s+)?contract\s+\w+)(?:\s+is\s+([^{]+?))?\s*\{", re.MULTILINE)
_EMPTY_CONSTRUCTOR = re.compile(r"constructor\(\)\s*\{")
_WITHDRAW = re.compile(r"function\s+withdraw\s*\(([^)]*)\)\s+public\s*\{")
_MINT = re.compile(r"function\s+mint\s*\(([^)]*)\)\s+public\s*\{")
_FUNCTION_START = re.compile(r"\bfunction\b")


def upgrade_pragma(code: str) -> str:
    return _PRAGMA.sub(MODERN_PRAGMA, code, count=1)


def insert_import(code: str, statement: str) -> str:
    """Insert ``statement`` after the last import, else after the pragma,
    else at the top."""
    lines = code.split("\n")
    imports = [i for i, line in enumerate(lines) if line.lstrip().startswith("import ")]
    if imports:
        # a multi-line import ends at its terminating semicolon
        end = imports[-1]
        while ";" not in lines[end] and end < len(lines) - 1:
            end += 1
        lines.insert(end + 1, statement)
    else:
        pragma = next((i for i, line in enumerate(lines) if "pragma solidity" in line), None)
        if pragma is not None:
            lines[pragma + 1:pragma + 1] = ["", statement]
        else:
            lines[0:0] = [statement, ""]
    return "\n".join(lines)


def add_base(code: str, base: str) -> str:
    """Add ``base`` to the inheritance list of the first contract."""
    def _rewrite(m: re.Match) -> str:
        bases = [b.strip() for b in (m.group(2) or "").split(",") if b.strip()]
        if base not in bases:
            bases.append(base)
        return f"{m.group(1)} is {', '.join(bases)} {{"
    return _CONTRACT_DECL.sub(_rewrite, code, count=1)


def forward_owner(code: str) -> str:
    return _EMPTY_CONSTRUCTOR.sub("constructor(address initialOwner) Ownable(initialOwner) {", code)


def guard_withdraw(code: str) -> str:
    return _WITHDRAW.sub(r"function withdraw(\1) public nonReentrant {", code)


def restrict_mint(code: str) -> str:
    return _MINT.sub(r"function mint(\1) public onlyOwner {", code)


def _block_end(code: str, open_idx: int) -> int | None:
    """Index of the brace closing the block opened at ``open_idx``.

    Braces inside string literals and comments are not counted.
    """
    depth = 0
    i = open_idx
    while i < len(code):
        c = code[i]
        if c in "\"'":
            i += 1
            while i < len(code) and code[i] != c:
                i += 2 if code[i] == "\\" else 1
        elif code.startswith("//", i):
            i = code.find("\n", i)
            if i == -1:
                return None
        elif code.startswith("/*", i):
            i = code.find("*/", i + 2)
            if i == -1:
                return None
            i += 1
        elif c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def remove_self_destruct(code: str) -> str:
    """Replace every function whose body calls selfdestruct with a comment.

    A function sharing its line with other code gets a block comment so
    the rest of the line survives.
    """
    out: list[str] = []
    pos = 0
    for m in _FUNCTION_START.finditer(code):
        if m.start() < pos:
            continue
        line_start = code.rfind("\n", 0, m.start()) + 1
        prefix = code[line_start:m.start()]
        if "//" in prefix:
            continue  # commented out
        open_idx = code.find("{", m.end())
        semi_idx = code.find(";", m.end())
        if open_idx == -1 or (semi_idx != -1 and semi_idx < open_idx):
            continue  # declaration without body
        end = _block_end(code, open_idx)
        if end is None:
            break
        if SELF_DESTRUCT in code[open_idx:end]:
            out.append(code[pos:m.start()])
            if prefix.strip():
                out.append(f"/* {REMOVED_PLACEHOLDER[3:]} */")
            else:
                out.append(REMOVED_PLACEHOLDER)
            pos = end + 1
    out.append(code[pos:])
    return "".join(out)


def add_todo(code: str, title: str) -> str:
    return f"{code}\n// TODO: Fix vulnerability: {title}"


class HeuristicFixProvider(FixProvider):
    """Pattern-based rewrites keyed by ``VulnerabilityKind``.

    Always returns a suggestion; unknown kinds get a TODO marker.
    """

    source = "heuristic"

    def fix(self, code: str, target: FixTarget) -> FixSuggestion:
        single, batch = split_target(target)
        if single is None:
            return self.fix_all(code, batch)

        handler = {
            VulnerabilityKind.REENTRANCY: self._fix_reentrancy,
            VulnerabilityKind.ACCESS_CONTROL: self._fix_access_control,
            VulnerabilityKind.INTEGER_OVERFLOW: self._fix_overflow,
            VulnerabilityKind.SELF_DESTRUCT: self._fix_self_destruct,
        }.get(single.kind)
        if handler is None:
            fixed_code = add_todo(code, single.title)
            explanation = (
                "Added a TODO comment to mark where the vulnerability should be fixed. Please review "
                "the specific issue and implement the appropriate security measures."
            )
        else:
            fixed_code, explanation = handler(code)

        logger.info("Heuristic fix for %s (%s)", single.id, single.kind.value)
        return FixSuggestion(
            vulnerability_id=single.id,
            original_code=code,
            fixed_code=fixed_code,
            explanation=explanation,
            source=self.source,
        )

    def _fix_reentrancy(self, code: str) -> tuple[str, str]:
        fixed = code
        if GUARD_CONTRACT not in fixed:
            fixed = add_base(insert_import(fixed, GUARD_IMPORT), GUARD_CONTRACT)
        fixed = guard_withdraw(fixed)
        return fixed, (
            "Added ReentrancyGuard from OpenZeppelin and applied the nonReentrant modifier to the "
            "withdraw function. This prevents reentrancy attacks by ensuring the function cannot be "
            "called recursively before the previous execution completes."
        )

    def _fix_access_control(self, code: str) -> tuple[str, str]:
        fixed = code
        if OWNABLE not in fixed:
            fixed = forward_owner(add_base(insert_import(fixed, OWNABLE_IMPORT), OWNABLE))
        fixed = restrict_mint(fixed)
        return fixed, (
            "Implemented OpenZeppelin's Ownable contract and added the onlyOwner modifier to sensitive "
            "functions like mint(). This ensures only the contract owner can call these critical "
            "operations, preventing unauthorized access."
        )

    def _fix_overflow(self, code: str) -> tuple[str, str]:
        return upgrade_pragma(code), (
            "Updated Solidity version to 0.8.20 which includes built-in overflow and underflow "
            "protection. This eliminates the need for SafeMath library and automatically prevents "
            "arithmetic vulnerabilities."
        )

    def _fix_self_destruct(self, code: str) -> tuple[str, str]:
        return remove_self_destruct(code), (
            "Removed the selfdestruct functionality as it's considered dangerous and deprecated in "
            "modern Solidity development. If fund withdrawal is needed, implement a proper withdraw "
            "function with access control instead."
        )

    def fix_all(self, code: str, vulnerabilities: Sequence[Vulnerability]) -> FixSuggestion:
        """Apply the rewrites for every kind in the batch as one pass.

        Order matters: later patterns expect the pragma, imports and
        inheritance list produced by the earlier steps.
        """
        kinds = {v.kind for v in vulnerabilities}
        needs_ownable = VulnerabilityKind.ACCESS_CONTROL in kinds
        needs_guard = VulnerabilityKind.REENTRANCY in kinds
        fixed = code
        steps: list[str] = []

        if VulnerabilityKind.INTEGER_OVERFLOW in kinds:
            fixed = upgrade_pragma(fixed)
            steps.append("✓ Upgraded to Solidity 0.8.20 for built-in overflow protection")

        add_ownable = needs_ownable and OWNABLE not in fixed
        add_guard = needs_guard and GUARD_CONTRACT not in fixed
        if add_ownable:
            fixed = insert_import(fixed, OWNABLE_IMPORT)
            steps.append("✓ Added Ownable contract for access control")
        if add_guard:
            fixed = insert_import(fixed, GUARD_IMPORT)
            steps.append("✓ Added ReentrancyGuard to prevent reentrancy attacks")

        if add_ownable:
            fixed = forward_owner(add_base(fixed, OWNABLE))
        if add_guard:
            fixed = add_base(fixed, GUARD_CONTRACT)

        if needs_guard:
            fixed = guard_withdraw(fixed)
            steps.append("✓ Applied nonReentrant modifier to withdraw function")
        if needs_ownable:
            fixed = restrict_mint(fixed)
            steps.append("✓ Applied onlyOwner modifier to mint function")

        if VulnerabilityKind.SELF_DESTRUCT in kinds:
            fixed = remove_self_destruct(fixed)
            steps.append("✓ Removed dangerous selfdestruct function")

        for v in vulnerabilities:
            if v.kind is VulnerabilityKind.OTHER:
                fixed = add_todo(fixed, v.title)
                steps.append(f"✓ Marked '{v.title}' for manual review")

        n = len(vulnerabilities)
        closing = f"All {n} reported vulnerabilities have been addressed." if n > 1 else \
            "The reported vulnerability has been addressed."
        explanation = "Applied comprehensive security fixes:\n\n" + "\n".join(steps) + "\n\n" + closing
        logger.info("Heuristic fix-all over %d vulnerabilities (%d steps)", n, len(steps))
        return FixSuggestion(
            vulnerability_id=ALL_VULNERABILITIES,
            original_code=code,
            fixed_code=fixed,
            explanation=explanation,
            source=self.source,
        )
