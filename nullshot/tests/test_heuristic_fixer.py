"""Tests for the heuristic fix provider."""

import pytest

from nullshot.audit.auditors import HeuristicAuditProvider
from nullshot.audit.fixers import GUARD_IMPORT, OWNABLE_IMPORT, HeuristicFixProvider, remove_self_destruct
from nullshot.audit.models import Vulnerability, VulnerabilityKind
from nullshot.errors import InvalidSubmission


def make_vuln(title, vid="v1", severity="High", kind=None):
    data = {"id": vid, "title": title, "description": "d", "severity": severity}
    if kind:
        data["kind"] = kind
    return Vulnerability.model_validate(data)


@pytest.fixture
def fixer():
    return HeuristicFixProvider()


class TestSingleFix:
    def test_reentrancy_inserts_one_import_and_one_base(self, fixer, bank_code):
        result = fixer.fix(bank_code, make_vuln("Reentrancy Vulnerability"))
        fixed = result.fixed_code

        assert fixed.count(GUARD_IMPORT) == 1
        assert fixed.count("ReentrancyGuard") == 2
        assert "contract Bank is ReentrancyGuard {" in fixed
        assert "function withdraw(uint256 amount) public nonReentrant {" in fixed
        assert result.vulnerability_id == "v1"
        assert result.original_code == bank_code
        assert result.source == "heuristic"

    def test_reentrancy_fix_is_idempotent(self, fixer, bank_code):
        vuln = make_vuln("Reentrancy Vulnerability")
        once = fixer.fix(bank_code, vuln).fixed_code
        twice = fixer.fix(once, vuln).fixed_code
        assert twice == once

    def test_reentrancy_extends_existing_inheritance(self, fixer):
        code = (
            'pragma solidity ^0.8.20;\n\nimport "@openzeppelin/contracts/access/Ownable.sol";\n\n'
            "contract CustomContract is Ownable {\n"
            "    function withdraw() public {\n        payable(msg.sender).transfer(1);\n    }\n}\n"
        )
        fixed = fixer.fix(code, make_vuln("Reentrancy")).fixed_code

        assert "contract CustomContract is Ownable, ReentrancyGuard {" in fixed
        lines = fixed.split("\n")
        assert lines.index(GUARD_IMPORT) == lines.index(OWNABLE_IMPORT) + 1

    def test_dispatch_follows_kind_not_title(self, fixer, bank_code):
        reworded = make_vuln("Recursive withdrawal drain", kind="reentrancy")
        assert "nonReentrant" in fixer.fix(bank_code, reworded).fixed_code

    def test_access_control(self, fixer, token_code):
        fixed = fixer.fix(token_code, make_vuln("Missing Access Control")).fixed_code

        assert fixed.count(OWNABLE_IMPORT) == 1
        assert "contract Token is Ownable {" in fixed
        assert "constructor(address initialOwner) Ownable(initialOwner) {" in fixed
        assert "function mint(address to, uint256 amount) public onlyOwner {" in fixed
        report = HeuristicAuditProvider().audit(fixed)
        assert VulnerabilityKind.ACCESS_CONTROL not in {v.kind for v in report.vulnerabilities}

    def test_integer_overflow_bumps_pragma(self, fixer, legacy_code):
        fixed = fixer.fix(legacy_code, make_vuln("Potential Integer Overflow", severity="Medium")).fixed_code
        assert fixed.startswith("pragma solidity ^0.8.20;")
        assert "0.6.12" not in fixed

    def test_self_destruct_removes_the_function(self, fixer, legacy_code):
        fixed = fixer.fix(legacy_code, make_vuln("Unprotected Self-Destruct")).fixed_code

        assert "selfdestruct" not in fixed
        assert "function destroy" not in fixed
        assert "    // Function removed: self-destruct is deprecated and dangerous" in fixed
        assert "function withdraw(uint256 amount) public {" in fixed
        assert fixed.rstrip().endswith("}")

    def test_unknown_kind_appends_todo(self, fixer, bank_code):
        result = fixer.fix(bank_code, make_vuln("Front-running on approve", severity="Low"))
        assert result.fixed_code == bank_code + "\n// TODO: Fix vulnerability: Front-running on approve"
        assert "TODO" in result.explanation


def test_remove_self_destruct_handles_nested_blocks():
    code = (
        "contract C {\n"
        "    address owner;\n"
        "    function kill() public {\n"
        "        if (msg.sender == owner) {\n"
        "            selfdestruct(payable(owner));\n"
        "        }\n"
        "    }\n"
        "    function keep() public view returns (uint) { return 1; }\n"
        "}\n"
    )
    fixed = remove_self_destruct(code)

    assert "selfdestruct" not in fixed
    assert "function keep()" in fixed
    assert fixed.count("{") == fixed.count("}")


MULTILINE_IMPORT = """\
pragma solidity ^0.8.20;

import {
    ERC20,
    IERC20
} from "@openzeppelin/contracts/token/ERC20/ERC20.sol";

contract Vault is ERC20 {
    function withdraw(uint256 amount) public {
        (bool ok, ) = msg.sender.call{value: amount}("");
        require(ok);
    }
}
"""

IMPORT_LIST = 'import {\n    ERC20,\n    IERC20\n} from "@openzeppelin/contracts/token/ERC20/ERC20.sol";\n'


def test_import_goes_after_multi_line_import(fixer):
    fixed = fixer.fix(MULTILINE_IMPORT, make_vuln("Reentrancy Vulnerability")).fixed_code

    assert IMPORT_LIST + GUARD_IMPORT + "\n" in fixed
    assert "contract Vault is ERC20, ReentrancyGuard {" in fixed


def test_fix_all_keeps_multi_line_import_intact(fixer):
    batch = [make_vuln("Reentrancy", "v1"), make_vuln("Missing Access Control", "v2")]
    fixed = fixer.fix(MULTILINE_IMPORT, batch).fixed_code

    assert IMPORT_LIST + OWNABLE_IMPORT + "\n" + GUARD_IMPORT + "\n" in fixed
    assert "contract Vault is ERC20, Ownable, ReentrancyGuard {" in fixed


def test_remove_self_destruct_ignores_braces_in_strings():
    code = (
        "contract C {\n"
        "    address owner;\n"
        "    function kill() public {\n"
        '        require(msg.sender == owner, "only owner }");\n'
        "        selfdestruct(payable(owner));\n"
        "    }\n"
        '    function keep() public pure returns (string memory) { return "{"; }\n'
        "}\n"
    )
    fixed = remove_self_destruct(code)

    assert "selfdestruct" not in fixed
    assert '    function keep() public pure returns (string memory) { return "{"; }\n}\n' in fixed


def test_remove_self_destruct_on_one_line_contract():
    code = "contract C { function kill() public { selfdestruct(payable(msg.sender)); } }"
    assert remove_self_destruct(code) == \
        "contract C { /* Function removed: self-destruct is deprecated and dangerous */ }"


def test_remove_self_destruct_skips_commented_out_code():
    code = (
        "contract C {\n"
        "    // this function used to call selfdestruct {\n"
        "    function keep() public {}\n"
        "}\n"
    )
    assert remove_self_destruct(code) == code


class TestFixAll:
    def test_reentrancy_and_overflow_applies_version_bump_first(self, fixer, legacy_code):
        batch = [make_vuln("Reentrancy", "v1"), make_vuln("Integer Overflow", "v2", severity="Medium")]
        result = fixer.fix(legacy_code, batch)
        fixed = result.fixed_code

        assert result.vulnerability_id == "all"
        assert "pragma solidity ^0.8.20;" in fixed
        assert "function withdraw(uint256 amount) public nonReentrant {" in fixed
        assert "contract Legacy is ReentrancyGuard {" in fixed
        assert result.explanation.index("Upgraded to Solidity 0.8.20") < \
            result.explanation.index("nonReentrant modifier")

    def test_full_batch_from_heuristic_audit(self, fixer, legacy_code):
        report = HeuristicAuditProvider().audit(legacy_code)
        fixed = fixer.fix(legacy_code, report.vulnerabilities).fixed_code

        assert "contract Legacy is Ownable, ReentrancyGuard {" in fixed
        assert fixed.count(OWNABLE_IMPORT) == 1
        assert fixed.count(GUARD_IMPORT) == 1
        assert "selfdestruct" not in fixed
        assert HeuristicAuditProvider().audit(fixed).vulnerabilities == []

    def test_unknown_kinds_are_marked(self, fixer, bank_code):
        result = fixer.fix(bank_code, [make_vuln("Timestamp dependence", severity="Low")])
        assert result.fixed_code.endswith("// TODO: Fix vulnerability: Timestamp dependence")
        assert "The reported vulnerability has been addressed." in result.explanation

    def test_empty_batch_is_rejected(self, fixer, bank_code):
        with pytest.raises(InvalidSubmission):
            fixer.fix(bank_code, [])
