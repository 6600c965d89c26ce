"""
Tests for the fallback policy and the service wiring built on it.
"""

import logging

import pytest

from nullshot.audit.models import Vulnerability
from nullshot.audit.policy import FallbackPolicy, FallbackStrategy
from nullshot.errors import (
    InvalidSubmission,
    NoResponseContent,
    ProviderTimeout,
    RemoteProviderFailure,
    UnparsableResponse,
)
from nullshot.services import build_services


def failing(exc):
    def call(*args):
        raise exc
    return call


def heuristic(*args):
    return "heuristic"


class TestFallbackStrategy:
    def test_primary_result_is_returned(self):
        strategy = FallbackStrategy(FallbackPolicy.FALLBACK_ON_ERROR)
        assert strategy.run("audit", lambda code: f"remote:{code}", heuristic, "x") == "remote:x"

    @pytest.mark.parametrize("exc", [
        NoResponseContent("empty"),
        UnparsableResponse("garbage"),
        RemoteProviderFailure("503"),
        ProviderTimeout("slow"),
    ])
    def test_remote_failures_fall_back(self, exc, caplog):
        strategy = FallbackStrategy(FallbackPolicy.FALLBACK_ON_ERROR)
        with caplog.at_level(logging.WARNING, logger="nullshot.audit.policy"):
            assert strategy.run("audit", failing(exc), heuristic, "x") == "heuristic"
        assert type(exc).__name__ in caplog.text

    def test_primary_policy_surfaces_failure(self):
        strategy = FallbackStrategy("primary")
        with pytest.raises(RemoteProviderFailure):
            strategy.run("audit", failing(RemoteProviderFailure("503")), heuristic, "x")

    @pytest.mark.parametrize("exc", [InvalidSubmission("empty"), KeyError("bug")])
    def test_other_errors_are_never_recovered(self, exc):
        strategy = FallbackStrategy(FallbackPolicy.FALLBACK_ON_ERROR)
        with pytest.raises(type(exc)):
            strategy.run("audit", failing(exc), heuristic, "x")

    def test_from_config(self):
        assert FallbackStrategy.from_config({}).policy is FallbackPolicy.FALLBACK_ON_ERROR
        assert FallbackStrategy.from_config({"fallback": {"policy": "primary"}}).policy is FallbackPolicy.PRIMARY

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            FallbackStrategy("sometimes")


def mock_config(policy, *responses):
    return {
        "models": {"auditor": {"provider": "mock", "model": "m", "responses": list(responses)}},
        "fallback": {"policy": policy},
    }


class TestServices:
    def test_remote_audit(self, bank_code):
        report_json = {"vulnerabilities": [], "score": 100, "summary": "Looks fine."}
        services = build_services(mock_config("primary", report_json))

        report = services.audit(bank_code)

        assert report.source == "remote"
        assert report.summary == "Looks fine."

    def test_failed_audit_degrades_to_heuristic(self, bank_code):
        services = build_services(mock_config("fallback_on_error", "no json here"))

        report = services.audit(bank_code)

        assert report.source == "heuristic"
        assert report.score == 35

    def test_failed_audit_surfaces_under_primary(self, bank_code):
        services = build_services(mock_config("primary", "no json here"))
        with pytest.raises(UnparsableResponse):
            services.audit(bank_code)

    def test_blank_submission_is_not_recovered(self):
        services = build_services(mock_config("fallback_on_error"))
        with pytest.raises(InvalidSubmission):
            services.audit("  ")

    def test_fix_and_generate_fall_back(self, bank_code):
        # fixer and generator reuse the auditor profile, which has nothing scripted
        services = build_services(mock_config("fallback_on_error"))
        vuln = Vulnerability(id="vuln-1", title="Reentrancy Vulnerability", description="d", severity="High")

        suggestion = services.fix(bank_code, vuln)
        contract = services.generate("an ERC20 token")

        assert suggestion.source == "heuristic"
        assert "nonReentrant" in suggestion.fixed_code
        assert contract.source == "heuristic"
        assert "contract MyToken" in contract.code

    def test_heuristic_only(self, bank_code):
        services = build_services({}, heuristic_only=True)
        assert services.audit(bank_code).source == "heuristic"
        assert services.generate("a vault").source == "heuristic"
