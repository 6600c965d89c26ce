"""
Tests for the HTTP routes, with services injected per test.
"""

import pytest
from fastapi.testclient import TestClient

from backend.main import app, get_services
from nullshot.errors import ProviderTimeout
from nullshot.services import build_services

BANK = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.20;

contract Bank {
    mapping(address => uint256) public balances;

    function deposit() public payable {
        balances[msg.sender] += msg.value;
    }

    function withdraw(uint256 amount) public {
        require(balances[msg.sender] >= amount, "Insufficient balance");
        (bool ok, ) = msg.sender.call{value: amount}("");
        require(ok, "Transfer failed");
        balances[msg.sender] -= amount;
    }
}
"""

REENTRANCY = {
    "id": "vuln-1",
    "title": "Reentrancy Vulnerability",
    "description": "External call before state update.",
    "severity": "High",
    "lineStart": 13,
    "lineEnd": 13,
}


@pytest.fixture
def client():
    def use(services):
        app.dependency_overrides[get_services] = lambda: services
        return TestClient(app)
    yield use
    app.dependency_overrides.clear()


@pytest.fixture
def heuristic_client(client):
    return client(build_services({}, heuristic_only=True))


def remote_services(policy, *responses):
    return build_services({
        "models": {"auditor": {"provider": "mock", "model": "m", "responses": list(responses)}},
        "fallback": {"policy": policy},
    })


def test_root(heuristic_client):
    body = heuristic_client.get("/").json()
    assert body["endpoints"] == {"audit": "/audit", "fix": "/fix", "generate": "/generate"}


class TestValidation:
    @pytest.mark.parametrize("path,body,message", [
        ("/audit", {}, "Code is required"),
        ("/audit", {"code": ""}, "Code is required"),
        ("/fix", {"code": BANK}, "Code and vulnerability are required"),
        ("/fix", {"vulnerability": REENTRANCY}, "Code and vulnerability are required"),
        ("/fix", {"vulnerabilities": [REENTRANCY]}, "Code is required"),
        ("/generate", {}, "Prompt is required"),
    ])
    def test_missing_fields(self, heuristic_client, path, body, message):
        response = heuristic_client.post(path, json=body)
        assert response.status_code == 400
        assert response.json() == {"error": message}

    def test_blank_code(self, heuristic_client):
        response = heuristic_client.post("/audit", json={"code": "  \n "})
        assert response.status_code == 400
        assert "empty" in response.json()["error"]

    def test_empty_batch(self, heuristic_client):
        response = heuristic_client.post("/fix", json={"code": BANK, "vulnerabilities": []})
        assert response.status_code == 400

    @pytest.mark.parametrize("vulnerability", [
        {"id": "vuln-1"},
        {**REENTRANCY, "severity": "Critical"},
        {**REENTRANCY, "lineStart": 20, "lineEnd": 3},
    ])
    def test_malformed_vulnerability(self, heuristic_client, vulnerability):
        response = heuristic_client.post("/fix", json={"code": BANK, "vulnerability": vulnerability})
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request")


class TestHeuristicRoutes:
    def test_audit(self, heuristic_client):
        response = heuristic_client.post("/audit", json={"code": BANK})

        assert response.status_code == 200
        report = response.json()
        assert report["score"] == 35
        assert report["isApproved"] is False
        assert report["source"] == "heuristic"
        assert report["vulnerabilities"][0]["lineStart"] == 13
        assert report["vulnerabilities"][0]["kind"] == "reentrancy"

    def test_fix_single(self, heuristic_client):
        response = heuristic_client.post("/fix", json={"code": BANK, "vulnerability": REENTRANCY})

        assert response.status_code == 200
        body = response.json()
        assert body["vulnerabilityId"] == "vuln-1"
        assert body["originalCode"] == BANK
        assert "nonReentrant" in body["fixedCode"]

    def test_fix_all(self, heuristic_client):
        report = heuristic_client.post("/audit", json={"code": BANK}).json()
        response = heuristic_client.post(
            "/fix", json={"code": BANK, "vulnerabilities": report["vulnerabilities"]}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["vulnerabilityId"] == "all"
        assert "All 2 reported vulnerabilities have been addressed." in body["explanation"]

    def test_generate(self, heuristic_client):
        response = heuristic_client.post("/generate", json={"prompt": "Create a token"})

        assert response.status_code == 200
        assert "contract MyToken" in response.json()["code"]


class TestRemoteFailures:
    def test_primary_surfaces_502(self, client):
        api = client(remote_services("primary", RuntimeError("upstream 503")))
        response = api.post("/audit", json={"code": BANK})
        assert response.status_code == 502
        assert "upstream 503" in response.json()["error"]

    def test_timeout_surfaces_504(self, client):
        api = client(remote_services("primary", ProviderTimeout("no answer within 60s")))
        response = api.post("/audit", json={"code": BANK})
        assert response.status_code == 504

    def test_fallback_returns_heuristic_report(self, client):
        api = client(remote_services("fallback_on_error", RuntimeError("upstream 503")))
        response = api.post("/audit", json={"code": BANK})
        assert response.status_code == 200
        assert response.json()["source"] == "heuristic"

    def test_remote_report(self, client):
        report = {"vulnerabilities": [], "score": 97, "summary": "Clean."}
        api = client(remote_services("primary", report))
        body = api.post("/audit", json={"code": BANK}).json()
        assert body["score"] == 97
        assert body["isApproved"] is True
        assert body["source"] == "remote"
