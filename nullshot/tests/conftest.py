"""Shared Solidity samples for the test suite."""

import pytest

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

LEGACY = """\
pragma solidity ^0.6.12;

contract Legacy {
    mapping(address => uint256) balances;
    function deposit() public payable { balances[msg.sender] += msg.value; }
    function withdraw(uint256 amount) public {
        (bool ok, ) = msg.sender.call{value: amount}("");
        require(ok);
        balances[msg.sender] -= amount;
    }
    function destroy() public {
        selfdestruct(payable(msg.sender));
    }
}
"""

TOKEN = """\
pragma solidity ^0.8.20;

contract Token {
    mapping(address => uint256) public balanceOf;

    constructor() {
        balanceOf[msg.sender] = 1000;
    }

    function mint(address to, uint256 amount) public {
        balanceOf[to] += amount;
    }
}
"""


@pytest.fixture
def bank_code():
    return BANK


@pytest.fixture
def legacy_code():
    return LEGACY


@pytest.fixture
def token_code():
    return TOKEN
