"""Contract generators: remote model-backed and template-based."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..errors import InvalidSubmission
from . import templates
from .models import GeneratedContract
from .prompts import build_generate_prompt
from .structured import TextClient, decode, request_json

logger = logging.getLogger(__name__)


def _require_prompt(prompt: str) -> str:
    if not prompt or not prompt.strip():
        raise InvalidSubmission("Prompt is required")
    return prompt


class ContractGenerator(ABC):
    """Writes a Solidity contract from a natural-language request."""

    source: str

    @abstractmethod
    def generate(self, prompt: str) -> GeneratedContract:
        pass


class RemoteContractGenerator(ContractGenerator):
    source = "remote"

    def __init__(self, client: TextClient):
        self.client = client

    def generate(self, prompt: str) -> GeneratedContract:
        system, user = build_generate_prompt(_require_prompt(prompt))
        parsed = request_json(self.client, system=system, user=user)
        if isinstance(parsed, dict):
            parsed = {**parsed, "source": self.source}
        return decode(GeneratedContract, parsed)


# (keywords, template, explanation); first match wins
TEMPLATE_RULES = (
    (
        ("erc20", "token"),
        templates.ERC20_TOKEN,
        "This is a secure ERC20 token implementation using OpenZeppelin contracts. Key features "
        "include: (1) Fixed maximum supply of 1 million tokens to prevent unlimited inflation, "
        "(2) Owner-only minting function with supply cap validation, (3) Public burn function "
        "allowing anyone to burn their own tokens, (4) Inherits from OpenZeppelin's audited ERC20 "
        "and Ownable contracts for security, (5) Uses Solidity 0.8.20 for built-in overflow protection.",
    ),
    (
        ("nft", "erc721"),
        templates.ERC721_COLLECTION,
        "This is a complete ERC721 NFT implementation with the following features: (1) Token URI "
        "storage for metadata links (images, attributes, etc.), (2) Max supply cap of 10,000 NFTs "
        "to create scarcity, (3) Owner-only minting with supply validation, (4) Auto-incrementing "
        "token IDs using OpenZeppelin's Counter utility, (5) Full ERC721 compliance with metadata "
        "extension support. Built on OpenZeppelin's audited contracts for maximum security.",
    ),
    (
        ("multisig", "multi-sig"),
        templates.MULTISIG_WALLET,
        "This is a production-ready multi-signature wallet with the following security features: "
        "(1) Configurable number of required approvals for transaction execution, (2) Multiple "
        "owners can propose and approve transactions, (3) Prevents duplicate approvals and double "
        "execution, (4) Supports both ETH transfers and contract interactions via encoded data, "
        "(5) Events for complete transaction tracking and transparency. Perfect for DAOs and "
        "shared treasury management.",
    ),
)

VAULT_EXPLANATION = (
    "This is a secure smart contract template with essential security features: (1) "
    "ReentrancyGuard to prevent reentrancy attacks, (2) Ownable for access control, (3) Proper "
    "event emission for transparency, (4) Balance tracking and validation, (5) Modern Solidity "
    "0.8.20 with built-in overflow protection. This template can be customized for various use "
    "cases including staking, vaults, or escrow systems."
)


class TemplateContractGenerator(ContractGenerator):
    """Picks a canned contract by keyword; the default is a guarded vault."""

    source = "heuristic"

    def generate(self, prompt: str) -> GeneratedContract:
        lowered = _require_prompt(prompt).lower()
        for keywords, code, explanation in TEMPLATE_RULES:
            if any(k in lowered for k in keywords):
                break
        else:
            code, explanation = templates.VAULT, VAULT_EXPLANATION
        return GeneratedContract(code=code, explanation=explanation, source=self.source)
