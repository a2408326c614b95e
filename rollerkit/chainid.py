"""Rollapp chain ID parsing and validation."""

from __future__ import annotations

import re
from dataclasses import dataclass

MAX_CHAIN_ID_LEN = 50

_ETH_ID_PATTERN = re.compile(r"_(\d+)-", re.ASCII)
_ETHERMINT_CHAIN_ID = re.compile(r"([a-z]{1,})_{1}([1-9][0-9]*)-{1}([1-9][0-9]*)")
_MAX_UINT64 = 2**64 - 1


class InvalidRollappIDError(ValueError):
    """Raised when a rollapp ID is malformed."""

    def __init__(self, detail: str = "") -> None:
        message = "invalid rollapp id"
        if detail:
            message = f"{detail}: {message}"
        super().__init__(message)


@dataclass(frozen=True)
class ChainID:
    """A validated rollapp chain ID and its parts."""

    chain_id: str
    name: str
    eip155_id: int
    revision: int


def get_eth_id(rollapp_id: str) -> str:
    """Return the EIP-155 number embedded in a rollapp ID, or an empty string."""
    match = _ETH_ID_PATTERN.search(rollapp_id)
    return match.group(1) if match else ""


def validate_chain_id(chain_id: str) -> ChainID:
    """Validate a rollapp ID of the form ``name_<eip155>-<revision>``."""
    cleaned = chain_id.strip()
    if not cleaned:
        raise InvalidRollappIDError("empty")
    if len(cleaned) > MAX_CHAIN_ID_LEN:
        raise InvalidRollappIDError(
            f"exceeds {MAX_CHAIN_ID_LEN} chars: {cleaned}: len: {len(cleaned)}"
        )

    match = _ETHERMINT_CHAIN_ID.fullmatch(cleaned)
    if match is None or not match.group(1):
        raise InvalidRollappIDError()

    name, eip155, revision_text = match.groups()
    revision = int(revision_text)
    if revision > _MAX_UINT64:
        raise InvalidRollappIDError(
            f"parse revision number: error: value out of range: {revision_text}"
        )

    print(f"'{chain_id}' is a valid RollApp ID")
    return ChainID(
        chain_id=cleaned,
        name=name,
        eip155_id=int(eip155),
        revision=revision,
    )