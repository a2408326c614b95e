"""Account balances: parsing, formatting and funding checks."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from tabulate import tabulate

from rollerkit.bash import exec_command_with_stdout

DECIMAL_PRECISION = 6
_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass
class Balance:
    """An amount held in a base denomination such as ``adym``."""

    denom: str
    amount: int = 0

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"

    def bigger_denom_str(self, decimals: int) -> str:
        """Return the amount in the display denomination, e.g. ``1.5DYM``."""
        return format_balance(self.amount, decimals) + self.denom[1:].upper()


@dataclass
class NotFundedAddressData:
    """An address whose balance is below what is required."""

    key_name: str
    address: str
    current_balance: int
    required_balance: int
    denom: str
    network: str


@dataclass(frozen=True)
class ChainQueryConfig:
    """How to query balances on a chain."""

    denom: str
    rpc: str
    binary: str


@dataclass
class AccountData:
    """An address together with its balance."""

    address: str
    balance: Balance = field(default_factory=lambda: Balance(denom=""))


def parse_balance(amount: str) -> int:
    """Parse a base-10 integer amount as printed by a chain binary."""
    if not isinstance(amount, str) or not _INTEGER.fullmatch(amount):
        raise ValueError("unable to convert balance amount to an integer")
    return int(amount)


def parse_balance_from_response(output: str | bytes, denom: str) -> Balance:
    """Return the ``denom`` balance from a bank balances JSON response."""
    response = json.loads(output)
    if not isinstance(response, Mapping):
        raise ValueError("invalid balance response: expected a JSON object")
    entries = response.get("balances") or []
    if not isinstance(entries, list):
        raise ValueError("invalid balance response: balances is not a list")

    balance = Balance(denom=denom, amount=0)
    for entry in entries:
        if not isinstance(entry, Mapping) or entry.get("denom") != denom:
            continue
        balance.amount = parse_balance(str(entry.get("amount", "")))
    return balance


def format_balance(balance: int, decimals: int) -> str:
    """Format a base-denom amount with up to six fractional digits."""
    quotient, remainder = divmod(balance, 10**decimals)
    fraction = str(remainder).rjust(decimals, "0")[:DECIMAL_PRECISION].rstrip("0")
    return f"{quotient}.{fraction}" if fraction else str(quotient)


def query_balance(chain_config: ChainQueryConfig, address: str) -> Balance:
    """Query the balance of ``address`` with the chain's binary."""
    output = exec_command_with_stdout(
        [
            chain_config.binary,
            "query", "bank", "balances", address,
            "--node", chain_config.rpc,
            "--output", "json",
        ]
    )
    return parse_balance_from_response(output, chain_config.denom)


def _confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N]: ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _render_table(addresses_data: Sequence[NotFundedAddressData]) -> str:
    rows: list[list[Any]] = [
        [
            item.key_name,
            item.address,
            f"{item.current_balance}{item.denom}",
            f"{item.required_balance}{item.denom}",
            item.network,
        ]
        for item in addresses_data
    ]
    return tabulate(
        rows,
        headers=["Name", "Address", "Current", "Required", "Network"],
        tablefmt="plain",
        colalign=("left",) * 5,
        disable_numparse=True,
    )


def print_insufficient_balances_if_any(
    addresses_data: Sequence[NotFundedAddressData],
) -> None:
    """List underfunded addresses and wait until the user confirms funding.

    Raises ``RuntimeError`` when the user declines.
    """
    if not addresses_data:
        return
    print("🔔 Please fund the addresses below.")
    print()
    print(_render_table(addresses_data))
    print()
    if not _confirm("press 'y' when the wallets are funded"):
        print("exiting")
        raise RuntimeError("cancelled by user")