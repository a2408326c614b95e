"""Validation of token and denomination settings."""

from __future__ import annotations

import string

MAX_DECIMALS = 18
_LETTERS = frozenset(string.ascii_letters)


def validate_decimals(decimals: int) -> None:
    """Raise ``ValueError`` unless ``decimals`` is between 0 and 18."""
    if decimals < 0 or decimals > MAX_DECIMALS:
        raise ValueError(
            f"invalid decimals: {decimals}. Must be less than or equal to {MAX_DECIMALS}"
        )


def is_valid_denom(denom: str) -> None:
    """Raise ``ValueError`` unless ``denom`` is 'a' followed by a valid symbol."""
    if not denom.startswith("a"):
        raise ValueError(f"invalid denom '{denom}'. denom expected to start with 'a'")
    symbol = denom[1:]
    if not is_valid_token_symbol(symbol):
        raise ValueError(f"invalid token symbol '{symbol}'")


def is_valid_token_symbol(symbol: str) -> bool:
    """Return whether ``symbol`` is 3 to 6 ASCII letters."""
    return 3 <= len(symbol) <= 6 and all(char in _LETTERS for char in symbol)