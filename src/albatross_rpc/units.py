"""
Units - Conversion between Luna and NIM.

Luna is the smallest unit of NIM; 100'000 (1e5) Luna equal 1 NIM.
Luna amounts are plain ints, NIM amounts are decimal strings.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext

from .errors import UnitParseError

LUNA_PER_NIM = 100_000
NIM_DECIMALS = 5

# 21 billion NIM
MAX_SUPPLY_LUNA = 2_100_000_000_000_000


def luna_to_nim(luna: int) -> str:
    """
    Format a Luna amount as the shortest exact NIM string.

    >>> luna_to_nim(1234567)
    '12.34567'
    >>> luna_to_nim(1200000)
    '12'
    """
    if luna < 0:
        raise UnitParseError(f"Luna amount must not be negative: {luna}")
    whole, fraction = divmod(int(luna), LUNA_PER_NIM)
    if not fraction:
        return str(whole)
    return f"{whole}.{fraction:0{NIM_DECIMALS}d}".rstrip("0")


def nim_to_luna(nim: str) -> int:
    """
    Parse a NIM amount into Luna.

    Digits beyond the fifth decimal place are truncated, not rounded.

    Raises:
        UnitParseError: If ``nim`` is not a finite, non-negative decimal number.
    """
    text = str(nim).strip()
    # Decimal also accepts digit-group underscores, which are not a valid amount
    if "_" in text:
        raise UnitParseError(f"Invalid NIM amount: {nim!r}")
    try:
        amount = Decimal(text)
    except InvalidOperation as exc:
        raise UnitParseError(f"Invalid NIM amount: {nim!r}") from exc

    if not amount.is_finite():
        raise UnitParseError(f"Invalid NIM amount: {nim!r}")
    if amount < 0:
        raise UnitParseError(f"NIM amount must not be negative: {nim!r}")

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(amount.as_tuple().digits) + NIM_DECIMALS + 1)
        return int(amount * LUNA_PER_NIM)


__all__ = [
    "LUNA_PER_NIM",
    "MAX_SUPPLY_LUNA",
    "NIM_DECIMALS",
    "luna_to_nim",
    "nim_to_luna",
]
