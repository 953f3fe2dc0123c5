#!/usr/bin/env python3
"""
Yen Amount Handling

Parsing and display helpers for the single currency this system handles.
Yen has no minor unit in practice, so every amount is a plain signed integer.

Key Principles:
- Never use floating-point arithmetic for amounts
- Strip every thousands separator, not just the first one
- Malformed amounts raise ValueError so the caller can skip the email
"""

import re

# Full-width digits occasionally appear in provider templates.
_FULLWIDTH_DIGITS = str.maketrans("０１２３４５６７８９－", "0123456789-")

_YEN_NOISE = re.compile(r"[,，\s円¥￥]")
_POINT_NOISE = re.compile(r"[,，\s円¥￥]|ポイント|pt|P$", re.IGNORECASE)


def parse_yen(value: str) -> int:
    """
    Parse a yen amount string to an integer.

    Args:
        value: Amount text such as "12,345円" or "¥1,000"

    Returns:
        Integer amount in yen

    Raises:
        ValueError: If nothing numeric remains after cleanup

    Examples:
        parse_yen("12,345円") -> 12345
        parse_yen("1,234,567円") -> 1234567
        parse_yen("￥500") -> 500
    """
    clean = _YEN_NOISE.sub("", value.translate(_FULLWIDTH_DIGITS))
    if not clean:
        raise ValueError(f"Empty amount: {value!r}")
    return int(clean)


def parse_points(value: str) -> int:
    """
    Parse a point count such as "100ポイント", "1,200pt" or "50円".

    Points are redeemed one-for-one against yen.
    """
    clean = _POINT_NOISE.sub("", value.translate(_FULLWIDTH_DIGITS))
    if not clean:
        raise ValueError(f"Empty point amount: {value!r}")
    return int(clean)


def format_yen(amount: int) -> str:
    """
    Format an amount for display.

    Examples:
        format_yen(12345) -> "¥12,345"
        format_yen(-500) -> "-¥500"
    """
    if amount < 0:
        return f"-¥{abs(amount):,}"
    return f"¥{amount:,}"
