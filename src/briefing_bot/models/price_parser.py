"""Tolerant price extraction from free-text trade fields."""

import re

_NUMBER = re.compile(r"\d[\d,]*(?:\.\d+)?|\.\d+")


def parse_price(text: str | float | int | None) -> float | None:
    """Extract the first number from a free-text price.

    "$135.50", "135~140 달러", "1,250.5" all parse; anything without a
    digit returns None. Never raises.

    Args:
        text: Free-text price, a bare number, or None.

    Returns:
        The first positive number found, or None.
    """
    if text is None or isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        return float(text) if text > 0 else None

    match = _NUMBER.search(str(text))
    if not match:
        return None
    try:
        value = float(match.group(0).replace(",", ""))
    except ValueError:
        return None
    return value if value > 0 else None
