"""Canonical numbers from free-form cost expressions.

Models write costs the way a person would: ``"₹ 6,800"``,
``"$50 per person"``, or running arithmetic such as
``"₹ 800 + ₹ 6,000 = ₹ 6,800"``. ``to_number`` picks one figure:

1. numbers pass through unchanged;
2. the number right after the last ``=`` (a computed total);
3. otherwise the rightmost number in the string;
4. otherwise the leading numeric run once everything but digits,
   separators, points and minus signs is stripped;
5. otherwise ``0``.

Assumption: rule 3 relies on the model writing totals last, left to right.
If the prompt or model changes that convention, revisit it.

A ``-`` is ambiguous between a negative amount and a range separator
(``"50-80"``). Rule 3 reads ``"50-80"`` as 80 and ``"-50"`` as 50; no
attempt is made to tell the two apart.
"""

from __future__ import annotations

import math
import re
from typing import Any

_NUMBER_TOKEN_RE = re.compile(r"\d[\d,]*(?:\.\d+)?")
_AFTER_EQUALS_RE = re.compile(r"[^0-9]*([0-9,]+\.?[0-9]*)")
_NON_NUMERIC_RE = re.compile(r"[^\d.,-]")
_LEADING_FLOAT_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


def _parse_float(token: str) -> float | None:
    """Parse the leading float of ``token`` after dropping separators."""
    match = _LEADING_FLOAT_RE.match(token.replace(",", "").strip())
    if match is None:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def to_number(value: Any) -> float | int:
    """Reduce a cost-bearing value to one canonical number. Never raises.

    Args:
        value: A number or a free-form cost string

    Returns:
        The canonical amount, or 0 when nothing numeric can be found
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    if not isinstance(value, str):
        return 0

    equals_at = value.rfind("=")
    if equals_at != -1:
        match = _AFTER_EQUALS_RE.match(value, equals_at + 1)
        if match:
            parsed = _parse_float(match.group(1))
            if parsed is not None:
                return parsed

    tokens = _NUMBER_TOKEN_RE.findall(value)
    if tokens:
        parsed = _parse_float(tokens[-1])
        if parsed is not None:
            return parsed

    parsed = _parse_float(_NON_NUMERIC_RE.sub("", value))
    return parsed if parsed is not None else 0
