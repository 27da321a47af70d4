"""Structural repair for truncated JSON text.

A single left-to-right scan tracks whether the cursor is inside a quoted
string and keeps a stack of the closers owed to every open ``{`` / ``[``.
Bracket characters inside strings are ignored. At end of input a dangling
string is closed, the owed closers are appended innermost first, and a
comma left directly in front of any closer is dropped.

The scan never reorders or rewrites characters the model produced, apart
from those trailing commas, so a repaired value is always a prefix of what
the model meant to send.
"""

from __future__ import annotations

from enum import Enum

_CLOSER_FOR = {"{": "}", "[": "]"}
_WHITESPACE = " \t\r\n"


class ScanState(str, Enum):
    """States of the repair scanner."""

    normal = "normal"
    in_string = "in_string"
    after_escape = "after_escape"


def _drop_trailing_comma(out: list[str]) -> None:
    """Remove a comma (and the whitespace after it) at the end of ``out``."""
    idx = len(out) - 1
    while idx >= 0 and out[idx] in _WHITESPACE:
        idx -= 1
    if idx >= 0 and out[idx] == ",":
        del out[idx:]


def repair_truncated_json(text: str) -> str:
    """Close an unterminated string and any unbalanced brackets in ``text``.

    Args:
        text: Possibly truncated JSON-like text

    Returns:
        The repaired text. Balanced input comes back unchanged except for
        commas that directly precede a closing bracket.
    """
    state = ScanState.normal
    stack: list[str] = []
    out: list[str] = []

    for ch in text:
        if state is ScanState.after_escape:
            state = ScanState.in_string
        elif state is ScanState.in_string:
            if ch == "\\":
                state = ScanState.after_escape
            elif ch == '"':
                state = ScanState.normal
        elif ch == '"':
            state = ScanState.in_string
        elif ch in _CLOSER_FOR:
            stack.append(_CLOSER_FOR[ch])
        elif ch in "}]":
            _drop_trailing_comma(out)
            # A stray closer that does not match the innermost opener is kept
            # verbatim; the final parse decides whether it is fatal.
            if stack and stack[-1] == ch:
                stack.pop()
        out.append(ch)

    if state is ScanState.after_escape:
        # A lone trailing backslash would escape the closing quote.
        out.pop()
        state = ScanState.in_string
    if state is ScanState.in_string:
        out.append('"')

    while stack:
        _drop_trailing_comma(out)
        out.append(stack.pop())

    return "".join(out)


def find_payload_start(text: str) -> int:
    """Index of the first ``{`` or ``[`` in ``text``, or 0 if there is none."""
    positions = [pos for pos in (text.find("{"), text.find("[")) if pos != -1]
    return min(positions) if positions else 0
