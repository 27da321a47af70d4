"""Capability-free evaluation of object-literal text.

Model output sometimes arrives as a JavaScript or Python object literal
rather than JSON: single, double or backtick quoted strings, bare keys,
``undefined``, ``True``/``None``, comments. This module translates such
text token by token into a Python literal and evaluates it with
``ast.literal_eval``. Nothing is executed: any identifier that is not a
known constant or an object key, and any operator beyond sign prefixes,
rejects the input. Evaluation runs on a worker thread with a hard
wall-clock timeout so the caller is never blocked for long.
"""

from __future__ import annotations

import ast
import logging
import math
import re
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any

logger = logging.getLogger(__name__)

_CONSTANTS = {
    "true": "True",
    "false": "False",
    "null": "None",
    "undefined": "None",
    "True": "True",
    "False": "False",
    "None": "None",
    # JSON.stringify turns non-finite numbers into null
    "NaN": "None",
    "Infinity": "None",
}

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_PUNCTUATION = set("{}[](),:+-")
_NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F]+|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
)
_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")

_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="sandbox-eval")


class SandboxError(ValueError):
    """Raised when text cannot be evaluated as a plain literal."""


class SandboxTimeoutError(SandboxError):
    """Raised when evaluation exceeds its wall-clock bound."""


def _read_string(text: str, pos: int) -> tuple[str, int]:
    """Decode the quoted string starting at ``pos``; return (value, next_pos)."""
    quote = text[pos]
    pos += 1
    chars: list[str] = []
    while pos < len(text):
        ch = text[pos]
        if ch == quote:
            return "".join(chars), pos + 1
        if quote == "`" and text.startswith("${", pos):
            raise SandboxError("template substitutions are not evaluated")
        if ch == "\\":
            pos += 1
            if pos >= len(text):
                break
            esc = text[pos]
            if esc in _SIMPLE_ESCAPES:
                chars.append(_SIMPLE_ESCAPES[esc])
            elif esc == "u" and re.fullmatch(r"[0-9a-fA-F]{4}", text[pos + 1 : pos + 5]):
                chars.append(chr(int(text[pos + 1 : pos + 5], 16)))
                pos += 4
            elif esc == "x" and re.fullmatch(r"[0-9a-fA-F]{2}", text[pos + 1 : pos + 3]):
                chars.append(chr(int(text[pos + 1 : pos + 3], 16)))
                pos += 2
            elif esc == "\n":
                pass  # line continuation
            else:
                chars.append(esc)
            pos += 1
            continue
        if ch == "\n" and quote != "`":
            raise SandboxError("unterminated string literal")
        chars.append(ch)
        pos += 1
    raise SandboxError("unterminated string literal")


def _next_significant(text: str, pos: int) -> str:
    """Return the next non-whitespace character at or after ``pos``."""
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return text[pos] if pos < len(text) else ""


def translate_literal(text: str) -> str:
    """Translate object-literal text into Python literal source.

    Raises:
        SandboxError: If the text contains anything but literal syntax
    """
    out: list[str] = []
    pos = 0
    length = len(text)

    while pos < length:
        ch = text[pos]

        if ch.isspace():
            out.append(ch)
            pos += 1
        elif text.startswith("//", pos):
            end = text.find("\n", pos)
            pos = length if end == -1 else end
        elif text.startswith("/*", pos):
            end = text.find("*/", pos + 2)
            if end == -1:
                raise SandboxError("unterminated block comment")
            pos = end + 2
        elif ch in "\"'`":
            value, pos = _read_string(text, pos)
            out.append(repr(value))
        elif ch.isdigit() or (ch == "." and pos + 1 < length and text[pos + 1].isdigit()):
            match = _NUMBER_RE.match(text, pos)
            if match is None:  # pragma: no cover - guarded by the branch test
                raise SandboxError(f"bad number at offset {pos}")
            token = match.group(0)
            if len(token) > 1 and token[0] == "0" and token[1].isdigit():
                token = token.lstrip("0") or "0"
            out.append(token)
            pos = match.end()
        elif ch in _PUNCTUATION:
            out.append(ch)
            pos += 1
        else:
            match = _IDENT_RE.match(text, pos)
            if match is None:
                raise SandboxError(f"unexpected character {ch!r} at offset {pos}")
            name = match.group(0)
            pos = match.end()
            if _next_significant(text, pos) == ":":
                out.append(repr(name))
            elif name in _CONSTANTS:
                out.append(_CONSTANTS[name])
            else:
                raise SandboxError(f"reference to name {name!r} is not allowed")

    return "".join(out)


def _to_json_value(value: Any) -> Any:
    """Coerce an evaluated literal into plain JSON-compatible values."""
    if isinstance(value, dict):
        return {str(k): _to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json_value(v) for v in value]
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    raise SandboxError(f"unsupported literal type {type(value).__name__}")


def _evaluate(text: str) -> Any:
    source = translate_literal(text)
    try:
        value = ast.literal_eval(source.strip())
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError) as e:
        raise SandboxError(f"not a literal expression: {e}") from e
    return _to_json_value(value)


def evaluate_literal(text: str, timeout_s: float = 1.0) -> Any:
    """Evaluate object-literal text without executing any code.

    Args:
        text: Candidate literal text
        timeout_s: Hard wall-clock bound for translation and evaluation

    Returns:
        The JSON-compatible value

    Raises:
        SandboxTimeoutError: If evaluation does not finish in ``timeout_s``
        SandboxError: If the text is not a plain literal
    """
    future = _executor.submit(_evaluate, text)
    try:
        return future.result(timeout=timeout_s)
    except FuturesTimeoutError as e:
        future.cancel()
        logger.warning("Sandbox evaluation exceeded %.2fs, abandoning", timeout_s)
        raise SandboxTimeoutError(f"evaluation exceeded {timeout_s}s") from e
