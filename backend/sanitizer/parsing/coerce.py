"""Coercion of string-wrapped arrays inside a parsed response."""

from __future__ import annotations

import json
import re
from typing import Any

import json5

_QUOTED_VALUE_RE = re.compile(r":\s*'([^']*)'")


def parse_fragment(text: str) -> Any:
    """Parse a JSON-like fragment, or return ``None`` if it is not one.

    Tries strict JSON, then JSON5, then a conservative single-to-double
    quote swap.
    """
    text = (text or "").strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except (json.JSONDecodeError, RecursionError):
        pass
    try:
        return json5.loads(text)
    except (ValueError, RecursionError):
        pass
    cleaned = _QUOTED_VALUE_RE.sub(r':"\1"', text).replace("'", '"')
    try:
        return json.loads(cleaned)
    except (json.JSONDecodeError, RecursionError):
        return None


def coerce_list(data: Any) -> list[Any]:
    """Coerce a possibly string-wrapped section into a list.

    A list keeps its non-string items; string items that parse are spliced
    in (lists) or appended (anything else), and unparseable strings are kept
    as-is. A string is parsed into a list. Anything else yields ``[]``.
    """
    if isinstance(data, list):
        out: list[Any] = []
        for item in data:
            if isinstance(item, str):
                parsed = parse_fragment(item)
                if isinstance(parsed, list):
                    out.extend(parsed)
                elif parsed is None or isinstance(parsed, str):
                    out.append(item)
                else:
                    out.append(parsed)
            else:
                out.append(item)
        return out

    if isinstance(data, str):
        parsed = parse_fragment(data)
        if parsed is None:
            return []
        return parsed if isinstance(parsed, list) else [parsed]

    return []
