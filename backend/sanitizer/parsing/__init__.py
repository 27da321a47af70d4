"""Recovery parsing of raw model text."""

from .coerce import coerce_list, parse_fragment
from .repair import repair_truncated_json
from .response_parser import ParseError, ResponseParser, parse_response
from .sandbox import SandboxError, SandboxTimeoutError, evaluate_literal

__all__ = [
    "ParseError",
    "ResponseParser",
    "SandboxError",
    "SandboxTimeoutError",
    "coerce_list",
    "evaluate_literal",
    "parse_fragment",
    "parse_response",
    "repair_truncated_json",
]
