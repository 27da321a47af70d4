"""Tiered recovery parser for raw model text.

Tiers are tried in a fixed order and the first success wins:

1. strict     - ``json.loads``
2. lenient    - JSON5 (trailing commas, bare keys, single quotes, comments)
3. substring  - tiers 1-2 on the text between the first ``{`` and last ``}``
4. sandbox    - capability-free object-literal evaluation, time bounded
5. repair     - close dangling strings/brackets, then tiers 1-2 again

Only the sandbox tier consults the clock; everything else is a pure
function of the input text, so the same text always resolves through the
same tier.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

import json5

from backend.sanitizer.config import Settings, get_settings
from backend.sanitizer.metrics.core import record_parse
from backend.sanitizer.metrics.registry import MetricsClient
from backend.sanitizer.models.common import ParseTier
from backend.sanitizer.models.itinerary import ParseResult

from .repair import find_payload_start, repair_truncated_json
from .sandbox import SandboxError, evaluate_literal

logger = logging.getLogger(__name__)

_NOT_PARSED = object()


class ParseError(ValueError):
    """Raised when every recovery tier fails."""

    def __init__(self, text_length: int, tiers_tried: list[ParseTier], reason: str):
        self.text_length = text_length
        self.tiers_tried = tiers_tried
        self.reason = reason
        tiers = ", ".join(t.value for t in tiers_tried)
        super().__init__(
            f"Unable to parse model response ({text_length} chars; tried {tiers}): {reason}"
        )


def _strict(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, RecursionError):
        return _NOT_PARSED


def _lenient(text: str) -> Any:
    try:
        return json5.loads(text)
    except (ValueError, RecursionError):
        return _NOT_PARSED


def _strict_then_lenient(text: str) -> tuple[Any, ParseTier | None]:
    value = _strict(text)
    if value is not _NOT_PARSED:
        return value, ParseTier.strict
    value = _lenient(text)
    if value is not _NOT_PARSED:
        return value, ParseTier.lenient
    return _NOT_PARSED, None


class ResponseParser:
    """Turns raw model text into a structured value."""

    def __init__(
        self,
        settings: Settings | None = None,
        metrics: MetricsClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.metrics = metrics

    def parse(self, text: str) -> ParseResult:
        """Parse ``text`` through the recovery tiers.

        Args:
            text: Raw model output

        Returns:
            ParseResult with the value, the successful tier and the repair flag

        Raises:
            ParseError: If every tier fails
        """
        start_time = time.time()
        try:
            result = self._parse(text or "")
        except ParseError as e:
            self._record(None, False, len(text or ""), start_time)
            logger.warning(
                "Model response unparseable after %d tiers (%d chars): %s",
                len(e.tiers_tried),
                e.text_length,
                e.reason,
            )
            raise
        self._record(result.tier, True, len(text or ""), start_time)
        return result

    def _parse(self, text: str) -> ParseResult:
        tried: list[ParseTier] = []

        # Tier 1: strict JSON
        tried.append(ParseTier.strict)
        value = _strict(text)
        if value is not _NOT_PARSED:
            return ParseResult(value=value, tier=ParseTier.strict, was_repaired=False)

        # Tier 2: lenient JSON5
        tried.append(ParseTier.lenient)
        value = _lenient(text)
        if value is not _NOT_PARSED:
            return ParseResult(value=value, tier=ParseTier.lenient, was_repaired=True)

        # Tier 3: outermost braces, for prose wrapped around the payload
        tried.append(ParseTier.substring)
        first_brace = text.find("{")
        last_brace = text.rfind("}")
        if first_brace != -1 and last_brace > first_brace:
            candidate = text[first_brace : last_brace + 1]
            value, _ = _strict_then_lenient(candidate)
            if value is not _NOT_PARSED:
                return ParseResult(
                    value=value, tier=ParseTier.substring, was_repaired=True
                )

        # Tier 4: sandboxed literal evaluation
        tried.append(ParseTier.sandbox_eval)
        reason = "no recovery tier produced a value"
        if len(text) <= self.settings.sandbox_max_chars:
            try:
                value = evaluate_literal(text, timeout_s=self.settings.sandbox_timeout_s)
                return ParseResult(
                    value=value, tier=ParseTier.sandbox_eval, was_repaired=True
                )
            except SandboxError as e:
                reason = str(e)

        # Tier 5: structural repair of truncated output
        tried.append(ParseTier.structural_repair)
        payload = text[find_payload_start(text) :]
        repaired = repair_truncated_json(payload)
        if repaired != text:
            value, _ = _strict_then_lenient(repaired)
            if value is not _NOT_PARSED:
                logger.info(
                    "Model response repaired and parsed (truncated): %s",
                    repaired[: self.settings.repaired_excerpt_chars],
                )
                return ParseResult(
                    value=value,
                    tier=ParseTier.structural_repair,
                    was_repaired=True,
                    repaired_text=repaired,
                )
            reason = "structural repair did not yield valid JSON"

        raise ParseError(len(text), tried, reason)

    def _record(
        self, tier: ParseTier | None, ok: bool, text_length: int, start_time: float
    ) -> None:
        latency_ms = int((time.time() - start_time) * 1000)
        record_parse(
            tier=tier,
            was_repaired=ok and tier is not ParseTier.strict,
            ok=ok,
            text_length=text_length,
            latency_ms=latency_ms,
        )
        if self.metrics:
            self.metrics.observe_parse_latency(latency_ms)
            if tier is not None:
                self.metrics.inc_parse_tier(tier.value)
            else:
                self.metrics.inc_parse_failure()


def parse_response(text: str, settings: Settings | None = None) -> ParseResult:
    """Parse model text with a default ResponseParser."""
    return ResponseParser(settings=settings).parse(text)
