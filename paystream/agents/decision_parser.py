"""
Decision parsing for judgment oracle replies.

The oracle is asked to answer with a JSON object, but replies often arrive
wrapped in prose or code fences, with fields missing or mistyped. Parsing is
therefore tolerant: anything that cannot be read degrades to RequestReview
instead of raising.
"""

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, NamedTuple

from paystream.schemas.payment import PaymentAction

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.5

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class ParsedDecision(NamedTuple):
    """Normalized (action, reason, confidence) triple."""

    action: PaymentAction
    reason: str
    confidence: float


def extract_json_object(text: str) -> dict[str, Any] | None:
    """
    Extract the first JSON object from an oracle reply.

    Args:
        text: Raw reply text, possibly with surrounding prose or fences

    Returns:
        Parsed object, or None if no JSON object could be decoded
    """
    if not isinstance(text, str):
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        match = _JSON_OBJECT.search(text)
        if not match:
            return None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
    return data if isinstance(data, dict) else None


def _as_float(value: Any) -> float | None:
    # bool is an int subclass; a boolean is never a score
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, str)):
        try:
            result = float(value)
        except (ValueError, OverflowError):
            return None
        # json.loads accepts NaN and Infinity
        return result if math.isfinite(result) else None
    return None


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class DecisionParser:
    """
    Role-configurable parser for oracle replies.

    Exactly one of score_field or flag_field is normally set:

    - score_field: a risk/fraud score. Above threshold forces Reject; above
      threshold * review_fraction forces RequestReview.
    - flag_field: a boolean gate. False forces Reject.

    When neither override fires the oracle's own action keyword is trusted,
    defaulting to RequestReview when it is missing or unrecognized.
    """

    label: str
    score_field: str | None = None
    threshold: float = 1.0
    review_fraction: float | None = None
    flag_field: str | None = None

    def parse(self, text: str) -> ParsedDecision:
        data = extract_json_object(text)
        if data is None:
            logger.warning(f"{self.label}: oracle reply is not a JSON object")
            return ParsedDecision(
                PaymentAction.REQUEST_REVIEW,
                f"Could not parse {self.label.lower()} response",
                0.0,
            )

        confidence = _as_float(data.get("confidence"))
        confidence = DEFAULT_CONFIDENCE if confidence is None else _clamp(confidence)
        reason = data.get("reason")
        if not isinstance(reason, str) or not reason.strip():
            reason = "No reason provided"

        suggested = PaymentAction.from_keyword(data.get("action"))

        if self.score_field is not None:
            score = _as_float(data.get(self.score_field))
            if score is None:
                return ParsedDecision(
                    PaymentAction.REQUEST_REVIEW,
                    f"{reason} (missing {self.score_field})",
                    confidence,
                )
            if score > self.threshold:
                return ParsedDecision(PaymentAction.REJECT, reason, confidence)
            if self.review_fraction is not None and score > self.threshold * self.review_fraction:
                return ParsedDecision(PaymentAction.REQUEST_REVIEW, reason, confidence)

        if self.flag_field is not None:
            flag = data.get(self.flag_field)
            if not isinstance(flag, bool):
                return ParsedDecision(
                    PaymentAction.REQUEST_REVIEW,
                    f"{reason} (missing {self.flag_field})",
                    confidence,
                )
            if not flag:
                return ParsedDecision(PaymentAction.REJECT, reason, confidence)

        return ParsedDecision(suggested or PaymentAction.REQUEST_REVIEW, reason, confidence)
