"""
Feedback adapter: game messages -> canonical Feedback.

The game has shipped several message layouts. This module is the only place
that knows about them; everything downstream sees `GuessOutcome` with a
`{attribute: Result}` dict.

Per-attribute value shapes accepted by normalize_result():
  - "HIGH_CLOSE"                       bare result string (any case)
  - "slightly_high"                    legacy lowercase tags (see LEGACY_TAGS)
  - {"value": 27, "result": "HIGH_CLOSE"}
Anything else (e.g. {"value": 27} with no result) is rejected; the attribute
is then left unconstrained instead of guessed at.

Message shapes accepted by extract_outcome():
  (a) room snapshot:  {"players": [{"id": ..., "guesses": [...]}], "meta": {"userId": ...}}
  (b) guess reply:    {"type": "GUESS_FEEDBACK" | "GUESS_RESPONSE",
                       "payload": {"isCorrect": bool, "playerId": ..., "feedback": {...}}}
  (c) bare outcome:   {"isSuccess": bool, "playerId": ..., "feedback": {...}}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional

from strikle.engine import ALL_ATTRIBUTES, Feedback, FeedbackNormalizationError, Result
from strikle.engine.entity import MAJOR_APPEARANCES, NATIONALITY, REGION
from strikle.engine.validation import validate_result

logger = logging.getLogger(__name__)

# Older builds of the game used lowercase tags.
LEGACY_TAGS: Dict[str, Result] = {
    "correct": Result.CORRECT,
    "incorrect": Result.INCORRECT,
    "incorrect_close": Result.INCORRECT_CLOSE,
    "slightly_high": Result.HIGH_CLOSE,
    "slightly_low": Result.LOW_CLOSE,
    "too_high": Result.HIGH_NOT_CLOSE,
    "too_low": Result.LOW_NOT_CLOSE,
}

# Wire key -> attribute
ALIASES: Dict[str, str] = {
    "country": NATIONALITY,
    "majors": MAJOR_APPEARANCES,
}

GUESS_REPLY_TYPES = ("GUESS_FEEDBACK", "GUESS_RESPONSE")


@dataclass
class GuessOutcome:
    entity_id: Optional[str]
    is_success: bool
    feedback: Feedback = field(default_factory=dict)


def normalize_result(raw: Any, attr: str = "") -> Result:
    """
    One attribute's raw value -> Result.

    Raises FeedbackNormalizationError for unknown shapes or vocabulary.
    """
    if isinstance(raw, Result):
        return raw
    if isinstance(raw, Mapping):
        if "result" not in raw or raw["result"] is None:
            raise FeedbackNormalizationError(f"{attr or 'value'}: no result in {dict(raw)!r}")
        raw = raw["result"]
    if not isinstance(raw, str):
        raise FeedbackNormalizationError(f"{attr or 'value'}: unsupported shape {raw!r}")

    token = raw.strip()
    try:
        return Result(token.upper())
    except ValueError:
        pass
    if token.lower() in LEGACY_TAGS:
        return LEGACY_TAGS[token.lower()]
    raise FeedbackNormalizationError(f"{attr or 'value'}: unknown result {raw!r}")


def normalize_feedback(raw: Optional[Mapping], attrs: Iterable[str] = ALL_ATTRIBUTES) -> Feedback:
    """
    Raw per-attribute mapping -> Feedback, restricted to `attrs`.

    Aliased keys are used only when the canonical key is absent. Values that
    cannot be normalized, or that make no sense for the attribute, are
    dropped with a warning.
    """
    out: Feedback = {}
    if not raw:
        return out
    merged: Dict[str, Any] = dict(raw)
    for wire, attr in ALIASES.items():
        if merged.get(attr) is None and merged.get(wire) is not None:
            merged[attr] = merged[wire]

    for a in attrs:
        value = merged.get(a)
        if value is None:
            continue
        try:
            res = normalize_result(value, a)
        except FeedbackNormalizationError as e:
            logger.warning("skipping feedback: %s", e)
            continue
        if not validate_result(a, res):
            logger.warning("skipping feedback: %s cannot be %s", a, res)
            continue
        out[a] = res
    return out


def _region_from_nationality(raw_nat: Any) -> Optional[Dict[str, str]]:
    """Room snapshots omit region; a CORRECT or close nationality implies it."""
    try:
        nat = normalize_result(raw_nat, NATIONALITY)
    except FeedbackNormalizationError:
        return None
    if nat in (Result.CORRECT, Result.INCORRECT_CLOSE):
        return {"result": Result.CORRECT.value}
    return {"result": Result.INCORRECT.value}


def _from_snapshot(message: Mapping, user_id: Optional[str],
                   attrs: Iterable[str]) -> Optional[GuessOutcome]:
    uid = user_id or (message.get("meta") or {}).get("userId")
    me = next((p for p in message.get("players") or [] if p.get("id") == uid), None)
    if not me or not me.get("guesses"):
        return None
    last = me["guesses"][-1]
    raw = {a: last.get(a) for a in ALL_ATTRIBUTES if last.get(a) is not None}
    if REGION not in raw and NATIONALITY in raw:
        derived = _region_from_nationality(raw[NATIONALITY])
        if derived is not None:
            raw[REGION] = derived
    return GuessOutcome(
        entity_id=last.get("id"),
        is_success=bool(last.get("isSuccess")),
        feedback=normalize_feedback(raw, attrs),
    )


def extract_outcome(
        message: Mapping,
        *,
        user_id: Optional[str] = None,
        last_guess_id: Optional[str] = None,
        attrs: Iterable[str] = ALL_ATTRIBUTES,
) -> Optional[GuessOutcome]:
    """
    Recognize a feedback-bearing message and return its GuessOutcome.

    Returns None for messages that carry no guess feedback (phase changes,
    chat, unknown layouts).
    """
    if not isinstance(message, Mapping):
        return None
    attrs = tuple(attrs)

    if message.get("players"):
        return _from_snapshot(message, user_id, attrs)

    if message.get("type") in GUESS_REPLY_TYPES and isinstance(message.get("payload"), Mapping):
        payload = message["payload"]
        return GuessOutcome(
            entity_id=last_guess_id or payload.get("playerId"),
            is_success=payload.get("isCorrect") is True,
            feedback=normalize_feedback(payload.get("feedback"), attrs),
        )

    if "isSuccess" in message and isinstance(message.get("feedback"), Mapping):
        return GuessOutcome(
            entity_id=message.get("playerId") or last_guess_id,
            is_success=bool(message["isSuccess"]),
            feedback=normalize_feedback(message["feedback"], attrs),
        )

    logger.debug("no feedback in message with keys %s", sorted(message.keys()))
    return None
