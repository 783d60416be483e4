"""
Per-attribute feedback for a single (guess, target) pair.

Result vocabulary:
  - CORRECT          : guessed value equals the target's
  - INCORRECT        : categorical mismatch ("far")
  - INCORRECT_CLOSE  : nationality only; different country, same region
  - HIGH_CLOSE       : numeric guess ABOVE target, within the threshold
  - LOW_CLOSE        : numeric guess BELOW target, within the threshold
  - HIGH_NOT_CLOSE   : numeric guess ABOVE target, beyond the threshold
  - LOW_NOT_CLOSE    : numeric guess BELOW target, beyond the threshold

Sign convention:
  HIGH/LOW always describe the GUESS relative to the target.
  Thresholds are inclusive: age 2, majorAppearances 1.

Examples (age):
  guess 20, target 22 -> LOW_CLOSE       (guess is 2 below)
  guess 20, target 25 -> LOW_NOT_CLOSE
  guess 24, target 22 -> HIGH_CLOSE
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Tuple

from .entity import (
    ALL_ATTRIBUTES,
    CATEGORICAL_ATTRIBUTES,
    NATIONALITY,
    NUMERIC_THRESHOLDS,
    REGION,
    Entity,
)


class Result(str, Enum):
    CORRECT = "CORRECT"
    INCORRECT = "INCORRECT"
    INCORRECT_CLOSE = "INCORRECT_CLOSE"
    HIGH_CLOSE = "HIGH_CLOSE"
    LOW_CLOSE = "LOW_CLOSE"
    HIGH_NOT_CLOSE = "HIGH_NOT_CLOSE"
    LOW_NOT_CLOSE = "LOW_NOT_CLOSE"

    def __str__(self) -> str:
        return self.value


# attribute -> result, as reported by the game for one guess
Feedback = Dict[str, Result]

# Hashable, ordered form used as a partition key by the selectors.
FeedbackKey = Tuple[Result, ...]


def _compare_numeric(g: int, t: int, threshold: int) -> Result:
    if g == t:
        return Result.CORRECT
    diff = g - t
    if diff > 0:
        return Result.HIGH_CLOSE if diff <= threshold else Result.HIGH_NOT_CLOSE
    return Result.LOW_CLOSE if -diff <= threshold else Result.LOW_NOT_CLOSE


def compare_attribute(guess: Entity, target: Entity, attr: str) -> Result:
    """
    Feedback for one attribute of `guess` when `target` is the hidden answer.

    Raises ValueError for an attribute name the game does not know, and
    MalformedEntityError if either entity lacks the attribute.
    """
    if attr in NUMERIC_THRESHOLDS:
        return _compare_numeric(guess.get(attr), target.get(attr), NUMERIC_THRESHOLDS[attr])

    if attr == NATIONALITY:
        if guess.get(NATIONALITY) == target.get(NATIONALITY):
            return Result.CORRECT
        # Different country in the same region is "close"
        if guess.get(REGION) == target.get(REGION):
            return Result.INCORRECT_CLOSE
        return Result.INCORRECT

    if attr in CATEGORICAL_ATTRIBUTES:
        return Result.CORRECT if guess.get(attr) == target.get(attr) else Result.INCORRECT

    raise ValueError(f"Unknown attribute: {attr}")


def complete_feedback(guess: Entity, target: Entity,
                      attrs: Iterable[str] = ALL_ATTRIBUTES) -> FeedbackKey:
    """
    Ordered feedback tuple for `attrs`.

    Two targets land in the same partition for `guess` iff their tuples are
    equal, so the tuple is used directly as a dict key.
    """
    return tuple(compare_attribute(guess, target, a) for a in attrs)


def score(guess: Entity, target: Entity, attrs: Iterable[str] = ALL_ATTRIBUTES) -> Feedback:
    """Feedback as the game reports it: {attribute: Result}."""
    return {a: compare_attribute(guess, target, a) for a in attrs}


def is_solved(feedback: Feedback, attrs: Iterable[str] = ALL_ATTRIBUTES) -> bool:
    """True when every compared attribute came back CORRECT."""
    attrs = tuple(attrs)
    return bool(attrs) and all(feedback.get(a) == Result.CORRECT for a in attrs)
