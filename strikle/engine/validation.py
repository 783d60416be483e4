"""
Lightweight feedback validation.

Answers "can this result be reported for this attribute at all?":
  - numeric attributes : CORRECT, HIGH_/LOW_ CLOSE / NOT_CLOSE
  - nationality        : CORRECT, INCORRECT, INCORRECT_CLOSE
  - team, role, region : CORRECT, INCORRECT

The filter already treats a meaningless result as "no constraint"; this
module lets the adapter notice and log it instead of silently passing it on.
"""

from typing import FrozenSet, Iterable, List

from .entity import CATEGORICAL_ATTRIBUTES, NATIONALITY, NUMERIC_THRESHOLDS
from .scoring import Feedback, Result

NUMERIC_RESULTS: FrozenSet[Result] = frozenset({
    Result.CORRECT, Result.HIGH_CLOSE, Result.LOW_CLOSE,
    Result.HIGH_NOT_CLOSE, Result.LOW_NOT_CLOSE,
})
NATIONALITY_RESULTS: FrozenSet[Result] = frozenset({
    Result.CORRECT, Result.INCORRECT, Result.INCORRECT_CLOSE,
})
CATEGORICAL_RESULTS: FrozenSet[Result] = frozenset({Result.CORRECT, Result.INCORRECT})


def allowed_results(attr: str) -> FrozenSet[Result]:
    if attr in NUMERIC_THRESHOLDS:
        return NUMERIC_RESULTS
    if attr == NATIONALITY:
        return NATIONALITY_RESULTS
    if attr in CATEGORICAL_ATTRIBUTES:
        return CATEGORICAL_RESULTS
    raise ValueError(f"Unknown attribute: {attr}")


def validate_result(attr: str, result: Result) -> bool:
    """Return True if `result` can be reported for `attr`."""
    return result in allowed_results(attr)


def invalid_attributes(feedback: Feedback, attrs: Iterable[str]) -> List[str]:
    """Attributes of `feedback` (restricted to `attrs`) carrying an impossible result."""
    return [a for a in attrs if a in feedback and not validate_result(a, feedback[a])]
