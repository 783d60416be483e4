"""
Candidate filtering given the feedback for the last guess.

Given:
  - the current candidate set
  - the entity that was guessed last
  - the feedback the game returned for it

Return:
  - the candidates consistent with every attribute's feedback.

This is the oracle read backwards: a candidate survives iff, hypothesized as
the target, it would have produced the reported result for every attribute
that has feedback.

Fallback ladder (feedback arrives through a lossy adapter, so contradictory
feedback is treated as low confidence, not as a fatal error):
  1) strict: all constraints
  2) relaxed: the single most reliable constraint present (RELAXED_PRIORITY)
  3) unchanged: the input candidates
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .entity import (
    ALL_ATTRIBUTES,
    CATEGORICAL_ATTRIBUTES,
    MAJOR_APPEARANCES,
    NATIONALITY,
    NUMERIC_THRESHOLDS,
    REGION,
    ROLE,
    TEAM,
    AGE,
    Entity,
)
from .errors import EmptyFilterResult
from .scoring import Feedback, Result

logger = logging.getLogger(__name__)

# Order in which single constraints are tried when strict filtering empties
# the set. Exact-match columns are the hardest for the game to get wrong.
RELAXED_PRIORITY = (TEAM, NATIONALITY, ROLE, REGION, AGE, MAJOR_APPEARANCES)

PATH_STRICT = "strict"
PATH_UNCHANGED = "unchanged"


@dataclass
class FilterReport:
    candidates: List[Entity]
    path: str                     # "strict", "relaxed:<attr>" or "unchanged"
    before: int

    @property
    def degraded(self) -> bool:
        return self.path != PATH_STRICT


def _matches_numeric(value: int, guessed: int, threshold: int, result: Result) -> bool:
    if result == Result.CORRECT:
        return value == guessed
    if result == Result.HIGH_CLOSE:
        # guess was a bit too high -> target slightly below it
        return guessed - threshold <= value < guessed
    if result == Result.LOW_CLOSE:
        return guessed < value <= guessed + threshold
    if result == Result.HIGH_NOT_CLOSE:
        return value < guessed - threshold
    if result == Result.LOW_NOT_CLOSE:
        return value > guessed + threshold
    return True  # not a numeric result: no constraint


def _matches_nationality(candidate: Entity, last_guess: Entity, result: Result) -> bool:
    if result == Result.CORRECT:
        return candidate.nationality == last_guess.nationality
    if result == Result.INCORRECT_CLOSE:
        return (candidate.nationality != last_guess.nationality
                and candidate.region == last_guess.region)
    if result == Result.INCORRECT:
        # INCORRECT says nothing about the region
        return candidate.nationality != last_guess.nationality
    return True


def matches(candidate: Entity, last_guess: Entity, attr: str, result: Optional[Result]) -> bool:
    """
    Is `candidate` consistent with `result` on `attr` for `last_guess`?

    A missing result, or one that has no meaning for the attribute kind
    (HIGH_CLOSE on `team`, say), imposes no constraint.
    """
    if result is None:
        return True
    if attr in NUMERIC_THRESHOLDS:
        return _matches_numeric(candidate.get(attr), last_guess.get(attr),
                                NUMERIC_THRESHOLDS[attr], result)
    if attr == NATIONALITY:
        return _matches_nationality(candidate, last_guess, result)
    if attr in CATEGORICAL_ATTRIBUTES:
        if result == Result.CORRECT:
            return candidate.get(attr) == last_guess.get(attr)
        if result == Result.INCORRECT:
            return candidate.get(attr) != last_guess.get(attr)
        return True
    raise ValueError(f"Unknown attribute: {attr}")


def _consistent(candidate: Entity, last_guess: Entity, feedback: Feedback,
                attrs: Sequence[str]) -> bool:
    for a in attrs:
        if not matches(candidate, last_guess, a, feedback.get(a)):
            return False
    return True


def filter_report(
        candidates: Iterable[Entity],
        last_guess: Optional[Entity],
        feedback: Optional[Feedback],
        attrs: Iterable[str] = ALL_ATTRIBUTES,
) -> FilterReport:
    """
    Filter with the fallback ladder and report which rung was used.
    """
    pool = list(candidates)
    if last_guess is None or not feedback:
        return FilterReport(pool, PATH_UNCHANGED, len(pool))

    active = [a for a in attrs if feedback.get(a) is not None]
    out = [c for c in pool if _consistent(c, last_guess, feedback, active)]
    if out or not pool:
        logger.debug("filter: %d -> %d candidates", len(pool), len(out))
        return FilterReport(out, PATH_STRICT, len(pool))

    logger.warning("feedback %s for %r leaves no candidate; relaxing",
                   {a: str(feedback[a]) for a in active}, last_guess.id)
    for a in RELAXED_PRIORITY:
        if a not in active:
            continue
        relaxed = [c for c in pool if matches(c, last_guess, a, feedback[a])]
        if relaxed:
            logger.warning("relaxed filter on %s keeps %d of %d", a, len(relaxed), len(pool))
            return FilterReport(relaxed, f"relaxed:{a}", len(pool))

    logger.warning("no single constraint is satisfiable; keeping all %d candidates", len(pool))
    return FilterReport(pool, PATH_UNCHANGED, len(pool))


def drop_guess(candidates: Sequence[Entity], guess: Optional[Entity]) -> List[Entity]:
    """
    Remove a guess the game did not accept, by id.

    Attribute feedback cannot rule out the guess itself when other candidates
    share all of its compared values, so a miss has to be applied by
    identity. The last remaining candidate is kept.
    """
    pool = list(candidates)
    if guess is None:
        return pool
    rest = [c for c in pool if c.id != guess.id]
    if not rest:
        logger.warning("miss reported for %r but it is the only candidate left", guess.id)
        return pool
    return rest


def filter_candidates(
        candidates: Iterable[Entity],
        last_guess: Optional[Entity],
        feedback: Optional[Feedback],
        attrs: Iterable[str] = ALL_ATTRIBUTES,
        *,
        strict: bool = False,
) -> List[Entity]:
    """
    Keep the candidates consistent with `feedback` for `last_guess`.

    Args:
      candidates : current candidate set (order preserved)
      last_guess : the entity that was guessed
      feedback   : {attribute: Result}; attributes without a result are skipped
      attrs      : attributes to honor (others in `feedback` are ignored)
      strict     : raise EmptyFilterResult instead of falling back

    Returns:
      A non-empty list whenever `candidates` is non-empty (unless strict).
    """
    if strict:
        pool = list(candidates)
        if last_guess is None or not feedback:
            return pool
        active = [a for a in attrs if feedback.get(a) is not None]
        out = [c for c in pool if _consistent(c, last_guess, feedback, active)]
        if pool and not out:
            raise EmptyFilterResult(f"feedback eliminates all {len(pool)} candidates")
        return out
    return filter_report(candidates, last_guess, feedback, attrs).candidates
