"""
Split Score Selector (balanced attribute splits).

Idea:
  For guess g and each compared attribute, count how many CURRENT candidates
  fall on the "same" side as g:
    - categorical / nationality : same value as g
    - numeric                   : value <= g's value
  The ideal split is n/2. Attribute score = 1 - |count - n/2| / (n/2), so a
  perfect halving scores 1 and a useless attribute (everyone on one side)
  scores 0. Sum over attributes; pick the MAX.

Cheaper than entropy (O(n * attrs) per guess instead of building feedback
tuples), but it ignores how attributes interact, so it is not numerically
equivalent to the entropy selector.
"""

from __future__ import annotations
from typing import List, Sequence

from strikle.engine import Entity, NUMERIC_THRESHOLDS
from .base import BaseSelector, register


def split_balance(count: int, n: int) -> float:
    """1.0 for a perfect halving, 0.0 when everything lands on one side."""
    if n <= 1:
        return 0.0
    half = n / 2.0
    return max(0.0, 1.0 - abs(count - half) / half)


@register
class SplitScoreSelector(BaseSelector):
    id = "split_score"
    name = "Split Score (balanced splits)"
    version = "1.0.0"

    def _score_one(self, g: Entity, candidates: List[Entity], attrs: Sequence[str]) -> float:
        n = len(candidates)
        s = 0.0
        for a in attrs:
            gv = g.get(a)
            if a in NUMERIC_THRESHOLDS:
                count = sum(1 for c in candidates if c.get(a) <= gv)
            else:
                count = sum(1 for c in candidates if c.get(a) == gv)
            s += split_balance(count, n)
        return s

    def score_candidates(self, candidates: List[Entity], universe: List[Entity],
                         attrs: Sequence[str]) -> List[float]:
        return [self._score_one(g, candidates, attrs) for g in candidates]
