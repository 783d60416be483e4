"""
Entropy Selector (minimum expected residual entropy).

Main idea:
  - For each candidate g, partition the CURRENT candidates by the feedback
    tuple each would produce if it were the target.
  - With a uniform prior, the uncertainty left in a bucket p is log2(|p|);
    the expected residual entropy is sum_p (|p| / n) * log2(|p|).
  - Pick g with the MIN expected residual entropy (equivalently the max
    expected information gain).
Tie-break:
  - handled by BaseSelector (an id not played yet this round, else a fresh
    id after a repeat, else candidate order).

Only candidates are considered as guesses: a guess that cannot be the
answer never wins outright in this game.
"""

from __future__ import annotations
import logging
from math import log2
from typing import List, Sequence

from strikle.engine import Entity
from .base import BaseSelector, partition, register

logger = logging.getLogger(__name__)


def calculate_entropy(items: Sequence) -> float:
    """H(S) = log2(|S|), 0 for 0 or 1 items."""
    n = len(items)
    if n <= 1:
        return 0.0
    return log2(n)


def expected_entropy(guess: Entity, candidates: Sequence[Entity], attrs: Sequence[str]) -> float:
    """Expected bits of uncertainty left after guessing `guess`."""
    n = len(candidates)
    if n <= 1:
        return 0.0
    H = 0.0
    for bucket in partition(guess, candidates, attrs).values():
        H += (len(bucket) / n) * calculate_entropy(bucket)
    return H


@register
class EntropySelector(BaseSelector):
    id = "entropy"
    name = "Entropy (Expected Residual Entropy)"
    version = "1.0.0"

    MAXIMIZE = False

    def score_candidates(self, candidates: List[Entity], universe: List[Entity],
                         attrs: Sequence[str]) -> List[float]:
        out: List[float] = []
        for g in candidates:
            H = expected_entropy(g, candidates, attrs)
            logger.debug("candidate %s expected entropy %.4f", g.nickname, H)
            out.append(H)
        return out
