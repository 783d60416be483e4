from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Type

from strikle.engine import ALL_ATTRIBUTES, Entity, NoCandidatesError, check_attributes, complete_feedback

logger = logging.getLogger(__name__)

# ---- Global selector registry ----
REGISTRY: Dict[str, Type["BaseSelector"]] = {}

# Scores closer than this are a tie.
TIE_EPSILON = 1e-4


def register(cls: Type["BaseSelector"]) -> Type["BaseSelector"]:
    """
    Decorator: @register on a selector class adds it to REGISTRY by its `id`.
    """
    sid = getattr(cls, "id", None)
    if not sid:
        raise ValueError(f"{cls.__name__} must define a non-empty `id`")
    if sid in REGISTRY:
        raise ValueError(f"Duplicate selector id: {sid}")
    REGISTRY[sid] = cls
    return cls


@dataclass
class GuessTracker:
    """
    Anti-cycling memory: which entity was picked last, how many times in a
    row it has been picked since, and every id picked this round.
    """
    last_guess_id: Optional[str] = None
    consecutive_count: int = 0
    played: Set[str] = field(default_factory=set)

    def record(self, entity_id: str) -> None:
        self.played.add(entity_id)
        if entity_id == self.last_guess_id:
            self.consecutive_count += 1
        else:
            self.last_guess_id = entity_id
            self.consecutive_count = 0

    def switch_to(self, entity_id: str) -> None:
        self.played.add(entity_id)
        self.last_guess_id = entity_id
        self.consecutive_count = 0

    def reset(self) -> None:
        self.last_guess_id = None
        self.consecutive_count = 0
        self.played.clear()


def indistinguishable(a: Entity, b: Entity, attrs: Sequence[str]) -> bool:
    """True if no feedback over `attrs` can tell `a` and `b` apart."""
    return all(a.get(x) == b.get(x) for x in attrs)


# ---- Base class that selectors inherit ----
class BaseSelector:
    id = "base"
    name = "Base"
    version = "0.0.0"

    # True if score_candidates() returns "higher is better"
    MAXIMIZE = True

    def __init__(self):
        self.universe: List[Entity] = []
        self.attributes: tuple = ALL_ATTRIBUTES
        self.tracker = GuessTracker()

    def reset(self, *, universe: Sequence[Entity], attributes: Sequence[str] = ALL_ATTRIBUTES,
              tracker: GuessTracker | None = None) -> None:
        self.universe = list(universe)
        self.attributes = check_attributes(attributes)
        self.tracker = tracker if tracker is not None else GuessTracker()

    def is_ready(self) -> bool:
        return True

    def score_candidates(self, candidates: List[Entity], universe: List[Entity],
                         attrs: Sequence[str]) -> List[float]:
        raise NotImplementedError("Override in subclass")

    # ---- shared control flow ----
    def find_best_guess(self, candidates: Sequence[Entity],
                        universe: Sequence[Entity] | None = None,
                        attributes: Sequence[str] | None = None) -> Entity:
        """
        Pick the next guess from `candidates` and update the tracker.

        Raises NoCandidatesError on an empty candidate set.
        """
        cands = list(candidates)
        attrs = self.attributes if attributes is None else check_attributes(attributes)
        if not cands:
            raise NoCandidatesError("no candidates to guess from")

        if len(cands) == 1:
            self.tracker.record(cands[0].id)
            return cands[0]

        forced = self._break_cycle(cands, attrs)
        if forced is not None:
            return forced

        pool = list(universe) if universe is not None else self.universe
        scores = self.score_candidates(cands, pool, attrs)
        best = self._pick(cands, scores)
        self.tracker.record(best.id)
        logger.info("%s picked %s (|candidates|=%d, repeat=%d)",
                    self.id, best.nickname, len(cands), self.tracker.consecutive_count)
        return best

    def next_guess(self, state: dict) -> Entity:
        """
        Dict form used by the harness.

        Args:
            state: dict with keys:
                - "candidates": current consistent entities
                - "universe":   every entity of the dataset
                - "attributes": attributes compared this game
        """
        return self.find_best_guess(state["candidates"], state.get("universe"),
                                    state.get("attributes"))

    def _break_cycle(self, cands: List[Entity], attrs: Sequence[str]) -> Entity | None:
        """
        Two candidates left and we keep landing on the same one: switch.

        An indistinguishable pair gets all-CORRECT feedback for either guess,
        so the filter never separates it; alternate right away in that case.
        """
        if len(cands) != 2 or self.tracker.last_guess_id is None:
            return None
        ids = [c.id for c in cands]
        if self.tracker.last_guess_id not in ids:
            return None
        degenerate = indistinguishable(cands[0], cands[1], attrs)
        if not degenerate and self.tracker.consecutive_count < 1:
            return None
        other = cands[1] if ids[0] == self.tracker.last_guess_id else cands[0]
        if degenerate:
            logger.info("indistinguishable pair %s/%s; alternating to %s",
                        cands[0].nickname, cands[1].nickname, other.nickname)
        else:
            logger.info("repeated %s; switching to %s", self.tracker.last_guess_id, other.nickname)
        self.tracker.switch_to(other.id)
        return other

    def _pick(self, cands: List[Entity], scores: List[float]) -> Entity:
        """
        Best score. Among ties, prefer an id not played yet this round, then
        (once the last pick has repeated) any id other than the last pick.
        """
        best_score = max(scores) if self.MAXIMIZE else min(scores)
        tied = [c for c, s in zip(cands, scores) if abs(s - best_score) < TIE_EPSILON]
        for c in tied:
            if c.id not in self.tracker.played and c.id != self.tracker.last_guess_id:
                return c
        if self.tracker.consecutive_count >= 1:
            for c in tied:
                if c.id != self.tracker.last_guess_id:
                    return c
        return tied[0]


def partition(guess: Entity, candidates: Sequence[Entity], attrs: Sequence[str]) -> Dict[tuple, List[Entity]]:
    """Group `candidates` by the feedback `guess` would get if each were the target."""
    buckets: Dict[tuple, List[Entity]] = {}
    for target in candidates:
        buckets.setdefault(complete_feedback(guess, target, attrs), []).append(target)
    return buckets
