"""
Simulation harness core primitives.

- simulate_feedback: what the game would report for a guess.
- run_case:  play one hidden target to completion with a given selector.
- run_batch: play many targets back-to-back.
- choose_targets: random or fixed (nickname-sorted) sample of the universe.
- summarize: success rate, mean guesses and the failed cases.

These functions are intentionally transport-agnostic so they can be reused by
the CLI, a notebook, or tests without changes.
"""

from __future__ import annotations
import logging
import random
import time
from typing import Dict, List, Iterable, Sequence, Tuple

from strikle.engine import (
    ALL_ATTRIBUTES,
    Entity,
    Feedback,
    NoCandidatesError,
    drop_guess,
    filter_report,
    score,
)

logger = logging.getLogger(__name__)

# The helper's self-test gave each target eight tries.
DEFAULT_MAX_GUESSES = 8


def simulate_feedback(guess: Entity, target: Entity,
                      attrs: Iterable[str] = ALL_ATTRIBUTES) -> Feedback:
    """Feedback as the game would report it (all six columns, always)."""
    return score(guess, target, attrs)


def run_case(
        selector,
        target: Entity,
        *,
        universe: Sequence[Entity],
        attributes: Sequence[str] = ALL_ATTRIBUTES,
        max_guesses: int = DEFAULT_MAX_GUESSES,
        detailed: bool = False,
) -> Dict:
    """
    Play one game until the selector hits `target` or runs out of guesses.

    Args:
        selector:     a BaseSelector (reset here with a fresh tracker)
        target:       the hidden entity for this case
        universe:     every entity (initial candidate set)
        attributes:   attributes the selector and filter compare
        max_guesses:  guess budget
        detailed:     also record per-step candidate counts and filter paths

    Returns:
        dict with keys:
            success (bool), guesses (int), time_ms (float), target (id),
            reason ("solved" | "max_guesses" | "no_candidates"),
            history (list[(guess_id, {attr: result})]), remaining (int),
            and "steps" when detailed
    """
    if max_guesses < 1:
        raise ValueError(f"max_guesses must be >= 1; got {max_guesses}")

    selector.reset(universe=universe, attributes=attributes)
    candidates: List[Entity] = list(universe)
    history: List[Tuple[str, Dict[str, str]]] = []
    steps: List[Dict] = []
    reason = "max_guesses"
    success = False

    t0 = time.perf_counter()
    for turn in range(1, max_guesses + 1):
        state = {
            "turn": turn,
            "candidates": candidates,
            "universe": universe,
            "attributes": attributes,
        }
        try:
            guess = selector.next_guess(state)
        except NoCandidatesError:
            reason = "no_candidates"
            break

        fb = simulate_feedback(guess, target, attributes)
        history.append((guess.id, {a: r.value for a, r in fb.items()}))

        # The game reports success on identity, not on matching columns
        if guess.id == target.id:
            success, reason = True, "solved"
            break

        report = filter_report(candidates, guess, fb, attributes)
        candidates = drop_guess(report.candidates, guess)
        if detailed:
            steps.append({
                "guess": guess.id,
                "before": report.before,
                "after": len(candidates),
                "path": report.path,
            })
        if not candidates:
            reason = "no_candidates"
            break

    dt = (time.perf_counter() - t0) * 1000.0
    out = {
        "success": success,
        "guesses": len(history),
        "time_ms": dt,
        "history": history,
        "target": target.id,
        "reason": reason,
        "remaining": len(candidates),
    }
    if detailed:
        out["steps"] = steps
    return out


def choose_targets(universe: Sequence[Entity], *, sample: int | None = None,
                   seed: int | None = None, fixed: bool = False) -> List[Entity]:
    """
    Pick the targets for a batch.

    - sample None (or >= len): every entity, in universe order
    - fixed: first `sample` entities sorted by nickname (stable across runs
      and datasets that only append)
    - otherwise: seeded random sample without replacement
    """
    pool = list(universe)
    if sample is None or sample >= len(pool):
        return pool
    if fixed:
        return sorted(pool, key=lambda e: e.nickname.lower())[:sample]
    rng = random.Random(seed)
    return rng.sample(pool, sample)


def run_batch(
        selector,
        targets: Sequence[Entity],
        *,
        universe: Sequence[Entity],
        attributes: Sequence[str] = ALL_ATTRIBUTES,
        max_guesses: int = DEFAULT_MAX_GUESSES,
        detailed: bool = False,
        progress=None,
) -> List[Dict]:
    """
    Run many cases back-to-back. `progress` wraps the target iterable (e.g.
    a tqdm factory) when given.
    """
    it = progress(targets) if progress is not None else targets
    out: List[Dict] = []
    for target in it:
        r = run_case(selector, target, universe=universe, attributes=attributes,
                     max_guesses=max_guesses, detailed=detailed)
        r["selector_id"] = selector.id
        if not r["success"]:
            logger.info("failed on %s: %s after %d guesses", target.nickname, r["reason"],
                        r["guesses"])
        out.append(r)
    return out


def summarize(results: List[Dict]) -> Dict:
    """Aggregate a batch: success count/rate and mean guesses over successes."""
    total = len(results)
    solved = [r for r in results if r["success"]]
    total_guesses = sum(r["guesses"] for r in solved)
    return {
        "total_tests": total,
        "success_count": len(solved),
        "success_rate": (len(solved) / total) if total else 0.0,
        "total_guesses": total_guesses,
        "avg_guesses": (total_guesses / len(solved)) if solved else 0.0,
        "max_guesses_used": max((r["guesses"] for r in solved), default=0),
        "failed": [
            {"target": r["target"], "guesses": r["guesses"], "reason": r["reason"],
             "remaining": r["remaining"]}
            for r in results if not r["success"]
        ],
    }
