"""
Session controller: one guessing round as a small state machine.

    IDLE --start_round--> AWAITING_GUESS --make_guess--> AWAITING_FEEDBACK
    AWAITING_FEEDBACK --on_feedback(success)--> TERMINATED
    AWAITING_FEEDBACK --on_feedback(miss)-----> AWAITING_GUESS (+ next guess
                                                scheduled when auto_play)
    any --reset/disconnect--> IDLE

All mutable round state lives here. The selectors get the round's
GuessTracker at start_round, so two controllers never share anti-cycling
memory.

The only concurrency is the pacing delay before an automatic guess. It runs
as an asyncio.Task; reset() and disconnect() cancel it, and a task that wakes
up outside AWAITING_GUESS does nothing.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence

from strikle.config import SolverConfig
from strikle.engine import (
    Entity,
    Feedback,
    NoCandidatesError,
    SelectorUnavailableError,
    SessionError,
    drop_guess,
    filter_report,
    invalid_attributes,
)
from strikle.engine.constraints import FilterReport
from strikle.selectors import BaseSelector, GuessTracker, create_selector
from strikle.transport import GuessOutcome, Transport

logger = logging.getLogger(__name__)

FALLBACK_SELECTOR = "entropy"


def _current_task() -> Optional[asyncio.Task]:
    try:
        return asyncio.current_task()
    except RuntimeError:  # no running loop
        return None


class Phase(str, Enum):
    IDLE = "IDLE"
    AWAITING_GUESS = "AWAITING_GUESS"
    AWAITING_FEEDBACK = "AWAITING_FEEDBACK"
    TERMINATED = "TERMINATED"


class SessionController:
    def __init__(
            self,
            universe: Sequence[Entity],
            transport: Transport,
            config: SolverConfig | None = None,
            *,
            selector: BaseSelector | None = None,
            fallback: BaseSelector | None = None,
    ):
        self.universe: List[Entity] = list(universe)
        self.transport = transport
        self.config = config or SolverConfig()
        self.selector = selector or create_selector(self.config.selector)
        if self.config.model_path and hasattr(self.selector, "load_model"):
            self.selector.load_model(self.config.model_path)
        self.fallback = fallback or create_selector(FALLBACK_SELECTOR)

        self.phase = Phase.IDLE
        self.candidates: List[Entity] = []
        self.tracker = GuessTracker()
        self.last_guess: Optional[Entity] = None
        self.last_filter: Optional[FilterReport] = None
        self.round = 0
        self.guess_count = 0
        self.result: Optional[str] = None   # "solved", "max_guesses", "error"
        self._pending: Optional[asyncio.Task] = None

    # ---- round lifecycle ----
    def start_round(self) -> None:
        self._cancel_pending()
        self.round += 1
        self.candidates = list(self.universe)
        self.tracker = GuessTracker()
        self.last_guess = None
        self.last_filter = None
        self.guess_count = 0
        self.result = None
        for s in (self.selector, self.fallback):
            s.reset(universe=self.universe, attributes=self.config.attributes, tracker=self.tracker)
        self.phase = Phase.AWAITING_GUESS
        logger.info("round %d started with %d candidates", self.round, len(self.candidates))

    def reset(self) -> None:
        self._cancel_pending()
        self.phase = Phase.IDLE
        self.candidates = []
        self.tracker = GuessTracker()
        self.last_guess = None
        self.last_filter = None
        self.guess_count = 0
        self.result = None
        logger.info("session reset")

    def disconnect(self) -> None:
        """Transport went away: nothing scheduled may act on this round any more."""
        logger.warning("transport disconnected in phase %s", self.phase.value)
        self.reset()

    # ---- guessing ----
    def choose_guess(self) -> Entity:
        """Ask the configured selector, or the fallback if it is not ready."""
        selector = self.selector
        if not selector.is_ready():
            logger.info("selector %s not ready; using %s", selector.id, self.fallback.id)
            selector = self.fallback
        try:
            try:
                return selector.find_best_guess(self.candidates, self.universe, self.config.attributes)
            except SelectorUnavailableError as e:
                if selector is self.fallback:
                    raise
                logger.warning("selector %s failed (%s); using %s", selector.id, e, self.fallback.id)
                return self.fallback.find_best_guess(self.candidates, self.universe,
                                                     self.config.attributes)
        except NoCandidatesError as e:
            self._terminate("error")
            raise SessionError(f"round {self.round}: {e}") from e

    async def make_guess(self) -> Entity:
        if self.phase is not Phase.AWAITING_GUESS:
            raise SessionError(f"cannot guess in phase {self.phase.value}")
        guess = self.choose_guess()
        self.last_guess = guess
        self.guess_count += 1
        self.phase = Phase.AWAITING_FEEDBACK
        logger.info("guess %d: %s (%d candidates)", self.guess_count, guess.nickname,
                    len(self.candidates))
        await self.transport.send_guess(guess)
        return guess

    # ---- feedback ----
    def apply_feedback(self, feedback: Feedback) -> FilterReport:
        """Narrow the candidates with feedback for the last guess."""
        feedback = feedback or {}
        bad = invalid_attributes(feedback, self.config.attributes)
        if bad:
            logger.warning("ignoring impossible results for %s", bad)
            feedback = {a: r for a, r in feedback.items() if a not in bad}
        report = filter_report(self.candidates, self.last_guess, feedback, self.config.attributes)
        self.last_filter = report
        if not report.candidates:
            self._terminate("error")
            raise SessionError(f"round {self.round}: no candidates left after filtering")
        if report.degraded:
            logger.warning("feedback inconsistent with candidates; filter path %s", report.path)
        self.candidates = report.candidates
        logger.info("%d -> %d candidates", report.before, len(self.candidates))
        return report

    async def on_feedback(self, outcome: GuessOutcome) -> Phase:
        if self.phase is not Phase.AWAITING_FEEDBACK:
            logger.warning("ignoring feedback in phase %s", self.phase.value)
            return self.phase
        if outcome.entity_id and self.last_guess and outcome.entity_id != self.last_guess.id:
            logger.warning("feedback for %s but last guess was %s", outcome.entity_id,
                           self.last_guess.id)

        if outcome.is_success:
            self._terminate("solved")
            logger.info("solved in %d guesses: %s", self.guess_count, self.last_guess.nickname
                        if self.last_guess else "?")
            return self.phase

        self.apply_feedback(outcome.feedback)
        self.candidates = drop_guess(self.candidates, self.last_guess)
        if self.guess_count >= self.config.max_guesses:
            self._terminate("max_guesses")
            return self.phase

        self.phase = Phase.AWAITING_GUESS
        if self.config.auto_play:
            if self.config.guess_interval_ms <= 0:
                await self.make_guess()
            else:
                self._schedule_next(self.config.guess_interval_s)
        return self.phase

    # ---- scheduling ----
    def _schedule_next(self, delay_s: float) -> None:
        self._cancel_pending()
        self._pending = asyncio.create_task(self._guess_later(delay_s))
        self._pending.add_done_callback(self._on_pending_done)

    async def _guess_later(self, delay_s: float) -> None:
        await asyncio.sleep(delay_s)
        if self.phase is not Phase.AWAITING_GUESS:
            logger.info("phase changed to %s during delay; skipping guess", self.phase.value)
            return
        await self.make_guess()

    def _on_pending_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("scheduled guess failed: %s", exc)

    def _cancel_pending(self) -> None:
        task = self._pending
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()
        self._pending = None

    @property
    def pending(self) -> Optional[asyncio.Task]:
        return self._pending

    async def wait_pending(self) -> None:
        """Wait for a scheduled guess, if any (cancellation is not an error)."""
        task = self._pending
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    def _terminate(self, result: str) -> None:
        self._cancel_pending()
        self.result = result
        self.phase = Phase.TERMINATED

    def status(self) -> Dict:
        return {
            "phase": self.phase.value,
            "round": self.round,
            "guess_count": self.guess_count,
            "candidates": len(self.candidates),
            "last_guess": self.last_guess.nickname if self.last_guess else None,
            "selector": self.selector.id,
            "result": self.result,
        }
