# apps/cli/solve.py
"""
Interactive solver: you relay the game, the session controller picks guesses.

Each turn the script prints a player to guess. Type the game's feedback as
attribute=RESULT pairs, for example:

    nationality=INCORRECT_CLOSE age=LOW_CLOSE majors=HIGH_NOT_CLOSE team=INCORRECT

("country" and "majors" are accepted as aliases). Type "win" when the guess
was right, "quit" to stop. Attributes you leave out are not constrained.

Usage:
    python -m apps.cli.solve --players strikle/datasets/data/players.json
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from strikle.config import SolverConfig
from strikle.datasets import DEFAULT_PLAYERS_PATH, load_players
from strikle.engine import ALL_ATTRIBUTES, Entity, SessionError
from strikle.selectors import get_selector_ids
from strikle.session import Phase, SessionController
from strikle.transport import GuessOutcome, normalize_feedback


class ConsoleTransport:
    """Shows the guess to the human relaying the game."""

    async def send_guess(self, entity: Entity) -> None:
        print(f"\n>>> Guess: {entity.nickname}  ({entity.nationality}, {entity.age}, "
              f"majors={entity.major_appearances}, {entity.team}, {entity.role}, {entity.region})")


def parse_feedback_line(line: str) -> dict:
    """'age=LOW_CLOSE team=CORRECT' -> {'age': 'LOW_CLOSE', 'team': 'CORRECT'}"""
    raw = {}
    for tok in line.replace(",", " ").split():
        if "=" not in tok:
            continue
        k, v = tok.split("=", 1)
        raw[k.strip()] = v.strip()
    return raw


async def _play(ctl: SessionController) -> None:
    ctl.start_round()
    await ctl.make_guess()
    while ctl.phase is Phase.AWAITING_FEEDBACK:
        line = (await asyncio.to_thread(input, "feedback> ")).strip()
        if line.lower() in ("quit", "exit", "q"):
            ctl.reset()
            print("Stopped.")
            return
        if line.lower() in ("win", "correct", "yes"):
            await ctl.on_feedback(GuessOutcome(ctl.last_guess.id, True, {}))
            break
        fb = normalize_feedback(parse_feedback_line(line), ctl.config.attributes)
        if not fb:
            print("No usable feedback in that line; try e.g. 'team=CORRECT age=HIGH_CLOSE'.")
            continue
        await ctl.on_feedback(GuessOutcome(ctl.last_guess.id, False, fb))
        print(f"{len(ctl.candidates)} candidate(s) left"
              + (f" (filter: {ctl.last_filter.path})" if ctl.last_filter and ctl.last_filter.degraded else ""))
        if ctl.phase is Phase.AWAITING_GUESS:
            await ctl.make_guess()

    if ctl.result == "solved":
        print(f"Solved in {ctl.guess_count} guess(es).")
    elif ctl.result == "max_guesses":
        names = ", ".join(c.nickname for c in ctl.candidates[:10])
        print(f"Out of guesses. Remaining candidates: {names}")


def main():
    ap = argparse.ArgumentParser(description="strikleAI: interactive solver")
    ap.add_argument("--players", default=str(DEFAULT_PLAYERS_PATH))
    ap.add_argument("--selector", default="entropy",
                    help=f"selector id (one of: {', '.join(get_selector_ids())})")
    ap.add_argument("--model", help="weights JSON for the 'model' selector")
    ap.add_argument("--attributes", nargs="+", default=list(ALL_ATTRIBUTES))
    ap.add_argument("--max-guesses", type=int, default=8)
    ap.add_argument("--log-level", default="WARNING")
    args = ap.parse_args()

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(levelname)s %(name)s: %(message)s")

    # Guesses are driven by the loop above, not by the pacing timer.
    cfg = SolverConfig(attributes=tuple(args.attributes), selector=args.selector,
                       auto_play=False, guess_interval_ms=0, max_guesses=args.max_guesses,
                       model_path=args.model)
    universe = load_players(args.players)
    ctl = SessionController(universe, ConsoleTransport(), cfg)
    print(f"Loaded {len(universe)} players; selector={ctl.selector.id}")
    try:
        asyncio.run(_play(ctl))
    except SessionError as e:
        raise SystemExit(f"Round aborted: {e}")


if __name__ == "__main__":
    main()
