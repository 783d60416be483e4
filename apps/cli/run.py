# apps/cli/run.py
"""
CLI entry point for simulated solver runs (the helper's "algorithm test").

This script:
  1) Validates the players file (prints counts + SHA, checks nationality -> region).
  2) Loads the universe and instantiates each requested selector.
  3) Plays every chosen target with a live progress indicator and writes,
     per selector:
       - CSV:  per-case results + guess/feedback history columns
       - JSON: manifest with config, dataset report, summary, git commit

Usage:
    python -m apps.cli.run --selectors entropy split_score --sample 50
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from tqdm import tqdm

from strikle.config import SolverConfig
from strikle.datasets import DEFAULT_PLAYERS_PATH, load_players, pretty_summary, validate_players
from strikle.engine import ALL_ATTRIBUTES
from strikle.harness import choose_targets, run_batch, summarize
from strikle.harness.io import write_csv, write_manifest, timestamp_id, git_commit_or_unknown
from strikle.selectors import create_selector, get_selector_ids


def _progress_factory(mode: str, label: str, total: int):
    """tqdm wrapper for run_batch; "plain" is an ASCII bar refreshed once a second (logs, CI)."""
    if mode == "off":
        return None
    if mode == "auto":
        mode = "bar" if sys.stderr.isatty() else "plain"
    plain = mode == "plain"
    return lambda it: tqdm(it, total=total, desc=label, unit="game",
                           ncols=80, ascii=plain, mininterval=1.0 if plain else 0.1)


def main():
    """
    Parse CLI args, validate the dataset, run each selector, and write outputs.
    """
    registered = get_selector_ids()

    ap = argparse.ArgumentParser(description="strikleAI: simulate solver runs")
    ap.add_argument("--selectors", nargs="+", default=["entropy"],
                    help=f"selector ids or 'ALL' (registered: {', '.join(registered)})")
    ap.add_argument("--players", default=str(DEFAULT_PLAYERS_PATH),
                    help="path to the players JSON")
    ap.add_argument("--attributes", nargs="+", default=list(ALL_ATTRIBUTES),
                    help="attributes to compare, in order")
    ap.add_argument("--max-guesses", type=int, default=8)
    ap.add_argument("--sample", type=int, help="play only K targets")
    ap.add_argument("--fixed-sample", action="store_true",
                    help="take the first K targets by nickname instead of a random sample")
    ap.add_argument("--seed", type=int, default=123, help="RNG seed for the target sample")
    ap.add_argument("--detailed", action="store_true", help="record per-step filter details")
    ap.add_argument("--model", help="weights JSON for the 'model' selector")
    ap.add_argument("--outdir", default="reports", help="directory for output files")
    ap.add_argument("--progress", choices=["auto", "bar", "plain", "off"], default="auto")
    ap.add_argument("--log-level", default="WARNING")
    args = ap.parse_args()

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    cfg = SolverConfig(attributes=tuple(args.attributes), max_guesses=args.max_guesses,
                       model_path=args.model)

    # 1) Validate players and print a one-liner summary
    rep = validate_players(args.players)
    print(pretty_summary(rep))
    for issue in rep["issues"]:
        print(f"  - {issue}")

    # 2) Load universe and targets
    universe = load_players(args.players)
    targets = choose_targets(universe, sample=args.sample, seed=args.seed, fixed=args.fixed_sample)

    # 3) Expand selectors
    if len(args.selectors) == 1 and args.selectors[0].lower() == "all":
        todo = list(registered)
    else:
        todo = args.selectors
        missing = [s for s in todo if s not in registered]
        if missing:
            raise SystemExit(f"Unknown selector ids: {missing}. Registered: {registered}")

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    for sid in todo:
        selector = create_selector(sid)
        if cfg.model_path and hasattr(selector, "load_model"):
            selector.load_model(cfg.model_path)
        selector.reset(universe=universe, attributes=cfg.attributes)
        if not selector.is_ready():
            print(f"Skipping {sid}: not ready (pass --model for learned selectors)")
            continue

        if args.progress != "off":
            print(f"\n=== Running {sid} on {len(targets)} targets ===")
        results = run_batch(
            selector, targets, universe=universe, attributes=cfg.attributes,
            max_guesses=cfg.max_guesses, detailed=args.detailed,
            progress=_progress_factory(args.progress, sid, len(targets)),
        )
        summary = summarize(results)
        print(f"{sid}: solved {summary['success_count']}/{summary['total_tests']} "
              f"({100.0 * summary['success_rate']:.1f}%), avg guesses {summary['avg_guesses']:.2f}")

        # 4) Write outputs (CSV + manifest) under <outdir>/<selector_id>/
        run_id = timestamp_id()
        sdir = outdir / sid
        csv_path = sdir / f"run_{run_id}.csv"
        manifest_path = sdir / f"run_{run_id}_manifest.json"
        write_csv(results, str(csv_path), max_guesses=cfg.max_guesses)
        manifest = {
            "run_id": run_id,
            "git_commit": git_commit_or_unknown(),
            "config": vars(args),
            "players": rep,
            "num_cases": len(results),
            "selector_id": sid,
            "summary": summary,
        }
        if args.detailed:
            manifest["steps"] = {r["target"]: r.get("steps", []) for r in results if not r["success"]}
        write_manifest(manifest, str(manifest_path))
        print(f"Wrote: {csv_path}")
        print(f"Wrote: {manifest_path}")


if __name__ == "__main__":
    main()
