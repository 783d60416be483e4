"""
Run outputs.

- write_csv:       one row per played target, guesses and feedback spread
                   over numbered columns.
- write_manifest:  JSON sidecar describing how the run was produced.
- timestamp_id:    UTC stamp used to name a run's files.
- git_commit_or_unknown: short HEAD hash, or "unknown" outside a checkout.

Feedback cells are compact, e.g. "nat=INCORRECT_CLOSE;age=LOW_CLOSE", so a
whole game fits on one CSV row.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List
import csv
import json
import subprocess
import datetime as dt

# Short column labels for the feedback cell
_ABBREV = {
    "nationality": "nat",
    "age": "age",
    "majorAppearances": "maj",
    "team": "team",
    "role": "role",
    "region": "reg",
}

_BASE_FIELDS = ["selector", "target", "success", "guesses", "reason", "remaining", "time_ms"]


def format_feedback(fb: Dict[str, str]) -> str:
    """{"nationality": "CORRECT", "age": "LOW_CLOSE"} -> "nat=CORRECT;age=LOW_CLOSE" """
    return ";".join(f"{_ABBREV.get(a, a)}={r}" for a, r in fb.items())


def _csv_row(r: Dict, max_guesses: int) -> Dict:
    row = {
        "selector": r.get("selector_id", "?"),
        "target": r["target"],
        "success": r["success"],
        "guesses": r["guesses"],
        "reason": r.get("reason", ""),
        "remaining": r.get("remaining", ""),
        "time_ms": round(float(r["time_ms"]), 3),
    }
    history = r.get("history", [])
    for i in range(max_guesses):
        guess_id, fb = history[i] if i < len(history) else ("", None)
        row[f"guess_{i + 1}"] = guess_id
        row[f"fb_{i + 1}"] = format_feedback(fb) if fb else ""
    return row


def write_csv(results: List[Dict], path: str, max_guesses: int) -> str:
    """
    Write a batch of run_case results.

    Columns: selector, target, success, guesses, reason, remaining, time_ms,
    then guess_i / fb_i for i = 1..max_guesses (blank past the last guess).
    Returns the path as a string.
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)

    fields = list(_BASE_FIELDS)
    for i in range(1, max_guesses + 1):
        fields += [f"guess_{i}", f"fb_{i}"]

    with out.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fields)
        writer.writeheader()
        writer.writerows(_csv_row(r, max_guesses) for r in results)
    return str(out)


def write_manifest(manifest: Dict, path: str) -> str:
    """
    Dump the run manifest as indented JSON.

    The CLI stores run_id, git_commit, its argparse config, the players
    validation report and the summarize() output here.
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    return str(out)


def timestamp_id() -> str:
    """UTC time as 20251018T093000Z."""
    return dt.datetime.now(dt.timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def git_commit_or_unknown() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"],
                                      stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError):
        return "unknown"
    return out.decode().strip()
