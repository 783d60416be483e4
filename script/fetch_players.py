"""
Download a players dataset and write a clean, validated copy.

What it does:
- GETs a JSON document (a list of players, or {"players": [...]}).
- Keeps the comparison columns (id, nickname, nationality, age,
  majorAppearances, team, role, region), drops everything else.
- De-duplicates by id (first wins), writes the file and prints the validator summary.

Usage:
    python -m script.fetch_players --url https://example.org/players.json \
        --out strikle/datasets/data/players.json
"""

import argparse

import requests

from strikle.datasets import pretty_summary, validate_players, write_players
from strikle.engine import ALL_ATTRIBUTES

KEEP = ("id", "nickname") + ALL_ATTRIBUTES


def unique_by_id(rows):
    seen = set()
    out = []
    for r in rows:
        k = str(r.get("id"))
        if k not in seen:
            seen.add(k)
            out.append(r)
    return out


def fetch_players(url: str) -> list[dict]:
    r = requests.get(url, timeout=30)
    r.raise_for_status()
    data = r.json()
    if isinstance(data, dict):
        data = data.get("players", [])
    rows = [{k: p.get(k) for k in KEEP} for p in data if isinstance(p, dict)]
    return unique_by_id(rows)


def main():
    ap = argparse.ArgumentParser(description="Fetch a players dataset")
    ap.add_argument("--url", required=True)
    ap.add_argument("--out", default="strikle/datasets/data/players.json")
    ap.add_argument("--sort", action="store_true", help="sort by nickname instead of source order")
    args = ap.parse_args()

    players = fetch_players(args.url)
    if args.sort:
        players = sorted(players, key=lambda p: str(p.get("nickname") or "").lower())

    path = write_players(players, args.out)
    print(f"Wrote {len(players)} players -> {path}")
    print(pretty_summary(validate_players(path)))

if __name__ == "__main__":
    main()
