"""
Players dataset checks.

validate_players() answers "can this file be used as a universe?":
  - every row builds an Entity (id, six attributes, non-negative ints)
  - ids are unique
  - each nationality sits in exactly one region, since INCORRECT_CLOSE is
    derived from the region
It also records the file's SHA-256 so run manifests pin the exact data.

    from strikle.datasets import validate_players, pretty_summary
    print(pretty_summary(validate_players("strikle/datasets/data/players.json")))
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, List
import hashlib
import json

from strikle.engine import Entity, MalformedEntityError


@dataclass
class FileReport:
    path: str
    exists: bool
    count: int             # rows that parsed into an Entity
    sha256: str            # "" when the file is missing
    unique_count: int      # distinct ids among parsed rows
    invalid_records: int


@dataclass
class ValidationReport:
    players: FileReport
    nationalities: int
    regions: int
    ambiguous_nationalities: Dict[str, List[str]]   # nationality -> regions seen
    passed: bool
    issues: List[str]


def _digest(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


def _rows(path: Path, issues: List[str]) -> list:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        issues.append(f"not valid JSON: {e}")
        return []
    if isinstance(data, dict):
        data = data.get("players")
    if not isinstance(data, list):
        issues.append("expected a list of player objects")
        return []
    return data


def validate_players(path: str) -> Dict:
    """
    Check a players JSON file and return the report as a plain dict.

    `passed` needs at least one valid row, no invalid rows, no duplicate ids
    and no nationality seen in two regions; `issues` says what failed.
    """
    p = Path(path)
    issues: List[str] = []
    if not p.exists():
        issues.append(f"players file not found: {path}")
        return asdict(ValidationReport(
            players=FileReport(path, False, 0, "", 0, 0),
            nationalities=0, regions=0, ambiguous_nationalities={},
            passed=False, issues=issues,
        ))

    entities: List[Entity] = []
    invalid = 0
    for rec in _rows(p, issues):
        if not isinstance(rec, dict):
            invalid += 1
            continue
        try:
            entities.append(Entity.from_record(rec))
        except MalformedEntityError:
            invalid += 1

    id_counts = Counter(e.id for e in entities)
    regions_by_nat: Dict[str, set] = defaultdict(set)
    for e in entities:
        regions_by_nat[e.nationality].add(e.region)
    ambiguous = {n: sorted(r) for n, r in sorted(regions_by_nat.items()) if len(r) > 1}
    duplicates = [i for i, c in id_counts.items() if c > 1]

    if not entities:
        issues.append("players file contains 0 valid records")
    if invalid:
        issues.append(f"players has {invalid} invalid record(s)")
    if duplicates:
        issues.append(f"players contains duplicate ids (e.g., {duplicates[:5]})")
    if ambiguous:
        issues.append(f"nationalities mapped to several regions: {dict(list(ambiguous.items())[:5])}")

    report = ValidationReport(
        players=FileReport(
            path=str(p),
            exists=True,
            count=len(entities),
            sha256=_digest(p),
            unique_count=len(id_counts),
            invalid_records=invalid,
        ),
        nationalities=len(regions_by_nat),
        regions=len({e.region for e in entities}),
        ambiguous_nationalities=ambiguous,
        passed=bool(entities) and not invalid and not duplicates and not ambiguous,
        issues=issues,
    )
    return asdict(report)


def pretty_summary(report: Dict) -> str:
    """players=60 (uniq=60, sha=3f2a...) | nationalities=27 | regions=5 | OK"""
    a = report["players"]
    sha = (a.get("sha256") or "")[:12]
    return (
        f"players={a['count']} (uniq={a['unique_count']}, sha={sha}) "
        f"| nationalities={report['nationalities']} | regions={report['regions']} "
        f"| {'OK' if report['passed'] else 'FAIL'}"
    )
