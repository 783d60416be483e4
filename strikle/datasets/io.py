from __future__ import annotations
import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from strikle.engine import Entity

DEFAULT_PLAYERS_PATH = Path(__file__).parent / "data" / "players.json"


def read_players(p: Path | str) -> List[Dict]:
    """
    Read a players JSON file (a list of objects, or {"players": [...]}).
    Raises FileNotFoundError if the path doesn't exist.
    """
    p = Path(p)
    if not p.exists():
        raise FileNotFoundError(p)
    data = json.loads(p.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("players", [])
    if not isinstance(data, list):
        raise ValueError(f"{p}: expected a list of player objects")
    return data


def write_players(rows: Iterable[Dict], p: Path | str) -> str:
    """
    Write player records as pretty JSON, ensuring a trailing newline.
    Returns the string path written.
    """
    p = Path(p)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(list(rows), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return str(p)


@lru_cache(maxsize=8)
def _load_cached(resolved: str) -> Tuple[Entity, ...]:
    return tuple(Entity.from_record(r) for r in read_players(resolved))


def load_players(p: Path | str = DEFAULT_PLAYERS_PATH) -> List[Entity]:
    """
    Load the entity universe. Parsed once per path; later calls reuse it.
    Raises MalformedEntityError on the first bad record.
    """
    return list(_load_cached(str(Path(p).resolve())))
