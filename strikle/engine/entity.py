"""
Entity model: one pro player and the attributes the game compares.

Attribute names are the game's wire names (`majorAppearances`, not
`major_appearances`) so that feedback dicts, configuration and the JSON
dataset all speak the same vocabulary. The dataclass field names are the
Python spellings; `Entity.get` maps between the two.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

from .errors import MalformedEntityError

NATIONALITY = "nationality"
AGE = "age"
MAJOR_APPEARANCES = "majorAppearances"
TEAM = "team"
ROLE = "role"
REGION = "region"

# Default comparison order (mirrors the order the game shows its columns in).
ALL_ATTRIBUTES: Tuple[str, ...] = (NATIONALITY, AGE, MAJOR_APPEARANCES, TEAM, ROLE, REGION)

CATEGORICAL_ATTRIBUTES = frozenset({TEAM, ROLE, REGION})

# Numeric attributes and their "close" thresholds (inclusive).
NUMERIC_THRESHOLDS: Dict[str, int] = {AGE: 2, MAJOR_APPEARANCES: 1}

_FIELD_FOR_ATTR: Dict[str, str] = {
    NATIONALITY: "nationality",
    AGE: "age",
    MAJOR_APPEARANCES: "major_appearances",
    TEAM: "team",
    ROLE: "role",
    REGION: "region",
}


def check_attributes(attrs) -> Tuple[str, ...]:
    """Return `attrs` as a tuple, raising ValueError on unknown names."""
    out = tuple(attrs)
    unknown = [a for a in out if a not in _FIELD_FOR_ATTR]
    if unknown:
        raise ValueError(f"Unknown attribute(s): {unknown}. Known: {list(ALL_ATTRIBUTES)}")
    return out


@dataclass(frozen=True)
class Entity:
    id: str
    nickname: str
    nationality: str
    age: int
    major_appearances: int
    team: str
    role: str
    region: str

    def get(self, attr: str):
        """Attribute value by wire name."""
        try:
            field = _FIELD_FOR_ATTR[attr]
        except KeyError as e:
            raise ValueError(f"Unknown attribute: {attr}") from e
        value = getattr(self, field)
        if value is None:
            raise MalformedEntityError(f"{self.id!r} has no value for {attr!r}")
        return value

    def as_record(self) -> Dict:
        """Back to the dataset's JSON shape."""
        return {
            "id": self.id,
            "nickname": self.nickname,
            NATIONALITY: self.nationality,
            AGE: self.age,
            MAJOR_APPEARANCES: self.major_appearances,
            TEAM: self.team,
            ROLE: self.role,
            REGION: self.region,
        }

    @classmethod
    def from_record(cls, rec: Mapping) -> "Entity":
        """
        Build an Entity from one dataset row.

        Raises MalformedEntityError if the id or any comparison attribute is
        missing, or if a numeric attribute is not a non-negative integer.
        """
        if rec.get("id") in (None, ""):
            raise MalformedEntityError(f"record without id: {dict(rec)!r}")
        ident = str(rec["id"])
        missing = [a for a in ALL_ATTRIBUTES if rec.get(a) in (None, "")]
        if missing:
            raise MalformedEntityError(f"{ident!r} is missing {missing}")

        numbers = {}
        for attr in NUMERIC_THRESHOLDS:
            raw = rec[attr]
            # bool is an int subclass, and int(25.7) would truncate
            if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
                raise MalformedEntityError(f"{ident!r}: {attr} must be an integer, got {raw!r}")
            try:
                val = int(raw)
            except (TypeError, ValueError) as e:
                raise MalformedEntityError(f"{ident!r}: {attr} must be an integer, got {raw!r}") from e
            if val < 0:
                raise MalformedEntityError(f"{ident!r}: {attr} must be >= 0, got {val}")
            numbers[attr] = val

        return cls(
            id=ident,
            nickname=str(rec.get("nickname") or ident),
            nationality=str(rec[NATIONALITY]),
            age=numbers[AGE],
            major_appearances=numbers[MAJOR_APPEARANCES],
            team=str(rec[TEAM]),
            role=str(rec[ROLE]),
            region=str(rec[REGION]),
        )
