"""
Solver configuration.

The fields mirror what the game helper lets a user tweak: which attributes to
compare, the pacing between automatic guesses, the selector and whether to
guess automatically. `from_mapping` also understands the camelCase keys the
helper's settings store used (guessInterval, autoPlay, algorithmType,
attributesToCompare).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Tuple

from strikle.engine import ALL_ATTRIBUTES, check_attributes

DEFAULT_GUESS_INTERVAL_MS = 5000
MAX_GUESS_INTERVAL_MS = 15000
DEFAULT_MAX_GUESSES = 8
DEFAULT_SELECTOR = "entropy"

_KEY_ALIASES = {
    "guessInterval": "guess_interval_ms",
    "autoPlay": "auto_play",
    "algorithmType": "selector",
    "attributesToCompare": "attributes",
    "maxGuesses": "max_guesses",
}


def clamp_interval(ms) -> int:
    """Pacing interval in ms, clamped to [0, MAX_GUESS_INTERVAL_MS]."""
    return max(0, min(MAX_GUESS_INTERVAL_MS, int(ms)))


@dataclass
class SolverConfig:
    attributes: Tuple[str, ...] = ALL_ATTRIBUTES
    guess_interval_ms: int = DEFAULT_GUESS_INTERVAL_MS
    selector: str = DEFAULT_SELECTOR
    auto_play: bool = True
    max_guesses: int = DEFAULT_MAX_GUESSES
    model_path: str | None = field(default=None)

    def __post_init__(self):
        self.attributes = check_attributes(self.attributes)
        if not self.attributes:
            raise ValueError("at least one attribute must be compared")
        self.guess_interval_ms = clamp_interval(self.guess_interval_ms)
        if int(self.max_guesses) < 1:
            raise ValueError(f"max_guesses must be >= 1; got {self.max_guesses}")
        self.max_guesses = int(self.max_guesses)

    @property
    def guess_interval_s(self) -> float:
        return self.guess_interval_ms / 1000.0

    @classmethod
    def from_mapping(cls, d: Mapping) -> "SolverConfig":
        """Build from a settings dict; unknown keys are ignored."""
        kw = {}
        for k, v in d.items():
            name = _KEY_ALIASES.get(k, k)
            if name in cls.__dataclass_fields__ and v is not None:
                kw[name] = v
        if "attributes" in kw:
            kw["attributes"] = tuple(kw["attributes"])
        if "auto_play" in kw:
            kw["auto_play"] = bool(kw["auto_play"])
        return cls(**kw)
