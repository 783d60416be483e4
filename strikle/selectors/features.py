from __future__ import annotations
from typing import Dict, List, Sequence

import numpy as np

from strikle.engine import ALL_ATTRIBUTES, Entity, NUMERIC_THRESHOLDS


class EntityEncoder:
    """
    Fixed-width numeric encoding of an entity:
      - one-hot per categorical attribute (vocabulary taken from the universe)
      - min-max scaled value per numeric attribute
    """

    def __init__(self):
        self.attributes: tuple = ()
        self.vocab: Dict[str, List[str]] = {}
        self.ranges: Dict[str, tuple] = {}
        self.feature_names: List[str] = []

    @property
    def dim(self) -> int:
        return len(self.feature_names)

    def fit(self, universe: Sequence[Entity], attributes: Sequence[str] = ALL_ATTRIBUTES) -> "EntityEncoder":
        self.attributes = tuple(attributes)
        self.vocab, self.ranges, self.feature_names = {}, {}, []
        for a in self.attributes:
            values = [e.get(a) for e in universe]
            if a in NUMERIC_THRESHOLDS:
                lo = min(values) if values else 0
                hi = max(values) if values else 0
                self.ranges[a] = (float(lo), float(hi))
                self.feature_names.append(a)
            else:
                self.vocab[a] = sorted(set(values))
                self.feature_names += [f"{a}={v}" for v in self.vocab[a]]
        return self

    def encode(self, e: Entity) -> np.ndarray:
        feats: List[float] = []
        for a in self.attributes:
            if a in NUMERIC_THRESHOLDS:
                lo, hi = self.ranges[a]
                span = hi - lo
                feats.append((e.get(a) - lo) / span if span > 0 else 0.0)
            else:
                v = e.get(a)
                # values unseen at fit time encode as all-zeros
                feats += [1.0 if v == known else 0.0 for known in self.vocab[a]]
        return np.asarray(feats, dtype=float)

    def encode_many(self, entities: Sequence[Entity]) -> np.ndarray:
        if not entities:
            return np.zeros((0, self.dim), dtype=float)
        return np.vstack([self.encode(e) for e in entities])
