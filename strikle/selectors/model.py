"""
Model Selector (learned scoring, inference only).

Idea:
  Encode every candidate with EntityEncoder, score the matrix with a loaded
  model, and guess the highest scorer. Training happens elsewhere; this
  selector only loads weights.

Availability:
  - is_ready() is False until a model whose feature layout matches the
    encoder is loaded. Callers (the session controller) must check it and
    fall back to a heuristic selector.
  - Asking an unready selector for a guess raises SelectorUnavailableError,
    as do non-finite model outputs.

Anti-cycling:
  Beyond the shared two-candidate rule, if the top scorer was already picked
  on the previous turn and has repeated, the runner-up is played instead.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import List, Sequence

import numpy as np

from strikle.engine import ALL_ATTRIBUTES, Entity, SelectorUnavailableError
from .base import BaseSelector, GuessTracker, register
from .features import EntityEncoder

logger = logging.getLogger(__name__)


class LinearScoringModel:
    """score(x) = x . w + b"""

    def __init__(self, weights, bias: float = 0.0, feature_names: List[str] | None = None):
        self.w = np.asarray(weights, dtype=float).reshape(-1)
        self.b = float(bias)
        self.feature_names = list(feature_names or [])

    @property
    def d(self) -> int:
        return int(self.w.shape[0])

    def predict(self, X: np.ndarray) -> np.ndarray:
        X = np.asarray(X, dtype=float)
        return X @ self.w + self.b

    # ---- persistence ----
    def to_json(self) -> str:
        pack = {
            "d": self.d,
            "bias": self.b,
            "weights": self.w.tolist(),
            "feature_names": self.feature_names,
        }
        return json.dumps(pack)

    @staticmethod
    def from_json(s: str) -> "LinearScoringModel":
        obj = json.loads(s)
        m = LinearScoringModel(obj["weights"], obj.get("bias", 0.0), obj.get("feature_names"))
        if m.d != int(obj.get("d", m.d)):
            raise ValueError(f"weights length {m.d} != declared d {obj['d']}")
        return m


@register
class ModelSelector(BaseSelector):
    id = "model"
    name = "Learned Scoring Model"
    version = "1.0.0"

    def __init__(self, model: LinearScoringModel | None = None):
        super().__init__()
        self.model = model
        self.encoder = EntityEncoder()

    def reset(self, *, universe: Sequence[Entity], attributes: Sequence[str] = ALL_ATTRIBUTES,
              tracker: GuessTracker | None = None) -> None:
        super().reset(universe=universe, attributes=attributes, tracker=tracker)
        self.encoder.fit(self.universe, self.attributes)

    def load_model(self, path: Path | str) -> None:
        self.model = LinearScoringModel.from_json(Path(path).read_text(encoding="utf-8"))
        logger.info("loaded scoring model from %s (d=%d)", path, self.model.d)

    def is_ready(self) -> bool:
        if self.model is None or self.encoder.dim == 0:
            return False
        if self.model.d != self.encoder.dim:
            return False
        # a model trained on another dataset may have the same width
        if self.model.feature_names and self.model.feature_names != self.encoder.feature_names:
            return False
        return True

    def score_candidates(self, candidates: List[Entity], universe: List[Entity],
                         attrs: Sequence[str]) -> List[float]:
        if not self.is_ready():
            raise SelectorUnavailableError("no compatible scoring model loaded")
        scores = self.model.predict(self.encoder.encode_many(candidates))
        if scores.shape != (len(candidates),) or not np.all(np.isfinite(scores)):
            raise SelectorUnavailableError("model produced invalid scores")
        return [float(s) for s in scores]

    def _pick(self, cands: List[Entity], scores: List[float]) -> Entity:
        # stable: equal scores keep candidate order
        order = sorted(range(len(cands)), key=lambda i: -scores[i])
        top = cands[order[0]]
        if (top.id == self.tracker.last_guess_id and self.tracker.consecutive_count >= 1
                and len(order) > 1):
            runner_up = cands[order[1]]
            logger.info("avoiding repeat of %s; playing %s", top.nickname, runner_up.nickname)
            return runner_up
        return top
