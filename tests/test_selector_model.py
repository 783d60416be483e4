import json

import numpy as np
import pytest
from strikle.engine import SelectorUnavailableError
from strikle.selectors import GuessTracker, create_selector
from strikle.selectors.features import EntityEncoder
from strikle.selectors.model import LinearScoringModel


def _age_model(encoder: EntityEncoder) -> LinearScoringModel:
    w = [1.0 if n == "age" else 0.0 for n in encoder.feature_names]
    return LinearScoringModel(w, 0.0, encoder.feature_names)


def test_encoder_layout(universe):
    enc = EntityEncoder().fit(universe, ("team", "age"))
    teams = sorted({e.team for e in universe})
    assert enc.feature_names == [f"team={t}" for t in teams] + ["age"]
    X = enc.encode_many(universe)
    assert X.shape == (len(universe), enc.dim)
    # one-hot block sums to 1, scaled age in [0, 1]
    assert np.allclose(X[:, :len(teams)].sum(axis=1), 1.0)
    assert X[:, -1].min() == 0.0 and X[:, -1].max() == 1.0


def test_not_ready_without_model(universe):
    sel = create_selector("model")
    sel.reset(universe=universe)
    assert sel.is_ready() is False
    with pytest.raises(SelectorUnavailableError):
        sel.find_best_guess(universe[:3])


def test_not_ready_with_mismatched_model(universe):
    sel = create_selector("model")
    sel.reset(universe=universe)
    sel.model = LinearScoringModel([1.0, 2.0])
    assert sel.is_ready() is False


def test_model_picks_top_scorer(universe):
    sel = create_selector("model")
    sel.reset(universe=universe)
    sel.model = _age_model(sel.encoder)
    assert sel.is_ready()
    oldest = max(universe, key=lambda e: e.age)
    assert sel.find_best_guess(universe).id == oldest.id


def test_model_plays_runner_up_after_repeat(universe):
    by_age = sorted(universe, key=lambda e: -e.age)
    tracker = GuessTracker(last_guess_id=by_age[0].id, consecutive_count=1)
    sel = create_selector("model")
    sel.reset(universe=universe, tracker=tracker)
    sel.model = _age_model(sel.encoder)
    assert sel.find_best_guess(universe).id == by_age[1].id


def test_non_finite_scores_are_unavailable(universe):
    sel = create_selector("model")
    sel.reset(universe=universe)
    w = [float("nan")] * sel.encoder.dim
    sel.model = LinearScoringModel(w, 0.0, sel.encoder.feature_names)
    with pytest.raises(SelectorUnavailableError):
        sel.find_best_guess(universe)


def test_model_json_and_load(tmp_path, universe):
    sel = create_selector("model")
    sel.reset(universe=universe)
    m = _age_model(sel.encoder)
    restored = LinearScoringModel.from_json(m.to_json())
    assert restored.d == m.d and restored.feature_names == m.feature_names
    assert np.allclose(restored.w, m.w)

    p = tmp_path / "weights.json"
    p.write_text(m.to_json(), encoding="utf-8")
    sel.load_model(p)
    assert sel.is_ready()


def test_from_json_rejects_wrong_width():
    bad = json.dumps({"d": 3, "bias": 0.0, "weights": [1.0, 2.0]})
    with pytest.raises(ValueError):
        LinearScoringModel.from_json(bad)
