import math

import pytest
from strikle.engine import ALL_ATTRIBUTES, NoCandidatesError, Result
from strikle.selectors import GuessTracker, create_selector, partition
from strikle.selectors.entropy import calculate_entropy, expected_entropy


@pytest.mark.parametrize("n,expected", [(0, 0.0), (1, 0.0), (2, 1.0), (4, 2.0), (6, math.log2(6))])
def test_calculate_entropy(n, expected):
    assert calculate_entropy(list(range(n))) == pytest.approx(expected)


def test_partition_is_complete_and_disjoint(universe):
    for g in universe:
        buckets = partition(g, universe, ALL_ATTRIBUTES)
        ids = [e.id for b in buckets.values() for e in b]
        assert len(ids) == len(universe)
        assert sorted(ids) == sorted(e.id for e in universe)
        # the guess is alone in the all-CORRECT bucket
        assert [e.id for e in buckets[(Result.CORRECT,) * len(ALL_ATTRIBUTES)]] == [g.id]


def test_expected_entropy_prefers_the_splitting_guess(make_entity):
    a = make_entity("a", age=20)
    b = make_entity("b", age=30)
    c = make_entity("c", age=31)
    cands = [a, b, c]
    # a cannot tell b from c (both LOW_NOT_CLOSE); b and c separate everything
    assert expected_entropy(a, cands, ALL_ATTRIBUTES) == pytest.approx(2 / 3)
    assert expected_entropy(b, cands, ALL_ATTRIBUTES) == 0.0

    sel = create_selector("entropy")
    sel.reset(universe=cands)
    assert sel.find_best_guess(cands).id == "b"   # tie b/c -> candidate order


def test_tie_prefers_fresh_id_after_repeat(make_entity):
    cands = [make_entity("a", age=20), make_entity("b", age=30), make_entity("c", age=31)]
    tracker = GuessTracker(last_guess_id="b", consecutive_count=1)
    sel = create_selector("entropy")
    sel.reset(universe=cands, tracker=tracker)
    assert sel.find_best_guess(cands).id == "c"
    assert tracker.last_guess_id == "c" and tracker.consecutive_count == 0


def test_single_candidate_short_circuits(monkeypatch, make_entity):
    only = make_entity("only")
    sel = create_selector("entropy")
    sel.reset(universe=[only, make_entity("other", age=40)])

    def boom(*a, **k):
        raise AssertionError("scoring should not run for one candidate")

    monkeypatch.setattr(sel, "score_candidates", boom)
    assert sel.find_best_guess([only]) is only
    assert sel.tracker.last_guess_id == "only"


def test_empty_candidates_raise():
    sel = create_selector("entropy")
    sel.reset(universe=[])
    with pytest.raises(NoCandidatesError):
        sel.find_best_guess([])


def test_indistinguishable_pair_alternates(make_entity):
    a = make_entity("a", nationality="Brazil", team="FURIA", region="Americas")
    b = make_entity("b", nationality="Brazil", team="FURIA", region="Americas")
    sel = create_selector("entropy")
    sel.reset(universe=[a, b])
    picks = [sel.find_best_guess([a, b]).id for _ in range(6)]
    assert picks == ["a", "b", "a", "b", "a", "b"]


def test_identical_triple_rotates_through_unplayed(make_entity):
    a, b, c = (make_entity(i, team="FURIA", nationality="Brazil", region="Americas") for i in "abc")
    sel = create_selector("entropy")
    sel.reset(universe=[a, b, c], attributes=("team",))
    picks = [sel.find_best_guess([a, b, c]).id for _ in range(6)]
    assert picks[:3] == ["a", "b", "c"]
    for i in range(len(picks) - 2):
        assert len(set(picks[i:i + 3])) > 1


def test_pair_never_repeats_three_times(make_entity):
    a = make_entity("a", team="X")
    b = make_entity("b", team="Y")
    sel = create_selector("entropy")
    sel.reset(universe=[a, b])
    picks = [sel.find_best_guess([a, b]).id for _ in range(6)]
    assert picks[:2] == ["a", "b"]
    for i in range(len(picks) - 2):
        assert len(set(picks[i:i + 3])) > 1


def test_next_guess_state_dict(universe):
    sel = create_selector("entropy")
    sel.reset(universe=universe)
    g = sel.next_guess({"candidates": universe, "universe": universe, "attributes": ALL_ATTRIBUTES})
    assert g in universe


def test_unknown_selector_id():
    with pytest.raises(ValueError):
        create_selector("nope")
