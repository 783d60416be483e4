import pytest
from strikle.engine import FeedbackNormalizationError, Result
from strikle.transport import extract_outcome, normalize_feedback, normalize_result

R = Result


@pytest.mark.parametrize("raw,expected", [
    ("HIGH_CLOSE", R.HIGH_CLOSE),
    ("low_not_close", R.LOW_NOT_CLOSE),
    (" CORRECT ", R.CORRECT),
    ("slightly_high", R.HIGH_CLOSE),
    ("too_low", R.LOW_NOT_CLOSE),
    ("incorrect_close", R.INCORRECT_CLOSE),
    ({"value": 27, "result": "LOW_CLOSE"}, R.LOW_CLOSE),
    (R.INCORRECT, R.INCORRECT),
])
def test_normalize_result_shapes(raw, expected):
    assert normalize_result(raw, "age") == expected


@pytest.mark.parametrize("raw", [{"value": 27}, {"result": None}, 27, "warmer", None])
def test_normalize_result_rejects(raw):
    with pytest.raises(FeedbackNormalizationError):
        normalize_result(raw, "age")


def test_normalize_feedback_aliases_and_skips():
    raw = {
        "country": "INCORRECT_CLOSE",
        "majors": {"value": 3, "result": "too_high"},
        "age": {"value": 27},            # no result -> skipped
        "team": "HIGH_CLOSE",            # meaningless for team -> skipped
        "role": "correct",
        "rating": "CORRECT",             # not an attribute -> ignored
    }
    fb = normalize_feedback(raw)
    assert fb == {
        "nationality": R.INCORRECT_CLOSE,
        "majorAppearances": R.HIGH_NOT_CLOSE,
        "role": R.CORRECT,
    }


def test_normalize_feedback_restricts_to_attrs():
    fb = normalize_feedback({"team": "CORRECT", "role": "INCORRECT"}, ("team",))
    assert fb == {"team": R.CORRECT}
    assert normalize_feedback(None) == {}


def test_extract_guess_reply():
    msg = {
        "type": "GUESS_FEEDBACK",
        "payload": {"isCorrect": False, "playerId": "p7", "feedback": {"age": "LOW_CLOSE"}},
    }
    out = extract_outcome(msg)
    assert out.entity_id == "p7" and out.is_success is False
    assert out.feedback == {"age": R.LOW_CLOSE}

    msg["payload"]["isCorrect"] = True
    assert extract_outcome(msg, last_guess_id="p9").is_success is True


def test_extract_truthy_non_bool_is_not_success():
    msg = {"type": "GUESS_RESPONSE", "payload": {"isCorrect": "yes", "feedback": {}}}
    assert extract_outcome(msg).is_success is False


def test_extract_snapshot_derives_region():
    msg = {
        "meta": {"userId": "u1"},
        "players": [
            {"id": "u2", "guesses": [{"id": "p1", "nationality": "CORRECT"}]},
            {"id": "u1", "guesses": [
                {"id": "p3", "nationality": "INCORRECT"},
                {"id": "p4", "isSuccess": False, "nationality": {"result": "INCORRECT_CLOSE"},
                 "team": "INCORRECT"},
            ]},
        ],
    }
    out = extract_outcome(msg)
    assert out.entity_id == "p4"
    assert out.feedback == {
        "nationality": R.INCORRECT_CLOSE,
        "team": R.INCORRECT,
        "region": R.CORRECT,
    }


def test_extract_snapshot_without_my_guesses():
    msg = {"players": [{"id": "u2", "guesses": []}]}
    assert extract_outcome(msg, user_id="u2") is None


def test_extract_bare_outcome_and_unknown():
    out = extract_outcome({"isSuccess": False, "feedback": {"role": "INCORRECT"}}, last_guess_id="p1")
    assert out.entity_id == "p1" and out.feedback == {"role": R.INCORRECT}
    assert extract_outcome({"type": "PHASE_CHANGE", "phase": "LOBBY"}) is None
    assert extract_outcome("not a dict") is None
