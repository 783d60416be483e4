import pytest
from strikle.config import (
    DEFAULT_GUESS_INTERVAL_MS,
    MAX_GUESS_INTERVAL_MS,
    SolverConfig,
    clamp_interval,
)
from strikle.engine import ALL_ATTRIBUTES


@pytest.mark.parametrize("ms,expected", [(-5, 0), (0, 0), (2500, 2500), (99999, MAX_GUESS_INTERVAL_MS)])
def test_clamp_interval(ms, expected):
    assert clamp_interval(ms) == expected


def test_defaults():
    cfg = SolverConfig()
    assert cfg.attributes == ALL_ATTRIBUTES
    assert cfg.guess_interval_ms == DEFAULT_GUESS_INTERVAL_MS
    assert cfg.guess_interval_s == 5.0
    assert cfg.selector == "entropy" and cfg.auto_play is True and cfg.max_guesses == 8


def test_from_mapping_understands_settings_keys():
    cfg = SolverConfig.from_mapping({
        "guessInterval": 20000,
        "autoPlay": 0,
        "algorithmType": "split_score",
        "attributesToCompare": ["team", "age"],
        "theme": "dark",
    })
    assert cfg.guess_interval_ms == MAX_GUESS_INTERVAL_MS
    assert cfg.auto_play is False
    assert cfg.selector == "split_score"
    assert cfg.attributes == ("team", "age")


@pytest.mark.parametrize("kw", [{"attributes": ()}, {"attributes": ("rating",)}, {"max_guesses": 0}])
def test_invalid_config(kw):
    with pytest.raises(ValueError):
        SolverConfig(**kw)
