import pytest
from strikle.engine import Entity


def _make(ident, nationality="France", age=25, majors=3, team="Vitality", role="Rifler",
          region="Europe", nickname=None):
    return Entity(id=ident, nickname=nickname or ident, nationality=nationality, age=age,
                  major_appearances=majors, team=team, role=role, region=region)


@pytest.fixture
def make_entity():
    return _make


@pytest.fixture
def universe():
    # Small but varied: shared teams, close ages, same-region nationalities.
    return [
        _make("zywoo", "France", 23, 6, "Vitality", "AWPer", "Europe"),
        _make("apex", "France", 31, 19, "Vitality", "IGL", "Europe"),
        _make("ropz", "Estonia", 24, 8, "Vitality", "Rifler", "Europe"),
        _make("niko", "Bosnia", 27, 14, "Falcons", "Rifler", "Europe"),
        _make("monesy", "Russia", 19, 4, "Falcons", "AWPer", "CIS"),
        _make("donk", "Russia", 18, 3, "Spirit", "Rifler", "CIS"),
        _make("sh1ro", "Russia", 23, 6, "Spirit", "AWPer", "CIS"),
        _make("b1t", "Ukraine", 21, 5, "Natus Vincere", "Rifler", "CIS"),
        _make("fallen", "Brazil", 33, 20, "FURIA", "IGL", "Americas"),
        _make("kscerato", "Brazil", 25, 8, "FURIA", "Rifler", "Americas"),
        _make("twistzz", "Canada", 25, 12, "Liquid", "IGL", "Americas"),
        _make("jks", "Australia", 29, 15, "G2", "Rifler", "Oceania"),
    ]
