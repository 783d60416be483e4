import json
from pathlib import Path

import pytest
from strikle.datasets import load_players, pretty_summary, read_players, validate_players, write_players
from strikle.engine import MalformedEntityError


def _row(ident, nationality="France", region="Europe", **kw):
    rec = {"id": ident, "nickname": ident, "nationality": nationality, "age": 24,
           "majorAppearances": 2, "team": "Vitality", "role": "Rifler", "region": region}
    rec.update(kw)
    return rec


def _write(p: Path, rows):
    p.write_text(json.dumps(rows), encoding="utf-8")


def test_validate_players_happy_path(tmp_path: Path):
    p = tmp_path / "players.json"
    _write(p, [_row("a"), _row("b", "Germany"), _row("c", "Brazil", "Americas")])

    rep = validate_players(str(p))
    assert rep["passed"] is True
    assert rep["players"]["count"] == 3 and rep["nationalities"] == 3 and rep["regions"] == 2
    s = pretty_summary(rep)
    assert "players=3" in s and s.endswith("OK")


def test_validate_players_flags_errors(tmp_path: Path):
    p = tmp_path / "players.json"
    _write(p, {"players": [_row("a"), _row("a"), _row("b", age="old"), "junk"]})

    rep = validate_players(str(p))
    assert rep["passed"] is False
    assert rep["players"]["invalid_records"] == 2
    assert any("invalid" in msg for msg in rep["issues"])
    assert any("duplicate" in msg for msg in rep["issues"])


def test_validate_players_ambiguous_nationality(tmp_path: Path):
    p = tmp_path / "players.json"
    _write(p, [_row("a", "Turkey", "Europe"), _row("b", "Turkey", "Asia")])

    rep = validate_players(str(p))
    assert rep["passed"] is False
    assert rep["ambiguous_nationalities"] == {"Turkey": ["Asia", "Europe"]}


def test_validate_players_missing_file(tmp_path: Path):
    rep = validate_players(str(tmp_path / "nope.json"))
    assert rep["passed"] is False and rep["players"]["exists"] is False
    assert "FAIL" in pretty_summary(rep)


def test_write_then_load(tmp_path: Path):
    p = tmp_path / "out" / "players.json"
    write_players([_row("x"), _row("y", "Denmark")], p)
    assert [r["id"] for r in read_players(p)] == ["x", "y"]
    assert [e.nationality for e in load_players(p)] == ["France", "Denmark"]


def test_load_players_rejects_bad_record(tmp_path: Path):
    p = tmp_path / "bad.json"
    _write(p, [_row("x", team=None)])
    with pytest.raises(MalformedEntityError):
        load_players(p)


def test_bundled_dataset_is_valid():
    rep = validate_players(str(Path(__file__).parents[1] / "strikle" / "datasets" / "data" / "players.json"))
    assert rep["passed"] is True, rep["issues"]
