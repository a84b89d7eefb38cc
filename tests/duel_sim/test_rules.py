"""Tests for rules data loading."""

import json
import shutil

import pytest

from duel_sim.rules.loader import DATA_DIR, RulesError, load_json
from duel_sim.rules.ruleset import Ruleset, default_ruleset, load_weights


def test_default_ruleset_loads() -> None:
    rules = default_ruleset()
    assert "umbreon" in rules.dex.species
    assert rules.dex.get_move("Stealth Rock").side_condition == "stealthrock"
    assert rules.find_trainer("penny").difficulty == "normal"
    assert rules.find_trainer("Lacey").difficulty == "noob"
    assert rules.weights.side_conditions["spikes"] == (-15.0, -20.0, -30.0)


def test_type_chart() -> None:
    dex = default_ruleset().dex
    assert dex.effectiveness("Ground", ("Dragon", "Ground")) == 1.0
    assert dex.effectiveness("Electric", ("Dragon", "Ground")) == 0.0
    assert dex.effectiveness("Rock", ("Fire", "Flying")) == 4.0


def test_unknown_names_raise() -> None:
    dex = default_ruleset().dex
    with pytest.raises(RulesError):
        dex.get_move("Hyper Beam")
    with pytest.raises(RulesError):
        dex.get_species("Missingno")


def test_missing_file(tmp_path) -> None:
    with pytest.raises(RulesError):
        load_json(tmp_path / "nope.json")


def test_invalid_json(tmp_path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RulesError):
        load_json(path)


def test_top_level_must_be_object(tmp_path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(RulesError):
        load_json(path)


def _weights_file(tmp_path, **changes):
    data = json.loads((DATA_DIR / "heuristics.json").read_text(encoding="utf-8"))
    data.update(changes)
    path = tmp_path / "heuristics.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_weights_come_from_file(tmp_path) -> None:
    path = _weights_file(tmp_path, win=500, side_conditions={"spikes": [-1, -2]})
    weights = load_weights(path)
    assert weights.win == 500.0
    assert weights.alive == 20.0
    assert weights.status["frz"] == -15.0
    assert weights.side_conditions == {"spikes": (-1.0, -2.0)}


def test_weights_require_every_scalar(tmp_path) -> None:
    path = tmp_path / "heuristics.json"
    path.write_text(json.dumps({"win": 500}), encoding="utf-8")
    with pytest.raises(RulesError, match="alive"):
        load_weights(path)


def test_weights_reject_empty_table(tmp_path) -> None:
    path = _weights_file(tmp_path, side_conditions={"spikes": []})
    with pytest.raises(RulesError):
        load_weights(path)


def test_missing_sets_key(tmp_path) -> None:
    data_dir = tmp_path / "data"
    shutil.copytree(DATA_DIR, data_dir)
    (data_dir / "sets.json").write_text("{}", encoding="utf-8")
    with pytest.raises(RulesError):
        Ruleset.load(data_dir)
