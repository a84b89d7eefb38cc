"""Tests for preset parsing and trainer team generation."""

from random import Random

from hypothesis import given, settings
from hypothesis import strategies as st

from duel_sim.rules.ruleset import PresetSet, default_ruleset
from duel_sim.teams.generator import (
    generate_trainer_team,
    get_set_for_species,
    moveset_metadata,
    parse_spread,
    parse_weighted_list,
    to_build,
)


def test_parse_weighted_list_forms() -> None:
    assert parse_weighted_list("(3,1) Leftovers, Life Orb") == [("Leftovers", 3.0), ("Life Orb", 1.0)]
    assert parse_weighted_list("Leftovers, Life Orb") == [("Leftovers", 1.0), ("Life Orb", 1.0)]
    assert parse_weighted_list("Leftovers") == [("Leftovers", 1.0)]
    assert parse_weighted_list(None) == []


def test_parse_weighted_list_missing_and_zero_weights() -> None:
    assert parse_weighted_list("(2) A, B, C") == [("A", 2.0), ("B", 1.0), ("C", 1.0)]
    assert parse_weighted_list("(0,0) A, B") == [("A", 1.0), ("B", 1.0)]


def test_foul_play_does_not_count_as_attack() -> None:
    meta = moveset_metadata(["Foul Play", "Toxic", "Moonlight", "Dark Pulse"], default_ruleset().dex)
    assert not meta.uses_atk
    assert meta.uses_spa


def test_parse_spread_nature_and_evs() -> None:
    dex = default_ruleset().dex
    nature, evs = parse_spread("HD", ["Foul Play", "Toxic", "Moonlight", "Dark Pulse"], dex)
    assert nature == "Calm"
    assert evs == {"hp": 252, "atk": 0, "def": 0, "spa": 0, "spd": 252, "spe": 4}

    nature, evs = parse_spread("AS", ["Earthquake", "Stone Edge", "Swords Dance"], dex)
    assert nature == "Adamant"
    assert evs["hp"] == 4


def test_empty_spread_is_neutral() -> None:
    nature, evs = parse_spread("", ["Tackle"], default_ruleset().dex)
    assert nature == "Hardy"
    assert sum(evs.values()) == 0


def test_get_set_by_index_and_id() -> None:
    rules = default_ruleset()
    assert get_set_for_species(rules, "Umbreon", set_id=1).id == "trapper"
    assert get_set_for_species(rules, "umbreon", set_id="wall").id == "wall"
    assert get_set_for_species(rules, "Missingno") is None


def test_to_build_zeroes_unused_attack_iv() -> None:
    preset = PresetSet(
        id="x", species="Umbreon", ability="Synchronize", item="Leftovers", moves=("Foul Play", "Wish")
    )
    build = to_build(preset, default_ruleset().dex, Random(0))
    assert build.ivs["atk"] == 0
    assert build.moves == ("Foul Play", "Wish")
    assert build.item == "Leftovers"


def test_unknown_trainer_has_no_team() -> None:
    assert generate_trainer_team("Nobody", 6, default_ruleset(), Random(0)) == []


def test_easy_trainer_uses_easy_sets() -> None:
    rules = default_ruleset()
    team = generate_trainer_team("Lacey", 6, rules, Random(5))
    easy_species = set(rules.set_lists["sets_easy"])
    assert len(team) == 6
    assert all(build.species.lower() in easy_species for build in team)


@settings(max_examples=25)
@given(seed=st.integers(min_value=0, max_value=2**32 - 1), trainer=st.sampled_from(["Penny", "Red", "Cynthia"]))
def test_trainer_teams_never_repeat_species(seed: int, trainer: str) -> None:
    team = generate_trainer_team(trainer, 6, default_ruleset(), Random(seed))
    species = [build.species for build in team]
    assert len(team) == 6
    assert len(set(species)) == len(species)
    assert all(build.moves for build in team)
