from __future__ import annotations

from itertools import permutations

from hypothesis import strategies as st

from duel_sim.domain.types import BOOST_STATS, Combatant

STATUSES = ("brn", "frz", "par", "psn", "tox", "slp")
VOLATILES = ("yawn", "leechseed", "substitute", "partiallytrapped", "trapped")

TEAM_CODES = ["".join(p) for p in permutations("123456")]


def team_code_strategy() -> st.SearchStrategy[str]:
    return st.sampled_from(TEAM_CODES)


def bad_team_code_strategy() -> st.SearchStrategy[str]:
    """Strings that are not a permutation of 1..6."""
    return st.text(alphabet="0123456789", min_size=0, max_size=8).filter(lambda s: sorted(s) != list("123456"))


def boosts_strategy() -> st.SearchStrategy[dict[str, int]]:
    return st.fixed_dictionaries({k: st.integers(min_value=-6, max_value=6) for k in BOOST_STATS})


def combatant_strategy(max_hp: int = 400) -> st.SearchStrategy[Combatant]:
    return st.integers(min_value=1, max_value=max_hp).flatmap(
        lambda top: st.builds(
            Combatant,
            species=st.sampled_from(["Umbreon", "Sylveon", "Garchomp", "Toxapex"]),
            hp=st.integers(min_value=0, max_value=top),
            max_hp=st.just(top),
            status=st.none() | st.sampled_from(STATUSES),
            volatiles=st.frozensets(st.sampled_from(VOLATILES)),
            boosts=boosts_strategy(),
            item=st.sampled_from(["", "leftovers"]),
            active=st.booleans(),
            fainted=st.booleans(),
        )
    )
