from __future__ import annotations

from random import Random

from hypothesis import settings
from hypothesis import strategies as st
from hypothesis.stateful import RuleBasedStateMachine, invariant, precondition, rule, run_state_machine_as_test

from duel_sim.decision.choices import enumerate_choices
from duel_sim.decision.phase import classify
from duel_sim.decision.validation import validate
from duel_sim.domain.types import SideId
from duel_sim.sim.turns import submit_choice
from tests.helpers.factories import make_battle
from tests.helpers.invariants import (
    assert_boosts_capped,
    assert_command_shape,
    assert_hp_in_bounds,
    assert_single_active,
)


class BattleStateMachine(RuleBasedStateMachine):
    def __init__(self) -> None:
        super().__init__()
        self.battle = make_battle(seed=9, preview=True)
        self.rng = Random(9)

    @precondition(lambda self: not self.battle.ended)
    @rule(pick=st.integers(min_value=0, max_value=20))
    def play_enumerated(self, pick: int) -> None:
        choices = enumerate_choices(self.battle, SideId.P1)
        result = submit_choice(self.battle, choices[pick % len(choices)], rng=self.rng)
        assert result.ok is True
        for command in result.ai_commands:
            assert_command_shape(command)

    @rule(text=st.sampled_from(["team 112345", "switch Missingno", "dance", "team 123456", "move"]))
    def play_garbage(self, text: str) -> None:
        before = self.battle.log
        result = submit_choice(self.battle, text, rng=self.rng)
        if not result.ok:
            assert self.battle.log == before

    @invariant()
    def invariants_hold(self) -> None:
        assert_hp_in_bounds(self.battle)
        assert_boosts_capped(self.battle)
        assert_single_active(self.battle)
        phases = classify(self.battle)
        for side_id in SideId:
            for command in enumerate_choices(self.battle, side_id):
                assert validate(command, phases[side_id], side_id, self.battle).is_valid


def test_battle_state_machine() -> None:
    run_state_machine_as_test(
        BattleStateMachine,
        settings=settings(max_examples=10, stateful_step_count=20, deadline=None),
    )
