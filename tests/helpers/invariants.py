from __future__ import annotations

import math

from duel_sim.domain.commands import verb_of
from duel_sim.domain.types import SideId
from duel_sim.engine.battle import Battle


def assert_hp_in_bounds(battle: Battle) -> None:
    for side_id in SideId:
        for combatant in battle.side(side_id).combatants:
            assert 0 <= combatant.hp <= combatant.max_hp
            assert combatant.fainted == (combatant.hp == 0)


def assert_boosts_capped(battle: Battle) -> None:
    for side_id in SideId:
        for combatant in battle.side(side_id).combatants:
            assert all(-6 <= stage <= 6 for stage in combatant.boosts.values())


def assert_single_active(battle: Battle) -> None:
    for side_id in SideId:
        side = battle.side(side_id)
        active = [c for c in side.combatants if c.active and not c.fainted]
        assert len(active) <= 1


def assert_finite(score: float) -> None:
    assert math.isfinite(score)


def assert_command_shape(command: str) -> None:
    assert command == "" or verb_of(command) in ("team", "move", "switch")
