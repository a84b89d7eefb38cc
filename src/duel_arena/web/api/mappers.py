from __future__ import annotations

from duel_arena.render.format import format_entry, hp_percent
from duel_arena.web.api import schemas
from duel_sim.decision.choices import enumerate_choices
from duel_sim.decision.phase import classify
from duel_sim.domain.types import Combatant, MoveRequest, SideId, SideView
from duel_sim.protocol.log_parser import get_recent_logs
from duel_sim.sim.match import Match

RECENT_DECISIONS = 2


def build_state_response(match: Match, player: SideId = SideId.P1) -> schemas.BattleStateResponse:
    battle = match.battle
    request = battle.request(player)
    moves = request.moves if isinstance(request, MoveRequest) else ()
    return schemas.BattleStateResponse(
        ended=battle.ended,
        turn=battle.turn,
        winner=battle.winner,
        request_state=battle.request_state.value,
        phases={side.value: phase.value for side, phase in classify(battle).items()},
        own_side=_side(battle.side(player), reveal=True),
        foe_side=_side(battle.side(player.foe), reveal=False),
        own_moves=[
            schemas.MoveOut(move_id=m.move_id, name=m.name, pp=m.pp, max_pp=m.max_pp, disabled=m.disabled)
            for m in moves
        ],
        trapped=isinstance(request, MoveRequest) and request.trapped,
        choices=[c for c in enumerate_choices(battle, player) if c],
        recent_logs=[
            schemas.LogEntryOut(header=e.header, args=list(e.args), text=format_entry(e))
            for e in get_recent_logs(battle.log, RECENT_DECISIONS, player.value)
        ],
        player_trainer=match.player_trainer,
        ai_trainer=match.ai_trainer,
    )


def _side(side: SideView, *, reveal: bool) -> schemas.SideOut:
    return schemas.SideOut(
        id=side.id.value,
        name=side.name,
        combatants=[_combatant(c, reveal=reveal) for c in side.combatants],
        side_conditions=dict(side.side_conditions),
    )


def _combatant(combatant: Combatant, *, reveal: bool) -> schemas.CombatantOut:
    out = schemas.CombatantOut(
        species=combatant.species,
        hp=combatant.hp,
        max_hp=combatant.max_hp,
        hp_percent=hp_percent(combatant),
        status=combatant.status,
        volatiles=sorted(combatant.volatiles),
        boosts={k: v for k, v in combatant.boosts.items() if v},
        active=combatant.active,
        fainted=combatant.fainted,
    )
    if reveal:
        out.item = combatant.item or None
        out.ability = combatant.ability or None
        out.moves = list(combatant.moves)
    return out
