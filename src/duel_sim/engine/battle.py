"""Reference singles engine.

`Battle` owns all mutable state for one battle and advances one decision
point per `apply_turn` call. Every state change is recorded as a
pipe-delimited protocol line in `log`.
"""

from __future__ import annotations

import copy
import logging
import math
import time
from dataclasses import dataclass
from random import Random
from typing import Sequence

from duel_sim.domain.commands import to_id
from duel_sim.domain.types import (
    CombatantSet,
    MoveRequest,
    MoveSlot,
    PendingRequest,
    RequestState,
    SideId,
    SideView,
    SwitchRequest,
    TeamRequest,
    WaitRequest,
)
from duel_sim.engine.damage import calc_damage
from duel_sim.engine.state import CHOICE_ITEMS, CombatantState, MoveState, SideState
from duel_sim.rules.dex import Dex, MoveData
from duel_sim.sim.rng import derive_seed

logger = logging.getLogger(__name__)

STRUGGLE = "struggle"
SPIKES_FRACTIONS = (1 / 8, 1 / 6, 1 / 4)
SIDE_CONDITION_LAYERS = {"spikes": 3}
FREEZE_THAW_CHANCE = 0.2
FULL_PARALYSIS_CHANCE = 0.25


class ChoiceError(ValueError):
    """A command pair that cannot be applied. No state has changed."""

    def __init__(self, message: str, side: SideId | None = None) -> None:
        super().__init__(message)
        self.side = side


class BattleEndedError(RuntimeError):
    pass


@dataclass(frozen=True)
class _Choice:
    kind: str  # "pass" | "team" | "move" | "switch"
    order: tuple[int, ...] = ()
    move_index: int = -1  # -1 with kind "move" means Struggle
    target: int = -1


class Battle:
    def __init__(self, sides: dict[SideId, SideState], *, dex: Dex, seed: int) -> None:
        self.dex = dex
        self.seed = seed
        self._sides = sides
        self._rng = Random(derive_seed(seed, turn=0, stream="battle", purpose="prng"))
        self._request_state = RequestState.TEAM_PREVIEW
        self._ended = False
        self._winner: str | None = None
        self._turn = 0
        self._log: list[str] = []
        self._switch_needed = {sid: False for sid in SideId}
        self._pivoting: set[SideId] = set()

        self._add("gametype", "singles")
        for sid, side in sides.items():
            self._add("player", sid.value, side.name)
            self._add("teamsize", sid.value, str(len(side.team)))
        for sid, side in sides.items():
            for mon in side.team:
                self._add("poke", sid.value, mon.species, "")
        self._add("teampreview")

    @classmethod
    def new(
        cls,
        p1_team: Sequence[CombatantSet],
        p2_team: Sequence[CombatantSet],
        *,
        dex: Dex | None = None,
        seed: int | None = None,
        p1_name: str = "Player 1",
        p2_name: str = "Player 2",
    ) -> "Battle":
        if dex is None:
            from duel_sim.rules.ruleset import default_ruleset

            dex = default_ruleset().dex
        if seed is None:
            seed = Random().getrandbits(32)
        sides: dict[SideId, SideState] = {}
        for sid, name, team in ((SideId.P1, p1_name, p1_team), (SideId.P2, p2_name, p2_team)):
            if not team:
                raise ValueError(f"{sid.value} needs at least one combatant")
            sides[sid] = SideState(
                id=sid,
                name=name,
                team=[CombatantState.from_set(build, dex) for build in team],
            )
        return cls(sides, dex=dex, seed=seed)

    # -- read side -----------------------------------------------------------

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def turn(self) -> int:
        return self._turn

    @property
    def winner(self) -> str | None:
        return self._winner

    @property
    def request_state(self) -> RequestState:
        return self._request_state

    @property
    def log(self) -> Sequence[str]:
        return tuple(self._log)

    def side(self, side_id: SideId) -> SideView:
        return self._sides[side_id].view()

    def side_state(self, side_id: SideId) -> SideState:
        """Live mutable state of one side, for scenario setup and debugging tools."""
        return self._sides[side_id]

    def request(self, side_id: SideId) -> PendingRequest:
        if self._ended:
            return WaitRequest()
        state = self._request_state
        if state is RequestState.TEAM_PREVIEW:
            return TeamRequest()
        if state is RequestState.SWITCH:
            return SwitchRequest(wait=not self._switch_needed[side_id])
        if state is RequestState.MOVE:
            active = self._sides[side_id].active
            if active is None or active.fainted:
                return WaitRequest()
            slots = tuple(
                MoveSlot(
                    move_id=m.move_id,
                    name=m.name,
                    pp=m.pp,
                    max_pp=m.max_pp,
                    disabled=active.move_disabled(m),
                )
                for m in active.moves
            )
            if all(slot.disabled for slot in slots):
                struggle = self.dex.get_move(STRUGGLE)
                slots = (MoveSlot(move_id=struggle.id, name=struggle.name, pp=1, max_pp=1),)
            return MoveRequest(moves=slots, trapped=active.trapped)
        return WaitRequest()

    def clone(self) -> "Battle":
        # Rules data is immutable and shared between clones.
        return copy.deepcopy(self, {id(self.dex): self.dex})

    # -- write side ----------------------------------------------------------

    def apply_turn(self, p1_choice: str, p2_choice: str) -> None:
        if self._ended:
            raise BattleEndedError("Battle has already ended")
        choices = {
            SideId.P1: self._parse_choice(SideId.P1, p1_choice),
            SideId.P2: self._parse_choice(SideId.P2, p2_choice),
        }
        state = self._request_state
        self._add("")
        self._add("t:", str(int(time.time())))
        if state is RequestState.TEAM_PREVIEW:
            self._run_team_preview(choices)
        elif state is RequestState.SWITCH:
            self._run_switches(choices)
        else:
            self._run_turn(choices)
        if self._ended:
            logger.info("battle over after turn %s: winner=%r", self._turn, self._winner)

    # -- parsing -------------------------------------------------------------

    def _parse_choice(self, sid: SideId, raw: str) -> _Choice:
        text = str(raw or "").strip()
        tokens = text.split()
        verb = tokens[0].lower() if tokens else ""
        request = self.request(sid)
        side = self._sides[sid]

        if isinstance(request, WaitRequest) or (isinstance(request, SwitchRequest) and request.wait):
            if text:
                raise ChoiceError(f"{sid.value}: no action expected, got '{text}'", side=sid)
            return _Choice("pass")
        if not text:
            raise ChoiceError(f"{sid.value}: a command is required", side=sid)

        if isinstance(request, TeamRequest):
            if verb != "team" or len(tokens) != 2:
                raise ChoiceError(f"{sid.value}: expected 'team <order>', got '{text}'", side=sid)
            return _Choice("team", order=self._parse_team_order(sid, tokens[1]))

        if verb == "switch":
            if isinstance(request, MoveRequest) and request.trapped:
                raise ChoiceError(f"{sid.value}: {side.active.species} is trapped and cannot switch", side=sid)
            if len(tokens) < 2:
                raise ChoiceError(f"{sid.value}: switch needs a target", side=sid)
            target = side.find_bench(" ".join(tokens[1:]))
            if target is None:
                raise ChoiceError(f"{sid.value}: cannot switch to '{' '.join(tokens[1:])}'", side=sid)
            return _Choice("switch", target=side.team.index(target))

        if isinstance(request, SwitchRequest):
            raise ChoiceError(f"{sid.value}: a switch is required, got '{text}'", side=sid)

        if verb == "move" and len(tokens) >= 2:
            return _Choice("move", move_index=self._parse_move(sid, request, " ".join(tokens[1:])))
        raise ChoiceError(f"{sid.value}: unrecognized command '{text}'", side=sid)

    def _parse_team_order(self, sid: SideId, code: str) -> tuple[int, ...]:
        size = len(self._sides[sid].team)
        if not code.isdigit():
            raise ChoiceError(f"{sid.value}: team order must be digits, got '{code}'", side=sid)
        digits = [int(ch) for ch in code]
        if len(set(digits)) != len(digits) or any(d < 1 or d > 6 for d in digits):
            raise ChoiceError(f"{sid.value}: invalid team order '{code}'", side=sid)
        # Slots beyond the team's size are ignored so "team 123456" always works.
        order = [d - 1 for d in digits if d <= size]
        order.extend(i for i in range(size) if i not in order)
        return tuple(order)

    def _parse_move(self, sid: SideId, request: MoveRequest, wanted: str) -> int:
        active = self._sides[sid].active
        move_id = to_id(wanted)
        if len(request.moves) == 1 and request.moves[0].move_id == STRUGGLE:
            if move_id in (STRUGGLE, "1"):
                return -1
            raise ChoiceError(f"{sid.value}: no moves left, only struggle is possible", side=sid)
        index: int | None = None
        if move_id.isdigit() and 1 <= int(move_id) <= len(active.moves):
            index = int(move_id) - 1
        else:
            for i, slot in enumerate(active.moves):
                if slot.move_id == move_id:
                    index = i
                    break
        if index is None:
            raise ChoiceError(f"{sid.value}: {active.species} does not know '{wanted}'", side=sid)
        if active.move_disabled(active.moves[index]):
            raise ChoiceError(f"{sid.value}: {active.moves[index].name} cannot be used right now", side=sid)
        return index

    # -- decision points -----------------------------------------------------

    def _run_team_preview(self, choices: dict[SideId, _Choice]) -> None:
        for sid, choice in choices.items():
            side = self._sides[sid]
            side.team = [side.team[i] for i in choice.order]
        self._add("start")
        for sid in SideId:
            self._switch_in(sid, self._sides[sid].team[0], hazards=False)
        self._start_turn()

    def _run_switches(self, choices: dict[SideId, _Choice]) -> None:
        for sid in SideId:
            choice = choices[sid]
            if choice.kind != "switch":
                continue
            side = self._sides[sid]
            self._switch_out(sid)
            self._switch_in(sid, side.team[choice.target])
            if self._check_winner():
                break
        self._after_decision()

    def _run_turn(self, choices: dict[SideId, _Choice]) -> None:
        keyed = []
        for sid, choice in choices.items():
            if choice.kind == "pass":
                continue
            active = self._sides[sid].active
            if choice.kind == "switch":
                key = (0, 0, 0.0, self._rng.random())
            else:
                priority = self._move_for(active, choice.move_index).priority
                key = (1, -priority, -active.speed(), self._rng.random())
            keyed.append((key, sid, choice))
        keyed.sort(key=lambda entry: entry[0])

        for _, sid, choice in keyed:
            side = self._sides[sid]
            if choice.kind == "switch":
                self._switch_out(sid)
                self._switch_in(sid, side.team[choice.target])
            else:
                user = side.active
                if user is None or user.fainted:
                    continue
                self._use_move(sid, choice.move_index)
            if self._check_winner():
                break

        if not self._ended:
            self._residuals()
        self._after_decision()

    def _after_decision(self) -> None:
        if self._check_winner():
            self._request_state = RequestState.NONE
            return
        needs: dict[SideId, bool] = {}
        for sid, side in self._sides.items():
            active = side.active
            lost_active = active is None or active.fainted
            needs[sid] = bool(side.bench()) and (lost_active or sid in self._pivoting)
        self._pivoting.clear()
        if any(needs.values()):
            self._request_state = RequestState.SWITCH
            self._switch_needed = needs
        else:
            self._start_turn()

    def _start_turn(self) -> None:
        self._turn += 1
        self._request_state = RequestState.MOVE
        self._switch_needed = {sid: False for sid in SideId}
        self._add("turn", str(self._turn))
        logger.debug("turn %s begins", self._turn)

    def _check_winner(self) -> bool:
        if self._ended:
            return True
        left = {sid: side.combatants_left for sid, side in self._sides.items()}
        if all(count > 0 for count in left.values()):
            return False
        self._ended = True
        self._request_state = RequestState.NONE
        survivors = [sid for sid, count in left.items() if count > 0]
        if survivors:
            self._winner = self._sides[survivors[0]].name
            self._add("win", self._winner)
        else:
            self._winner = ""
            self._add("tie")
        return True

    # -- switching -----------------------------------------------------------

    def _switch_out(self, sid: SideId) -> None:
        active = self._sides[sid].active
        if active is None:
            return
        active.clear_on_switch_out()
        active.active = False
        self._release_foe(sid)

    def _release_foe(self, sid: SideId) -> None:
        foe = self._sides[sid.foe].active
        if foe is not None:
            foe.volatiles.pop("trapped", None)
            foe.volatiles.pop("partiallytrapped", None)

    def _switch_in(self, sid: SideId, mon: CombatantState, *, hazards: bool = True) -> None:
        mon.active = True
        self._add("switch", self._ident(sid, mon), mon.species, self._hp_text(mon))
        if hazards:
            self._apply_hazards(sid, mon)

    def _apply_hazards(self, sid: SideId, mon: CombatantState) -> None:
        if mon.item == "heavydutyboots":
            return
        conditions = self._sides[sid].side_conditions
        if conditions.get("stealthrock"):
            fraction = self.dex.effectiveness("Rock", mon.types) / 8
            self._damage(sid, mon, math.floor(mon.max_hp * fraction), "[from] Stealth Rock")
        layers = min(conditions.get("spikes", 0), len(SPIKES_FRACTIONS))
        if layers and not mon.fainted and "Flying" not in mon.types:
            fraction = SPIKES_FRACTIONS[layers - 1]
            self._damage(sid, mon, math.floor(mon.max_hp * fraction), "[from] Spikes")

    # -- moves ---------------------------------------------------------------

    def _move_for(self, user: CombatantState, index: int) -> MoveData:
        if index < 0:
            return self.dex.get_move(STRUGGLE)
        return self.dex.moves[user.moves[index].move_id]

    def _use_move(self, sid: SideId, index: int) -> None:
        user = self._sides[sid].active
        move = self._move_for(user, index)
        if not self._can_act(sid, user):
            return

        slot: MoveState | None = user.moves[index] if index >= 0 else None
        if slot is not None:
            slot.pp = max(0, slot.pp - 1)
            if user.item in CHOICE_ITEMS:
                user.choice_lock = slot.move_id

        foe_sid = sid.foe
        target = self._sides[foe_sid].active
        if move.target == "self":
            self._add("move", self._ident(sid, user), move.name, self._ident(sid, user))
            self._apply_self_move(sid, user, move)
            return
        if target is None or target.fainted:
            self._add("move", self._ident(sid, user), move.name)
            self._add("-notarget", self._ident(sid, user))
            return
        self._add("move", self._ident(sid, user), move.name, self._ident(foe_sid, target))
        if move.accuracy is not None and self._rng.random() * 100 >= move.accuracy:
            self._add("-miss", self._ident(sid, user), self._ident(foe_sid, target))
            return
        if move.is_damaging:
            self._hit(sid, user, target, move)
        else:
            self._apply_status_move(sid, user, target, move)

    def _can_act(self, sid: SideId, user: CombatantState) -> bool:
        ident = self._ident(sid, user)
        if user.status == "slp":
            user.status_turns -= 1
            if user.status_turns > 0:
                self._add("cant", ident, "slp")
                return False
            self._cure_status(sid, user)
        elif user.status == "frz":
            if self._rng.random() >= FREEZE_THAW_CHANCE:
                self._add("cant", ident, "frz")
                return False
            self._cure_status(sid, user)
        elif user.status == "par" and self._rng.random() < FULL_PARALYSIS_CHANCE:
            self._add("cant", ident, "par")
            return False
        return True

    def _hit(self, sid: SideId, user: CombatantState, target: CombatantState, move: MoveData) -> None:
        foe_sid = sid.foe
        target_ident = self._ident(foe_sid, target)
        roll = calc_damage(user, target, move, self.dex, self._rng)
        if roll.effectiveness == 0:
            self._add("-immune", target_ident)
            return

        blocked = "substitute" in target.volatiles and "sound" not in move.flags
        if blocked:
            dealt = min(target.substitute_hp, roll.damage)
            target.substitute_hp -= dealt
            self._add("-activate", target_ident, "Substitute", "[damage]")
            if target.substitute_hp <= 0:
                target.volatiles.pop("substitute", None)
                self._add("-end", target_ident, "Substitute")
        else:
            if roll.crit:
                self._add("-crit", target_ident)
            if roll.effectiveness > 1:
                self._add("-supereffective", target_ident)
            elif roll.effectiveness < 1:
                self._add("-resisted", target_ident)
            dealt = self._damage(foe_sid, target, roll.damage)

        if move.drain and dealt:
            self._heal(sid, user, max(1, math.floor(dealt * move.drain)), "[from] drain", f"[of] {target_ident}")
        if move.recoil and dealt:
            self._damage(sid, user, max(1, math.floor(dealt * move.recoil)), "[from] Recoil")
        if user.item == "lifeorb" and dealt:
            self._damage(sid, user, max(1, user.max_hp // 10), "[from] item: Life Orb")

        if not blocked and not target.fainted:
            if move.volatile == "partiallytrapped" and "partiallytrapped" not in target.volatiles:
                target.volatiles["partiallytrapped"] = self._rng.randint(4, 5)
                self._add("-activate", target_ident, f"move: {move.name}", f"[of] {self._ident(sid, user)}")
            secondary = move.secondary
            if secondary is not None and self._rng.random() * 100 < secondary.chance:
                if secondary.status:
                    self._try_status(foe_sid, target, secondary.status, quiet=True)
                if secondary.boosts:
                    self._boost(foe_sid, target, secondary.boosts)

        if user.fainted:
            return
        if move.self_boosts:
            self._boost(sid, user, move.self_boosts)
        if move.self_switch and self._sides[sid].bench():
            self._pivoting.add(sid)

    def _apply_self_move(self, sid: SideId, user: CombatantState, move: MoveData) -> None:
        ident = self._ident(sid, user)
        acted = False
        if move.heal:
            if user.hp >= user.max_hp:
                self._add("-fail", ident, "heal")
                return
            self._heal(sid, user, max(1, math.floor(user.max_hp * move.heal)))
            acted = True
        if move.volatile == "substitute":
            cost = user.max_hp // 4
            if "substitute" in user.volatiles or user.hp <= cost:
                self._add("-fail", ident, "move: Substitute")
                return
            user.hp -= cost
            user.substitute_hp = cost
            user.volatiles["substitute"] = 1
            self._add("-start", ident, "Substitute")
            self._add("-damage", ident, self._hp_text(user))
            acted = True
        if move.boosts:
            self._boost(sid, user, move.boosts)
            acted = True
        if not acted:
            self._add("-nothing")

    def _apply_status_move(
        self, sid: SideId, user: CombatantState, target: CombatantState, move: MoveData
    ) -> None:
        foe_sid = sid.foe
        target_ident = self._ident(foe_sid, target)
        if move.type_immune and self.dex.effectiveness(move.type, target.types) == 0:
            self._add("-immune", target_ident)
            return
        affects_target = bool(move.status or move.volatile or move.boosts)
        if affects_target and "substitute" in target.volatiles and "sound" not in move.flags:
            self._add("-fail", target_ident)
            return
        if move.status:
            self._try_status(foe_sid, target, move.status, quiet=False)
        if move.volatile:
            self._try_volatile(foe_sid, target, move)
        if move.boosts:
            self._boost(foe_sid, target, move.boosts)
        if move.side_condition:
            self._add_side_condition(foe_sid, move)

    # -- effects -------------------------------------------------------------

    def _damage(self, sid: SideId, mon: CombatantState, amount: int, *suffix: str) -> int:
        if amount <= 0 or mon.fainted:
            return 0
        dealt = min(mon.hp, amount)
        mon.hp -= dealt
        self._add("-damage", self._ident(sid, mon), self._hp_text(mon), *suffix)
        if mon.hp == 0:
            self._faint(sid, mon)
        else:
            self._check_berries(sid, mon)
        return dealt

    def _heal(self, sid: SideId, mon: CombatantState, amount: int, *suffix: str) -> int:
        if amount <= 0 or mon.fainted or mon.hp >= mon.max_hp:
            return 0
        healed = min(mon.max_hp - mon.hp, amount)
        mon.hp += healed
        self._add("-heal", self._ident(sid, mon), self._hp_text(mon), *suffix)
        return healed

    def _faint(self, sid: SideId, mon: CombatantState) -> None:
        mon.fainted = True
        mon.status = None
        mon.status_turns = 0
        mon.volatiles.clear()
        self._add("faint", self._ident(sid, mon))
        self._release_foe(sid)

    def _try_status(self, sid: SideId, mon: CombatantState, status: str, *, quiet: bool) -> bool:
        ident = self._ident(sid, mon)
        if mon.fainted or mon.status is not None:
            if not quiet:
                self._add("-fail", ident)
            return False
        if self.dex.status_immune(status, mon.types):
            if not quiet:
                self._add("-immune", ident)
            return False
        mon.status = status
        # Sleep lasts 1-3 turns of inaction; the counter is spent on each move attempt.
        mon.status_turns = self._rng.randint(2, 4) if status == "slp" else 0
        self._add("-status", ident, status)
        self._check_berries(sid, mon)
        return True

    def _cure_status(self, sid: SideId, mon: CombatantState) -> None:
        old = mon.status
        mon.status = None
        mon.status_turns = 0
        self._add("-curestatus", self._ident(sid, mon), old or "", "[msg]")

    def _try_volatile(self, sid: SideId, mon: CombatantState, move: MoveData) -> None:
        ident = self._ident(sid, mon)
        volatile = move.volatile
        if volatile in mon.volatiles or (volatile == "yawn" and mon.status is not None):
            self._add("-fail", ident)
            return
        if volatile == "leechseed" and "Grass" in mon.types:
            self._add("-immune", ident)
            return
        mon.volatiles[volatile] = 2 if volatile == "yawn" else 1
        self._add("-start", ident, f"move: {move.name}")

    def _boost(self, sid: SideId, mon: CombatantState, boosts: dict[str, int]) -> None:
        ident = self._ident(sid, mon)
        for stat, amount in boosts.items():
            before = mon.boosts.get(stat, 0)
            after = max(-6, min(6, before + amount))
            mon.boosts[stat] = after
            kind = "-boost" if amount > 0 else "-unboost"
            self._add(kind, ident, stat, str(abs(after - before)))

    def _add_side_condition(self, sid: SideId, move: MoveData) -> None:
        side = self._sides[sid]
        condition = move.side_condition
        current = side.side_conditions.get(condition, 0)
        if current >= SIDE_CONDITION_LAYERS.get(condition, 1):
            self._add("-fail", f"{sid.value}: {side.name}")
            return
        side.side_conditions[condition] = current + 1
        self._add("-sidestart", f"{sid.value}: {side.name}", f"move: {move.name}")

    def _check_berries(self, sid: SideId, mon: CombatantState) -> None:
        if mon.fainted:
            return
        ident = self._ident(sid, mon)
        if mon.item == "sitrusberry" and mon.hp <= mon.max_hp // 2:
            mon.item = ""
            self._add("-enditem", ident, "Sitrus Berry", "[eat]")
            self._heal(sid, mon, mon.max_hp // 4, "[from] item: Sitrus Berry")
        elif mon.item == "lumberry" and mon.status is not None:
            mon.item = ""
            self._add("-enditem", ident, "Lum Berry", "[eat]")
            self._cure_status(sid, mon)

    def _residuals(self) -> None:
        def speed_of(sid: SideId) -> float:
            active = self._sides[sid].active
            return active.speed() if active is not None else 0.0

        for sid in sorted(SideId, key=speed_of, reverse=True):
            mon = self._sides[sid].active
            if mon is None or mon.fainted:
                continue
            self._residual(sid, mon)
            if self._check_winner():
                return
        self._add("upkeep")

    def _residual(self, sid: SideId, mon: CombatantState) -> None:
        ident = self._ident(sid, mon)
        if mon.item == "leftovers":
            self._heal(sid, mon, max(1, mon.max_hp // 16), "[from] item: Leftovers")

        foe = self._sides[sid.foe].active
        if "leechseed" in mon.volatiles and foe is not None and not foe.fainted:
            drained = self._damage(sid, mon, max(1, mon.max_hp // 8), "[from] Leech Seed", f"[of] {self._ident(sid.foe, foe)}")
            self._heal(sid.foe, foe, drained, "[silent]")
        if mon.fainted:
            return

        if "partiallytrapped" in mon.volatiles:
            mon.volatiles["partiallytrapped"] -= 1
            if mon.volatiles["partiallytrapped"] <= 0:
                del mon.volatiles["partiallytrapped"]
                self._add("-end", ident, "partiallytrapped")
            else:
                self._damage(sid, mon, max(1, mon.max_hp // 8), "[from] partiallytrapped")
        if mon.fainted:
            return

        if mon.status == "brn":
            self._damage(sid, mon, max(1, mon.max_hp // 16), "[from] brn")
        elif mon.status == "psn":
            self._damage(sid, mon, max(1, mon.max_hp // 8), "[from] psn")
        elif mon.status == "tox":
            mon.status_turns += 1
            self._damage(sid, mon, max(1, mon.max_hp * mon.status_turns // 16), "[from] psn")
        if mon.fainted:
            return

        if "yawn" in mon.volatiles:
            mon.volatiles["yawn"] -= 1
            if mon.volatiles["yawn"] <= 0:
                del mon.volatiles["yawn"]
                self._add("-end", ident, "move: Yawn", "[silent]")
                self._try_status(sid, mon, "slp", quiet=True)

    # -- log -----------------------------------------------------------------

    def _ident(self, sid: SideId, mon: CombatantState) -> str:
        return f"{sid.value}a: {mon.species}"

    def _hp_text(self, mon: CombatantState) -> str:
        if mon.fainted or mon.hp <= 0:
            return "0 fnt"
        text = f"{mon.hp}/{mon.max_hp}"
        return f"{text} {mon.status}" if mon.status else text

    def _add(self, *parts: str) -> None:
        self._log.append("|" + "|".join(parts))
