"""Starting a human-vs-AI match from trainer rosters."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random

from duel_sim.domain.commands import TEAM_PLACEHOLDER, TEAM_SIZE
from duel_sim.domain.types import PlayerInfo, SideId
from duel_sim.engine.battle import Battle
from duel_sim.rules.ruleset import HeuristicWeights, Ruleset, default_ruleset
from duel_sim.sim.rng import derive_seed, pick_random
from duel_sim.teams.generator import generate_trainer_team

logger = logging.getLogger(__name__)

PLAYER_TRAINER = "Penny"
AI_TRAINERS = ("Red", "Penny", "Cynthia", "Lacey")

HUMAN = PlayerInfo(id=SideId.P1, name="Player 1")
AI = PlayerInfo(id=SideId.P2, name="Player 2")


@dataclass()
class Match:
    battle: Battle
    player_trainer: str
    ai_trainer: str
    seed: int
    weights: HeuristicWeights


def start_match(
    rules: Ruleset | None = None,
    *,
    seed: int | None = None,
    player_trainer: str = PLAYER_TRAINER,
    ai_trainer: str | None = None,
    skip_preview: bool = True,
) -> Match:
    """Generate both teams and open a battle.

    With `skip_preview` both sides keep their generated order and the battle
    starts at turn 1.
    """
    rules = rules or default_ruleset()
    if seed is None:
        seed = Random().getrandbits(32)
    picker = Random(derive_seed(seed, turn=0, stream="match", purpose="trainer"))
    ai_trainer = ai_trainer or pick_random(AI_TRAINERS, picker)

    p1_team = generate_trainer_team(
        player_trainer, TEAM_SIZE, rules, Random(derive_seed(seed, turn=0, stream="p1", purpose="team"))
    )
    p2_team = generate_trainer_team(
        ai_trainer, TEAM_SIZE, rules, Random(derive_seed(seed, turn=0, stream="p2", purpose="team"))
    )
    if not p1_team or not p2_team:
        raise ValueError(f"Could not build teams for {player_trainer!r} vs {ai_trainer!r}")

    battle = Battle.new(p1_team, p2_team, dex=rules.dex, seed=seed, p1_name=HUMAN.name, p2_name=AI.name)
    if skip_preview:
        battle.apply_turn(TEAM_PLACEHOLDER, TEAM_PLACEHOLDER)
    logger.info("New match: %s vs %s (seed=%s)", player_trainer, ai_trainer, seed)
    return Match(
        battle=battle,
        player_trainer=player_trainer,
        ai_trainer=ai_trainer,
        seed=seed,
        weights=rules.weights,
    )
